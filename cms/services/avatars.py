"""
Avatar lifecycle: upload, set active, delete and public reads.

All mutations rewrite `avatars` and `active_avatar_id` of one users row in a
single UPDATE guarded by the row's version counter. A concurrent writer makes
the UPDATE match no row (StaleDataError); the mutation is then re-applied on a
fresh read, up to AVATAR_UPDATE_MAX_ATTEMPTS times.
"""

import logging
import time
import uuid
from collections.abc import Callable
from typing import Any

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from cms.core.config import Settings
from cms.core.errors import (
    AvatarRejected,
    AvatarRejectedReason,
    Conflict,
    NotFound,
    ValidationFailed,
)
from cms.core.security import TokenClaim
from cms.models import User
from cms.models.base import utcnow
from cms.services.accounts import get_user
from cms.services.images import parse_image_data_url, render_avatar

logger = logging.getLogger(__name__)

ACTIVE = "active"
AVATAR_NOT_FOUND = "Avatar not found"
MISSING_AVATAR_ID = "Missing avatarId"
ACTIVE_AVATAR_DELETE = "Cannot delete active avatar"
CONCURRENT_UPDATE = "Concurrent avatar update, please retry"

AvatarRecord = dict[str, Any]


def _find(avatars: list[AvatarRecord] | None, avatar_id: str | None) -> AvatarRecord | None:
    if not avatar_id:
        return None
    return next((a for a in avatars or [] if a.get("avatarId") == avatar_id), None)


def _apply(
    db: Session,
    user_id: str,
    mutate: Callable[[User], bool],
    max_attempts: int,
) -> None:
    """
    Read the account, let `mutate` change it in memory and commit one versioned UPDATE.

    `mutate` returns False when there is nothing to write. Domain errors it
    raises propagate unchanged.
    """
    for attempt in range(1, max_attempts + 1):
        user = get_user(db, user_id)
        if not mutate(user):
            db.rollback()
            return
        user.updated_at = utcnow()
        try:
            db.commit()
            return
        except StaleDataError:
            db.rollback()
            db.expunge_all()
            logger.info(
                "Avatar update lost a race; retrying",
                extra={"user_id": user_id, "attempt": attempt},
            )
    raise Conflict(CONCURRENT_UPDATE)


def add_avatar(
    db: Session,
    claim: TokenClaim,
    data_url: str | None,
    settings: Settings,
) -> AvatarRecord:
    """
    Validate and store a new avatar, making it the active one.

    Rejections (all AvatarRejected) in order: invalid format, too large,
    invalid image data, dimensions exceeded, limit reached.
    """
    payload = parse_image_data_url(data_url, settings.AVATAR_MAX_DATA_URL_LENGTH)
    rendered = render_avatar(
        payload,
        size=settings.AVATAR_SIZE,
        max_dimension=settings.AVATAR_MAX_SOURCE_DIMENSION,
    )
    avatar: AvatarRecord = {
        "avatarId": uuid.uuid4().hex,
        "dataUrl": rendered,
        "uploadedAt": int(time.time() * 1000),
    }

    def append(user: User) -> bool:
        avatars = list(user.avatars or [])
        if len(avatars) >= settings.AVATAR_MAX_COUNT:
            raise AvatarRejected(
                AvatarRejectedReason.LIMIT_REACHED,
                f"Max {settings.AVATAR_MAX_COUNT} avatars",
            )
        user.avatars = avatars + [avatar]
        user.active_avatar_id = avatar["avatarId"]
        return True

    _apply(db, claim.user_id, append, settings.AVATAR_UPDATE_MAX_ATTEMPTS)
    logger.info(
        "Avatar added",
        extra={"user_id": claim.user_id, "avatar_id": avatar["avatarId"]},
    )
    return avatar


def set_active_avatar(
    db: Session,
    claim: TokenClaim,
    avatar_id: str | None,
    settings: Settings,
) -> str:
    """Point active_avatar_id at an existing avatar of the caller."""
    if not avatar_id:
        raise ValidationFailed(MISSING_AVATAR_ID)

    def activate(user: User) -> bool:
        if _find(user.avatars, avatar_id) is None:
            raise NotFound(AVATAR_NOT_FOUND)
        if user.active_avatar_id == avatar_id:
            return False
        user.active_avatar_id = avatar_id
        return True

    _apply(db, claim.user_id, activate, settings.AVATAR_UPDATE_MAX_ATTEMPTS)
    return avatar_id


def delete_avatar(
    db: Session,
    claim: TokenClaim,
    avatar_id: str,
    settings: Settings,
) -> str:
    """
    Remove an avatar of the caller.

    The active avatar cannot be deleted (Conflict). Deleting an id that does
    not exist succeeds without writing anything.
    """

    def remove(user: User) -> bool:
        if user.active_avatar_id == avatar_id:
            raise Conflict(ACTIVE_AVATAR_DELETE)
        avatars = list(user.avatars or [])
        remaining = [a for a in avatars if a.get("avatarId") != avatar_id]
        if len(remaining) == len(avatars):
            return False
        user.avatars = remaining
        return True

    _apply(db, claim.user_id, remove, settings.AVATAR_UPDATE_MAX_ATTEMPTS)
    logger.info("Avatar deleted", extra={"user_id": claim.user_id, "avatar_id": avatar_id})
    return avatar_id


def get_avatar(db: Session, user_id: str, avatar_id: str | None) -> tuple[User, AvatarRecord | None]:
    """
    Resolve a public avatar request.

    `avatar_id` of None, "" or "active" means the active avatar, which may be
    unset (returns None). A concrete id that does not exist raises NotFound.
    """
    user = get_user(db, user_id)
    requested = None if avatar_id in (None, "", ACTIVE) else avatar_id
    avatar = _find(user.avatars, requested or user.active_avatar_id)
    if avatar is None and requested:
        raise NotFound(AVATAR_NOT_FOUND)
    return user, avatar


def get_active_avatar(db: Session, user_id: str) -> tuple[User, AvatarRecord]:
    """Return the active avatar; NotFound when the account has none."""
    user, avatar = get_avatar(db, user_id, ACTIVE)
    if avatar is None:
        raise NotFound(AVATAR_NOT_FOUND)
    return user, avatar
