"""Profile operations for the authenticated account: read, email, password."""

import logging

from sqlalchemy.orm import Session

from cms.core.config import Settings
from cms.core.errors import NotFound, Unauthorized, UnauthorizedReason, ValidationFailed
from cms.core.security import MIN_NEW_PASSWORD_LEN, hash_password, verify_password
from cms.models import User
from cms.models.base import utcnow
from cms.schemas.users import Profile
from cms.services.accounts import USER_NOT_FOUND, get_user

logger = logging.getLogger(__name__)

INVALID_EMAIL = "Invalid email"
MISSING_PASSWORDS = "Missing passwords"
INCORRECT_OLD_PASSWORD = "Incorrect old password"


def get_profile(db: Session, user_id: str) -> Profile:
    """Return the account without its password hash."""
    user = get_user(db, user_id)
    return Profile(
        user_id=user.user_id,
        username=user.username,
        email=user.email,
        role=user.role,
        avatars=user.avatars or [],
        active_avatar_id=user.active_avatar_id,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def _update_fields(db: Session, user_id: str, values: dict, *criteria) -> int:
    """Single UPDATE statement on one account; bumps the version counter. Returns rows matched."""
    values = {
        **values,
        User.updated_at: utcnow(),
        User.version_id: User.version_id + 1,
    }
    updated = (
        db.query(User)
        .filter(User.user_id == user_id, *criteria)
        .update(values, synchronize_session=False)
    )
    db.commit()
    return updated


def update_email(db: Session, user_id: str, email: str | None) -> str:
    if not email or "@" not in email:
        raise ValidationFailed(INVALID_EMAIL)
    if not _update_fields(db, user_id, {User.email: email}):
        raise NotFound(USER_NOT_FOUND)
    return email


def delete_email(db: Session, user_id: str) -> None:
    if not _update_fields(db, user_id, {User.email: None}):
        raise NotFound(USER_NOT_FOUND)


def update_password(
    db: Session,
    user_id: str,
    old_password: str | None,
    new_password: str | None,
    settings: Settings,
) -> None:
    """
    Replace the password after verifying the current one.

    The UPDATE is conditional on the hash that was verified, so a concurrent
    password change makes this one fail instead of silently overwriting it.
    """
    if not old_password or not new_password:
        raise ValidationFailed(MISSING_PASSWORDS)
    if len(new_password) < MIN_NEW_PASSWORD_LEN:
        raise ValidationFailed(
            f"New password must be at least {MIN_NEW_PASSWORD_LEN} characters"
        )
    user = get_user(db, user_id)
    current_hash = user.password_hash
    if not verify_password(old_password, current_hash):
        raise Unauthorized(INCORRECT_OLD_PASSWORD, UnauthorizedReason.INVALID_CREDENTIALS)

    new_hash = hash_password(new_password, rounds=settings.BCRYPT_ROUNDS)
    if not _update_fields(
        db,
        user_id,
        {User.password_hash: new_hash},
        User.password_hash == current_hash,
    ):
        raise Unauthorized(INCORRECT_OLD_PASSWORD, UnauthorizedReason.INVALID_CREDENTIALS)
    logger.info("Password updated", extra={"user_id": user_id})
