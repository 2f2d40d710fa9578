"""Login flow: credential check gated on account activation."""

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from cms.core.config import Settings
from cms.core.errors import Forbidden, Unauthorized, UnauthorizedReason, ValidationFailed
from cms.core.security import create_access_token, verify_password
from cms.schemas.auth import PublicIdentity
from cms.services.accounts import Pending, activation_of, find_by_username
from cms.services.registration import MISSING_CREDENTIALS

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
NOT_ACTIVATED = "User account not activated. Contact administrator."


@dataclass(frozen=True)
class LoginResult:
    token: str
    identity: PublicIdentity


def _invalid_credentials() -> Unauthorized:
    return Unauthorized(INVALID_CREDENTIALS, UnauthorizedReason.INVALID_CREDENTIALS)


def login(
    db: Session,
    settings: Settings,
    username: str | None,
    password: str | None,
) -> LoginResult:
    """
    Authenticate by username and password and issue a one-hour token.

    Unknown username and wrong password raise the same Unauthorized so the
    response does not reveal whether the username exists. An account that
    exists but is pending activation raises Forbidden before any password check.
    """
    if not username or not password:
        raise ValidationFailed(MISSING_CREDENTIALS)

    user = find_by_username(db, username)
    if user is None:
        raise _invalid_credentials()

    activation = activation_of(user)
    if isinstance(activation, Pending):
        logger.info("Login blocked for pending account", extra={"user_id": user.user_id})
        raise Forbidden(NOT_ACTIVATED)

    if not verify_password(password, user.password_hash):
        logger.info("Login failed", extra={"user_id": user.user_id})
        raise _invalid_credentials()

    logger.info("Login succeeded", extra={"user_id": user.user_id})
    token = create_access_token(
        user_id=user.user_id,
        username=user.username,
        role=activation.role,
        settings=settings,
    )
    return LoginResult(
        token=token,
        identity=PublicIdentity(
            user_id=user.user_id,
            username=user.username,
            role=activation.role,
        ),
    )
