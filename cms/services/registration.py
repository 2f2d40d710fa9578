"""Account registration with the username-uniqueness invariant enforced by the store."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cms.core.errors import UsernameTaken, ValidationFailed
from cms.core.security import BCRYPT_ROUNDS, hash_password
from cms.models import User

logger = logging.getLogger(__name__)

MISSING_CREDENTIALS = "Username and password are required"


def register(
    db: Session,
    username: str | None,
    password: str | None,
    email: str | None = None,
    bcrypt_rounds: int = BCRYPT_ROUNDS,
) -> str:
    """
    Create a pending account and return its user_id.

    The insert is conditional on the unique username index: there is no
    lookup beforehand, so of two concurrent registrations for the same
    username exactly one INSERT succeeds and the other raises UsernameTaken.
    The account is created without a role (pending activation).
    """
    if not username or not password:
        raise ValidationFailed(MISSING_CREDENTIALS)

    user = User(
        username=username,
        password_hash=hash_password(password, rounds=bcrypt_rounds),
        email=email or None,
        avatars=[],
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Registration rejected: username already exists")
        raise UsernameTaken()
    logger.info("User registered", extra={"user_id": user.user_id})
    return user.user_id
