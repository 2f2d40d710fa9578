"""Account lookups and the activation state derived from the stored role."""

from dataclasses import dataclass

from sqlalchemy import or_
from sqlalchemy.orm import Session

from cms.core.errors import NotFound
from cms.models import User
from cms.models.base import utcnow

USER_NOT_FOUND = "User not found"

VALID_ROLES = ("user", "admin")


@dataclass(frozen=True)
class Pending:
    """Registered but not yet activated by an administrator; cannot log in."""


@dataclass(frozen=True)
class Activated:
    role: str


Activation = Pending | Activated


def activation_of(user: User) -> Activation:
    """Map the nullable role column onto the two activation states."""
    if not user.role:
        return Pending()
    return Activated(role=user.role)


def find_by_username(db: Session, username: str) -> User | None:
    """Exact, case-sensitive lookup through the unique username index."""
    return db.query(User).filter(User.username == username).first()


def get_user(db: Session, user_id: str) -> User:
    """Load an account by id or raise NotFound."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFound(USER_NOT_FOUND)
    return user


def list_accounts(db: Session) -> list[User]:
    return db.query(User).order_by(User.created_at, User.username).all()


def activate(db: Session, username: str, role: str = "user") -> bool:
    """
    Grant a role to an account in one UPDATE statement. Returns False when no
    account has that username. Also bumps version_id so a concurrent avatar
    update on the same row retries instead of overwriting the role.
    """
    if role not in VALID_ROLES:
        raise ValueError(f"role must be one of {', '.join(VALID_ROLES)}")
    updated = (
        db.query(User)
        .filter(User.username == username)
        .update(
            {
                User.role: role,
                User.updated_at: utcnow(),
                User.version_id: User.version_id + 1,
            },
            synchronize_session=False,
        )
    )
    db.commit()
    return updated > 0


def activate_all_pending(db: Session, role: str = "user") -> int:
    """Activate every pending account; returns how many were activated."""
    if role not in VALID_ROLES:
        raise ValueError(f"role must be one of {', '.join(VALID_ROLES)}")
    updated = (
        db.query(User)
        .filter(or_(User.role.is_(None), User.role == ""))
        .update(
            {
                User.role: role,
                User.updated_at: utcnow(),
                User.version_id: User.version_id + 1,
            },
            synchronize_session=False,
        )
    )
    db.commit()
    return updated
