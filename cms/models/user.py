"""ORM model for user accounts (credentials, activation role, profile and avatars)."""

import uuid

from sqlalchemy import Column, DateTime, Integer, String

from cms.models.base import Base, JSONType, utcnow


def new_user_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """
    Account record keyed by user_id with a unique index on username.

    role: NULL while pending activation, then 'user' or 'admin'.
    avatars: ordered list of {avatarId, dataUrl, uploadedAt}; stored on the row so
    that the list and active_avatar_id always change in a single UPDATE.
    version_id: optimistic concurrency counter; every ORM flush of this row
    carries WHERE version_id = <read value> and bumps it.
    """

    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, default=new_user_id)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=True)
    email = Column(String(320), nullable=True)
    avatars = Column(JSONType, nullable=False, default=list)
    active_avatar_id = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    version_id = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        # Never include password_hash.
        return f"User(user_id={self.user_id!r}, username={self.username!r}, role={self.role!r})"
