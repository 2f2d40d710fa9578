"""ORM model for posts."""

import uuid

from sqlalchemy import Column, DateTime, Integer, String, Text

from cms.models.base import Base, JSONType, utcnow


class Post(Base):
    """Post owned by the user who created it; user_id never changes after creation."""

    __tablename__ = "posts"

    post_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    username = Column(String(255), nullable=False)
    title = Column(String(500), nullable=False)
    content = Column(Text, nullable=False)
    tags = Column(JSONType, nullable=False, default=list)
    status = Column(String(32), nullable=False, default="published")
    post_avatar_id = Column(String(64), nullable=True)
    comment_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
