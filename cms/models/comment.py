"""ORM model for comments on posts."""

import uuid

from sqlalchemy import Column, DateTime, String, Text

from cms.models.base import Base, utcnow


class Comment(Base):
    """Comment on a post; user_id is the ownership fact for deletion."""

    __tablename__ = "comments"

    comment_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    post_id = Column(String(36), nullable=False, index=True)
    user_id = Column(String(36), nullable=False, index=True)
    username = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    parent_comment_id = Column(String(36), nullable=True)
    comment_avatar_id = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
