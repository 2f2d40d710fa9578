"""SQLAlchemy ORM models."""

from cms.models.base import Base
from cms.models.comment import Comment
from cms.models.post import Post
from cms.models.user import User

__all__ = ["Base", "Comment", "Post", "User"]
