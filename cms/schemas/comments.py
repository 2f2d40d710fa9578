"""Request/response schemas for comments."""

from datetime import datetime

from cms.schemas.common import CamelModel


class CommentCreateRequest(CamelModel):
    content: str | None = None
    parent_comment_id: str | None = None
    comment_avatar_id: str | None = None


class CommentOut(CamelModel):
    comment_id: str
    post_id: str
    user_id: str
    username: str
    content: str
    parent_comment_id: str | None = None
    comment_avatar_id: str | None = None
    created_at: datetime


class CommentCreateResponse(CamelModel):
    message: str
    comment: CommentOut


class CommentDeleteResponse(CamelModel):
    message: str
    comment_id: str


class CommentsListResponse(CamelModel):
    comments: list[CommentOut]
    count: int
    next_key: str | None = None
