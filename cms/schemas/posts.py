"""Request/response schemas for posts."""

from datetime import datetime

from pydantic import Field

from cms.schemas.common import CamelModel


class PostCreateRequest(CamelModel):
    title: str | None = None
    content: str | None = None
    tags: list[str] = Field(default_factory=list)
    status: str | None = None
    post_avatar_id: str | None = None


class PostUpdateRequest(CamelModel):
    title: str | None = None
    content: str | None = None
    tags: list[str] | None = None
    status: str | None = None
    post_avatar_id: str | None = None


class PostOut(CamelModel):
    post_id: str
    user_id: str
    username: str
    title: str
    content: str
    tags: list[str] = Field(default_factory=list)
    status: str
    post_avatar_id: str | None = None
    comment_count: int
    created_at: datetime
    updated_at: datetime


class PostResponse(CamelModel):
    post: PostOut


class PostMutationResponse(CamelModel):
    message: str
    post: PostOut


class PostDeleteResponse(CamelModel):
    message: str
    post_id: str


class PostsListResponse(CamelModel):
    posts: list[PostOut]
    last_key: str | None = None
