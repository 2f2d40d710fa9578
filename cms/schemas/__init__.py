"""Pydantic request/response schemas."""

from cms.schemas.auth import (
    LoginRequest,
    LoginResponse,
    PublicIdentity,
    RegisterRequest,
    RegisterResponse,
)
from cms.schemas.comments import (
    CommentCreateRequest,
    CommentCreateResponse,
    CommentDeleteResponse,
    CommentOut,
    CommentsListResponse,
)
from cms.schemas.common import CamelModel, MessageResponse
from cms.schemas.health import HealthResponse
from cms.schemas.posts import (
    PostCreateRequest,
    PostDeleteResponse,
    PostMutationResponse,
    PostOut,
    PostResponse,
    PostsListResponse,
    PostUpdateRequest,
)
from cms.schemas.users import (
    ActiveAvatarView,
    AddAvatarRequest,
    AddAvatarResponse,
    Avatar,
    AvatarIdResponse,
    AvatarView,
    Profile,
    SetActiveAvatarRequest,
    UpdateEmailRequest,
    UpdateEmailResponse,
    UpdatePasswordRequest,
)

__all__ = [
    "ActiveAvatarView",
    "AddAvatarRequest",
    "AddAvatarResponse",
    "Avatar",
    "AvatarIdResponse",
    "AvatarView",
    "CamelModel",
    "CommentCreateRequest",
    "CommentCreateResponse",
    "CommentDeleteResponse",
    "CommentOut",
    "CommentsListResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "PostCreateRequest",
    "PostDeleteResponse",
    "PostMutationResponse",
    "PostOut",
    "PostResponse",
    "PostsListResponse",
    "PostUpdateRequest",
    "Profile",
    "PublicIdentity",
    "RegisterRequest",
    "RegisterResponse",
    "SetActiveAvatarRequest",
    "UpdateEmailRequest",
    "UpdateEmailResponse",
    "UpdatePasswordRequest",
]
