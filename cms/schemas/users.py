"""Request/response schemas for profile and avatar endpoints."""

from datetime import datetime

from pydantic import Field

from cms.schemas.common import CamelModel


class Avatar(CamelModel):
    avatar_id: str
    data_url: str
    uploaded_at: int = Field(..., description="Upload time, epoch milliseconds")


class Profile(CamelModel):
    """Account as returned to its owner; password_hash is not a field here."""

    user_id: str
    username: str
    email: str | None = None
    role: str | None = None
    avatars: list[Avatar] = Field(default_factory=list)
    active_avatar_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UpdateEmailRequest(CamelModel):
    email: str | None = None


class UpdateEmailResponse(CamelModel):
    message: str
    email: str


class UpdatePasswordRequest(CamelModel):
    old_password: str | None = None
    new_password: str | None = None


class AddAvatarRequest(CamelModel):
    data_url: str | None = Field(default=None, description="data:image/<fmt>;base64,<payload>")


class AddAvatarResponse(CamelModel):
    avatar: Avatar
    active_avatar_id: str


class SetActiveAvatarRequest(CamelModel):
    avatar_id: str | None = None


class AvatarIdResponse(CamelModel):
    message: str
    avatar_id: str


class AvatarView(CamelModel):
    """Public avatar lookup by id (or 'active'); always carries avatarId, null when none is set."""

    user_id: str
    username: str
    avatar_id: str | None
    avatar_data_url: str | None


class ActiveAvatarView(CamelModel):
    """Public active-avatar lookup; no avatarId in this shape."""

    user_id: str
    username: str
    avatar_data_url: str
