"""Profile, email, password and avatar routes under /admin/users."""

from fastapi import APIRouter

from cms.api.auth import CurrentUser
from cms.api.deps import AppSettings, DbSession
from cms.schemas.common import MessageResponse
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
from cms.services import avatars, profile

router = APIRouter()


@router.get("/profile", response_model=Profile, response_model_exclude_none=True)
def get_profile(claim: CurrentUser, db: DbSession) -> Profile:
    """Own profile; the password hash is never included."""
    return profile.get_profile(db, claim.user_id)


@router.put("/profile/email", response_model=UpdateEmailResponse)
def update_email(body: UpdateEmailRequest, claim: CurrentUser, db: DbSession) -> UpdateEmailResponse:
    email = profile.update_email(db, claim.user_id, body.email)
    return UpdateEmailResponse(message="Email updated", email=email)


@router.delete("/profile/email", response_model=MessageResponse)
def delete_email(claim: CurrentUser, db: DbSession) -> MessageResponse:
    profile.delete_email(db, claim.user_id)
    return MessageResponse(message="Email removed successfully")


@router.put("/profile/password", response_model=MessageResponse)
def update_password(
    body: UpdatePasswordRequest,
    claim: CurrentUser,
    db: DbSession,
    settings: AppSettings,
) -> MessageResponse:
    profile.update_password(db, claim.user_id, body.old_password, body.new_password, settings)
    return MessageResponse(message="Password updated successfully")


@router.post("/profile/avatar", response_model=AddAvatarResponse)
def add_avatar(
    body: AddAvatarRequest,
    claim: CurrentUser,
    db: DbSession,
    settings: AppSettings,
) -> AddAvatarResponse:
    """Upload a jpeg/png/gif data URL; it is stored as a 50x50 image and becomes the active avatar."""
    avatar = avatars.add_avatar(db, claim, body.data_url, settings)
    return AddAvatarResponse(
        avatar=Avatar.model_validate(avatar),
        active_avatar_id=avatar["avatarId"],
    )


@router.put("/profile/avatar/active", response_model=AvatarIdResponse)
def set_active_avatar(
    body: SetActiveAvatarRequest,
    claim: CurrentUser,
    db: DbSession,
    settings: AppSettings,
) -> AvatarIdResponse:
    avatar_id = avatars.set_active_avatar(db, claim, body.avatar_id, settings)
    return AvatarIdResponse(message="Active avatar updated", avatar_id=avatar_id)


@router.delete("/profile/avatar/{avatar_id}", response_model=AvatarIdResponse)
def delete_avatar(
    avatar_id: str,
    claim: CurrentUser,
    db: DbSession,
    settings: AppSettings,
) -> AvatarIdResponse:
    """409 for the active avatar; unknown ids are a successful no-op."""
    avatars.delete_avatar(db, claim, avatar_id, settings)
    return AvatarIdResponse(message="Avatar deleted", avatar_id=avatar_id)


@router.get("/{user_id}/avatars/{avatar_id}", response_model=AvatarView)
def get_user_avatar(user_id: str, avatar_id: str, db: DbSession) -> AvatarView:
    """
    Public. `avatar_id` may be a concrete id or "active". With no active
    avatar set, returns 200 with null avatarId and avatarDataUrl.
    """
    user, avatar = avatars.get_avatar(db, user_id, avatar_id)
    return AvatarView(
        user_id=user.user_id,
        username=user.username,
        avatar_id=avatar["avatarId"] if avatar else None,
        avatar_data_url=avatar["dataUrl"] if avatar else None,
    )


@router.get("/{user_id}/avatar", response_model=ActiveAvatarView)
def get_user_active_avatar(user_id: str, db: DbSession) -> ActiveAvatarView:
    """Public. Active avatar only, without avatarId; 404 when none is set."""
    user, avatar = avatars.get_active_avatar(db, user_id)
    return ActiveAvatarView(
        user_id=user.user_id,
        username=user.username,
        avatar_data_url=avatar["dataUrl"],
    )
