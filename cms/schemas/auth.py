"""Request/response schemas for auth endpoints."""

from pydantic import Field

from cms.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    """Registration body. Fields are optional here so the service can answer with its own 400."""

    username: str | None = Field(default=None, description="Username (case-sensitive, unique)")
    password: str | None = Field(default=None, description="Password")
    email: str | None = Field(default=None, description="Optional contact email")


class RegisterResponse(CamelModel):
    message: str
    user_id: str


class LoginRequest(CamelModel):
    """Credentials for login."""

    username: str | None = Field(default=None, description="Username")
    password: str | None = Field(default=None, description="Password")


class PublicIdentity(CamelModel):
    """Identity returned after login (never includes the password hash)."""

    user_id: str
    username: str
    role: str


class LoginResponse(CamelModel):
    """JWT access token returned after successful login."""

    message: str = "Login successful"
    token: str = Field(..., description="JWT access token (Authorization: Bearer <token>)")
    user: PublicIdentity
