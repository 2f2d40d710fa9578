"""Register and login routes, and the bearer-token dependency (get_current_user)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from cms.api.deps import AppSettings, DbSession
from cms.core.security import TokenClaim, authenticate
from cms.schemas.auth import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
from cms.services.login import login as login_user
from cms.services.registration import register as register_user

router = APIRouter()
# auto_error=False: missing or malformed headers are reported by authenticate() with our own 401 body.
security = HTTPBearer(auto_error=False)

REGISTERED_MESSAGE = "User registered successfully. Awaiting activation by admin."


def get_current_user(
    request: Request,
    settings: AppSettings,
    _credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> TokenClaim:
    """Dependency: require a valid Bearer JWT and return its claim. Raises Unauthorized (401)."""
    return authenticate(request.headers.get("Authorization"), settings)


CurrentUser = Annotated[TokenClaim, Depends(get_current_user)]


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, db: DbSession, settings: AppSettings) -> RegisterResponse:
    """
    Create an account pending activation. 409 if the username is taken.
    The account cannot log in until an administrator assigns a role.
    """
    user_id = register_user(
        db,
        body.username,
        body.password,
        body.email,
        bcrypt_rounds=settings.BCRYPT_ROUNDS,
    )
    return RegisterResponse(message=REGISTERED_MESSAGE, user_id=user_id)


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, db: DbSession, settings: AppSettings) -> LoginResponse:
    """
    Authenticate with username and password; returns a JWT valid for one hour.
    Include the token in the Authorization header as: Bearer <token>
    """
    result = login_user(db, settings, body.username, body.password)
    return LoginResponse(token=result.token, user=result.identity)
