"""Password hashing, JWT issue/verify, and bearer-token authentication."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt
from pydantic import BaseModel, ValidationError

from cms.core.config import Settings
from cms.core.errors import Unauthorized, UnauthorizedReason

# Default bcrypt cost; Settings.BCRYPT_ROUNDS overrides it per app.
BCRYPT_ROUNDS = 12

MIN_NEW_PASSWORD_LEN = 8

NO_TOKEN_MESSAGE = "Unauthorized: No token provided"
INVALID_TOKEN_MESSAGE = "Unauthorized: Invalid token"


class TokenClaim(BaseModel):
    """Verified identity carried by a bearer token. Never persisted."""

    user_id: str
    username: str
    role: str
    issued_at: datetime
    expires_at: datetime


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Salted bcrypt hash of a password, as text for the password_hash column."""
    # bcrypt has a 72-byte limit; truncate to avoid errors.
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str | None) -> bool:
    """Verify a plain password against a stored hash. A malformed hash never verifies."""
    if not hashed:
        return False
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(
    user_id: str,
    username: str,
    role: str,
    settings: Settings,
    ttl: timedelta | None = None,
) -> str:
    """Create a signed JWT with userId, username, role, iat and exp (one hour unless ttl is given)."""
    now = datetime.now(UTC)
    if ttl is None:
        ttl = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": user_id,
        "userId": user_id,
        "username": username,
        "role": role,
        "iat": now,
        "exp": now + ttl,
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def verify_access_token(token: str, settings: Settings) -> TokenClaim | None:
    """
    Decode and validate a JWT. Fails closed: bad signature, malformed token,
    missing claims or expiry all return None instead of raising.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
    except jwt.PyJWTError:
        return None
    try:
        return TokenClaim(
            user_id=payload.get("userId") or payload.get("sub"),
            username=payload.get("username"),
            role=payload.get("role"),
            issued_at=datetime.fromtimestamp(payload["iat"], UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )
    except (ValidationError, TypeError, ValueError, OverflowError):
        return None


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token part of an 'Authorization: Bearer <token>' header, if present."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


def authenticate(authorization: str | None, settings: Settings) -> TokenClaim:
    """
    Verify the bearer token from an Authorization header and return its claim.

    Raises Unauthorized(NO_TOKEN) when no bearer token is present and
    Unauthorized(INVALID_TOKEN) on signature, structure or expiry failure.
    Has no side effects.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        raise Unauthorized(NO_TOKEN_MESSAGE, UnauthorizedReason.NO_TOKEN)
    claim = verify_access_token(token, settings)
    if claim is None:
        raise Unauthorized(INVALID_TOKEN_MESSAGE, UnauthorizedReason.INVALID_TOKEN)
    return claim
