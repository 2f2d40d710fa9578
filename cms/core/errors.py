"""Domain error taxonomy. Every error maps to one HTTP status and a public message."""

from enum import Enum


class CmsError(Exception):
    """Base class for failures that are safe to report to the caller."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationFailed(CmsError):
    """Malformed or missing input."""

    status_code = 400


class UnauthorizedReason(str, Enum):
    NO_TOKEN = "no_token"
    INVALID_TOKEN = "invalid_token"
    INVALID_CREDENTIALS = "invalid_credentials"


class Unauthorized(CmsError):
    """Missing, invalid or expired token, or bad credentials."""

    status_code = 401

    def __init__(self, message: str, reason: UnauthorizedReason) -> None:
        self.reason = reason
        super().__init__(message)


class Forbidden(CmsError):
    """Authenticated but not permitted (includes accounts pending activation)."""

    status_code = 403


class NotFound(CmsError):
    status_code = 404


class Conflict(CmsError):
    """Uniqueness or active-resource conflicts."""

    status_code = 409


class UsernameTaken(Conflict):
    def __init__(self) -> None:
        super().__init__("Username already exists")


class AvatarRejectedReason(str, Enum):
    INVALID_FORMAT = "invalid_format"
    TOO_LARGE = "too_large"
    INVALID_IMAGE_DATA = "invalid_image_data"
    IMAGE_DIMENSIONS_EXCEEDED = "image_dimensions_exceeded"
    LIMIT_REACHED = "limit_reached"


class AvatarRejected(ValidationFailed):
    """Upload refused by the avatar pipeline; reason tells which check failed."""

    def __init__(self, reason: AvatarRejectedReason, message: str) -> None:
        self.reason = reason
        super().__init__(message)
