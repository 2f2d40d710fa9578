"""Owner-only authorization for mutations of posts and comments."""

import logging
from enum import Enum

from cms.core.errors import Forbidden
from cms.core.security import TokenClaim

logger = logging.getLogger(__name__)


class Decision(str, Enum):
    ALLOWED = "allowed"
    FORBIDDEN = "forbidden"


def authorize(claim: TokenClaim, resource_owner_id: str) -> Decision:
    """Allowed iff the claim's user is the recorded owner. Roles grant no override."""
    if claim.user_id == resource_owner_id:
        return Decision.ALLOWED
    return Decision.FORBIDDEN


def require_owner(claim: TokenClaim, resource_owner_id: str, message: str) -> None:
    """Raise Forbidden(message) unless the claim owns the resource. Call after the existence check."""
    if authorize(claim, resource_owner_id) is Decision.FORBIDDEN:
        logger.warning(
            "Ownership check denied",
            extra={"user_id": claim.user_id, "owner_id": resource_owner_id},
        )
        raise Forbidden(message)
