"""Health probe payload."""

from typing import Literal

from pydantic import Field

from cms.schemas.common import CamelModel


class HealthResponse(CamelModel):
    """Liveness plus store reachability, for load balancers and monitoring."""

    status: Literal["ok"] = "ok"
    service: str = "txtme-cms"
    environment: str = Field(description="APP_ENV the process runs with")
    database: Literal["connected", "disconnected"] = Field(
        description="Whether the credential store answered a trivial query",
    )
