"""GET /health: liveness and database reachability."""

from fastapi import APIRouter

from cms.api.deps import AppSettings, DbSession
from cms.core.database import check_db_connected
from cms.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(db: DbSession, settings: AppSettings) -> HealthResponse:
    """Always 200 while the process is up; `database` reports whether SELECT 1 succeeded."""
    return HealthResponse(
        environment=settings.APP_ENV,
        database="connected" if check_db_connected(db) else "disconnected",
    )
