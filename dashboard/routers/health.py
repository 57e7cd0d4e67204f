from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from core.constants import SYSTEM_VERSION
from core.container import ServiceContainer
from dashboard.dependencies import get_container
from dashboard.schemas import DispatcherStats, HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def get_health(container: ServiceContainer = Depends(get_container)):
    """
    Liveness plus dependency status: database reachability,
    dispatcher queue depth and provider health.
    """
    database_ok = await container.database.health_check()
    return HealthResponse(
        status="healthy" if database_ok else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=SYSTEM_VERSION,
        database=database_ok,
        dispatcher=DispatcherStats(**container.dispatcher.get_stats()),
        provider=container.source.get_health().to_dict(),
    )
