"""Health check endpoints.

Provides endpoints for monitoring service health and readiness.
Healthy means the pool is initialized and a round-trip query succeeds.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from product_lookup.api.schemas import AppHealth, DatabaseHealth, HealthResponse
from product_lookup.infrastructure.database import ConnectionPool

router = APIRouter()


async def _database_ok(request: Request) -> bool:
    pool: ConnectionPool | None = getattr(request.app.state, "pool", None)
    if pool is None:
        return False
    return await pool.test_connectivity()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def health_check(request: Request) -> JSONResponse:
    """Check service health.

    Returns:
        Health report; 503 when the database is unreachable.
    """
    settings = request.app.state.settings
    db_ok = await _database_ok(request)
    now = datetime.now(timezone.utc)
    started_at = getattr(request.app.state, "started_at", None)

    report = HealthResponse(
        status="healthy" if db_ok else "unhealthy",
        timestamp=now,
        uptime=round(time.monotonic() - started_at, 3) if started_at else 0.0,
        database=DatabaseHealth(
            status="connected" if db_ok else "disconnected",
            timestamp=now,
        ),
        app=AppHealth(
            name=settings.app_name,
            version=settings.api_version,
            environment=settings.environment,
        ),
    )
    return JSONResponse(
        status_code=status.HTTP_200_OK if db_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=report.model_dump(mode="json"),
    )


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """Check if service is ready to accept requests.

    Returns:
        Readiness status.
    """
    if await _database_ok(request):
        return JSONResponse(content={"status": "ready"})
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready"},
    )
