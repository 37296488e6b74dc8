"""
Health Check Endpoints

Provides health and readiness checks for orchestration systems.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request, Response
from pydantic import BaseModel

from showroom.config import SourceKind, get_settings
from showroom.database.connection import check_database_health

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    environment: str
    timestamp: datetime
    checks: Dict[str, Any]


def _dashboard_check(request: Request) -> Dict[str, Any]:
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        return {"status": "unhealthy", "error": "pipeline not initialized"}

    state = pipeline.state
    return {
        "status": "degraded" if state.last_error or state.degraded_sources else "healthy",
        "cycle_id": state.latest_cycle_id,
        "loading": state.loading,
        "refreshed_at": state.refreshed_at.isoformat() if state.refreshed_at else None,
        "last_error": state.last_error,
        "degraded_sources": list(state.degraded_sources),
    }


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """
    Comprehensive health check endpoint.

    Checks:
    - Dashboard refresh state
    - Database connectivity (database source only)
    """
    settings = get_settings()
    checks = {"dashboard": _dashboard_check(request)}

    if settings.dashboard.source == SourceKind.DATABASE:
        checks["database"] = await check_database_health()

    statuses = {check["status"] for check in checks.values()}
    if "unhealthy" in statuses:
        overall_status = "unhealthy"
    elif "degraded" in statuses:
        overall_status = "degraded"
    else:
        overall_status = "healthy"

    return HealthResponse(
        status=overall_status,
        version=settings.version,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
    )


@router.get("/health/live")
async def liveness_check() -> Dict[str, str]:
    """
    Kubernetes liveness probe endpoint.

    Returns 200 if the application is running.
    """
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness_check(request: Request, response: Response) -> Dict[str, str]:
    """
    Kubernetes readiness probe endpoint.

    Ready once the refresh pipeline exists and, for the database source,
    the database answers.
    """
    if getattr(request.app.state, "pipeline", None) is None:
        response.status_code = 503
        return {"status": "not_ready", "reason": "pipeline_not_initialized"}

    if get_settings().dashboard.source == SourceKind.DATABASE:
        db_health = await check_database_health()
        if db_health.get("status") != "healthy":
            response.status_code = 503
            return {"status": "not_ready", "reason": "database_unavailable"}

    return {"status": "ready"}
