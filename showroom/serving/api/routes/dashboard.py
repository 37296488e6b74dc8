"""
Dashboard Endpoints

Current dashboard state and on-demand refresh cycles.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from showroom.aggregation import DashboardSnapshot, DerivedMetrics
from showroom.orchestration import CycleOutcome, DashboardPipeline, DashboardState

router = APIRouter()


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class DashboardResponse(BaseModel):
    """What the dashboard shows right now"""
    loading: bool
    cycle_id: int
    snapshot: DashboardSnapshot
    derived: DerivedMetrics
    refreshed_at: Optional[datetime] = None
    last_error: Optional[str] = None
    degraded_sources: List[str] = []

    @classmethod
    def from_state(cls, state: DashboardState) -> "DashboardResponse":
        return cls(
            loading=state.loading,
            cycle_id=state.latest_cycle_id,
            snapshot=state.snapshot,
            derived=state.derived,
            refreshed_at=state.refreshed_at,
            last_error=state.last_error,
            degraded_sources=list(state.degraded_sources),
        )


class RefreshResponse(BaseModel):
    """Result of a refresh cycle and the state it left behind"""
    cycle_id: int
    outcome: CycleOutcome
    failed_sources: List[str]
    duration_seconds: float
    dashboard: DashboardResponse


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_pipeline(request: Request) -> DashboardPipeline:
    """Pipeline created by the application lifespan"""
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        raise HTTPException(status_code=503, detail="Dashboard pipeline is not initialized")
    return pipeline


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("", response_model=DashboardResponse)
async def get_dashboard(pipeline: DashboardPipeline = Depends(get_pipeline)) -> DashboardResponse:
    """
    Get the current dashboard.

    Returns the last published snapshot, its derived metrics and whether a
    refresh cycle is in flight.
    """
    return DashboardResponse.from_state(pipeline.state)


@router.post("/refresh", response_model=RefreshResponse)
async def refresh_dashboard(pipeline: DashboardPipeline = Depends(get_pipeline)) -> RefreshResponse:
    """
    Run one refresh cycle and return its outcome.

    A failed fetch does not fail the request: the outcome reports it and
    the dashboard keeps the last good snapshot (or a degraded one).
    """
    result = await pipeline.refresh()
    return RefreshResponse(
        cycle_id=result.cycle_id,
        outcome=result.outcome,
        failed_sources=list(result.failed_sources),
        duration_seconds=round(result.duration_seconds, 4),
        dashboard=DashboardResponse.from_state(pipeline.state),
    )
