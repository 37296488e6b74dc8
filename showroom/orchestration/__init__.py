"""
Dashboard Refresh Orchestration
"""
from .pipeline import CycleOutcome, CycleResult, DashboardPipeline
from .state import DashboardState, DashboardStatus

__all__ = [
    "CycleOutcome",
    "CycleResult",
    "DashboardPipeline",
    "DashboardState",
    "DashboardStatus",
]
