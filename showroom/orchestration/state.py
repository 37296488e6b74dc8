"""
Dashboard State

Holds what the dashboard currently shows and which fetch cycle owns the
next update. Cycle ids increase monotonically; a cycle may only settle the
state while it is still the latest one started, so a slow, superseded cycle
can never overwrite a newer result.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, Optional, Tuple

import structlog

from showroom.aggregation import DashboardSnapshot, DerivedMetrics, derive_metrics

logger = structlog.get_logger(__name__)


class DashboardStatus(str, Enum):
    """Loading indicator"""
    IDLE = "idle"
    LOADING = "loading"


class DashboardState:
    """
    In-memory dashboard state.

    The initial state is idle with an all-zero snapshot. ``snapshot`` is only
    ever replaced by a successful cycle; a failed cycle keeps the previous
    snapshot visible and records ``last_error``.
    """

    def __init__(self) -> None:
        self.status = DashboardStatus.IDLE
        self.latest_cycle_id = 0
        self.snapshot = DashboardSnapshot()
        self.derived: DerivedMetrics = derive_metrics(self.snapshot)
        self.refreshed_at: Optional[datetime] = None
        self.last_error: Optional[str] = None
        self.degraded_sources: Tuple[str, ...] = ()

    @property
    def loading(self) -> bool:
        return self.status == DashboardStatus.LOADING

    def is_current(self, cycle_id: int) -> bool:
        return cycle_id == self.latest_cycle_id

    def begin_cycle(self) -> int:
        """Start a new cycle and return its id"""
        self.latest_cycle_id += 1
        self.status = DashboardStatus.LOADING
        return self.latest_cycle_id

    def complete_cycle(
        self,
        cycle_id: int,
        snapshot: DashboardSnapshot,
        degraded_sources: Iterable[str] = (),
    ) -> bool:
        """
        Publish a cycle's snapshot.

        Returns:
            False if a newer cycle has started since; the state is unchanged
        """
        if not self.is_current(cycle_id):
            logger.info("Discarding stale cycle result", cycle_id=cycle_id, latest_cycle_id=self.latest_cycle_id)
            return False

        self.snapshot = snapshot
        self.derived = derive_metrics(snapshot)
        self.degraded_sources = tuple(degraded_sources)
        self.refreshed_at = datetime.now(timezone.utc)
        self.last_error = None
        self.status = DashboardStatus.IDLE
        return True

    def fail_cycle(self, cycle_id: int, error: str) -> bool:
        """
        Record a failed cycle, keeping the previous snapshot.

        Returns:
            False if a newer cycle has started since; the state is unchanged
        """
        if not self.is_current(cycle_id):
            logger.info("Discarding stale cycle failure", cycle_id=cycle_id, latest_cycle_id=self.latest_cycle_id)
            return False

        self.last_error = error
        self.status = DashboardStatus.IDLE
        return True
