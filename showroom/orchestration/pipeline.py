"""
Dashboard Refresh Pipeline

One refresh cycle:
1. start a cycle in the dashboard state (loading indicator on)
2. issue the six source fetches concurrently, each bounded by a timeout
3. wait for every fetch to settle
4. apply the failure policy to failed fetches
5. aggregate once and settle the state, unless a newer cycle started
"""

import asyncio
import time
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

import structlog
from pydantic import BaseModel, ConfigDict

from showroom.aggregation import DashboardSnapshot, aggregate, payment_category
from showroom.config import FailurePolicy, Settings, get_settings
from showroom.ingestion.sources import DashboardSource, SourceFetchError, create_source

from .state import DashboardState

logger = structlog.get_logger(__name__)

# Stand-ins for a failed fetch under the degrade policy
EMPTY_RESULTS: Dict[str, Any] = {
    "sales": [],
    "purchases": [],
    "expenses": [],
    "payments": [],
    "suppliers": 0,
    "inspections": 0,
}


class CycleOutcome(str, Enum):
    """How a refresh cycle ended"""
    COMPLETED = "completed"
    DEGRADED = "degraded"  # Published with failed sources treated as empty
    ABORTED = "aborted"  # Not published; previous snapshot kept
    STALE = "stale"  # Superseded by a newer cycle; discarded


class CycleResult(BaseModel):
    """Result of one refresh cycle"""

    model_config = ConfigDict(frozen=True)

    cycle_id: int
    outcome: CycleOutcome
    snapshot: DashboardSnapshot
    failed_sources: Tuple[str, ...] = ()
    errors: Dict[str, str] = {}
    duration_seconds: float = 0.0


class DashboardPipeline:
    """
    Runs refresh cycles against a data source.

    Overlapping cycles are allowed. Each one settles the state only if it is
    still the latest cycle started, so the last-started cycle wins.

    Example:
        pipeline = DashboardPipeline(create_source())
        result = await pipeline.refresh()
        print(result.outcome, pipeline.state.snapshot.revenue)
    """

    def __init__(
        self,
        source: DashboardSource,
        state: Optional[DashboardState] = None,
        failure_policy: FailurePolicy = FailurePolicy.ABORT,
        fetch_timeout: Optional[float] = 30.0,
        payment_type: Optional[str] = None,
    ):
        self.source = source
        self.state = state or DashboardState()
        self.failure_policy = FailurePolicy(failure_policy)
        self.fetch_timeout = fetch_timeout
        self.category_predicate = payment_category(payment_type) if payment_type else None

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        source: Optional[DashboardSource] = None,
    ) -> "DashboardPipeline":
        """Build a pipeline from application settings"""
        settings = settings or get_settings()
        dashboard = settings.dashboard
        return cls(
            source or create_source(settings),
            failure_policy=dashboard.failure_policy,
            fetch_timeout=dashboard.fetch_timeout_seconds,
            payment_type=dashboard.payment_category,
        )

    def _fetches(self) -> Dict[str, Callable[[], Awaitable[Any]]]:
        return {
            "sales": self.source.fetch_sales,
            "purchases": self.source.fetch_purchases,
            "expenses": self.source.fetch_expenses,
            "payments": self.source.fetch_payments,
            "suppliers": self.source.count_suppliers,
            "inspections": self.source.count_inspections,
        }

    async def _fetch(self, name: str, fetch: Callable[[], Awaitable[Any]]) -> Any:
        try:
            return await asyncio.wait_for(fetch(), timeout=self.fetch_timeout)
        except asyncio.TimeoutError as e:
            raise SourceFetchError(name, f"timed out after {self.fetch_timeout}s") from e

    async def _fetch_all(self) -> Tuple[Dict[str, Any], Dict[str, str]]:
        """Run all fetches concurrently and wait for every one to settle"""
        fetches = self._fetches()
        results = await asyncio.gather(
            *(self._fetch(name, fetch) for name, fetch in fetches.items()),
            return_exceptions=True,
        )

        values: Dict[str, Any] = {}
        errors: Dict[str, str] = {}
        for name, result in zip(fetches, results):
            if isinstance(result, Exception):
                errors[name] = str(result)
            elif isinstance(result, BaseException):
                raise result
            else:
                values[name] = result
        return values, errors

    async def refresh(self) -> CycleResult:
        """
        Run one refresh cycle.

        Fetch failures never propagate: they are logged and handled by the
        failure policy. Cancelling the refresh records the cycle as failed
        and re-raises.

        Returns:
            CycleResult describing the cycle
        """
        cycle_id = self.state.begin_cycle()
        log = logger.bind(cycle_id=cycle_id)
        start = time.perf_counter()
        log.info("Refresh cycle started", failure_policy=self.failure_policy.value)

        try:
            values, errors = await self._fetch_all()
        except asyncio.CancelledError:
            log.warning("Refresh cycle cancelled")
            self.state.fail_cycle(cycle_id, "Refresh cancelled")
            raise

        for name, error in errors.items():
            log.error("Source fetch failed", source=name, error=error)

        failed = tuple(name for name in EMPTY_RESULTS if name in errors)

        if failed and self.failure_policy == FailurePolicy.ABORT:
            message = "; ".join(errors[name] for name in failed)
            applied = self.state.fail_cycle(cycle_id, message)
            return self._finish(
                log,
                cycle_id,
                CycleOutcome.ABORTED if applied else CycleOutcome.STALE,
                self.state.snapshot,
                failed,
                errors,
                start,
            )

        for name in failed:
            values[name] = EMPTY_RESULTS[name]

        try:
            snapshot = aggregate(
                values["sales"],
                values["purchases"],
                values["expenses"],
                values["payments"],
                partner_count=values["suppliers"],
                inspection_count=values["inspections"],
                category_predicate=self.category_predicate,
            )
        except Exception as e:
            log.exception("Aggregation failed")
            errors = {**errors, "aggregate": str(e)}
            applied = self.state.fail_cycle(cycle_id, f"Aggregation failed: {e}")
            return self._finish(
                log,
                cycle_id,
                CycleOutcome.ABORTED if applied else CycleOutcome.STALE,
                self.state.snapshot,
                failed,
                errors,
                start,
            )

        applied = self.state.complete_cycle(cycle_id, snapshot, degraded_sources=failed)
        if not applied:
            outcome = CycleOutcome.STALE
        elif failed:
            outcome = CycleOutcome.DEGRADED
        else:
            outcome = CycleOutcome.COMPLETED
        return self._finish(log, cycle_id, outcome, snapshot, failed, errors, start)

    def _finish(
        self,
        log: Any,
        cycle_id: int,
        outcome: CycleOutcome,
        snapshot: DashboardSnapshot,
        failed: Tuple[str, ...],
        errors: Dict[str, str],
        start: float,
    ) -> CycleResult:
        duration = time.perf_counter() - start
        log.info(
            "Refresh cycle finished",
            outcome=outcome.value,
            failed_sources=list(failed),
            duration_seconds=round(duration, 3),
        )
        return CycleResult(
            cycle_id=cycle_id,
            outcome=outcome,
            snapshot=snapshot,
            failed_sources=failed,
            errors=errors,
            duration_seconds=duration,
        )
