"""
Prefect Workflow Orchestration - Dashboard Refresh

Scheduled refresh of the showroom dashboard outside the API process:
- one refresh cycle per flow run
- the configured failure policy decides what a failed fetch does
- failed or degraded cycles are reported as alerts in the run log
"""

from typing import Optional

from prefect import flow, get_run_logger, task

from showroom.aggregation import derive_metrics
from showroom.config import FailurePolicy, SourceKind, get_settings
from showroom.database.connection import close_database, init_database
from showroom.orchestration import CycleOutcome, CycleResult, DashboardPipeline


# =============================================================================
# SUMMARY
# =============================================================================

def summarize_cycle(result: CycleResult) -> dict:
    """
    Summary of a refresh cycle for the flow run result.

    Figures are included only for cycles that published a snapshot; an
    aborted or stale cycle carries the placeholder of a fresh state.
    """
    summary = {
        "cycle_id": result.cycle_id,
        "outcome": result.outcome.value,
        "duration_seconds": result.duration_seconds,
        "failed_sources": list(result.failed_sources),
        "errors": dict(result.errors),
    }
    if result.outcome in (CycleOutcome.COMPLETED, CycleOutcome.DEGRADED):
        summary["snapshot"] = result.snapshot.model_dump(mode="json")
        summary["derived"] = derive_metrics(result.snapshot).model_dump()
    return summary


# =============================================================================
# TASKS
# =============================================================================

@task(
    name="refresh_dashboard",
    description="Run one dashboard refresh cycle",
)
async def refresh_dashboard(failure_policy: Optional[str] = None) -> dict:
    """Run one refresh cycle and summarize it"""
    logger = get_run_logger()
    settings = get_settings()
    uses_database = settings.dashboard.source == SourceKind.DATABASE

    if uses_database:
        await init_database()
    try:
        pipeline = DashboardPipeline.from_settings(settings)
        if failure_policy:
            pipeline.failure_policy = FailurePolicy(failure_policy)
        result = await pipeline.refresh()
    finally:
        if uses_database:
            await close_database()

    summary = summarize_cycle(result)
    if "snapshot" in summary:
        logger.info(
            f"Cycle {result.cycle_id} {result.outcome.value} in {result.duration_seconds:.2f}s: "
            f"revenue={summary['snapshot']['revenue']:.2f} "
            f"net_balance={summary['derived']['net_balance']:.2f}"
        )
    else:
        logger.info(f"Cycle {result.cycle_id} {result.outcome.value} in {result.duration_seconds:.2f}s")
    return summary


@task(
    name="send_alert",
    description="Send alert notification",
)
async def send_alert(message: str, severity: str = "warning") -> None:
    """Send alert notification"""
    logger = get_run_logger()

    # Alerts go to the run log; wire a Prefect notification block here
    # to deliver them elsewhere
    if severity == "error":
        logger.error(f"[ALERT] {message}")
    else:
        logger.warning(f"[ALERT] {message}")


# =============================================================================
# FLOWS
# =============================================================================

@flow(
    name="dashboard_refresh",
    description="Refresh the showroom dashboard snapshot",
)
async def dashboard_refresh(failure_policy: Optional[str] = None) -> dict:
    """
    Dashboard refresh flow.

    Args:
        failure_policy: Override of the configured policy (abort or degrade)

    Returns:
        Summary of the refresh cycle
    """
    summary = await refresh_dashboard(failure_policy)

    if summary["outcome"] == CycleOutcome.ABORTED.value:
        await send_alert(
            f"Dashboard refresh aborted, failed sources: {', '.join(summary['failed_sources'])}",
            severity="error",
        )
    elif summary["outcome"] == CycleOutcome.DEGRADED.value:
        await send_alert(
            f"Dashboard published with empty data for: {', '.join(summary['failed_sources'])}",
        )

    return summary


if __name__ == "__main__":
    settings = get_settings()

    # Serve on the configured interval
    dashboard_refresh.serve(
        name="dashboard-refresh",
        interval=settings.dashboard.refresh_interval_seconds,
    )
