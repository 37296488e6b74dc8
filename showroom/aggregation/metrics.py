"""
Derived Dashboard Metrics

Values computed from a snapshot for presentation. They depend only on four
snapshot fields, and are memoized on exactly those fields.
"""

from functools import lru_cache

from pydantic import BaseModel, ConfigDict

from .records import DashboardSnapshot


class DerivedMetrics(BaseModel):
    """Net result and gross margin of a snapshot"""

    model_config = ConfigDict(frozen=True)

    net_balance: float
    profit_margin: float


@lru_cache(maxsize=256)
def compute_derived(profit: float, expenses: float, team_cost: float, revenue: float) -> DerivedMetrics:
    """
    Compute derived metrics.

    ``profit_margin`` is a percentage of revenue and is 0 whenever there is
    no positive revenue to divide by.
    """
    profit_margin = (profit / revenue) * 100 if revenue > 0 else 0.0
    return DerivedMetrics(
        net_balance=profit - expenses - team_cost,
        profit_margin=profit_margin,
    )


def derive_metrics(snapshot: DashboardSnapshot) -> DerivedMetrics:
    """Derived metrics of a snapshot (memoized)"""
    return compute_derived(
        snapshot.profit,
        snapshot.expenses,
        snapshot.team_cost,
        snapshot.revenue,
    )
