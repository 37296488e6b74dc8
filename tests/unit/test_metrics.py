"""
Unit Tests - Derived Metrics
"""
import math

import pytest

from showroom.aggregation import DashboardSnapshot, derive_metrics
from showroom.aggregation.metrics import compute_derived


@pytest.fixture(autouse=True)
def clear_cache():
    compute_derived.cache_clear()
    yield
    compute_derived.cache_clear()


class TestDeriveMetrics:
    """Tests for net balance and profit margin"""

    def test_values(self):
        snapshot = DashboardSnapshot(revenue=1000, profit=400, expenses=50, team_cost=100)
        derived = derive_metrics(snapshot)

        assert derived.net_balance == 250
        assert derived.profit_margin == 40

    @pytest.mark.parametrize("profit", [0, 400, -250])
    def test_zero_revenue_margin_is_zero(self, profit):
        derived = derive_metrics(DashboardSnapshot(revenue=0, profit=profit))

        assert derived.profit_margin == 0
        assert math.isfinite(derived.profit_margin)

    def test_negative_revenue_margin_is_zero(self):
        assert derive_metrics(DashboardSnapshot(revenue=-10, profit=5)).profit_margin == 0

    def test_memoized_on_read_fields(self):
        """Snapshots differing only in unread fields share one result"""
        first = derive_metrics(DashboardSnapshot(revenue=100, profit=20, cars_in_stock=1))
        second = derive_metrics(DashboardSnapshot(revenue=100, profit=20, cars_in_stock=5, stock_value=999))

        assert first is second
        assert compute_derived.cache_info().hits == 1

    def test_recomputed_when_read_field_changes(self):
        first = derive_metrics(DashboardSnapshot(revenue=100, profit=20))
        second = derive_metrics(DashboardSnapshot(revenue=100, profit=20, expenses=5))

        assert first is not second
        assert second.net_balance == 15
