"""
Unit Tests - Sample Data Generator
"""
from datetime import datetime, timezone

import polars as pl
import pytest

from showroom.data import CSV_FILES, ShowroomDataGenerator, write_csv
from showroom.ingestion.sources import CsvDashboardSource
from showroom.orchestration import CycleOutcome, DashboardPipeline

REFERENCE_TIME = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def frames():
    generator = ShowroomDataGenerator(seed=7, reference_time=REFERENCE_TIME)
    return generator.generate_all(purchases=50, orphan_sales=3)


class TestShowroomDataGenerator:
    """Tests for ShowroomDataGenerator"""

    def test_all_tables(self, frames):
        assert set(frames) == set(CSV_FILES)
        assert frames["purchases"].height == 50

    def test_same_seed_same_data(self):
        first = ShowroomDataGenerator(seed=3, reference_time=REFERENCE_TIME).generate_purchases(10)
        second = ShowroomDataGenerator(seed=3, reference_time=REFERENCE_TIME).generate_purchases(10)

        assert first.equals(second)

    def test_sales_reference_sold_purchases(self, frames):
        sold_ids = set(frames["purchases"].filter(pl.col("is_sold"))["id"].to_list())
        all_ids = set(frames["purchases"]["id"].to_list())
        car_ids = frames["sales"]["car_id"].to_list()

        assert len(car_ids) == len(sold_ids) + 3
        assert sold_ids <= set(car_ids)
        assert len([car_id for car_id in car_ids if car_id not in all_ids]) == 3

    def test_balance_matches_payment(self, frames):
        sales = frames["sales"]
        diff = (sales["total_price"] - sales["amount_paid"] - sales["balance"]).abs()
        assert diff.max() < 0.011

    def test_mixed_transaction_types(self, frames):
        types = set(frames["worker_transactions"]["type"].to_list())
        assert types <= {"paiement", "avance", "absence"}
        assert "paiement" in types

    def test_nothing_in_the_future(self, frames):
        for name in ("purchases", "sales", "expenses"):
            assert frames[name]["created_at"].max() <= REFERENCE_TIME


class TestWriteCsv:
    """Tests for CSV export"""

    def test_files_written(self, frames, tmp_path):
        written = write_csv(frames, tmp_path)

        for name, file_name in CSV_FILES.items():
            assert written[name] == tmp_path / file_name
            assert written[name].exists()

    async def test_csv_source_reads_export(self, frames, tmp_path):
        """A generated export refreshes the dashboard end to end"""
        write_csv(frames, tmp_path)
        pipeline = DashboardPipeline(CsvDashboardSource(tmp_path, sales_limit=1000, purchases_limit=1000))

        result = await pipeline.refresh()

        purchases = frames["purchases"]
        in_stock = purchases.filter(~pl.col("is_sold"))
        assert result.outcome == CycleOutcome.COMPLETED
        assert result.snapshot.cars_in_stock == in_stock.height
        assert result.snapshot.stock_value == pytest.approx(in_stock["selling_price"].sum())
        assert result.snapshot.revenue == pytest.approx(frames["sales"]["total_price"].sum())
        assert result.snapshot.partners == frames["suppliers"].height
        assert len(result.snapshot.recent_activity) == 5
