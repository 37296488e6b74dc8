"""
Unit Tests - CSV Data Source
"""
import pytest

from showroom.aggregation import aggregate
from showroom.config import Settings
from showroom.ingestion.sources import (
    CsvDashboardSource,
    SourceFetchError,
    SqlDashboardSource,
    create_source,
)


@pytest.fixture
def csv_dir(tmp_path):
    """A directory with one small CSV export per table"""
    files = {
        "sales.csv": (
            "total_price,balance,car_id,created_at,first_name,last_name\n"
            "1000,200,A,2024-01-02,J,D\n"
            "500,,B,2024-01-05T10:00:00Z,Amina,Haddad\n"
            "abc,0,C,,Karim,Benali\n"
        ),
        "purchases.csv": (
            "id,total_cost,selling_price,is_sold,created_at,make,model\n"
            "A,600,900,false,2024-01-01,X,Y\n"
            "B,300,450,true,2024-01-03,Kia,Rio\n"
            "D,700,800,false,2024-01-04,Toyota,Yaris\n"
        ),
        "expenses.csv": "id,name,cost\n1,Rent,50\n2,Water,12.5\n",
        "worker_transactions.csv": (
            "id,worker_id,type,amount\n"
            "1,w1,paiement,100\n"
            "2,w1,avance,40\n"
            "3,w2,Paiement,60\n"
        ),
        "suppliers.csv": "id,name\n1,Alpha\n2,Beta\n",
        "inspections.csv": "id,type\n1,checkin\n2,checkout\n3,checkin\n",
    }
    for name, content in files.items():
        (tmp_path / name).write_text(content, encoding="utf-8")
    return tmp_path


class TestCsvDashboardSource:
    """Tests for CsvDashboardSource"""

    async def test_sales_newest_first_and_limited(self, csv_dir):
        source = CsvDashboardSource(csv_dir, sales_limit=2)

        sales = await source.fetch_sales()

        assert [row["car_id"] for row in sales] == ["B", "A"]

    async def test_rows_without_timestamp_last(self, csv_dir):
        sales = await CsvDashboardSource(csv_dir).fetch_sales()
        assert sales[-1]["car_id"] == "C"

    async def test_values_read_as_strings(self, csv_dir):
        purchases = await CsvDashboardSource(csv_dir).fetch_purchases()

        assert purchases[0]["id"] == "D"
        assert purchases[0]["total_cost"] == "700"
        assert purchases[0]["is_sold"] == "false"

    async def test_payments_filtered_by_category(self, csv_dir):
        payments = await CsvDashboardSource(csv_dir, payment_category="paiement").fetch_payments()
        assert sorted(row["amount"] for row in payments) == ["100", "60"]

    async def test_counts(self, csv_dir):
        source = CsvDashboardSource(csv_dir)

        assert await source.count_suppliers() == 2
        assert await source.count_inspections() == 3

    async def test_missing_file_raises_fetch_error(self, tmp_path):
        with pytest.raises(SourceFetchError) as exc_info:
            await CsvDashboardSource(tmp_path).fetch_expenses()

        assert exc_info.value.source == "expenses"

    async def test_aggregates_end_to_end(self, csv_dir):
        source = CsvDashboardSource(csv_dir)

        snapshot = aggregate(
            await source.fetch_sales(),
            await source.fetch_purchases(),
            await source.fetch_expenses(),
            await source.fetch_payments(),
            partner_count=await source.count_suppliers(),
            inspection_count=await source.count_inspections(),
        )

        assert snapshot.revenue == 1500
        assert snapshot.profit == 600  # A: 1000-600, B: 500-300
        assert snapshot.debt == 200
        assert snapshot.stock_value == 1700
        assert snapshot.cars_in_stock == 2
        assert snapshot.expenses == 62.5
        assert snapshot.team_cost == 160
        assert snapshot.partners == 2
        assert snapshot.inspections == 3


class TestCreateSource:
    """Tests for source selection"""

    def test_csv(self, tmp_path):
        settings = Settings(dashboard={"source": "csv", "csv_dir": str(tmp_path), "sales_limit": 5})
        source = create_source(settings)

        assert isinstance(source, CsvDashboardSource)
        assert source.sales_limit == 5

    def test_database(self):
        settings = Settings(dashboard={"source": "database", "payment_category": " Paiement "})
        source = create_source(settings)

        assert isinstance(source, SqlDashboardSource)
        assert source.payment_category == "paiement"
