"""
Dashboard Data Sources

The six record sets a dashboard refresh needs, behind one interface:

- SqlDashboardSource: showroom database through SQLAlchemy async sessions
- CsvDashboardSource: a directory of CSV exports read with polars

Rows are returned as plain mappings. Type coercion is left to the record
models, so a source never rejects a row for a malformed value.
"""

import asyncio
from contextlib import AbstractAsyncContextManager
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Union

import polars as pl
import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from showroom.aggregation.engine import OLDEST
from showroom.aggregation.normalizer import normalize_timestamp
from showroom.config import Settings, SourceKind, get_settings
from showroom.database.connection import get_db
from showroom.database.models import (
    Expense,
    Inspection,
    Purchase,
    Sale,
    Supplier,
    WorkerTransaction,
)

logger = structlog.get_logger(__name__)

Row = Dict[str, Any]
SessionScope = Callable[[], AbstractAsyncContextManager[AsyncSession]]

# Names of the six fetches, as reported in failures
SOURCE_NAMES = ("sales", "purchases", "expenses", "payments", "suppliers", "inspections")


class SourceFetchError(Exception):
    """A record set could not be fetched"""

    def __init__(self, source: str, cause: Union[BaseException, str]):
        self.source = source
        self.cause = cause
        super().__init__(f"Failed to fetch {source}: {cause}")


class DashboardSource(Protocol):
    """Everything a refresh cycle reads"""

    async def fetch_sales(self) -> List[Row]: ...

    async def fetch_purchases(self) -> List[Row]: ...

    async def fetch_expenses(self) -> List[Row]: ...

    async def fetch_payments(self) -> List[Row]: ...

    async def count_suppliers(self) -> int: ...

    async def count_inspections(self) -> int: ...


# =============================================================================
# DATABASE SOURCE
# =============================================================================

class SqlDashboardSource:
    """
    Reads the dashboard record sets from the showroom database.

    Every fetch opens its own session, so the six fetches of a cycle can
    run concurrently. Sales and purchases come back newest first and capped
    at their limits; worker transactions are restricted to the payment
    category in the query.

    Example:
        await init_database()
        source = SqlDashboardSource(sales_limit=100, purchases_limit=100)
        sales = await source.fetch_sales()
    """

    def __init__(
        self,
        session_scope: SessionScope = get_db,
        sales_limit: int = 100,
        purchases_limit: int = 100,
        payment_category: str = "paiement",
    ):
        self.session_scope = session_scope
        self.sales_limit = sales_limit
        self.purchases_limit = purchases_limit
        self.payment_category = payment_category.strip().lower()

    async def _rows(self, source: str, stmt) -> List[Row]:
        try:
            async with self.session_scope() as db:
                result = await db.execute(stmt)
                rows = [dict(row) for row in result.mappings()]
        except SQLAlchemyError as e:
            raise SourceFetchError(source, e) from e

        logger.debug("Fetched rows", source=source, rows=len(rows))
        return rows

    async def _count(self, source: str, model) -> int:
        stmt = select(func.count()).select_from(model)
        try:
            async with self.session_scope() as db:
                result = await db.execute(stmt)
                return int(result.scalar_one())
        except SQLAlchemyError as e:
            raise SourceFetchError(source, e) from e

    async def fetch_sales(self) -> List[Row]:
        stmt = (
            select(
                Sale.total_price.label("total_price"),
                Sale.balance.label("balance"),
                Sale.car_id.label("car_id"),
                Sale.created_at.label("created_at"),
                Sale.first_name.label("first_name"),
                Sale.last_name.label("last_name"),
            )
            .order_by(Sale.created_at.desc().nulls_last())
            .limit(self.sales_limit)
        )
        return await self._rows("sales", stmt)

    async def fetch_purchases(self) -> List[Row]:
        stmt = (
            select(
                Purchase.id.label("id"),
                Purchase.total_cost.label("total_cost"),
                Purchase.selling_price.label("selling_price"),
                Purchase.is_sold.label("is_sold"),
                Purchase.created_at.label("created_at"),
                Purchase.make.label("make"),
                Purchase.model.label("model"),
            )
            .order_by(Purchase.created_at.desc().nulls_last())
            .limit(self.purchases_limit)
        )
        return await self._rows("purchases", stmt)

    async def fetch_expenses(self) -> List[Row]:
        stmt = select(Expense.cost.label("cost"))
        return await self._rows("expenses", stmt)

    async def fetch_payments(self) -> List[Row]:
        stmt = select(
            WorkerTransaction.amount.label("amount"),
            WorkerTransaction.type.label("type"),
        ).where(func.lower(WorkerTransaction.type) == self.payment_category)
        return await self._rows("payments", stmt)

    async def count_suppliers(self) -> int:
        return await self._count("suppliers", Supplier)

    async def count_inspections(self) -> int:
        return await self._count("inspections", Inspection)


# =============================================================================
# CSV SOURCE
# =============================================================================

class CsvDashboardSource:
    """
    Reads the dashboard record sets from CSV exports.

    Expected files in ``directory``: sales.csv, purchases.csv, expenses.csv,
    worker_transactions.csv, suppliers.csv and inspections.csv. Every column
    is read as a string and left to the record normalizer. Files are parsed
    in a worker thread to keep the event loop free.
    """

    def __init__(
        self,
        directory: Union[str, Path],
        sales_limit: int = 100,
        purchases_limit: int = 100,
        payment_category: str = "paiement",
    ):
        self.directory = Path(directory)
        self.sales_limit = sales_limit
        self.purchases_limit = purchases_limit
        self.payment_category = payment_category.strip().lower()

    def _read(self, source: str, file_name: str) -> pl.DataFrame:
        path = self.directory / file_name
        try:
            # infer_schema_length=0 reads every column as a string
            return pl.read_csv(path, infer_schema_length=0)
        except (OSError, pl.exceptions.PolarsError) as e:
            raise SourceFetchError(source, e) from e

    def _newest_first(self, source: str, file_name: str, limit: int) -> List[Row]:
        rows = self._read(source, file_name).to_dicts()
        # Stable: rows created at the same instant keep their file order
        rows.sort(key=lambda row: normalize_timestamp(row.get("created_at")) or OLDEST, reverse=True)
        return rows[:limit]

    def _payments(self) -> List[Row]:
        df = self._read("payments", "worker_transactions.csv")
        try:
            df = df.filter(
                pl.col("type").fill_null("").str.strip_chars().str.to_lowercase() == self.payment_category
            )
        except pl.exceptions.PolarsError as e:
            raise SourceFetchError("payments", e) from e
        return df.to_dicts()

    async def fetch_sales(self) -> List[Row]:
        return await asyncio.to_thread(lambda: self._newest_first("sales", "sales.csv", self.sales_limit))

    async def fetch_purchases(self) -> List[Row]:
        return await asyncio.to_thread(lambda: self._newest_first("purchases", "purchases.csv", self.purchases_limit))

    async def fetch_expenses(self) -> List[Row]:
        return await asyncio.to_thread(lambda: self._read("expenses", "expenses.csv").to_dicts())

    async def fetch_payments(self) -> List[Row]:
        return await asyncio.to_thread(self._payments)

    async def count_suppliers(self) -> int:
        return await asyncio.to_thread(lambda: self._read("suppliers", "suppliers.csv").height)

    async def count_inspections(self) -> int:
        return await asyncio.to_thread(lambda: self._read("inspections", "inspections.csv").height)


def create_source(settings: Optional[Settings] = None) -> DashboardSource:
    """
    Build the configured data source.

    Args:
        settings: Application settings; defaults to get_settings()

    Returns:
        SqlDashboardSource or CsvDashboardSource
    """
    settings = settings or get_settings()
    dashboard = settings.dashboard

    if dashboard.source == SourceKind.CSV:
        logger.info("Using CSV data source", directory=dashboard.csv_dir)
        return CsvDashboardSource(
            dashboard.csv_dir,
            sales_limit=dashboard.sales_limit,
            purchases_limit=dashboard.purchases_limit,
            payment_category=dashboard.payment_category,
        )

    logger.info("Using database data source")
    return SqlDashboardSource(
        sales_limit=dashboard.sales_limit,
        purchases_limit=dashboard.purchases_limit,
        payment_category=dashboard.payment_category,
    )
