"""
Aggregation Engine

Turns one batch of fetched record sets into a DashboardSnapshot:
- joins sales to the purchases they sold through an id lookup
- reduces sales, stock, expenses and payroll payments to the summary metrics
- merges the most recent sales and in-stock purchases into one activity feed

The engine is pure and synchronous. It never mutates its inputs and never
raises for malformed values: those have already been normalized to zero by
the record models.
"""

import heapq
import math
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .normalizer import normalize_count
from .records import (
    ActivityEntry,
    DashboardSnapshot,
    ExpenseRecord,
    PurchaseRecord,
    SaleRecord,
    TransactionRecord,
)

RECENT_SALES_LIMIT = 3
RECENT_PURCHASES_LIMIT = 2

# Records without a creation time sort after everything else
OLDEST = datetime.min.replace(tzinfo=timezone.utc)

CategoryPredicate = Callable[[TransactionRecord], bool]


def payment_category(category: str) -> CategoryPredicate:
    """Build a predicate matching transactions of one type, ignoring case."""
    wanted = category.strip().lower()

    def matches(transaction: TransactionRecord) -> bool:
        return transaction.type.lower() == wanted

    return matches


def build_purchase_lookup(purchases: Iterable[PurchaseRecord]) -> Dict[str, PurchaseRecord]:
    """Index purchases by id. Purchases without an id cannot be joined."""
    return {purchase.id: purchase for purchase in purchases if purchase.id is not None}


def _created_key(record: Any) -> datetime:
    return record.created_at or OLDEST


def _activity_key(entry: ActivityEntry) -> datetime:
    return entry.timestamp or OLDEST


def most_recent(records: Sequence[Any], limit: int) -> List[Any]:
    """
    Newest records first, at most ``limit`` of them.

    The sort is stable, so records created at the same instant keep their
    input order.
    """
    return sorted(records, key=_created_key, reverse=True)[:limit]


def merge_recent_activity(
    sales: Sequence[SaleRecord],
    in_stock: Sequence[PurchaseRecord],
) -> Tuple[ActivityEntry, ...]:
    """
    Build the recent-activity feed.

    Takes the three newest sales and the two newest in-stock purchases and
    merges them newest-first. On equal timestamps sales come before
    purchases.
    """
    feeds = [
        [ActivityEntry.from_sale(sale) for sale in most_recent(sales, RECENT_SALES_LIMIT)],
        [ActivityEntry.from_purchase(purchase) for purchase in most_recent(in_stock, RECENT_PURCHASES_LIMIT)],
    ]
    # heapq.merge is stable: ties resolve in favour of the earlier feed
    return tuple(heapq.merge(*feeds, key=_activity_key, reverse=True))


def aggregate(
    sales: Optional[Iterable[Any]],
    purchases: Optional[Iterable[Any]],
    expenses: Optional[Iterable[Any]],
    payments: Optional[Iterable[Any]],
    partner_count: Any = 0,
    inspection_count: Any = 0,
    category_predicate: Optional[CategoryPredicate] = None,
) -> DashboardSnapshot:
    """
    Aggregate one fetch cycle's record sets into a snapshot.

    Args:
        sales: Sale records or raw rows
        purchases: Purchase records or raw rows
        expenses: Expense records or raw rows
        payments: Worker transactions, normally already restricted to the
            payment category by the data source
        partner_count: Number of suppliers
        inspection_count: Number of inspections
        category_predicate: When given, only payments it accepts count
            toward team cost

    Returns:
        DashboardSnapshot with the nine metrics and the activity feed
    """
    sale_records = SaleRecord.from_rows(sales)
    purchase_records = PurchaseRecord.from_rows(purchases)
    expense_records = ExpenseRecord.from_rows(expenses)
    payment_records = TransactionRecord.from_rows(payments)

    lookup = build_purchase_lookup(purchase_records)

    # Single pass over sales; a sale whose car is unknown has no cost basis
    # and is left out of profit only
    revenue_terms: List[float] = []
    debt_terms: List[float] = []
    profit_terms: List[float] = []
    for sale in sale_records:
        revenue_terms.append(sale.total_price)
        debt_terms.append(sale.balance)
        original = lookup.get(sale.car_id)
        if original is not None:
            profit_terms.append(sale.total_price - original.total_cost)

    in_stock = [purchase for purchase in purchase_records if not purchase.is_sold]

    if category_predicate is not None:
        payment_records = [payment for payment in payment_records if category_predicate(payment)]

    return DashboardSnapshot(
        revenue=math.fsum(revenue_terms),
        profit=math.fsum(profit_terms),
        stock_value=math.fsum(purchase.selling_price for purchase in in_stock),
        debt=math.fsum(debt_terms),
        expenses=math.fsum(expense.cost for expense in expense_records),
        team_cost=math.fsum(payment.amount for payment in payment_records),
        cars_in_stock=len(in_stock),
        partners=normalize_count(partner_count),
        inspections=normalize_count(inspection_count),
        recent_activity=merge_recent_activity(sale_records, in_stock),
    )
