"""
Dashboard Aggregation Module
"""
from .engine import aggregate, payment_category
from .metrics import DerivedMetrics, derive_metrics
from .normalizer import normalize_amount
from .records import (
    ActivityEntry,
    ActivityKind,
    DashboardSnapshot,
    ExpenseRecord,
    PurchaseRecord,
    SaleRecord,
    TransactionRecord,
)

__all__ = [
    "aggregate",
    "payment_category",
    "DerivedMetrics",
    "derive_metrics",
    "normalize_amount",
    "ActivityEntry",
    "ActivityKind",
    "DashboardSnapshot",
    "ExpenseRecord",
    "PurchaseRecord",
    "SaleRecord",
    "TransactionRecord",
]
