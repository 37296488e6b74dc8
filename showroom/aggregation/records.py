"""
Dashboard Record Models

Immutable value records consumed and produced by the aggregation engine.

Input records are built from flat rows returned by a data source. Each field
accepts the snake_case name as well as the camelCase column names used by the
showroom schema, and is passed through the record normalizer before
validation, so building a record never fails on a malformed value.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Tuple

import structlog
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .normalizer import (
    normalize_amount,
    normalize_count,
    normalize_flag,
    normalize_identifier,
    normalize_text,
    normalize_timestamp,
)

logger = structlog.get_logger(__name__)


class DashboardRecord(BaseModel):
    """Base class for input records"""

    model_config = ConfigDict(frozen=True, extra="ignore")

    @classmethod
    def from_rows(cls, rows: Optional[Iterable[Any]]) -> List["DashboardRecord"]:
        """
        Build records from raw rows.

        Args:
            rows: Mappings or already-built records; None is an empty set

        Returns:
            List of records in input order. Rows that are neither a mapping
            nor a record of this type are skipped.
        """
        if rows is None:
            return []

        records = []
        skipped = 0
        for row in rows:
            if isinstance(row, cls):
                records.append(row)
            elif isinstance(row, Mapping):
                records.append(cls.model_validate(dict(row)))
            else:
                skipped += 1

        if skipped:
            logger.warning(
                "Skipped rows that are not records",
                record_type=cls.__name__,
                skipped=skipped,
            )
        return records


class SaleRecord(DashboardRecord):
    """A vehicle sale"""

    total_price: float = Field(default=0.0, validation_alias=AliasChoices("total_price", "totalPrice"))
    balance: float = Field(default=0.0, validation_alias=AliasChoices("balance"))  # May be negative (credit)
    car_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("car_id", "carId"))
    created_at: Optional[datetime] = Field(default=None, validation_alias=AliasChoices("created_at", "createdAt"))
    first_name: str = Field(
        default="", validation_alias=AliasChoices("first_name", "firstName", "customerFirstName")
    )
    last_name: str = Field(
        default="", validation_alias=AliasChoices("last_name", "lastName", "customerLastName")
    )

    @field_validator("total_price", "balance", mode="before")
    @classmethod
    def coerce_amounts(cls, value: Any) -> float:
        return normalize_amount(value)

    @field_validator("car_id", mode="before")
    @classmethod
    def coerce_car_id(cls, value: Any) -> Optional[str]:
        return normalize_identifier(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def coerce_created_at(cls, value: Any) -> Optional[datetime]:
        return normalize_timestamp(value)

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def coerce_names(cls, value: Any) -> str:
        return normalize_text(value)

    @property
    def customer_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class PurchaseRecord(DashboardRecord):
    """A vehicle acquired into stock"""

    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("id"))
    total_cost: float = Field(default=0.0, validation_alias=AliasChoices("total_cost", "totalCost"))
    selling_price: float = Field(default=0.0, validation_alias=AliasChoices("selling_price", "sellingPrice"))
    is_sold: bool = Field(default=False, validation_alias=AliasChoices("is_sold", "isSold"))
    created_at: Optional[datetime] = Field(default=None, validation_alias=AliasChoices("created_at", "createdAt"))
    make: str = Field(default="", validation_alias=AliasChoices("make"))
    model: str = Field(default="", validation_alias=AliasChoices("model"))

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Optional[str]:
        return normalize_identifier(value)

    @field_validator("total_cost", "selling_price", mode="before")
    @classmethod
    def coerce_amounts(cls, value: Any) -> float:
        return normalize_amount(value)

    @field_validator("is_sold", mode="before")
    @classmethod
    def coerce_is_sold(cls, value: Any) -> bool:
        return normalize_flag(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def coerce_created_at(cls, value: Any) -> Optional[datetime]:
        return normalize_timestamp(value)

    @field_validator("make", "model", mode="before")
    @classmethod
    def coerce_names(cls, value: Any) -> str:
        return normalize_text(value)

    @property
    def vehicle_name(self) -> str:
        return f"{self.make} {self.model}"


class ExpenseRecord(DashboardRecord):
    """A general business expense"""

    cost: float = Field(default=0.0, validation_alias=AliasChoices("cost"))

    @field_validator("cost", mode="before")
    @classmethod
    def coerce_cost(cls, value: Any) -> float:
        return normalize_amount(value)


class TransactionRecord(DashboardRecord):
    """A worker transaction (payment, advance, absence deduction)"""

    amount: float = Field(default=0.0, validation_alias=AliasChoices("amount"))
    type: str = Field(default="", validation_alias=AliasChoices("type"))

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, value: Any) -> float:
        return normalize_amount(value)

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, value: Any) -> str:
        return normalize_text(value)


class ActivityKind(str, Enum):
    """Kinds of entries in the recent-activity feed"""
    SALE = "sale"
    PURCHASE = "purchase"


class ActivityEntry(BaseModel):
    """One entry of the recent-activity feed"""

    model_config = ConfigDict(frozen=True)

    kind: ActivityKind
    amount: float
    timestamp: Optional[datetime] = None
    label: str

    @classmethod
    def from_sale(cls, sale: SaleRecord) -> "ActivityEntry":
        return cls(
            kind=ActivityKind.SALE,
            amount=sale.total_price,
            timestamp=sale.created_at,
            label=sale.customer_name,
        )

    @classmethod
    def from_purchase(cls, purchase: PurchaseRecord) -> "ActivityEntry":
        return cls(
            kind=ActivityKind.PURCHASE,
            amount=purchase.total_cost,
            timestamp=purchase.created_at,
            label=purchase.vehicle_name,
        )


class DashboardSnapshot(BaseModel):
    """
    One immutable result of a single aggregation pass.

    Monetary metrics are floats; the three counts are non-negative integers.
    """

    model_config = ConfigDict(frozen=True)

    revenue: float = 0.0
    profit: float = 0.0
    stock_value: float = 0.0
    debt: float = 0.0
    expenses: float = 0.0
    team_cost: float = 0.0
    cars_in_stock: int = 0
    partners: int = 0
    inspections: int = 0
    recent_activity: Tuple[ActivityEntry, ...] = ()

    @field_validator("cars_in_stock", "partners", "inspections", mode="before")
    @classmethod
    def coerce_counts(cls, value: Any) -> int:
        return normalize_count(value)
