"""
Database Models - Showroom Schema

Tables read by the dashboard data source:

- sales: vehicle sales with the amount still owed by the customer
- purchases: vehicles acquired into stock (camelCase cost/price columns)
- expenses: general business expenses
- worker_transactions: payments, advances and absence deductions per worker
- suppliers: partners vehicles are bought from
- inspections: check-in / check-out inspection reports
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional
import uuid

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


def _new_id() -> str:
    return str(uuid.uuid4())


# =============================================================================
# ENUMERATIONS
# =============================================================================

class SaleStatus(str, Enum):
    """Sale settlement status"""
    COMPLETED = "completed"
    DEBT = "debt"


class TransactionType(str, Enum):
    """Worker transaction types"""
    PAYMENT = "paiement"
    ADVANCE = "avance"
    ABSENCE = "absence"


class InspectionType(str, Enum):
    """Inspection direction"""
    CHECKIN = "checkin"
    CHECKOUT = "checkout"


# =============================================================================
# TABLES
# =============================================================================

class Supplier(Base):
    """Supplier (partner) a vehicle is bought from"""
    __tablename__ = "suppliers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    code: Mapped[Optional[str]] = mapped_column(String(50))
    mobile: Mapped[Optional[str]] = mapped_column(String(30))
    address: Mapped[Optional[str]] = mapped_column(String(300))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    created_by: Mapped[Optional[str]] = mapped_column(String(100))

    purchases: Mapped[List["Purchase"]] = relationship(back_populates="supplier")


class Purchase(Base):
    """
    Purchase Table

    One row per vehicle bought. ``is_sold`` flips when the vehicle is sold;
    unsold rows are the current stock.
    """
    __tablename__ = "purchases"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    supplier_id: Mapped[Optional[str]] = mapped_column(ForeignKey("suppliers.id"))

    # Vehicle
    make: Mapped[str] = mapped_column(String(100), nullable=False)
    model: Mapped[str] = mapped_column(String(100), nullable=False)
    year: Mapped[Optional[str]] = mapped_column(String(4))
    color: Mapped[Optional[str]] = mapped_column(String(50))
    plate: Mapped[Optional[str]] = mapped_column(String(20))
    vin: Mapped[Optional[str]] = mapped_column(String(32))
    mileage: Mapped[Optional[int]] = mapped_column(Integer)

    # Pricing (column names as in the showroom schema)
    total_cost: Mapped[Decimal] = mapped_column("totalCost", Numeric(12, 2), default=0)
    selling_price: Mapped[Decimal] = mapped_column("sellingPrice", Numeric(12, 2), default=0)

    is_sold: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    created_by: Mapped[Optional[str]] = mapped_column(String(100))

    supplier: Mapped[Optional["Supplier"]] = relationship(back_populates="purchases")

    __table_args__ = (
        Index("ix_purchases_created_at", "created_at"),
        Index("ix_purchases_is_sold", "is_sold"),
    )


class Sale(Base):
    """
    Sale Table

    ``balance`` is what the customer still owes (negative for a credit).
    ``car_id`` points at the purchase that was sold.
    """
    __tablename__ = "sales"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    # Not a foreign key: a sale may outlive the purchase row it sold
    car_id: Mapped[Optional[str]] = mapped_column(String(36))

    # Customer
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    mobile1: Mapped[Optional[str]] = mapped_column(String(30))
    doc_number: Mapped[Optional[str]] = mapped_column(String(50))

    # Amounts
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    amount_paid: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    balance: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    status: Mapped[str] = mapped_column(String(20), default=SaleStatus.COMPLETED.value)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    created_by: Mapped[Optional[str]] = mapped_column(String(100))

    __table_args__ = (
        Index("ix_sales_created_at", "created_at"),
        Index("ix_sales_car_id", "car_id"),
    )


class Expense(Base):
    """General business expense"""
    __tablename__ = "expenses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    expense_date: Mapped[Optional[date]] = mapped_column("date", Date)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    created_by: Mapped[Optional[str]] = mapped_column(String(100))


class WorkerTransaction(Base):
    """
    Worker Transaction Table

    ``type`` is one of TransactionType values; only payments count toward
    team cost on the dashboard.
    """
    __tablename__ = "worker_transactions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    worker_id: Mapped[Optional[str]] = mapped_column(String(36))
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    transaction_date: Mapped[Optional[date]] = mapped_column("date", Date)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        Index("ix_worker_transactions_type", "type"),
    )


class Inspection(Base):
    """Vehicle check-in / check-out inspection"""
    __tablename__ = "inspections"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    car_id: Mapped[Optional[str]] = mapped_column(String(36))
    car_name: Mapped[Optional[str]] = mapped_column(String(200))
    inspection_date: Mapped[Optional[date]] = mapped_column("date", Date)
    mileage: Mapped[Optional[int]] = mapped_column(Integer)
    partner_name: Mapped[Optional[str]] = mapped_column(String(200))
    note: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    created_by: Mapped[Optional[str]] = mapped_column(String(100))
