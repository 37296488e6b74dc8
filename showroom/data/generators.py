"""
Synthetic Data Generator

Generates realistic showroom data for development, demos and tests.
Includes:
- Suppliers vehicles are bought from
- Purchases (stock), a share of them sold
- Sales of the sold purchases, optionally with orphan sales
- Expenses, worker transactions of mixed types and inspections

Every generator draws from its own seeded random source, so the same seed
always produces the same data.
"""

import random
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional, Union

import polars as pl
import structlog
from faker import Faker

from showroom.database.models import InspectionType, SaleStatus, TransactionType

logger = structlog.get_logger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

VEHICLES = [
    ("Toyota", ["Corolla", "Yaris", "RAV4", "Hilux", "Land Cruiser"]),
    ("Hyundai", ["i10", "Accent", "Elantra", "Tucson", "Santa Fe"]),
    ("Renault", ["Clio", "Megane", "Symbol", "Duster", "Kangoo"]),
    ("Volkswagen", ["Polo", "Golf", "Passat", "Tiguan", "Caddy"]),
    ("Peugeot", ["208", "301", "308", "2008", "3008"]),
    ("Kia", ["Picanto", "Rio", "Cerato", "Sportage", "Sorento"]),
]

COLORS = ["white", "black", "silver", "grey", "blue", "red"]

EXPENSE_NAMES = ["Rent", "Electricity", "Water", "Cleaning", "Advertising", "Insurance", "Repairs", "Fuel"]

# Transaction type weights; only payments count as team cost
TRANSACTION_TYPES = [
    (TransactionType.PAYMENT.value, 0.6),
    (TransactionType.ADVANCE.value, 0.3),
    (TransactionType.ABSENCE.value, 0.1),
]

# CSV file written for each table
CSV_FILES = {
    "suppliers": "suppliers.csv",
    "purchases": "purchases.csv",
    "sales": "sales.csv",
    "expenses": "expenses.csv",
    "worker_transactions": "worker_transactions.csv",
    "inspections": "inspections.csv",
}

CSV_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S%:z"


# =============================================================================
# GENERATOR
# =============================================================================

class ShowroomDataGenerator:
    """
    Generate one consistent showroom dataset.

    Example:
        generator = ShowroomDataGenerator(seed=7)
        frames = generator.generate_all(purchases=200)
        write_csv(frames, "data/generated")
    """

    def __init__(self, seed: int = 42, reference_time: Optional[datetime] = None):
        self.seed = seed
        self.random = random.Random(seed)
        self.fake = Faker()
        self.fake.seed_instance(seed)
        self.reference_time = reference_time or datetime.now(timezone.utc).replace(microsecond=0)

    def _id(self) -> str:
        return str(uuid.UUID(int=self.random.getrandbits(128), version=4))

    def _past(self, max_days: int) -> datetime:
        """A time within the last ``max_days`` days, to the second"""
        return self.reference_time - timedelta(seconds=self.random.randint(0, max_days * 86400))

    def generate_suppliers(self, n: int = 20) -> pl.DataFrame:
        """Generate n suppliers"""
        suppliers = []
        for i in range(n):
            suppliers.append({
                "id": self._id(),
                "name": self.fake.company(),
                "code": f"SUP-{i + 1:04d}",
                "mobile": self.fake.phone_number(),
                "address": self.fake.address().replace("\n", ", "),
                "created_at": self._past(730),
            })
        return pl.DataFrame(suppliers)

    def generate_purchases(
        self,
        n: int = 100,
        supplier_ids: Optional[List[str]] = None,
        sold_ratio: float = 0.6,
    ) -> pl.DataFrame:
        """
        Generate n purchased vehicles.

        Args:
            n: Number of purchases
            supplier_ids: Suppliers to buy from; purchases have none if empty
            sold_ratio: Share of purchases already sold
        """
        purchases = []
        for _ in range(n):
            make, models = self.random.choice(VEHICLES)
            total_cost = round(self.random.uniform(4000, 45000), 2)
            selling_price = round(total_cost * self.random.uniform(1.05, 1.3), 2)

            purchases.append({
                "id": self._id(),
                "supplier_id": self.random.choice(supplier_ids) if supplier_ids else None,
                "make": make,
                "model": self.random.choice(models),
                "year": str(self.random.randint(2008, self.reference_time.year)),
                "color": self.random.choice(COLORS),
                "plate": self.fake.bothify("?? ###-##").upper(),
                "vin": self.fake.bothify("?#?#?#?#?#?#?#?#?").upper(),
                "mileage": self.random.randint(0, 250000),
                "total_cost": total_cost,
                "selling_price": selling_price,
                "is_sold": self.random.random() < sold_ratio,
                "created_at": self._past(365),
            })
        return pl.DataFrame(purchases)

    def generate_sales(self, purchases_df: pl.DataFrame, orphan_sales: int = 0) -> pl.DataFrame:
        """
        Generate one sale per sold purchase.

        Args:
            purchases_df: Output of generate_purchases
            orphan_sales: Extra sales whose car is not among the purchases
        """
        sold = purchases_df.filter(pl.col("is_sold")).to_dicts()
        sales = []

        for purchase in sold:
            total_price = round(purchase["selling_price"] * self.random.uniform(0.95, 1.02), 2)
            sold_after = timedelta(seconds=self.random.randint(3600, 60 * 86400))
            created_at = min(purchase["created_at"] + sold_after, self.reference_time)
            sales.append(self._sale(purchase["id"], total_price, created_at))

        for _ in range(orphan_sales):
            sales.append(self._sale(self._id(), round(self.random.uniform(5000, 50000), 2), self._past(365)))

        return pl.DataFrame(sales)

    def _sale(self, car_id: str, total_price: float, created_at: datetime) -> dict:
        # Most customers pay in full; some still owe, a few have a credit
        roll = self.random.random()
        if roll < 0.7:
            amount_paid = total_price
        elif roll < 0.95:
            amount_paid = round(total_price * self.random.uniform(0.5, 0.95), 2)
        else:
            amount_paid = round(total_price + self.random.uniform(50, 500), 2)
        balance = round(total_price - amount_paid, 2)

        return {
            "id": self._id(),
            "car_id": car_id,
            "first_name": self.fake.first_name(),
            "last_name": self.fake.last_name(),
            "mobile1": self.fake.phone_number(),
            "doc_number": self.fake.bothify("########"),
            "total_price": total_price,
            "amount_paid": amount_paid,
            "balance": balance,
            "status": SaleStatus.DEBT.value if balance > 0 else SaleStatus.COMPLETED.value,
            "created_at": created_at,
        }

    def generate_expenses(self, n: int = 60) -> pl.DataFrame:
        """Generate n expenses"""
        expenses = []
        for _ in range(n):
            created_at = self._past(365)
            expenses.append({
                "id": self._id(),
                "name": self.random.choice(EXPENSE_NAMES),
                "cost": round(self.random.uniform(20, 3000), 2),
                "date": created_at.date(),
                "created_at": created_at,
            })
        return pl.DataFrame(expenses)

    def generate_worker_transactions(self, n: int = 80, workers: int = 6) -> pl.DataFrame:
        """Generate n worker transactions of mixed types"""
        worker_ids = [self._id() for _ in range(workers)]
        types, weights = zip(*TRANSACTION_TYPES)

        transactions = []
        for _ in range(n):
            created_at = self._past(365)
            transactions.append({
                "id": self._id(),
                "worker_id": self.random.choice(worker_ids),
                "type": self.random.choices(types, weights=weights)[0],
                "amount": round(self.random.uniform(50, 2500), 2),
                "date": created_at.date(),
                "created_at": created_at,
            })
        return pl.DataFrame(transactions)

    def generate_inspections(self, purchases_df: pl.DataFrame, n: int = 40) -> pl.DataFrame:
        """Generate n inspections of purchased vehicles"""
        cars = purchases_df.select(["id", "make", "model", "mileage"]).to_dicts()
        inspections = []
        for _ in range(n):
            car = self.random.choice(cars) if cars else None
            created_at = self._past(365)
            inspections.append({
                "id": self._id(),
                "type": self.random.choice([InspectionType.CHECKIN.value, InspectionType.CHECKOUT.value]),
                "car_id": car["id"] if car else None,
                "car_name": f"{car['make']} {car['model']}" if car else None,
                "date": created_at.date(),
                "mileage": car["mileage"] if car else None,
                "partner_name": self.fake.company(),
                "note": self.fake.sentence(nb_words=8),
                "created_at": created_at,
            })
        return pl.DataFrame(inspections)

    def generate_all(
        self,
        suppliers: int = 20,
        purchases: int = 100,
        orphan_sales: int = 0,
        expenses: int = 60,
        worker_transactions: int = 80,
        inspections: int = 40,
    ) -> Dict[str, pl.DataFrame]:
        """
        Generate every table of a consistent dataset.

        Returns:
            DataFrames keyed by table name
        """
        suppliers_df = self.generate_suppliers(suppliers)
        purchases_df = self.generate_purchases(purchases, suppliers_df["id"].to_list())

        frames = {
            "suppliers": suppliers_df,
            "purchases": purchases_df,
            "sales": self.generate_sales(purchases_df, orphan_sales=orphan_sales),
            "expenses": self.generate_expenses(expenses),
            "worker_transactions": self.generate_worker_transactions(worker_transactions),
            "inspections": self.generate_inspections(purchases_df, inspections),
        }
        logger.info(
            "Generated showroom dataset",
            seed=self.seed,
            rows={name: df.height for name, df in frames.items()},
        )
        return frames


# =============================================================================
# EXPORT
# =============================================================================

def write_csv(frames: Dict[str, pl.DataFrame], directory: Union[str, Path]) -> Dict[str, Path]:
    """
    Write generated tables as CSV files readable by the CSV data source.

    Datetimes are written as ISO-8601 with their UTC offset.

    Returns:
        Written file path per table
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    written = {}
    for name, df in frames.items():
        datetime_columns = [column for column, dtype in df.schema.items() if isinstance(dtype, pl.Datetime)]
        if datetime_columns:
            df = df.with_columns(pl.col(datetime_columns).dt.strftime(CSV_DATETIME_FORMAT))

        path = directory / CSV_FILES.get(name, f"{name}.csv")
        df.write_csv(path)
        written[name] = path
        logger.info("Wrote CSV", table=name, path=str(path), rows=df.height)
    return written
