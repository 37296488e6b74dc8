"""
Test Suite Configuration
"""
import asyncio
from typing import Any, Dict, List, Optional

import pytest

from showroom.config import Settings


class FakeSource:
    """
    In-memory dashboard source.

    ``data`` holds the value each fetch returns; ``failures`` maps a fetch
    name to the exception it raises; ``delays`` maps a fetch name to seconds
    it sleeps first.
    """

    def __init__(
        self,
        data: Dict[str, Any],
        failures: Optional[Dict[str, Exception]] = None,
        delays: Optional[Dict[str, float]] = None,
    ):
        self.data = data
        self.failures = failures or {}
        self.delays = delays or {}
        self.calls: List[str] = []

    async def _get(self, name: str) -> Any:
        self.calls.append(name)
        if name in self.delays:
            await asyncio.sleep(self.delays[name])
        if name in self.failures:
            raise self.failures[name]
        return self.data[name]

    async def fetch_sales(self):
        return await self._get("sales")

    async def fetch_purchases(self):
        return await self._get("purchases")

    async def fetch_expenses(self):
        return await self._get("expenses")

    async def fetch_payments(self):
        return await self._get("payments")

    async def count_suppliers(self):
        return await self._get("suppliers")

    async def count_inspections(self):
        return await self._get("inspections")


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        debug=True,
    )


@pytest.fixture
def scenario_data() -> Dict[str, Any]:
    """One sale of a car still flagged in stock, with small expenses and payroll"""
    return {
        "sales": [
            {
                "totalPrice": 1000,
                "balance": 200,
                "carId": "A",
                "createdAt": "2024-01-02",
                "firstName": "J",
                "lastName": "D",
            }
        ],
        "purchases": [
            {
                "id": "A",
                "totalCost": 600,
                "sellingPrice": 900,
                "isSold": False,
                "createdAt": "2024-01-01",
                "make": "X",
                "model": "Y",
            }
        ],
        "expenses": [{"cost": 50}],
        "payments": [{"amount": 100, "type": "payment"}],
        "suppliers": 2,
        "inspections": 3,
    }


@pytest.fixture
def sample_sales() -> List[Dict[str, Any]]:
    """Sales across several days, one of them of an unknown car"""
    return [
        {"total_price": 12000, "balance": 0, "car_id": "car-1", "created_at": "2025-03-01T10:00:00Z",
         "first_name": "Amina", "last_name": "Haddad"},
        {"total_price": "15500.50", "balance": "500", "car_id": "car-2", "created_at": "2025-03-03T09:30:00Z",
         "first_name": "Karim", "last_name": "Benali"},
        {"total_price": 9000, "balance": -100, "car_id": "car-9", "created_at": "2025-03-05T16:45:00Z",
         "first_name": "Sofia", "last_name": "Mansour"},
        {"total_price": 20000, "balance": 2500, "car_id": "car-3", "created_at": "2025-03-02T12:00:00Z",
         "first_name": "Yacine", "last_name": "Toumi"},
    ]


@pytest.fixture
def sample_purchases() -> List[Dict[str, Any]]:
    """Purchases: three sold, two in stock"""
    return [
        {"id": "car-1", "total_cost": 10000, "selling_price": 12500, "is_sold": True,
         "created_at": "2025-02-01T08:00:00Z", "make": "Toyota", "model": "Yaris"},
        {"id": "car-2", "total_cost": 14000, "selling_price": 15500, "is_sold": True,
         "created_at": "2025-02-03T08:00:00Z", "make": "Kia", "model": "Rio"},
        {"id": "car-3", "total_cost": 17000, "selling_price": 20500, "is_sold": True,
         "created_at": "2025-02-05T08:00:00Z", "make": "Hyundai", "model": "Tucson"},
        {"id": "car-4", "total_cost": 8000, "selling_price": 9500, "is_sold": False,
         "created_at": "2025-03-04T08:00:00Z", "make": "Renault", "model": "Clio"},
        {"id": "car-5", "total_cost": 11000, "selling_price": 13000, "is_sold": "false",
         "created_at": "2025-03-06T08:00:00Z", "make": "Peugeot", "model": "208"},
    ]


@pytest.fixture
def fake_source(scenario_data) -> FakeSource:
    """Fake source returning the scenario data"""
    return FakeSource(scenario_data)


@pytest.fixture
def source_factory():
    """Build fake sources with custom data, failures and delays"""
    return FakeSource
