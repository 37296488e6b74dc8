"""
Database Seeding

Loads a generated showroom dataset into the database.

Usage:
    python -m showroom.ingestion.seed_db --seed 42 --purchases 200
"""

import argparse
import asyncio
from typing import Any, Dict, List, Optional

import polars as pl
import structlog
from sqlalchemy import insert

from showroom.config.logging import configure_logging
from showroom.data.generators import ShowroomDataGenerator
from showroom.database.connection import close_database, create_schema, get_db, init_database
from showroom.database.models import (
    Expense,
    Inspection,
    Purchase,
    Sale,
    Supplier,
    WorkerTransaction,
)

logger = structlog.get_logger(__name__)

CHUNK_SIZE = 1000

# Insert order respects foreign keys; the value renames generated columns
# to model attributes where they differ
TABLES = [
    ("suppliers", Supplier, {}),
    ("purchases", Purchase, {}),
    ("sales", Sale, {}),
    ("expenses", Expense, {"date": "expense_date"}),
    ("worker_transactions", WorkerTransaction, {"date": "transaction_date"}),
    ("inspections", Inspection, {"date": "inspection_date"}),
]


async def execute_batch_insert(model: Any, records: List[Dict[str, Any]]) -> None:
    """Insert records in chunks with an ORM bulk insert"""
    if not records:
        return

    async with get_db() as db:
        for i in range(0, len(records), CHUNK_SIZE):
            await db.execute(insert(model), records[i:i + CHUNK_SIZE])
    logger.info("Inserted records", table=model.__tablename__, rows=len(records))


async def seed_database(frames: Dict[str, pl.DataFrame]) -> Dict[str, int]:
    """
    Insert generated tables into an initialized database.

    Args:
        frames: Output of ShowroomDataGenerator.generate_all

    Returns:
        Rows inserted per table
    """
    inserted = {}
    for name, model, renames in TABLES:
        df = frames.get(name)
        if df is None or df.is_empty():
            inserted[name] = 0
            continue

        records = df.rename(renames).to_dicts() if renames else df.to_dicts()
        await execute_batch_insert(model, records)
        inserted[name] = len(records)
    return inserted


async def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Seed the showroom database with generated data")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--purchases", type=int, default=100, help="Number of purchased vehicles")
    parser.add_argument("--orphan-sales", type=int, default=0, help="Sales referencing unknown cars")
    parser.add_argument("--create-schema", action="store_true", help="Create missing tables first")
    args = parser.parse_args(argv)

    configure_logging()
    await init_database()
    try:
        if args.create_schema:
            await create_schema()

        generator = ShowroomDataGenerator(seed=args.seed)
        frames = generator.generate_all(purchases=args.purchases, orphan_sales=args.orphan_sales)
        inserted = await seed_database(frames)
        logger.info("Seeding complete", rows=inserted)
    finally:
        await close_database()


if __name__ == "__main__":
    asyncio.run(main())
