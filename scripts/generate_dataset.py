"""
Showroom Dataset Generator

Writes a generated showroom dataset as CSV files, ready for the CSV data
source (DASHBOARD_SOURCE=csv) or for inspection.
"""

import argparse
from pathlib import Path

from showroom.data import ShowroomDataGenerator, write_csv

OUTPUT_DIR = Path(__file__).parent.parent / "data" / "generated"


def main():
    parser = argparse.ArgumentParser(description="Generate a showroom dataset as CSV")
    parser.add_argument("--output", type=Path, default=OUTPUT_DIR, help="Output directory")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--suppliers", type=int, default=20)
    parser.add_argument("--purchases", type=int, default=200)
    parser.add_argument("--orphan-sales", type=int, default=2)
    parser.add_argument("--expenses", type=int, default=60)
    parser.add_argument("--worker-transactions", type=int, default=80)
    parser.add_argument("--inspections", type=int, default=40)
    args = parser.parse_args()

    print("=" * 60)
    print("🚗 Showroom Dataset Generator")
    print("=" * 60 + "\n")

    generator = ShowroomDataGenerator(seed=args.seed)
    frames = generator.generate_all(
        suppliers=args.suppliers,
        purchases=args.purchases,
        orphan_sales=args.orphan_sales,
        expenses=args.expenses,
        worker_transactions=args.worker_transactions,
        inspections=args.inspections,
    )
    written = write_csv(frames, args.output)

    print(f"\n📁 Output: {args.output}\n")
    for name, path in written.items():
        size = path.stat().st_size / 1024
        print(f"   📄 {path.name}: {frames[name].height:,} rows ({size:.1f} KB)")


if __name__ == "__main__":
    main()
