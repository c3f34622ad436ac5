#!/usr/bin/env python3
"""Dataset generation script for ingestion performance testing.

Generates a synthetic startup deal-flow CSV export with the kind of headers the
heuristic column mapper recognises (Company, Industry, Stage, Score, Founders,
...). A configurable share of rows is made deliberately defective:
- rows with an empty Industry cell (skipped by the record builder)
- rows with a non-numeric Score (score defaulted to 0 and counted)

The output is suitable as a ``source_directory`` file for the batch runner.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

INDUSTRIES = ["Fintech", "Healthtech", "Climate", "Developer Tools", "Logistics", "Edtech"]
STAGES = ["Pre-seed", "Seed", "Series A", "Series B"]
COUNTRIES = ["USA", "UK", "Germany", "India", "Brazil", "Japan"]
FIRST_NAMES = ["Jane", "John", "Amara", "Kenji", "Lucia", "Omar", "Priya", "Tom"]
LAST_NAMES = ["Doe", "Smith", "Okafor", "Tanaka", "Rossi", "Haddad", "Nair", "Berg"]


def _founders_cell(n_founders: int, structured: bool) -> str:
    names = [
        f"{np.random.choice(FIRST_NAMES)} {np.random.choice(LAST_NAMES)}"
        for _ in range(n_founders)
    ]
    if structured:
        return "; ".join(f"{n}: Ex-{np.random.choice(['Google', 'Stripe', 'McKinsey'])}" for n in names)
    return ", ".join(names)


def generate_startup_data(
    rows: int,
    seed: int = 42,
    missing_sector_ratio: float = 0.02,
    bad_score_ratio: float = 0.05,
) -> pd.DataFrame:
    """Generate a synthetic startup export as a DataFrame of strings.

    Args:
        rows: Number of data rows
        seed: Random seed for reproducible data
        missing_sector_ratio: Share of rows whose Industry cell is blank
        bad_score_ratio: Share of rows whose Score cell is not numeric
    """
    np.random.seed(seed)

    industries = np.random.choice(INDUSTRIES, rows).astype(object)
    industries[np.random.random(rows) < missing_sector_ratio] = ""

    scores = np.round(np.random.uniform(0, 100, rows), 1).astype(str).astype(object)
    scores[np.random.random(rows) < bad_score_ratio] = "n/a"

    founders = [
        _founders_cell(int(np.random.randint(1, 4)), structured=bool(np.random.random() < 0.3))
        for _ in range(rows)
    ]

    return pd.DataFrame(
        {
            "Company": [f"Startup {i:06d}" for i in range(1, rows + 1)],
            "Description": [f"Builds software for segment {i % 97}, serving SMB customers" for i in range(rows)],
            "Industry": industries,
            "Stage": np.random.choice(STAGES, rows),
            "Country": np.random.choice(COUNTRIES, rows),
            "Score": scores,
            "Website": [f"https://startup{i}.example.com" for i in range(rows)],
            "Founders": founders,
            "# Employees": np.random.randint(1, 500, rows),
            "Market Size": [f"${np.random.randint(1, 90)}B" for _ in range(rows)],
        }
    )


def create_csv_file(output_path: Path, rows: int, seed: int = 42) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df = generate_startup_data(rows, seed)
    df.to_csv(output_path, index=False, lineterminator="\n")
    print(f"Created CSV file: {output_path}")
    print(f"  Rows: {rows:,} (+ 1 header row)")
    print(f"  Columns: {len(df.columns)}")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic startup CSV export for performance testing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate default 50k rows
  %(prog)s data/perf.csv

  # Custom size and seed
  %(prog)s data/large.csv --rows 200000 --seed 7
        """,
    )
    parser.add_argument("output", type=Path, help="Output CSV file path")
    parser.add_argument("--rows", type=int, default=50_000, help="Number of data rows (default: 50,000)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--dry-run", action="store_true", help="Show the plan without writing files")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1

    print("Dataset generation plan:")
    print(f"  Output file: {args.output}")
    print(f"  Rows: {args.rows:,}")
    print(f"  Random seed: {args.seed}")

    if args.dry_run:
        print("\n[DRY RUN] Would generate the file but not creating it.")
        return 0

    try:
        create_csv_file(args.output, args.rows, args.seed)
    except OSError as e:
        print(f"\nError generating dataset: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
