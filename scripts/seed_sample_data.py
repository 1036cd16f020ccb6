#!/usr/bin/env python
"""
Write a synthetic events table so the sampling stage can run locally.

Usage:
    python scripts/seed_sample_data.py              # 5 systems x 2000 rows
    python scripts/seed_sample_data.py --rows 500   # rows per system
"""

import argparse
import sys
from pathlib import Path

import pandas as pd

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from keysample.io import write_table
from keysample.paths import get_sample_input_path

SYSTEMS = ["linux", "hpc", "hdfs", "hadoop", "spark"]


def make_events(rows_per_system: int) -> pd.DataFrame:
    rows = []
    for system in SYSTEMS:
        for i in range(rows_per_system):
            rows.append({
                "system": system,
                "raw_id": str(i),
                "severity": "ERROR" if i % 7 == 0 else "INFO",
                "event_id": f"E{i % 10 + 1}",
                "message": f"{system} message {i}",
            })
    return pd.DataFrame(rows)


def main():
    parser = argparse.ArgumentParser(description="Seed a synthetic events table for local sampling runs")
    parser.add_argument("--rows", type=int, default=2000, help="Rows per system")
    parser.add_argument("--output", type=Path, default=get_sample_input_path(), help="Output Parquet/CSV path")
    args = parser.parse_args()

    df = make_events(args.rows)
    write_table(df, args.output)
    print(f"Seeded {len(df)} rows -> {args.output}")


if __name__ == "__main__":
    main()
