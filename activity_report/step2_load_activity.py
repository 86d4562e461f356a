"""
Step 2: Load Activity Data

This module loads the raw 5-minute step-count file and validates it.

A valid file has a header row and three columns:
    - steps: non-negative number, or empty/'NA' when nothing was recorded
    - date: ISO-8601 date (YYYY-MM-DD)
    - interval: integer interval code (e.g. 835 = 08:35)

Each (date, interval) pair must occur exactly once. Any violation fails
the step; there is no partial-load recovery.
"""

from __future__ import annotations
from pathlib import Path
from typing import Tuple
import pandas as pd

from .config import Step2Config, REQUIRED_COLS
from .utils import (
    ensure_dir,
    load_input,
    validate_unique_keys,
    save_dataframe,
    print_summary_stats
)


def load_activity(csv_path: Path) -> pd.DataFrame:
    """
    Load and validate the raw activity file.

    Args:
        csv_path: Path to activity CSV

    Returns:
        DataFrame with columns steps (float, NaN = missing), date (datetime),
        interval (int64), sorted by date and interval

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty, columns are missing, values are
                    malformed, or (date, interval) pairs are duplicated
    """
    df = load_input(csv_path, REQUIRED_COLS)
    if df.empty:
        raise ValueError(f"No observations in {csv_path}")
    validate_unique_keys(df, ["date", "interval"], str(csv_path))

    df = df[REQUIRED_COLS].sort_values(["date", "interval"]).reset_index(drop=True)
    return df


def run_step2(cfg: Step2Config) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Execute Step 2: Load and validate the activity data.

    Returns:
        Tuple of (activity, summary)
            - activity: Validated activity data
            - summary: Row, day, interval and missing-value counts
    """
    print("\n" + "=" * 70)
    print("STEP 2: Load Activity Data")
    print("=" * 70)

    ensure_dir(cfg.outdir)

    print(f"\nLoading input: {cfg.input_csv}")
    df = load_activity(cfg.input_csv)
    print(f"  Total rows: {len(df):,}")

    n_days = df["date"].nunique()
    n_intervals = df["interval"].nunique()
    n_missing = int(df["steps"].isna().sum())
    n_missing_days = int(df["steps"].isna().groupby(df["date"]).all().sum())

    summary = pd.DataFrame([{
        "n_rows": len(df),
        "n_days": n_days,
        "n_intervals": n_intervals,
        "n_missing_steps": n_missing,
        "n_fully_missing_days": n_missing_days,
        "first_date": df["date"].min(),
        "last_date": df["date"].max()
    }])

    # Print summary
    print("\n" + "-" * 70)
    print("Summary Statistics:")
    print("-" * 70)
    print(f"  Days: {n_days:,} ({df['date'].min():%Y-%m-%d} to {df['date'].max():%Y-%m-%d})")
    print(f"  Distinct intervals: {n_intervals:,}")
    print_summary_stats("Rows with missing steps", len(df), n_missing)
    print(f"  Days with no recorded steps: {n_missing_days:,}")

    print("\nSaving outputs...")
    save_dataframe(df, cfg.outdir / "activity_clean.csv")
    save_dataframe(summary, cfg.outdir / "step2_summary.csv")

    print("\n" + "=" * 70)
    print("STEP 2 COMPLETED")
    print("=" * 70)

    return df, summary


def main():
    """Example usage of Step 2."""
    config = Step2Config(
        input_csv=Path("data/activity.csv"),
        outdir=Path("output/step2")
    )

    df, summary = run_step2(config)
    return df, summary


if __name__ == "__main__":
    main()
