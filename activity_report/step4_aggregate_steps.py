"""
Step 4: Step-Count Aggregation

This module computes grouped sums and means of step counts.

Missing step values never contribute to a group: sums and means are taken
over present values only, and a group whose values are all missing produces
no output row (it is not reported as zero).
"""

from __future__ import annotations
from pathlib import Path
from typing import List, Literal, Tuple
import pandas as pd

from .config import Step4Config, DAILY_KEY, INTERVAL_KEY, DAYTYPE_KEY
from .utils import (
    ensure_dir,
    load_input,
    validate_required_columns,
    save_dataframe
)


def aggregate_steps(
    df: pd.DataFrame,
    by: List[str],
    how: Literal["sum", "mean"] = "sum",
    value_col: str = "steps"
) -> pd.DataFrame:
    """
    Sum or average step counts within each group.

    Args:
        df: Activity data
        by: Grouping key columns
        how: 'sum' or 'mean'
        value_col: Column to aggregate (default: 'steps')

    Returns:
        DataFrame with the key columns and value_col, sorted by key

    Raises:
        ValueError: If how is unknown or a column is missing
    """
    if how not in ("sum", "mean"):
        raise ValueError(f"Unknown aggregation: {how!r} (expected 'sum' or 'mean')")

    by = list(by)
    validate_required_columns(df, by + [value_col], "Aggregation input")

    # Drop missing values first so all-missing groups vanish entirely
    present = df.loc[df[value_col].notna(), by + [value_col]]

    return (
        present.groupby(by, sort=True)[value_col]
        .agg(how)
        .reset_index()
    )


def daily_totals(df: pd.DataFrame) -> pd.DataFrame:
    """Total steps per day, keyed by (date, is_weekend)."""
    return aggregate_steps(df, DAILY_KEY, "sum")


def interval_profile(df: pd.DataFrame) -> pd.DataFrame:
    """Average steps per interval across all days."""
    return aggregate_steps(df, INTERVAL_KEY, "mean")


def interval_profile_by_daytype(df: pd.DataFrame) -> pd.DataFrame:
    """Average steps per interval, split into weekdays and weekends."""
    return aggregate_steps(df, DAYTYPE_KEY, "mean")


def run_step4(cfg: Step4Config) -> Tuple[pd.DataFrame, pd.DataFrame, pd.DataFrame]:
    """
    Execute Step 4: Aggregate step counts before imputation.

    This step:
    1. Loads annotated activity data from Step 3
    2. Sums steps per day (date, is_weekend)
    3. Averages steps per interval
    4. Averages steps per interval separately for weekdays and weekends

    Args:
        cfg: Step4Config with input/output paths

    Returns:
        Tuple of (totals, profile, daytype_profile)
    """
    print("\n" + "=" * 70)
    print("STEP 4: Step-Count Aggregation")
    print("=" * 70)

    ensure_dir(cfg.outdir)

    print(f"\nLoading input: {cfg.input_csv}")
    df = load_input(cfg.input_csv)
    validate_required_columns(df, ["is_weekend"], str(cfg.input_csv))
    print(f"  Total rows: {len(df):,}")
    print(f"  Rows with recorded steps: {int(df['steps'].notna().sum()):,}")

    print("\nCalculating daily totals...")
    totals = daily_totals(df)
    n_days = df["date"].nunique()
    print(f"  Days with recorded steps: {len(totals):,} / {n_days:,}")

    print("\nCalculating interval profiles...")
    profile = interval_profile(df)
    daytype_profile = interval_profile_by_daytype(df)
    print(f"  Intervals: {len(profile):,}")

    # Print summary
    print("\n" + "-" * 70)
    print("Summary Statistics:")
    print("-" * 70)
    weekend_totals = totals.groupby("is_weekend")["steps"].mean()
    for is_weekend, mean_total in weekend_totals.items():
        label = "Weekend" if is_weekend else "Weekday"
        print(f"  {label} mean daily total: {mean_total:,.2f}")

    print("\nSaving outputs...")
    save_dataframe(totals, cfg.outdir / "daily_totals.csv")
    save_dataframe(profile, cfg.outdir / "interval_profile.csv")
    save_dataframe(daytype_profile, cfg.outdir / "interval_profile_by_daytype.csv")

    print("\n" + "=" * 70)
    print("STEP 4 COMPLETED")
    print("=" * 70)

    return totals, profile, daytype_profile


def main():
    """Example usage of Step 4."""
    config = Step4Config(
        input_csv=Path("output/step3/activity_annotated.csv"),
        outdir=Path("output/step4")
    )

    totals, profile, daytype_profile = run_step4(config)
    return totals, profile, daytype_profile


if __name__ == "__main__":
    main()
