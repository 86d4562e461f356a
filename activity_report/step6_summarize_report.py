"""
Step 6: Report Summary

This module extracts the headline numbers of the activity report:
    - mean and median of daily totals, before and after imputation
    - the interval with the highest average step count
    - the number of rows with missing steps
    - the number of measured, non-zero intervals on a sparse reference day
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict
import pandas as pd

from .config import Step6Config
from .utils import (
    ensure_dir,
    load_input,
    load_totals,
    load_profile,
    interval_label,
    save_dataframe
)


def max_interval(profile: pd.DataFrame) -> pd.Series:
    """
    Row of an interval profile with the highest mean step count.

    Ties go to the lowest interval code.

    Args:
        profile: DataFrame with interval and steps columns

    Returns:
        Series with interval and steps of the busiest interval

    Raises:
        ValueError: If the profile is empty
    """
    if profile.empty:
        raise ValueError("Interval profile is empty")

    ordered = profile.sort_values("interval", kind="stable").reset_index(drop=True)
    return ordered.loc[ordered["steps"].idxmax()]


def daily_total_stats(totals: pd.DataFrame) -> Dict[str, float]:
    """
    Mean and median of the steps column of a daily totals table.

    Returns:
        Dict with 'mean' and 'median'
    """
    return {
        "mean": float(totals["steps"].mean()),
        "median": float(totals["steps"].median())
    }


def count_missing_steps(df: pd.DataFrame) -> int:
    """Number of rows whose steps value is missing."""
    return int(df["steps"].isna().sum())


def count_measured_intervals(df: pd.DataFrame, day) -> int:
    """
    Number of intervals on a date with a recorded, non-zero step count.

    Args:
        df: Activity data
        day: Date (anything pd.Timestamp accepts)
    """
    on_day = df["date"] == pd.Timestamp(day)
    measured = df["steps"].notna() & (df["steps"] != 0)
    return int((on_day & measured).sum())


def run_step6(cfg: Step6Config) -> pd.DataFrame:
    """
    Execute Step 6: Extract report summary statistics.

    This step:
    1. Loads validated activity data (Step 2), daily totals and interval
       profile (Step 4) and post-imputation daily totals (Step 5)
    2. Computes mean/median daily totals before and after imputation
    3. Finds the interval with the highest average step count
    4. Counts missing rows and measured intervals on the sparse date

    Args:
        cfg: Step6Config with input/output paths

    Returns:
        Single-row DataFrame with the report numbers
    """
    print("\n" + "=" * 70)
    print("STEP 6: Report Summary")
    print("=" * 70)

    ensure_dir(cfg.outdir)

    print(f"\nLoading activity data: {cfg.activity_csv}")
    activity = load_input(cfg.activity_csv)
    print(f"\nLoading daily totals: {cfg.daily_totals_csv}")
    totals = load_totals(cfg.daily_totals_csv, "is_weekend")
    print(f"\nLoading interval profile: {cfg.interval_profile_csv}")
    profile = load_profile(cfg.interval_profile_csv)
    print(f"\nLoading imputed daily totals: {cfg.imputed_daily_totals_csv}")
    imputed_totals = load_totals(cfg.imputed_daily_totals_csv, "is_imputed")

    before = daily_total_stats(totals)
    after = daily_total_stats(imputed_totals)
    busiest = max_interval(profile)
    n_missing = count_missing_steps(activity)
    n_measured = count_measured_intervals(activity, cfg.sparse_date)

    summary = pd.DataFrame([{
        "mean_daily_steps": round(before["mean"], 2),
        "median_daily_steps": round(before["median"], 2),
        "max_interval": int(busiest["interval"]),
        "max_interval_mean_steps": round(float(busiest["steps"]), 2),
        "n_missing_steps": n_missing,
        "mean_daily_steps_imputed": round(after["mean"], 2),
        "median_daily_steps_imputed": round(after["median"], 2),
        "sparse_date": cfg.sparse_date,
        "sparse_date_measured_intervals": n_measured
    }])

    # Print summary
    print("\n" + "-" * 70)
    print("Report Summary:")
    print("-" * 70)
    print(f"  Daily total steps (before imputation):")
    print(f"    - Mean: {before['mean']:,.2f}")
    print(f"    - Median: {before['median']:,.2f}")
    print(f"\n  Busiest interval: {int(busiest['interval'])} "
          f"({interval_label(busiest['interval'])}), "
          f"mean {float(busiest['steps']):.2f} steps")
    print(f"\n  Rows with missing steps: {n_missing:,}")
    print(f"\n  Daily total steps (after imputation):")
    print(f"    - Mean: {after['mean']:,.2f}")
    print(f"    - Median: {after['median']:,.2f}")
    print(f"\n  Measured non-zero intervals on {cfg.sparse_date}: {n_measured:,}")

    print("\nSaving outputs...")
    save_dataframe(summary, cfg.outdir / "report_summary.csv")

    print("\n" + "=" * 70)
    print("STEP 6 COMPLETED")
    print("=" * 70)

    return summary


def main():
    """Example usage of Step 6."""
    base_dir = Path("output")

    config = Step6Config(
        activity_csv=base_dir / "step2/activity_clean.csv",
        daily_totals_csv=base_dir / "step4/daily_totals.csv",
        interval_profile_csv=base_dir / "step4/interval_profile.csv",
        imputed_daily_totals_csv=base_dir / "step5/daily_totals_imputed.csv",
        outdir=base_dir / "step6"
    )

    summary = run_step6(config)
    return summary


if __name__ == "__main__":
    main()
