"""
Step 3: Calendar Annotation

This module derives the day of week and a weekend flag for every observation.

Weekday names come from a fixed table indexed by the proleptic Gregorian
day ordinal modulo 7, so the result never depends on the host locale
(strftime('%A') and Series.dt.day_name() would).
"""

from __future__ import annotations
from datetime import date
from pathlib import Path
from typing import Tuple
import numpy as np
import pandas as pd

from .config import Step3Config, WEEKDAY_TABLE, WEEKDAY_ORDER, WEEKEND_DAYS
from .utils import (
    ensure_dir,
    load_input,
    save_dataframe,
    print_summary_stats
)


# Ordinal of the Unix epoch, used to turn datetime64 values into ordinals
EPOCH = pd.Timestamp("1970-01-01")
EPOCH_ORDINAL = date(1970, 1, 1).toordinal()


def weekday_name(d: date) -> str:
    """
    Return the English weekday name of a date.

    Examples:
        date(2012, 10, 1) -> "Monday"
        date(2012, 11, 15) -> "Thursday"
    """
    return WEEKDAY_TABLE[d.toordinal() % 7]


def weekday_names(dates: pd.Series) -> pd.Series:
    """
    Vectorised weekday_name over a datetime Series.

    Args:
        dates: Series of datetimes (time of day is ignored)

    Returns:
        Series of weekday names aligned to dates
    """
    days = (dates.dt.normalize() - EPOCH).dt.days.to_numpy()
    ordinals = days + EPOCH_ORDINAL
    names = np.asarray(WEEKDAY_TABLE, dtype=object)[ordinals % 7]
    return pd.Series(names, index=dates.index, name="weekday")


def annotate_calendar(df: pd.DataFrame) -> pd.DataFrame:
    """
    Add weekday and is_weekend columns derived from the date column.

    Args:
        df: Activity data with a datetime 'date' column

    Returns:
        Copy of df with 'weekday' (str) and 'is_weekend' (bool) added
    """
    out = df.copy()
    out["weekday"] = weekday_names(out["date"])
    out["is_weekend"] = out["weekday"].isin(WEEKEND_DAYS)
    return out


def run_step3(cfg: Step3Config) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Execute Step 3: Annotate weekday and weekend flag.

    Args:
        cfg: Step3Config with input/output paths

    Returns:
        Tuple of (annotated, weekday_counts)
            - annotated: Activity data with weekday and is_weekend columns
            - weekday_counts: Days and rows per weekday
    """
    print("\n" + "=" * 70)
    print("STEP 3: Calendar Annotation")
    print("=" * 70)

    ensure_dir(cfg.outdir)

    print(f"\nLoading input: {cfg.input_csv}")
    df = load_input(cfg.input_csv)
    print(f"  Total rows: {len(df):,}")

    print("\nDeriving weekday and weekend flag...")
    annotated = annotate_calendar(df)

    weekday_counts = (
        annotated.groupby("weekday")
        .agg(n_days=("date", "nunique"), n_rows=("date", "size"))
        .reindex(WEEKDAY_ORDER, fill_value=0)
        .rename_axis("weekday")
        .reset_index()
    )

    # Print summary
    print("\n" + "-" * 70)
    print("Summary Statistics:")
    print("-" * 70)
    for row in weekday_counts.itertuples(index=False):
        print(f"  {row.weekday:<10} days: {row.n_days:>3,}  rows: {row.n_rows:>6,}")
    print_summary_stats("Weekend rows", len(annotated), int(annotated["is_weekend"].sum()))

    print("\nSaving outputs...")
    save_dataframe(annotated, cfg.outdir / "activity_annotated.csv")
    save_dataframe(weekday_counts, cfg.outdir / "weekday_counts.csv")

    print("\n" + "=" * 70)
    print("STEP 3 COMPLETED")
    print("=" * 70)

    return annotated, weekday_counts


def main():
    """Example usage of Step 3."""
    config = Step3Config(
        input_csv=Path("output/step2/activity_clean.csv"),
        outdir=Path("output/step3")
    )

    annotated, weekday_counts = run_step3(config)
    return annotated, weekday_counts


if __name__ == "__main__":
    main()
