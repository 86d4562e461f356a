"""
Step 5: Missing Value Imputation

This module fills missing step counts with the mean step count of the same
(interval, weekday) slot, computed from every present observation in the
dataset.

Imputation flag modes:
    - value_match: a row is flagged as imputed when its final step count
      equals the slot mean. This reproduces the published report, including
      its quirk: a measured value that happens to equal the slot mean is
      flagged too.
    - provenance: a row is flagged as imputed when it was missing and got
      filled.

Post-imputation daily totals are keyed by (date, is_imputed). With
value_match a measured day can carry a zero-valued imputed part (a measured
0 matching a slot mean of 0); those (date, True) rows with a zero total are
dropped by default so they don't show up as empty bars.
"""

from __future__ import annotations
from pathlib import Path
from typing import Tuple
import pandas as pd

from .config import (
    Step5Config,
    IMPUTATION_KEY,
    IMPUTED_DAILY_KEY,
    validate_flag_mode
)
from .step4_aggregate_steps import aggregate_steps
from .utils import (
    ensure_dir,
    load_input,
    validate_required_columns,
    save_dataframe,
    print_summary_stats
)


def imputation_table(df: pd.DataFrame) -> pd.DataFrame:
    """
    Mean step count per (interval, weekday) slot over present observations.

    Args:
        df: Annotated activity data (needs interval, weekday, steps)

    Returns:
        DataFrame with interval, weekday, imputed_value
    """
    return aggregate_steps(df, IMPUTATION_KEY, "mean").rename(columns={"steps": "imputed_value"})


def impute_missing_steps(
    df: pd.DataFrame,
    flag_mode: str = "value_match",
    allow_unimputable: bool = False
) -> pd.DataFrame:
    """
    Fill missing step counts with their (interval, weekday) slot mean.

    Present values are left unchanged and row order is preserved. Running
    this on a table without missing values changes no step count.

    Args:
        df: Annotated activity data (needs interval, weekday, steps)
        flag_mode: 'value_match' or 'provenance' (see module docstring)
        allow_unimputable: If True, rows whose slot has no present value stay
                           missing; otherwise they raise

    Returns:
        Copy of df with steps filled and imputed_value, is_imputed columns

    Raises:
        ValueError: If flag_mode is unknown, or a missing row falls in a slot
                    with no present observation and allow_unimputable is False
    """
    validate_flag_mode(flag_mode)
    validate_required_columns(df, IMPUTATION_KEY + ["steps"], "Imputation input")

    base = df.drop(columns=["imputed_value", "is_imputed"], errors="ignore")
    table = imputation_table(base)

    out = base.merge(table, on=IMPUTATION_KEY, how="left", validate="many_to_one")
    out.index = base.index

    was_missing = out["steps"].isna()
    unimputable = was_missing & out["imputed_value"].isna()
    if unimputable.any() and not allow_unimputable:
        slots = out.loc[unimputable, IMPUTATION_KEY].drop_duplicates().to_dict("records")
        raise ValueError(
            f"{int(unimputable.sum()):,} missing rows in {len(slots):,} (interval, weekday) "
            f"slots with no recorded steps: {slots[:5]}"
        )

    out["steps"] = out["steps"].fillna(out["imputed_value"])

    if flag_mode == "value_match":
        out["is_imputed"] = out["steps"] == out["imputed_value"]
    else:
        out["is_imputed"] = was_missing & out["steps"].notna()

    return out


def daily_totals_by_imputation(df: pd.DataFrame, drop_zero_imputed: bool = True) -> pd.DataFrame:
    """
    Total steps per (date, is_imputed) after imputation.

    Args:
        df: Imputed activity data
        drop_zero_imputed: Drop (date, is_imputed=True) rows whose total is 0

    Returns:
        DataFrame with date, is_imputed, steps
    """
    totals = aggregate_steps(df, IMPUTED_DAILY_KEY, "sum")

    if drop_zero_imputed:
        zero_imputed = totals["is_imputed"] & (totals["steps"] == 0)
        totals = totals[~zero_imputed].reset_index(drop=True)

    return totals


def run_step5(cfg: Step5Config) -> Tuple[pd.DataFrame, pd.DataFrame, pd.DataFrame]:
    """
    Execute Step 5: Impute missing step counts.

    This step:
    1. Loads annotated activity data from Step 3
    2. Computes mean steps per (interval, weekday) slot
    3. Fills missing steps with the slot mean and flags imputed rows
    4. Sums steps per (date, is_imputed)

    Args:
        cfg: Step5Config with input/output paths and imputation options

    Returns:
        Tuple of (imputed, totals, summary)
            - imputed: Activity data after imputation
            - totals: Post-imputation daily totals
            - summary: Imputation counts
    """
    print("\n" + "=" * 70)
    print("STEP 5: Missing Value Imputation")
    print("=" * 70)

    ensure_dir(cfg.outdir)

    print(f"\nLoading input: {cfg.input_csv}")
    df = load_input(cfg.input_csv)
    validate_required_columns(df, ["weekday", "is_weekend"], str(cfg.input_csv))
    print(f"  Total rows: {len(df):,}")

    n_missing = int(df["steps"].isna().sum())
    print_summary_stats("Rows with missing steps", len(df), n_missing)

    print("\nComputing (interval, weekday) slot means...")
    table = imputation_table(df)
    print(f"  Slots with recorded steps: {len(table):,}")

    print(f"\nImputing missing steps (flag mode: {cfg.flag_mode})...")
    imputed = impute_missing_steps(df, cfg.flag_mode, cfg.allow_unimputable)

    n_filled = int((df["steps"].isna() & imputed["steps"].notna()).sum())
    n_flagged = int(imputed["is_imputed"].sum())
    n_still_missing = int(imputed["steps"].isna().sum())
    n_mislabelled = n_flagged - int((imputed["is_imputed"] & df["steps"].isna()).sum())

    print("\nCalculating post-imputation daily totals...")
    totals = daily_totals_by_imputation(imputed, cfg.drop_zero_imputed_days)
    n_dropped = len(aggregate_steps(imputed, IMPUTED_DAILY_KEY, "sum")) - len(totals)

    summary = pd.DataFrame([{
        "flag_mode": cfg.flag_mode,
        "n_rows": len(imputed),
        "n_missing_before": n_missing,
        "n_filled": n_filled,
        "n_flagged_imputed": n_flagged,
        "n_measured_flagged_imputed": n_mislabelled,
        "n_still_missing": n_still_missing,
        "n_zero_imputed_days_dropped": n_dropped
    }])

    # Print summary
    print("\n" + "-" * 70)
    print("Summary Statistics:")
    print("-" * 70)
    print_summary_stats("Rows filled", len(imputed), n_filled)
    print_summary_stats("Rows flagged as imputed", len(imputed), n_flagged)
    if n_mislabelled:
        print(f"  Measured rows equal to their slot mean: {n_mislabelled:,}")
    if n_still_missing:
        print(f"  Rows left missing (no data for slot): {n_still_missing:,}")
    print(f"  Zero-total imputed day rows dropped: {n_dropped:,}")

    print("\nSaving outputs...")
    save_dataframe(table, cfg.outdir / "imputation_table.csv")
    save_dataframe(imputed, cfg.outdir / "activity_imputed.csv")
    save_dataframe(totals, cfg.outdir / "daily_totals_imputed.csv")
    save_dataframe(summary, cfg.outdir / "step5_summary.csv")

    print("\n" + "=" * 70)
    print("STEP 5 COMPLETED")
    print("=" * 70)

    return imputed, totals, summary


def main():
    """Example usage of Step 5."""
    config = Step5Config(
        input_csv=Path("output/step3/activity_annotated.csv"),
        outdir=Path("output/step5"),
        flag_mode="value_match",
        drop_zero_imputed_days=True,
        allow_unimputable=False
    )

    imputed, totals, summary = run_step5(config)
    return imputed, totals, summary


if __name__ == "__main__":
    main()
