"""
Utility functions shared across the activity report pipeline.

This module contains helper functions for data loading, parsing,
and common operations used throughout the pipeline.
"""

from __future__ import annotations
from pathlib import Path
from typing import List
import pandas as pd
import numpy as np

from .config import DATE_FORMAT, REQUIRED_COLS


# Derived columns written by later steps and parsed back on load
BOOL_COLS = ["is_weekend", "is_imputed"]
FLOAT_COLS = ["imputed_value"]


def ensure_dir(path: Path) -> None:
    """
    Create directory if it doesn't exist.

    Args:
        path: Directory path to create
    """
    path.mkdir(parents=True, exist_ok=True)


def parse_steps(steps: pd.Series) -> pd.Series:
    """
    Convert raw step strings to float, keeping missing values as NaN.

    Empty fields and 'NA' are already NaN after read_csv; anything else
    must be a non-negative number.

    Args:
        steps: Series of raw step strings

    Returns:
        Series of float step counts (NaN where missing)

    Raises:
        ValueError: If a present value is non-numeric or negative
    """
    steps_num = pd.to_numeric(steps, errors="coerce").astype("float64")

    bad = steps.notna() & steps_num.isna()
    if bad.any():
        examples = steps[bad].unique()[:5].tolist()
        raise ValueError(f"Non-numeric step values: {examples}")

    negative = steps_num < 0
    if negative.any():
        raise ValueError(f"Negative step values in {int(negative.sum()):,} rows")

    return steps_num


def parse_dates(dates: pd.Series) -> pd.Series:
    """
    Parse ISO-8601 date strings (YYYY-MM-DD) to pandas datetimes at midnight.

    Raises:
        ValueError: If any date is missing or cannot be parsed
    """
    parsed = pd.to_datetime(dates.astype(str).str.strip(), format=DATE_FORMAT, errors="coerce")

    bad = parsed.isna()
    if bad.any():
        examples = dates[bad].astype(str).unique()[:5].tolist()
        raise ValueError(f"Unparseable dates: {examples}")

    return parsed


def parse_intervals(intervals: pd.Series) -> pd.Series:
    """
    Parse interval codes to int64.

    Raises:
        ValueError: If any interval code is missing or not an integer
    """
    codes = pd.to_numeric(intervals, errors="coerce")

    bad = codes.isna() | (codes != np.floor(codes))
    if bad.any():
        examples = intervals[bad].astype(str).unique()[:5].tolist()
        raise ValueError(f"Invalid interval codes: {examples}")

    return codes.astype("int64")


def parse_bool(s: pd.Series) -> pd.Series:
    """Parse a 'True'/'False' (or '1'/'0') column written by to_csv."""
    return s.astype(str).str.strip().str.lower().isin(["true", "1"])


def load_csv_safe(csv_path: Path, dtype: str = "str") -> pd.DataFrame:
    """
    Load CSV file with safe defaults.

    Args:
        csv_path: Path to CSV file
        dtype: Default dtype for columns (default: 'str')

    Returns:
        DataFrame with lowercased column names

    Raises:
        FileNotFoundError: If CSV file doesn't exist
        ValueError: If the file cannot be parsed as CSV
    """
    if not csv_path.exists():
        raise FileNotFoundError(f"Input file not found: {csv_path}")

    try:
        df = pd.read_csv(csv_path, dtype=dtype, encoding="utf-8-sig")
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise ValueError(f"Could not read {csv_path}: {e}") from e

    df.columns = df.columns.str.lower().str.strip()

    return df


def validate_required_columns(df: pd.DataFrame, required_cols: List[str], file_name: str = "Input") -> None:
    """
    Validate that DataFrame contains all required columns.

    Args:
        df: DataFrame to validate
        required_cols: List of required column names
        file_name: Name of file for error message

    Raises:
        ValueError: If any required columns are missing
    """
    missing = set(required_cols) - set(df.columns)
    if missing:
        raise ValueError(f"{file_name} missing required columns: {missing}")


def validate_unique_keys(df: pd.DataFrame, key: List[str], file_name: str = "Input") -> None:
    """
    Validate that the key columns identify each row uniquely.

    Raises:
        ValueError: If any key combination occurs more than once
    """
    dup = df.duplicated(subset=key, keep=False)
    if dup.any():
        examples = df.loc[dup, key].drop_duplicates().head(5).to_dict("records")
        raise ValueError(f"{file_name} has {int(dup.sum()):,} rows with duplicate {key}: {examples}")


def load_input(input_csv: Path, required_cols: List[str] = REQUIRED_COLS) -> pd.DataFrame:
    """
    Load and parse an activity CSV file.

    The three core columns are always parsed:
        - steps: float, NaN where missing
        - date: datetime at midnight
        - interval: int64 interval code

    Derived columns written by earlier steps are parsed back when present:
        - is_weekend, is_imputed: bool
        - imputed_value: float
        - weekday: kept as string

    Args:
        input_csv: Path to input CSV file
        required_cols: List of required column names

    Returns:
        DataFrame with parsed columns

    Raises:
        FileNotFoundError: If input file doesn't exist
        ValueError: If required columns are missing or values are malformed
    """
    df = load_csv_safe(input_csv, dtype="str")
    validate_required_columns(df, required_cols, str(input_csv))

    df["steps"] = parse_steps(df["steps"])
    df["date"] = parse_dates(df["date"])
    df["interval"] = parse_intervals(df["interval"])

    for col in BOOL_COLS:
        if col in df.columns:
            df[col] = parse_bool(df[col])

    for col in FLOAT_COLS:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce").astype("float64")

    return df


def load_totals(csv_path: Path, flag_col: str) -> pd.DataFrame:
    """
    Load a daily totals table (date, flag, steps) written by Step 4 or Step 5.

    Args:
        csv_path: Path to daily totals CSV
        flag_col: Boolean grouping column ('is_weekend' or 'is_imputed')

    Returns:
        DataFrame with date (datetime), flag (bool), steps (float)
    """
    totals = load_csv_safe(csv_path, dtype="str")
    validate_required_columns(totals, ["date", flag_col, "steps"], str(csv_path))

    totals["date"] = parse_dates(totals["date"])
    totals[flag_col] = parse_bool(totals[flag_col])
    totals["steps"] = parse_steps(totals["steps"])

    return totals


def load_profile(csv_path: Path, extra_key: List[str] = None) -> pd.DataFrame:
    """
    Load an interval profile table written by Step 4.

    Args:
        csv_path: Path to interval profile CSV
        extra_key: Additional boolean key columns (e.g. ['is_weekend'])

    Returns:
        DataFrame with interval (int64), steps (float) and any extra key columns
    """
    extra_key = extra_key or []
    profile = load_csv_safe(csv_path, dtype="str")
    validate_required_columns(profile, ["interval", "steps"] + extra_key, str(csv_path))

    profile["interval"] = parse_intervals(profile["interval"])
    profile["steps"] = parse_steps(profile["steps"])
    for col in extra_key:
        profile[col] = parse_bool(profile[col])

    return profile


def interval_label(code: int) -> str:
    """
    Render an interval code as an HH:MM label.

    Examples:
        0 -> "00:00"
        835 -> "08:35"
        2355 -> "23:55"
    """
    code = int(code)
    return f"{code // 100:02d}:{code % 100:02d}"


def save_dataframe(df: pd.DataFrame, output_path: Path) -> None:
    """
    Save DataFrame to CSV with UTF-8-sig encoding for Excel compatibility.

    Args:
        df: DataFrame to save
        output_path: Path to output CSV file
    """
    ensure_dir(output_path.parent)
    df.to_csv(output_path, index=False, encoding="utf-8-sig")
    print(f"  Saved: {output_path}")


def print_summary_stats(label: str, total: int, count: int) -> None:
    """
    Print summary statistics with percentage.

    Args:
        label: Label for the statistic
        total: Total count
        count: Specific count
    """
    pct = (count / total * 100) if total > 0 else 0
    print(f"  {label}: {count:,} / {total:,} ({pct:.2f}%)")
