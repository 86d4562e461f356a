"""
Configuration classes and constants for the activity step-count report.

This module contains all configuration dataclasses and constants used across
the analysis pipeline for the 5-minute step-count dataset.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional


# ============================================================================
# Constants
# ============================================================================

# Dataset acquisition
DATASET_URL = "https://d396qusza40orc.cloudfront.net/repdata%2Fdata%2Factivity.zip"
ARCHIVE_NAME = "activity.zip"
CSV_NAME = "activity.csv"

# Column requirements
REQUIRED_COLS = ["steps", "date", "interval"]
DATE_FORMAT = "%Y-%m-%d"

# Time and day constants
INTERVAL_MINUTES = 5
EXPECTED_INTERVALS_PER_DAY = 288  # 24 hours * 12 five-minute slots

# Weekday names indexed by (proleptic Gregorian ordinal % 7).
# Ordinal 1 (0001-01-01) is a Monday, so remainder 0 is a Sunday.
WEEKDAY_TABLE = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)
WEEKDAY_ORDER = [
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"
]
WEEKEND_DAYS = ("Saturday", "Sunday")

# Grouping keys
DAILY_KEY = ["date", "is_weekend"]
INTERVAL_KEY = ["interval"]
DAYTYPE_KEY = ["interval", "is_weekend"]
IMPUTATION_KEY = ["interval", "weekday"]
IMPUTED_DAILY_KEY = ["date", "is_imputed"]

# Imputation flagging
FLAG_MODE = "value_match"  # Original report behaviour (alternative: "provenance")
FLAG_MODES = ("value_match", "provenance")

# Reference date with only a couple of measured intervals
SPARSE_REFERENCE_DATE = "2012-11-15"


# ============================================================================
# Configuration Classes
# ============================================================================

@dataclass(frozen=True)
class Step1Config:
    """Configuration for Step 1: Dataset download and extraction."""

    outdir: Path
    url: str = DATASET_URL
    archive_name: str = ARCHIVE_NAME
    csv_name: str = CSV_NAME
    force_download: bool = False


@dataclass(frozen=True)
class Step2Config:
    """Configuration for Step 2: Load and validate activity data."""

    input_csv: Path
    outdir: Path


@dataclass(frozen=True)
class Step3Config:
    """Configuration for Step 3: Calendar annotation."""

    input_csv: Path
    outdir: Path


@dataclass(frozen=True)
class Step4Config:
    """Configuration for Step 4: Step-count aggregation."""

    input_csv: Path
    outdir: Path


@dataclass(frozen=True)
class Step5Config:
    """Configuration for Step 5: Missing value imputation."""

    input_csv: Path
    outdir: Path
    flag_mode: Literal["value_match", "provenance"] = "value_match"
    drop_zero_imputed_days: bool = True
    allow_unimputable: bool = False


@dataclass(frozen=True)
class Step6Config:
    """Configuration for Step 6: Report summary extraction."""

    activity_csv: Path
    daily_totals_csv: Path
    interval_profile_csv: Path
    imputed_daily_totals_csv: Path
    outdir: Path
    sparse_date: str = SPARSE_REFERENCE_DATE


@dataclass(frozen=True)
class VisualizationConfig:
    """Configuration for report charts."""

    daily_totals_csv: Path
    imputed_daily_totals_csv: Path
    interval_profile_csv: Path
    daytype_profile_csv: Path
    outdir: Path
    hist_bins: int = 10
    tick_every_hours: int = 3


@dataclass(frozen=True)
class PipelineConfig:
    """Configuration for the complete pipeline."""

    # Data locations
    data_dir: Path
    output_base_dir: Path

    # Acquisition
    url: str = DATASET_URL
    skip_download: bool = False
    input_csv: Optional[Path] = None

    # Imputation parameters
    flag_mode: Literal["value_match", "provenance"] = FLAG_MODE
    drop_zero_imputed_days: bool = True
    allow_unimputable: bool = False

    # Visualization
    make_plots: bool = True

    # Report
    sparse_date: str = SPARSE_REFERENCE_DATE


def validate_flag_mode(flag_mode: str) -> None:
    """
    Validate an imputation flag mode.

    Raises:
        ValueError: If flag_mode is not one of FLAG_MODES
    """
    if flag_mode not in FLAG_MODES:
        raise ValueError(f"Unknown flag mode: {flag_mode!r} (expected one of {FLAG_MODES})")
