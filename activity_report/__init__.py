"""
Activity Step-Count Report Pipeline

A linear pipeline that analyses a personal activity-tracking dataset
(step counts in 5-minute intervals over two months).

Modules:
    - config: Configuration classes and constants
    - utils: Shared utility functions
    - step1_download_dataset: Download and extract the dataset
    - step2_load_activity: Load and validate the activity file
    - step3_annotate_calendar: Derive weekday and weekend flag
    - step4_aggregate_steps: Daily totals and interval profiles
    - step5_impute_missing: Fill missing steps with (interval, weekday) means
    - step6_summarize_report: Extract the report summary statistics
    - step7_visualize_activity: Render the report charts
    - run_pipeline: Run all steps; command-line entry point
"""

__version__ = "1.0.0"
__author__ = "Activity Report Team"

from .config import (
    Step1Config,
    Step2Config,
    Step3Config,
    Step4Config,
    Step5Config,
    Step6Config,
    VisualizationConfig,
    PipelineConfig
)

from .step1_download_dataset import run_step1
from .step2_load_activity import run_step2, load_activity
from .step3_annotate_calendar import run_step3, annotate_calendar, weekday_name
from .step4_aggregate_steps import (
    run_step4,
    aggregate_steps,
    daily_totals,
    interval_profile,
    interval_profile_by_daytype
)
from .step5_impute_missing import (
    run_step5,
    imputation_table,
    impute_missing_steps,
    daily_totals_by_imputation
)
from .step6_summarize_report import (
    run_step6,
    max_interval,
    daily_total_stats,
    count_missing_steps,
    count_measured_intervals
)
from .step7_visualize_activity import run_visualization
from .run_pipeline import run_pipeline


__all__ = [
    # Config classes
    "Step1Config",
    "Step2Config",
    "Step3Config",
    "Step4Config",
    "Step5Config",
    "Step6Config",
    "VisualizationConfig",
    "PipelineConfig",
    # Step functions
    "run_step1",
    "run_step2",
    "run_step3",
    "run_step4",
    "run_step5",
    "run_step6",
    "run_visualization",
    "run_pipeline",
    # Core operations
    "load_activity",
    "annotate_calendar",
    "weekday_name",
    "aggregate_steps",
    "daily_totals",
    "interval_profile",
    "interval_profile_by_daytype",
    "imputation_table",
    "impute_missing_steps",
    "daily_totals_by_imputation",
    "max_interval",
    "daily_total_stats",
    "count_missing_steps",
    "count_measured_intervals",
]
