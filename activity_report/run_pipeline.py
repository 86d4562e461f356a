"""
Run the complete activity report pipeline.

Steps are executed in order, each reading the CSV outputs of the previous
ones from <output_base_dir>/stepN/.
"""

from __future__ import annotations
import argparse
from pathlib import Path
from typing import Dict, List, Optional

from .config import (
    CSV_NAME,
    DATASET_URL,
    FLAG_MODES,
    PipelineConfig,
    Step1Config,
    Step2Config,
    Step3Config,
    Step4Config,
    Step5Config,
    Step6Config,
    VisualizationConfig,
    validate_flag_mode
)
from .step1_download_dataset import run_step1
from .step2_load_activity import run_step2
from .step3_annotate_calendar import run_step3
from .step4_aggregate_steps import run_step4
from .step5_impute_missing import run_step5
from .step6_summarize_report import run_step6
from .step7_visualize_activity import run_visualization


def run_pipeline(cfg: PipelineConfig) -> Dict[str, object]:
    """
    Execute Steps 1-7.

    Args:
        cfg: PipelineConfig with data locations and options

    Returns:
        Dict with the report summary ('summary'), post-imputation daily totals
        ('imputed_totals') and written chart paths ('charts')

    Raises:
        FileNotFoundError: If skip_download is set and the input CSV is missing
        ValueError: If flag_mode is unknown or the input data is malformed
    """
    validate_flag_mode(cfg.flag_mode)

    out = cfg.output_base_dir
    step2_dir = out / "step2"
    step3_dir = out / "step3"
    step4_dir = out / "step4"
    step5_dir = out / "step5"

    # Step 1: acquire the raw file
    if cfg.input_csv is not None:
        input_csv = cfg.input_csv
    elif cfg.skip_download:
        input_csv = cfg.data_dir / CSV_NAME
    else:
        input_csv = run_step1(Step1Config(outdir=cfg.data_dir, url=cfg.url))

    if not input_csv.exists():
        raise FileNotFoundError(f"Input file not found: {input_csv}")

    # Step 2: load + validate
    run_step2(Step2Config(input_csv=input_csv, outdir=step2_dir))

    # Step 3: weekday / weekend
    run_step3(Step3Config(input_csv=step2_dir / "activity_clean.csv", outdir=step3_dir))

    # Step 4: pre-imputation aggregates
    annotated_csv = step3_dir / "activity_annotated.csv"
    run_step4(Step4Config(input_csv=annotated_csv, outdir=step4_dir))

    # Step 5: imputation
    _, imputed_totals, _ = run_step5(Step5Config(
        input_csv=annotated_csv,
        outdir=step5_dir,
        flag_mode=cfg.flag_mode,
        drop_zero_imputed_days=cfg.drop_zero_imputed_days,
        allow_unimputable=cfg.allow_unimputable
    ))

    # Step 6: report numbers
    summary = run_step6(Step6Config(
        activity_csv=step2_dir / "activity_clean.csv",
        daily_totals_csv=step4_dir / "daily_totals.csv",
        interval_profile_csv=step4_dir / "interval_profile.csv",
        imputed_daily_totals_csv=step5_dir / "daily_totals_imputed.csv",
        outdir=out / "step6",
        sparse_date=cfg.sparse_date
    ))

    # Step 7: charts
    charts: List[Path] = []
    if cfg.make_plots:
        charts = run_visualization(VisualizationConfig(
            daily_totals_csv=step4_dir / "daily_totals.csv",
            imputed_daily_totals_csv=step5_dir / "daily_totals_imputed.csv",
            interval_profile_csv=step4_dir / "interval_profile.csv",
            daytype_profile_csv=step4_dir / "interval_profile_by_daytype.csv",
            outdir=out / "visualization"
        ))

    print("\n" + "=" * 70)
    print("PIPELINE COMPLETED")
    print("=" * 70)

    return {"summary": summary, "imputed_totals": imputed_totals, "charts": charts}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="activity-report",
        description="Analyse the 5-minute activity step-count dataset."
    )
    parser.add_argument("--data-dir", type=Path, default=Path("data"),
                        help="Directory for the downloaded dataset (default: data)")
    parser.add_argument("--outdir", type=Path, default=Path("output"),
                        help="Base output directory (default: output)")
    parser.add_argument("--input-csv", type=Path, default=None,
                        help="Use an existing activity CSV instead of downloading")
    parser.add_argument("--url", default=DATASET_URL,
                        help="Dataset archive URL")
    parser.add_argument("--skip-download", action="store_true",
                        help="Expect activity.csv to already exist in --data-dir")
    parser.add_argument("--flag-mode", choices=FLAG_MODES, default="value_match",
                        help="How imputed rows are flagged (default: value_match)")
    parser.add_argument("--keep-zero-imputed-days", action="store_true",
                        help="Keep (date, imputed) daily totals equal to zero")
    parser.add_argument("--allow-unimputable", action="store_true",
                        help="Leave rows missing when their (interval, weekday) slot has no data")
    parser.add_argument("--no-plots", action="store_true",
                        help="Skip chart rendering")
    return parser


def main(argv: Optional[List[str]] = None):
    """Command-line entry point."""
    args = build_parser().parse_args(argv)

    config = PipelineConfig(
        data_dir=args.data_dir,
        output_base_dir=args.outdir,
        url=args.url,
        skip_download=args.skip_download,
        input_csv=args.input_csv,
        flag_mode=args.flag_mode,
        drop_zero_imputed_days=not args.keep_zero_imputed_days,
        allow_unimputable=args.allow_unimputable,
        make_plots=not args.no_plots
    )

    results = run_pipeline(config)
    return results


if __name__ == "__main__":
    main()
