import pandas as pd
import pytest

from activity_report.config import PipelineConfig
from activity_report.run_pipeline import main, run_pipeline
from activity_report.step4_aggregate_steps import daily_totals
from activity_report.step5_impute_missing import daily_totals_by_imputation, impute_missing_steps

from conftest import INTERVALS


def test_pipeline_end_to_end(tmp_path, activity_csv, annotated_frame) -> None:
    outdir = tmp_path / "output"
    results = run_pipeline(PipelineConfig(
        data_dir=tmp_path / "data",
        output_base_dir=outdir,
        input_csv=activity_csv,
        make_plots=False
    ))

    s = results["summary"].iloc[0]
    assert s["n_missing_steps"] == len(INTERVALS) + 1
    assert s["max_interval"] == 2355
    assert s["sparse_date_measured_intervals"] == 0

    before = daily_totals(annotated_frame)["steps"]
    assert s["mean_daily_steps"] == pytest.approx(round(before.mean(), 2))
    assert s["median_daily_steps"] == pytest.approx(round(before.median(), 2))

    after = daily_totals_by_imputation(impute_missing_steps(annotated_frame))["steps"]
    assert s["mean_daily_steps_imputed"] == pytest.approx(round(after.mean(), 2))
    assert s["median_daily_steps_imputed"] == pytest.approx(round(after.median(), 2))

    for name in ("step2/activity_clean.csv", "step3/activity_annotated.csv",
                 "step4/daily_totals.csv", "step5/activity_imputed.csv",
                 "step6/report_summary.csv"):
        assert (outdir / name).exists()
    assert results["charts"] == []


def test_pipeline_skip_download_requires_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        run_pipeline(PipelineConfig(
            data_dir=tmp_path / "data",
            output_base_dir=tmp_path / "output",
            skip_download=True
        ))


def test_pipeline_rejects_unknown_flag_mode(tmp_path, activity_csv) -> None:
    with pytest.raises(ValueError, match="Unknown flag mode"):
        run_pipeline(PipelineConfig(
            data_dir=tmp_path,
            output_base_dir=tmp_path / "output",
            input_csv=activity_csv,
            flag_mode="guess"
        ))


def test_pipeline_renders_charts(tmp_path, activity_csv) -> None:
    pytest.importorskip("matplotlib")

    results = run_pipeline(PipelineConfig(
        data_dir=tmp_path,
        output_base_dir=tmp_path / "output",
        input_csv=activity_csv
    ))

    names = sorted(p.name for p in results["charts"])
    assert names == sorted([
        "daily_totals.png",
        "daily_totals_imputed.png",
        "hist_daily_totals.png",
        "hist_daily_totals_imputed.png",
        "interval_profile.png",
        "interval_profile_by_daytype.png",
    ])
    assert all(p.stat().st_size > 0 for p in results["charts"])


def test_main_parses_arguments(tmp_path, activity_csv) -> None:
    results = main([
        "--input-csv", str(activity_csv),
        "--outdir", str(tmp_path / "output"),
        "--flag-mode", "provenance",
        "--no-plots",
    ])

    summary = pd.read_csv(tmp_path / "output" / "step6" / "report_summary.csv", encoding="utf-8-sig")
    assert int(summary.loc[0, "max_interval"]) == 2355
    assert results["charts"] == []
