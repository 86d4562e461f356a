import numpy as np
import pandas as pd
import pytest

from activity_report.config import Step5Config
from activity_report.step3_annotate_calendar import annotate_calendar
from activity_report.step5_impute_missing import (
    daily_totals_by_imputation,
    imputation_table,
    impute_missing_steps,
    run_step5
)
from activity_report.utils import load_input, load_totals

from conftest import MISSING_DAY, MISSING_SLOT, INTERVALS


def _frame(rows):
    df = pd.DataFrame(rows, columns=["steps", "date", "interval"])
    df["date"] = pd.to_datetime(df["date"])
    return annotate_calendar(df)


@pytest.fixture
def two_mondays() -> pd.DataFrame:
    """A measured zero that equals its slot mean, plus a zero-valued fill."""
    return _frame([
        (0.0, "2012-10-01", 0),
        (10.0, "2012-10-01", 5),
        (np.nan, "2012-10-08", 0),
        (20.0, "2012-10-08", 5),
    ])


def test_imputation_table_uses_whole_dataset(annotated_frame) -> None:
    table = imputation_table(annotated_frame)
    assert list(table.columns) == ["interval", "weekday", "imputed_value"]
    assert len(table) == 7 * len(INTERVALS)

    monday = table[table["weekday"] == "Monday"].set_index("interval")["imputed_value"]
    # Mondays of weeks 1 and 3 (offsets 0 and 10)
    assert monday.to_dict() == {0: 5.0, 5: 105.0, 835: 205.0, 2355: 305.0}

    wednesday_5 = table[(table["weekday"] == "Wednesday") & (table["interval"] == 5)]
    # Weeks 2 and 3 only (offsets 2 and 10)
    assert wednesday_5["imputed_value"].iloc[0] == 20 + 100 + 6


def test_fill_equals_slot_mean(annotated_frame) -> None:
    imputed = impute_missing_steps(annotated_frame)

    assert not imputed["steps"].isna().any()
    assert imputed.index.equals(annotated_frame.index)

    missing_day = imputed[imputed["date"] == pd.Timestamp(MISSING_DAY)]
    assert missing_day["steps"].tolist() == [5.0, 105.0, 205.0, 305.0]

    slot = imputed[(imputed["date"] == pd.Timestamp(MISSING_SLOT[0]))
                   & (imputed["interval"] == MISSING_SLOT[1])]
    assert slot["steps"].iloc[0] == 126.0


def test_present_values_unchanged(annotated_frame) -> None:
    imputed = impute_missing_steps(annotated_frame)
    present = annotated_frame["steps"].notna()
    pd.testing.assert_series_equal(imputed.loc[present, "steps"], annotated_frame.loc[present, "steps"])


def test_imputation_is_idempotent(annotated_frame) -> None:
    once = impute_missing_steps(annotated_frame)
    twice = impute_missing_steps(once)

    pd.testing.assert_series_equal(once["steps"], twice["steps"])
    assert list(twice.columns) == list(once.columns)


def test_value_match_flags(annotated_frame) -> None:
    imputed = impute_missing_steps(annotated_frame, flag_mode="value_match")
    # No measured value in this dataset coincides with its slot mean
    assert imputed["is_imputed"].tolist() == annotated_frame["steps"].isna().tolist()


def test_value_match_mislabels_measured_value_equal_to_mean(two_mondays) -> None:
    imputed = impute_missing_steps(two_mondays, flag_mode="value_match")
    assert imputed["is_imputed"].tolist() == [True, False, True, False]


def test_provenance_flags_only_filled_rows(two_mondays) -> None:
    imputed = impute_missing_steps(two_mondays, flag_mode="provenance")
    assert imputed["is_imputed"].tolist() == [False, False, True, False]
    assert imputed["steps"].tolist() == [0.0, 10.0, 0.0, 20.0]


def test_unknown_flag_mode_raises(annotated_frame) -> None:
    with pytest.raises(ValueError, match="Unknown flag mode"):
        impute_missing_steps(annotated_frame, flag_mode="guess")


def test_unimputable_slot_raises() -> None:
    df = _frame([
        (np.nan, "2012-10-01", 0),
        (5.0, "2012-10-01", 5),
        (7.0, "2012-10-08", 5),
    ])
    with pytest.raises(ValueError, match="no recorded steps"):
        impute_missing_steps(df)


def test_unimputable_slot_left_missing_when_allowed() -> None:
    df = _frame([
        (np.nan, "2012-10-01", 0),
        (5.0, "2012-10-01", 5),
        (7.0, "2012-10-08", 5),
    ])
    for mode in ("value_match", "provenance"):
        imputed = impute_missing_steps(df, flag_mode=mode, allow_unimputable=True)
        assert np.isnan(imputed["steps"].iloc[0])
        assert not imputed["is_imputed"].iloc[0]


def test_daily_totals_by_imputation(annotated_frame) -> None:
    imputed = impute_missing_steps(annotated_frame)
    totals = daily_totals_by_imputation(imputed)

    assert list(totals.columns) == ["date", "is_imputed", "steps"]
    flagged = totals[totals["is_imputed"]].set_index("date")["steps"]
    assert flagged.to_dict() == {
        pd.Timestamp(MISSING_SLOT[0]): 126.0,
        pd.Timestamp(MISSING_DAY): 620.0,
    }
    # One row per date, plus the extra imputed row of the partly missing day
    assert len(totals) == 21 + 1


def test_zero_imputed_day_rows_dropped(two_mondays) -> None:
    imputed = impute_missing_steps(two_mondays, flag_mode="value_match")

    kept = daily_totals_by_imputation(imputed, drop_zero_imputed=True)
    assert not kept["is_imputed"].any()
    assert kept["steps"].tolist() == [10.0, 20.0]

    everything = daily_totals_by_imputation(imputed, drop_zero_imputed=False)
    assert len(everything) == 4
    assert everything.loc[everything["is_imputed"], "steps"].tolist() == [0.0, 0.0]


def test_run_step5_outputs(tmp_path, annotated_frame) -> None:
    annotated_csv = tmp_path / "annotated.csv"
    annotated_frame.to_csv(annotated_csv, index=False)

    outdir = tmp_path / "step5"
    imputed, totals, summary = run_step5(Step5Config(input_csv=annotated_csv, outdir=outdir))

    s = summary.iloc[0]
    assert s["n_missing_before"] == len(INTERVALS) + 1
    assert s["n_filled"] == len(INTERVALS) + 1
    assert s["n_flagged_imputed"] == len(INTERVALS) + 1
    assert s["n_measured_flagged_imputed"] == 0
    assert s["n_still_missing"] == 0

    reloaded = load_input(outdir / "activity_imputed.csv")
    assert reloaded["is_imputed"].tolist() == imputed["is_imputed"].tolist()
    np.testing.assert_allclose(reloaded["steps"], imputed["steps"])

    reloaded_totals = load_totals(outdir / "daily_totals_imputed.csv", "is_imputed")
    assert len(reloaded_totals) == len(totals)
    assert (outdir / "imputation_table.csv").exists()
