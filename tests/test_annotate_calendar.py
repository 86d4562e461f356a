import calendar
import locale
from datetime import date, timedelta

import pandas as pd
import pytest

from activity_report.config import Step3Config, WEEKEND_DAYS
from activity_report.step2_load_activity import load_activity
from activity_report.step3_annotate_calendar import (
    annotate_calendar,
    run_step3,
    weekday_name,
    weekday_names
)
from activity_report.utils import load_input


ENGLISH_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


@pytest.mark.parametrize("d, expected", [
    (date(2012, 10, 1), "Monday"),
    (date(2012, 10, 6), "Saturday"),
    (date(2012, 10, 7), "Sunday"),
    (date(2012, 11, 15), "Thursday"),
    (date(2000, 2, 29), "Tuesday"),
    (date(1, 1, 1), "Monday"),
])
def test_weekday_name_known_dates(d, expected) -> None:
    assert weekday_name(d) == expected


def test_weekday_names_match_calendar_arithmetic() -> None:
    days = [date(1969, 12, 1) + timedelta(days=n) for n in range(800)]
    dates = pd.Series(pd.to_datetime(days))
    names = weekday_names(dates)
    assert names.tolist() == [ENGLISH_NAMES[d.weekday()] for d in days]
    assert names.tolist() == [weekday_name(d) for d in days]


def test_weekday_names_ignore_locale() -> None:
    d = date(2012, 10, 6)
    previous = locale.setlocale(locale.LC_TIME)
    try:
        locale.setlocale(locale.LC_TIME, "C")
        assert weekday_name(d) == "Saturday"
        assert weekday_names(pd.Series([pd.Timestamp(d)])).iloc[0] == "Saturday"

        for candidate in ("de_DE.UTF-8", "fr_FR.UTF-8", "ja_JP.UTF-8"):
            try:
                locale.setlocale(locale.LC_TIME, candidate)
            except locale.Error:
                continue
            assert weekday_name(d) == "Saturday"
            assert weekday_names(pd.Series([pd.Timestamp(d)])).iloc[0] == "Saturday"
    finally:
        locale.setlocale(locale.LC_TIME, previous)


def test_annotate_calendar_weekend_flag(activity_frame) -> None:
    annotated = annotate_calendar(activity_frame)

    assert "weekday" not in activity_frame.columns
    assert annotated["is_weekend"].dtype == bool
    assert (annotated["is_weekend"] == annotated["weekday"].isin(WEEKEND_DAYS)).all()

    weekend_dates = annotated.loc[annotated["is_weekend"], "date"].dt.date.unique()
    assert all(d.weekday() >= calendar.SATURDAY for d in weekend_dates)
    assert len(weekend_dates) == 6


def test_run_step3_round_trips_annotations(tmp_path, activity_csv) -> None:
    clean = load_activity(activity_csv)
    clean_csv = tmp_path / "clean.csv"
    clean.to_csv(clean_csv, index=False)

    outdir = tmp_path / "step3"
    annotated, weekday_counts = run_step3(Step3Config(input_csv=clean_csv, outdir=outdir))

    assert weekday_counts["weekday"].tolist() == ENGLISH_NAMES
    assert weekday_counts["n_days"].tolist() == [3] * 7

    reloaded = load_input(outdir / "activity_annotated.csv")
    assert reloaded["weekday"].tolist() == annotated["weekday"].tolist()
    assert reloaded["is_weekend"].tolist() == annotated["is_weekend"].tolist()
