import os
from datetime import date, timedelta
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

os.environ.setdefault("MPLBACKEND", "Agg")

from activity_report.step3_annotate_calendar import annotate_calendar


START = date(2012, 10, 1)  # Monday
N_DAYS = 21
INTERVALS = [0, 5, 835, 2355]
WEEK_OFFSETS = (0, 2, 10)

MISSING_DAY = "2012-10-08"  # Monday of week 2, nothing recorded
MISSING_SLOT = ("2012-10-03", 5)  # Wednesday of week 1, one interval


def expected_steps(day_index: int, interval_index: int) -> float:
    """Step count before any values are blanked out."""
    weekday = day_index % 7
    week = day_index // 7
    return float(10 * weekday + 100 * interval_index + WEEK_OFFSETS[week])


def make_activity_frame() -> pd.DataFrame:
    rows = []
    for d in range(N_DAYS):
        day = pd.Timestamp(START + timedelta(days=d))
        for i, code in enumerate(INTERVALS):
            rows.append({"steps": expected_steps(d, i), "date": day, "interval": code})
    df = pd.DataFrame(rows)

    df.loc[df["date"] == pd.Timestamp(MISSING_DAY), "steps"] = np.nan
    slot = (df["date"] == pd.Timestamp(MISSING_SLOT[0])) & (df["interval"] == MISSING_SLOT[1])
    df.loc[slot, "steps"] = np.nan
    return df


def write_raw_csv(df: pd.DataFrame, path: Path) -> Path:
    """Write a frame in the raw dataset layout (quoted header, NA for missing)."""
    lines = ['"steps","date","interval"']
    for row in df.itertuples(index=False):
        steps = "NA" if pd.isna(row.steps) else str(int(row.steps))
        lines.append(f'{steps},"{row.date:%Y-%m-%d}",{row.interval}')
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def activity_frame() -> pd.DataFrame:
    return make_activity_frame()


@pytest.fixture
def annotated_frame(activity_frame) -> pd.DataFrame:
    return annotate_calendar(activity_frame)


@pytest.fixture
def activity_csv(tmp_path, activity_frame) -> Path:
    return write_raw_csv(activity_frame, tmp_path / "activity.csv")
