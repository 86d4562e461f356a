"""
Step 7: Activity Report Charts

This module renders the report figures from the Step 4 and Step 5 tables:
    - daily totals as bars, coloured by weekend flag
    - histograms of daily totals before and after imputation
    - daily totals after imputation, coloured by imputation flag
    - average steps per interval
    - average steps per interval, weekdays vs weekends

Intervals are plotted by position with HH:MM tick labels, since interval
codes jump from :55 to the next hour.
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Optional, Tuple
import pandas as pd
import numpy as np

try:
    import matplotlib.pyplot as plt
    MATPLOTLIB_AVAILABLE = True
except ImportError:
    MATPLOTLIB_AVAILABLE = False

from .config import VisualizationConfig, INTERVAL_MINUTES
from .step6_summarize_report import daily_total_stats, max_interval
from .utils import (
    ensure_dir,
    load_totals,
    load_profile,
    interval_label
)


FLAG_COLORS = {False: "#4C72B0", True: "#DD8452"}


def set_academic_mpl_style() -> None:
    """Simple paper-friendly matplotlib styling."""
    if not MATPLOTLIB_AVAILABLE:
        return

    plt.rcParams.update({
        "font.size": 11,
        "axes.titlesize": 12,
        "axes.labelsize": 11,
        "xtick.labelsize": 10,
        "ytick.labelsize": 10,
        "legend.fontsize": 10,

        "axes.linewidth": 1.0,
        "lines.linewidth": 1.5,
        "xtick.major.width": 1.0,
        "ytick.major.width": 1.0,

        "savefig.dpi": 300,
        "figure.dpi": 120,
    })


def interval_ticks(intervals: np.ndarray, every_hours: int = 3) -> Tuple[List[int], List[str]]:
    """
    Tick positions and HH:MM labels for intervals plotted by position.

    Args:
        intervals: Interval codes in plotting order
        every_hours: Spacing between ticks in hours

    Returns:
        Tuple of (positions, labels)
    """
    step = max(1, every_hours * 60 // INTERVAL_MINUTES)
    positions = list(range(0, len(intervals), step))
    labels = [interval_label(intervals[p]) for p in positions]
    return positions, labels


def _save(fig, out_path: Path) -> Path:
    fig.tight_layout()
    fig.savefig(out_path, dpi=300)
    plt.close(fig)
    print(f"[ok] saved: {out_path}")
    return out_path


def plot_daily_totals(totals: pd.DataFrame, flag_col: str, labels: Dict[bool, str],
                      title: str, out_path: Path) -> Optional[Path]:
    """
    Bar chart of daily totals, one colour per flag value.

    Args:
        totals: DataFrame with date, flag_col, steps
        flag_col: Boolean column used for colouring
        labels: Legend label per flag value
        title: Axes title
        out_path: Output PNG path
    """
    if totals.empty:
        print("[warn] no data for plot")
        return None

    fig, ax = plt.subplots(figsize=(10, 4.2))
    for flag in (False, True):
        part = totals[totals[flag_col] == flag]
        if part.empty:
            continue
        ax.bar(part["date"], part["steps"], width=0.8,
               color=FLAG_COLORS[flag], label=labels[flag])

    ax.set_title(title)
    ax.set_xlabel("Date")
    ax.set_ylabel("Total steps")
    ax.legend(frameon=False)
    fig.autofmt_xdate()

    return _save(fig, out_path)


def plot_daily_histogram(totals: pd.DataFrame, bins: int, title: str,
                         out_path: Path) -> Optional[Path]:
    """Histogram of daily totals with mean and median reference lines."""
    if totals.empty:
        print("[warn] no data for plot")
        return None

    stats = daily_total_stats(totals)

    fig, ax = plt.subplots(figsize=(6.8, 4.2))
    ax.hist(totals["steps"].to_numpy(), bins=bins, alpha=0.5,
            edgecolor="black", linewidth=0.6)
    ax.axvline(stats["mean"], linestyle="--", linewidth=2.0,
               label=f"Mean = {stats['mean']:,.0f}")
    ax.axvline(stats["median"], linestyle=":", linewidth=2.0,
               label=f"Median = {stats['median']:,.0f}")

    ax.set_title(title)
    ax.set_xlabel("Total steps per day")
    ax.set_ylabel("Frequency")
    ax.legend(frameon=False)

    return _save(fig, out_path)


def plot_interval_profile(profile: pd.DataFrame, every_hours: int,
                          out_path: Path) -> Optional[Path]:
    """Line chart of average steps per interval, busiest interval marked."""
    if profile.empty:
        print("[warn] no data for plot")
        return None

    ordered = profile.sort_values("interval").reset_index(drop=True)
    intervals = ordered["interval"].to_numpy()
    busiest = max_interval(ordered)
    peak_pos = int(np.flatnonzero(intervals == busiest["interval"])[0])

    fig, ax = plt.subplots(figsize=(10, 4.2))
    ax.plot(np.arange(len(ordered)), ordered["steps"].to_numpy())
    ax.axvline(peak_pos, linestyle="--", linewidth=1.2, color="grey",
               label=f"Max at {interval_label(busiest['interval'])} "
                     f"({float(busiest['steps']):.1f} steps)")

    positions, labels = interval_ticks(intervals, every_hours)
    ax.set_xticks(positions)
    ax.set_xticklabels(labels)
    ax.set_title("Average steps per 5-minute interval")
    ax.set_xlabel("Time of day")
    ax.set_ylabel("Average steps")
    ax.legend(frameon=False)

    return _save(fig, out_path)


def plot_daytype_profiles(daytype_profile: pd.DataFrame, every_hours: int,
                          out_path: Path) -> Optional[Path]:
    """Two stacked panels of the interval profile: weekdays and weekends."""
    if daytype_profile.empty:
        print("[warn] no data for plot")
        return None

    intervals = np.sort(daytype_profile["interval"].unique())
    positions, labels = interval_ticks(intervals, every_hours)

    fig, axes = plt.subplots(2, 1, figsize=(10, 6.4), sharex=True, sharey=True)
    for ax, is_weekend in zip(axes, (False, True)):
        part = daytype_profile[daytype_profile["is_weekend"] == is_weekend]
        part = part.set_index("interval")["steps"].reindex(intervals)
        ax.plot(np.arange(len(intervals)), part.to_numpy(), color=FLAG_COLORS[is_weekend])
        ax.set_title("Weekend" if is_weekend else "Weekday")
        ax.set_ylabel("Average steps")

    axes[-1].set_xticks(positions)
    axes[-1].set_xticklabels(labels)
    axes[-1].set_xlabel("Time of day")

    return _save(fig, out_path)


def run_visualization(cfg: VisualizationConfig) -> List[Path]:
    """
    Execute visualization: Render the report charts.

    Args:
        cfg: VisualizationConfig with input tables and output directory

    Returns:
        List of written chart paths (empty when matplotlib is unavailable)
    """
    print("\n" + "=" * 70)
    print("STEP 7: Activity Report Charts")
    print("=" * 70)

    ensure_dir(cfg.outdir)

    if not MATPLOTLIB_AVAILABLE:
        print("\nWarning: matplotlib is not installed. Skipping visualization.")
        print("Install with: pip install matplotlib")
        return []

    print("\nLoading inputs...")
    totals = load_totals(cfg.daily_totals_csv, "is_weekend")
    imputed_totals = load_totals(cfg.imputed_daily_totals_csv, "is_imputed")
    profile = load_profile(cfg.interval_profile_csv)
    daytype_profile = load_profile(cfg.daytype_profile_csv, ["is_weekend"])

    set_academic_mpl_style()

    print("\nGenerating charts...")
    written = [
        plot_daily_totals(
            totals, "is_weekend", {False: "Weekday", True: "Weekend"},
            "Total steps per day", cfg.outdir / "daily_totals.png"
        ),
        plot_daily_histogram(
            totals, cfg.hist_bins, "Daily totals (missing values ignored)",
            cfg.outdir / "hist_daily_totals.png"
        ),
        plot_daily_totals(
            imputed_totals, "is_imputed", {False: "Measured", True: "Imputed"},
            "Total steps per day after imputation", cfg.outdir / "daily_totals_imputed.png"
        ),
        plot_daily_histogram(
            imputed_totals, cfg.hist_bins, "Daily totals (missing values imputed)",
            cfg.outdir / "hist_daily_totals_imputed.png"
        ),
        plot_interval_profile(
            profile, cfg.tick_every_hours, cfg.outdir / "interval_profile.png"
        ),
        plot_daytype_profiles(
            daytype_profile, cfg.tick_every_hours, cfg.outdir / "interval_profile_by_daytype.png"
        ),
    ]
    written = [p for p in written if p is not None]

    print("\n" + "=" * 70)
    print("VISUALIZATION COMPLETED")
    print("=" * 70)

    return written


def main():
    """Example usage of visualization."""
    base_dir = Path("output")

    config = VisualizationConfig(
        daily_totals_csv=base_dir / "step4/daily_totals.csv",
        imputed_daily_totals_csv=base_dir / "step5/daily_totals_imputed.csv",
        interval_profile_csv=base_dir / "step4/interval_profile.csv",
        daytype_profile_csv=base_dir / "step4/interval_profile_by_daytype.csv",
        outdir=base_dir / "visualization"
    )

    written = run_visualization(config)
    return written


if __name__ == "__main__":
    main()
