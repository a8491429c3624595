"""
mismatch_visualization.py

Helpers for summarizing and visualizing reconciliation mismatches.
"""

from __future__ import annotations

from typing import Tuple

import pandas as pd
import matplotlib.pyplot as plt

from ..config import RECONCILE_CONFIG
from ..engines.cats_edits import discrepancy_reason


CODE_LABEL = RECONCILE_CONFIG.code_mismatch_label
HOURS_LABEL = RECONCILE_CONFIG.hours_mismatch_label
DISCREPANCY_GROUPS = [
    ("code_only", CODE_LABEL),
    ("hours_only", HOURS_LABEL),
    ("code_and_hours", f"{CODE_LABEL}, {HOURS_LABEL}"),
]
MISMATCH_REQUIRED_COLUMNS = [
    "date",
    "oracle_leave_code",
    "oracle_hours",
    "drmis_leave_code",
    "drmis_hours",
]


def _validate_required_columns(df: pd.DataFrame, required_cols: list[str]) -> None:
    missing = [col for col in required_cols if col not in df.columns]
    if missing:
        missing_list = ", ".join(missing)
        raise ValueError(f"Missing required columns: {missing_list}")


def build_mismatch_kpi_summary(df: pd.DataFrame) -> pd.DataFrame:
    """
    Compute counts and percentages of mismatches by discrepancy reason.

    Required columns:
      - date
      - oracle_leave_code, oracle_hours
      - drmis_leave_code, drmis_hours
    """

    _validate_required_columns(df, MISMATCH_REQUIRED_COLUMNS)

    columns = ["discrepancy_group", "count", "percent"]
    if df.empty:
        return pd.DataFrame(columns=columns)

    reasons = df.apply(discrepancy_reason, axis=1)
    total = int(df.shape[0])
    rows = []
    for group_label, reason in DISCREPANCY_GROUPS:
        count = int((reasons == reason).sum())
        percent = count / total if total else 0.0
        rows.append(
            {
                "discrepancy_group": group_label,
                "count": count,
                "percent": percent,
            }
        )

    return pd.DataFrame(rows, columns=columns)


def plot_mismatch_kpi_summary(
    summary_df: pd.DataFrame,
) -> Tuple[plt.Figure, plt.Axes]:
    """
    Plot mismatches by discrepancy reason as percent of mismatches.
    """

    _validate_required_columns(summary_df, ["discrepancy_group", "count", "percent"])

    fig, ax = plt.subplots(figsize=(8, 4))
    if summary_df.empty:
        ax.text(0.5, 0.5, "No data available", ha="center", va="center")
        ax.set_axis_off()
        return fig, ax

    order = [group_label for group_label, _ in DISCREPANCY_GROUPS]
    data = summary_df.set_index("discrepancy_group").reindex(order).fillna(0)
    counts = data["count"].astype(int)
    percents = data["percent"] * 100

    ax.barh(order, percents, color="#72B7B2")
    ax.set_xlabel("Percent of Mismatches")
    ax.set_title("Leave Mismatches by Discrepancy Reason")

    max_pct = float(percents.max() if len(percents) else 0)
    ax.set_xlim(0, max(10.0, max_pct * 1.15))

    for idx, (pct, count) in enumerate(zip(percents, counts)):
        ax.text(
            pct + 0.5,
            idx,
            f"{pct:.1f}% ({count})",
            va="center",
        )

    return fig, ax


def build_monthly_mismatch_hours(df: pd.DataFrame) -> pd.DataFrame:
    """
    Total DRMIS vs Oracle hours on mismatching days, per calendar month.

    Required columns:
      - date, oracle_hours, drmis_hours

    Raises:
        ValueError: if any date cannot be read.
    """

    _validate_required_columns(df, ["date", "oracle_hours", "drmis_hours"])

    columns = ["month", "mismatch_days", "drmis_hours", "oracle_hours", "hours_delta"]
    if df.empty:
        return pd.DataFrame(columns=columns)

    dates = pd.to_datetime(df["date"], errors="coerce")
    invalid_count = int(dates.isna().sum())
    if invalid_count:
        raise ValueError(f"Found {invalid_count} rows with missing or malformed date.")

    work = pd.DataFrame(
        {
            "month": dates.dt.to_period("M").astype(str),
            "drmis_hours": pd.to_numeric(df["drmis_hours"], errors="coerce").fillna(0.0),
            "oracle_hours": pd.to_numeric(df["oracle_hours"], errors="coerce").fillna(0.0),
        }
    )
    summary = (
        work.groupby("month", sort=True)
        .agg(
            mismatch_days=("month", "size"),
            drmis_hours=("drmis_hours", "sum"),
            oracle_hours=("oracle_hours", "sum"),
        )
        .reset_index()
    )
    summary["hours_delta"] = summary["oracle_hours"] - summary["drmis_hours"]
    return summary[columns]


def plot_monthly_mismatch_hours(
    metrics_df: pd.DataFrame,
) -> Tuple[plt.Figure, plt.Axes]:
    """
    Plot DRMIS vs Oracle hours on mismatching days, side by side per month.
    """

    _validate_required_columns(metrics_df, ["month", "drmis_hours", "oracle_hours"])

    fig, ax = plt.subplots(figsize=(9, 4))
    if metrics_df.empty:
        ax.text(0.5, 0.5, "No data available", ha="center", va="center")
        ax.set_axis_off()
        return fig, ax

    data = metrics_df.sort_values("month")
    positions = range(len(data))
    width = 0.4

    ax.bar(
        [p - width / 2 for p in positions],
        data["drmis_hours"].astype(float),
        width=width,
        color="#4C78A8",
        label="DRMIS",
    )
    ax.bar(
        [p + width / 2 for p in positions],
        data["oracle_hours"].astype(float),
        width=width,
        color="#F58518",
        label="Oracle",
    )
    ax.set_xticks(list(positions))
    ax.set_xticklabels(data["month"].tolist(), rotation=45, ha="right")
    ax.set_ylabel("Hours")
    ax.set_title("Leave Hours on Mismatching Days")
    ax.legend()

    return fig, ax
