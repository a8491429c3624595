from datetime import date

import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

from leave_reconcile.visualization.mismatch_visualization import (
    build_mismatch_kpi_summary,
    build_monthly_mismatch_hours,
    plot_mismatch_kpi_summary,
    plot_monthly_mismatch_hours,
)


def _mismatches() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "date": [date(2025, 4, 28), date(2025, 4, 29), date(2025, 5, 1), date(2025, 5, 2)],
            "oracle_leave_code": ["", "1120", "1110", "1110"],
            "oracle_hours": [0.0, 7.5, 4.0, 7.5],
            "drmis_leave_code": ["1110", "1110", "1110", "0"],
            "drmis_hours": [4.25, 7.5, 7.5, 0.0],
        }
    )


def test_build_mismatch_kpi_summary_counts() -> None:
    summary = build_mismatch_kpi_summary(_mismatches()).set_index("discrepancy_group")

    assert summary.loc["code_only", "count"] == 1
    assert summary.loc["hours_only", "count"] == 1
    assert summary.loc["code_and_hours", "count"] == 2
    assert summary.loc["code_and_hours", "percent"] == pytest.approx(0.5)


def test_build_mismatch_kpi_summary_empty() -> None:
    summary = build_mismatch_kpi_summary(_mismatches().iloc[0:0])

    assert summary.empty is True
    assert list(summary.columns) == ["discrepancy_group", "count", "percent"]


def test_build_mismatch_kpi_summary_missing_columns() -> None:
    with pytest.raises(ValueError, match="Missing required columns"):
        build_mismatch_kpi_summary(pd.DataFrame({"date": [date(2025, 4, 28)]}))


def test_build_monthly_mismatch_hours() -> None:
    summary = build_monthly_mismatch_hours(_mismatches()).set_index("month")

    assert summary.loc["2025-04", "mismatch_days"] == 2
    assert summary.loc["2025-04", "drmis_hours"] == pytest.approx(11.75)
    assert summary.loc["2025-04", "oracle_hours"] == pytest.approx(7.5)
    assert summary.loc["2025-05", "hours_delta"] == pytest.approx(4.0)


def test_build_monthly_mismatch_hours_rejects_bad_dates() -> None:
    df = _mismatches()
    df.loc[0, "date"] = "not a date"

    with pytest.raises(ValueError, match="malformed date"):
        build_monthly_mismatch_hours(df)


def test_plots_return_figures() -> None:
    fig, ax = plot_mismatch_kpi_summary(build_mismatch_kpi_summary(_mismatches()))
    assert ax.get_title() == "Leave Mismatches by Discrepancy Reason"

    fig, ax = plot_monthly_mismatch_hours(build_monthly_mismatch_hours(_mismatches()))
    assert ax.get_ylabel() == "Hours"


def test_plot_empty_summary_shows_placeholder() -> None:
    fig, ax = plot_monthly_mismatch_hours(build_monthly_mismatch_hours(_mismatches().iloc[0:0]))

    assert ax.texts[0].get_text() == "No data available"
