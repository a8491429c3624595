from datetime import date, datetime

import pandas as pd
import pytest

from leave_reconcile.core.normalizers import (
    HOURS_BLANK,
    HOURS_UNPARSEABLE,
    HOURS_VALID,
    cell_text,
    digits_only,
    format_display_date,
    normalize_date,
    normalize_drmis_leave_code,
    normalize_employee_id,
    normalize_oracle_leave_code,
    parse_display_date,
    parse_hours,
    render_code,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (1, date(1899, 12, 31)),
        (45775, date(2025, 4, 28)),
        (45775.75, date(2025, 4, 28)),
        ("28.04.2025", date(2025, 4, 28)),
        ("28-04-2025", date(2025, 4, 28)),
        ("04/28/2025", date(2025, 4, 28)),
        ("2025-04-28", date(2025, 4, 28)),
        (datetime(2025, 4, 28, 15, 30), date(2025, 4, 28)),
        (pd.Timestamp("2025-04-28 15:30"), date(2025, 4, 28)),
        (date(2025, 4, 28), date(2025, 4, 28)),
    ],
)
def test_normalize_date_supported_forms(value, expected) -> None:
    assert normalize_date(value) == expected


@pytest.mark.parametrize("value", [None, "", "   ", "not a date", "31.02.2025", float("nan"), True])
def test_normalize_date_unreadable_returns_none(value) -> None:
    assert normalize_date(value) is None


def test_display_date_round_trip() -> None:
    assert format_display_date(date(2025, 4, 8)) == "Apr 08, 2025"
    assert parse_display_date("Apr 08, 2025") == date(2025, 4, 8)
    assert format_display_date(None) == ""
    assert parse_display_date("") is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("110", "1110"),
        ("1110", "1110"),
        (110, "1110"),
        (110.0, "1110"),
        ("", "0"),
        ("-", "0"),
        (None, "0"),
        ("12", "12"),
    ],
)
def test_normalize_oracle_leave_code(raw, expected) -> None:
    assert normalize_oracle_leave_code(raw) == expected


def test_normalize_drmis_leave_code() -> None:
    assert normalize_drmis_leave_code("1110") == "1110"
    assert normalize_drmis_leave_code(" - ") == "0"
    assert normalize_drmis_leave_code(None) == "0"
    assert normalize_drmis_leave_code("A/A 1110") == "1110"
    assert normalize_drmis_leave_code("VAC") == "VAC"


def test_render_code_drops_leading_zeros() -> None:
    assert render_code("01110") == "1110"
    assert render_code("1110") == "1110"
    assert render_code("VAC") == "VAC"
    assert render_code("") == ""


def test_parse_hours_distinguishes_blank_from_malformed() -> None:
    assert parse_hours(7.5).hours == 7.5
    assert parse_hours("4.25").status == HOURS_VALID
    assert parse_hours(0).status == HOURS_VALID

    blank = parse_hours(None)
    assert blank.hours == 0.0
    assert blank.status == HOURS_BLANK
    assert blank.is_valid is False

    bad = parse_hours("abc")
    assert bad.hours == 0.0
    assert bad.status == HOURS_UNPARSEABLE


def test_cell_text_and_identifiers() -> None:
    assert cell_text(12345.0) == "12345"
    assert cell_text("  x ") == "x"
    assert cell_text(float("nan")) == ""
    assert normalize_employee_id(12345.0) == "12345"
    assert digits_only("WO-12 34") == "1234"
