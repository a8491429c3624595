# Docstring for leave_reconcile/core/normalizers module
"""
normalizers.py

Shared normalization helpers for DRMIS and Oracle spreadsheet cells.

Both exports arrive as loosely typed grids: dates may be native datetimes,
spreadsheet serial numbers or strings in several layouts; leave codes may be
numbers, digit strings, or decorated text; hours may be blank or malformed.
These helpers turn single cell values into the canonical forms compared by the
reconciler.

Design goals
------------
- Single source of truth for date, leave-code, hours, and employee-id
  handling across both extractors and the detail lookup.
- Cell-level functions (scalar in, scalar out) so the ordered, first-wins
  semantics of the extractors stay explicit.
- Explicit coercion: `parse_hours` reports whether a zero is a real zero,
  a blank cell, or malformed input.

Public API
----------
- is_blank(value) -> bool
- cell_text(value) -> str
- digits_only(value) -> str
- normalize_date(value) -> date | None
- format_display_date(value) -> str
- parse_display_date(text) -> date | None
- parse_hours(value) -> HoursValue
- normalize_employee_id(value) -> str
- normalize_drmis_leave_code(value) -> str
- normalize_oracle_leave_code(value) -> str
- render_code(value) -> str
"""

from __future__ import annotations

import math
import re
import warnings
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from numbers import Integral, Real       # Integral -> int-like values, Real -> floats and ints
from typing import Any

import pandas as pd

from ..config import LEAVE_CODE_CONFIG


# Spreadsheet 1900 date system: serial 1 == 1899-12-31
SERIAL_EPOCH = date(1899, 12, 30)

HOURS_VALID = "valid"
HOURS_BLANK = "blank"
HOURS_UNPARSEABLE = "unparseable"

# (pattern, order of the captured groups)
_DATE_PATTERNS = [
    (re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{4})$"), ("day", "month", "year")),
    (re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$"), ("day", "month", "year")),
    (re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$"), ("month", "day", "year")),
    (re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$"), ("year", "month", "day")),
]

_MONTH_ABBR = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class HoursValue:
    """Parsed hours plus how they were obtained (valid / blank / unparseable)."""

    hours: float
    status: str

    @property
    def is_valid(self) -> bool:
        return self.status == HOURS_VALID


def is_blank(value: Any) -> bool:
    """True for None, NaN/NaT, and strings that are empty after stripping."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):     # array-likes are never a single blank cell
        return False


def cell_text(value: Any) -> str:
    """
    Render a cell as trimmed text.

    Integer-like floats lose their '.0' so that 1110.0 (how pandas reads an
    integer column with blanks) renders the same as the 1110 typed in the
    spreadsheet.
    """
    if is_blank(value):
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, Real) and not isinstance(value, Integral):
        if float(value).is_integer():
            return str(int(value))
    return str(value).strip()


def digits_only(value: Any) -> str:
    """Strip every non-digit character: 'A/A 1110 - Vac' -> '1110'."""
    return re.sub(r"\D+", "", cell_text(value))


# --- Dates --------------------------------------------------------------------

def normalize_date(value: Any) -> date | None:
    """
    Convert a date-like cell to a calendar date, or None when it cannot be read.

    Rules, in order:
        - datetime / Timestamp / date -> the calendar day (time dropped)
        - int / float -> spreadsheet serial day count from 1899-12-30, floored
        - str -> D.M.YYYY, D-M-YYYY, M/D/YYYY, YYYY-M-D, then general parsing
    """
    if is_blank(value):
        return None

    # pd.Timestamp is a datetime subclass, so this branch covers both
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if isinstance(value, Real) and not isinstance(value, bool):
        number = float(value)
        if not math.isfinite(number):
            return None
        try:
            return SERIAL_EPOCH + timedelta(days=math.floor(number))
        except OverflowError:
            return None

    if isinstance(value, str):
        return _parse_date_string(value.strip())

    return None


def _parse_date_string(text: str) -> date | None:
    for pattern, order in _DATE_PATTERNS:
        match = pattern.match(text)
        if match is None:
            continue
        parts = dict(zip(order, (int(g) for g in match.groups())))
        try:
            return date(parts["year"], parts["month"], parts["day"])
        except ValueError:
            # The layout matched but the day does not exist (e.g. 31.02.2025)
            return None

    # General parsing fallback; pandas warns when it has to guess a format
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        parsed = pd.to_datetime(text, errors="coerce")
    if pd.isna(parsed):
        return None
    return parsed.date()


def format_display_date(value: date | None) -> str:
    """Display form used in the CATs edits table: 'Apr 28, 2025'."""
    if value is None:
        return ""
    return f"{_MONTH_ABBR[value.month - 1]} {value.day:02d}, {value.year}"


def parse_display_date(text: str | None) -> date | None:
    """Inverse of format_display_date; other layouts go through normalize_date."""
    if not text:
        return None
    parts = text.replace(",", " ").split()
    if len(parts) == 3 and parts[0] in _MONTH_ABBR:
        try:
            return date(int(parts[2]), _MONTH_ABBR.index(parts[0]) + 1, int(parts[1]))
        except ValueError:
            return None
    return normalize_date(text)


# --- Hours --------------------------------------------------------------------

def parse_hours(value: Any) -> HoursValue:
    """
    Parse an hours cell.

    Blank cells and malformed values both become 0.0 hours, but the status
    tells them apart from a legitimate zero.
    """
    if is_blank(value):
        return HoursValue(0.0, HOURS_BLANK)
    if isinstance(value, bool):
        return HoursValue(0.0, HOURS_UNPARSEABLE)
    if isinstance(value, Real):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return HoursValue(0.0, HOURS_UNPARSEABLE)
    if not math.isfinite(number):
        return HoursValue(0.0, HOURS_UNPARSEABLE)
    return HoursValue(number, HOURS_VALID)


# --- Identifiers and codes ------------------------------------------------------

def normalize_employee_id(value: Any) -> str:
    """Personnel number as text: 12345.0 -> '12345', missing -> ''."""
    return cell_text(value)


def _strip_code(value: Any) -> str:
    cfg = LEAVE_CODE_CONFIG
    text = cell_text(value)
    if text in cfg.blank_tokens:
        return cfg.missing_code
    digits = re.sub(r"\D+", "", text)
    # Nothing numeric in the cell: keep the text so it still compares literally
    return digits if digits else text


def normalize_drmis_leave_code(value: Any) -> str:
    """DRMIS A/A type -> digit string; blank or '-' -> '0'."""
    return _strip_code(value)


def normalize_oracle_leave_code(value: Any) -> str:
    """
    Oracle leave code -> DRMIS-comparable code.

    Oracle uses 3-digit codes that correspond 1:1 to 4-digit DRMIS codes with
    the same suffix, so '110' -> '1110'. 4-digit codes pass through, and any
    other length is compared literally.
    """
    cfg = LEAVE_CODE_CONFIG
    code = _strip_code(value)
    if code == cfg.missing_code:
        return cfg.missing_code
    if len(code) == 3:
        return cfg.oracle_bridge_prefix + code
    return code


def render_code(value: Any) -> str:
    """
    Render a code without leading zeros ('01110' -> '1110').

    Only the leading integer is used, so text codes without one are returned
    unchanged.
    """
    text = cell_text(value)
    match = _LEADING_INT_RE.match(text)
    if match is None:
        return text
    return str(int(match.group(1)))
