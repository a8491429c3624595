# Docstring for leave_reconcile/cleaning/clean_drmis module
"""
clean_drmis.py

Extraction of canonical per-day records from a DRMIS time/leave export.

DRMIS (the internal timekeeping system) exports one row per time entry:
personnel number, date, work order, activity, attendance/absence type
("A/A type") and hours. A single day usually holds several entries (work on
different orders plus any leave).

This module produces two views of the same table:

1) Canonical DRMIS records (for reconciliation)
   - Columns: employee_id, date, hours, hours_status, leave_code
   - Rows with unparseable dates are dropped.
   - Leave codes are normalized (blank / '-' -> '0', non-digits stripped).
   - Administrative codes starting with '30' are dropped.
   - With an active allow-list only listed codes are kept ('0' matches '0').

2) Detail lookup (for the prefill engine)
   - {(date, employee_id): [DetailEntry, ...]} built from every row of the
     unfiltered table, so work entries the extractor drops are still
     available when hours must be reallocated.

Inputs
------
- A DetectedTable from `core.grid.detect_table`, optionally re-keyed by
  `core.columns.apply_column_mapping` after a manual column mapping.

Public API
----------
- extract_drmis_records(table, allow_list=None) -> pd.DataFrame
- build_detail_lookup(table) -> DetailLookup
- DetailEntry
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import AbstractSet, Dict, List, Tuple

import pandas as pd

from ..config import LEAVE_CODE_CONFIG
from ..core.columns import DETAIL_RULES, DRMIS_RULES, resolve_columns
from ..core.grid import DetectedTable
from ..core.normalizers import (
    cell_text,
    digits_only,
    normalize_date,
    normalize_drmis_leave_code,
    normalize_employee_id,
    parse_hours,
)


DRMIS_RECORD_COLUMNS = ["employee_id", "date", "hours", "hours_status", "leave_code"]


@dataclass(frozen=True)
class DetailEntry:
    """One underlying DRMIS time entry (work order line or leave line)."""

    work_order: str
    activity: str
    code: str
    hours: float


DetailLookup = Dict[Tuple[date, str], List[DetailEntry]]


def _allow_list_code(code: str) -> str:
    # '0' is matched as-is; anything else by its digits only
    return code if code == LEAVE_CODE_CONFIG.missing_code else digits_only(code)


def extract_drmis_records(
    table: DetectedTable,
    allow_list: AbstractSet[str] | None = None,
) -> pd.DataFrame:

    """

    Build canonical DRMIS records from a detected table.

    Args:
        table:
            Detected DRMIS table (headers + records).
        allow_list:
            Optional set of digit-string leave codes. When non-empty, rows whose
            code is not listed are dropped.

    Returns:
        DataFrame with columns employee_id, date, hours, hours_status,
        leave_code, in source row order.

    Raises:
        MissingColumnsError: if Pers No, Date, Hours or A/A Type cannot be
        resolved from the headers.

    """

    if table.is_empty:
        return pd.DataFrame(columns=DRMIS_RECORD_COLUMNS)

    cols = resolve_columns(table.headers, DRMIS_RULES, source="DRMIS")
    cfg = LEAVE_CODE_CONFIG
    use_allow_list = bool(allow_list)

    records = []
    for row in table.rows:
        day = normalize_date(row.get(cols["date"]))
        if day is None:
            continue    # unparseable dates are dropped silently

        code = normalize_drmis_leave_code(row.get(cols["leave_code"]))
        if code.startswith(cfg.admin_prefix):
            continue
        if use_allow_list and _allow_list_code(code) not in allow_list:
            continue

        hours = parse_hours(row.get(cols["hours"]))
        records.append(
            {
                "employee_id": normalize_employee_id(row.get(cols["employee_id"])),
                "date": day,
                "hours": hours.hours,
                "hours_status": hours.status,
                "leave_code": code,
            }
        )

    return pd.DataFrame(records, columns=DRMIS_RECORD_COLUMNS)


def build_detail_lookup(table: DetectedTable) -> DetailLookup:

    """

    Index every DRMIS entry by (date, employee_id).

    Column detection is best-effort here: a missing work-order or activity
    column leaves those fields blank, and rows without a readable date are
    skipped. No leave-code filtering is applied.

    """

    lookup: DetailLookup = {}
    if table.is_empty:
        return lookup

    cols = resolve_columns(table.headers, DETAIL_RULES, source="DRMIS", required=False)
    if "date" not in cols:
        return lookup

    def _get(row: dict, field: str):
        return row.get(cols[field]) if field in cols else None

    for row in table.rows:
        day = normalize_date(_get(row, "date"))
        if day is None:
            continue
        code = cell_text(_get(row, "leave_code"))
        if code in LEAVE_CODE_CONFIG.blank_tokens:
            code = LEAVE_CODE_CONFIG.missing_code
        entry = DetailEntry(
            work_order=cell_text(_get(row, "work_order")),
            activity=cell_text(_get(row, "activity")),
            code=code,
            hours=parse_hours(_get(row, "hours")).hours,
        )
        key = (day, normalize_employee_id(_get(row, "employee_id")))
        lookup.setdefault(key, []).append(entry)

    return lookup
