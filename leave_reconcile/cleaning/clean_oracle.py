# Docstring for leave_reconcile/cleaning/clean_oracle module
"""
clean_oracle.py

Extraction of canonical per-day leave records from an Oracle payroll export.

Oracle records leave as requests: a from-date, the hours recorded, and a leave
code. Two differences from DRMIS have to be bridged before the systems can be
compared:

1) Code space
   Oracle uses 3-digit codes that map 1:1 onto 4-digit DRMIS codes with the
   same suffix ('110' -> '1110'). 4-digit codes pass through; any other length
   is kept as-is and compared literally (a warning reports how many).

2) Multi-day entries
   A single Oracle entry may cover several days (e.g. 20 hours starting on a
   Monday). Entries above 8 hours are spread over consecutive business days,
   8 hours per day, the last day taking the remainder.

Filtering rules
---------------
- Rows with unparseable from-dates are dropped.
- Bridged codes 1200, 1260, 1261 and 1660 are never reconciled.
- With an active allow-list, rows without a code ('0') and unlisted codes are
  dropped.

Oracle rows carry no personnel number; the reconciler attributes them to the
employee of the DRMIS file.

Public API
----------
- extract_oracle_records(table, allow_list=None, holidays=None) -> pd.DataFrame
- expand_multi_day(records, holidays=None, cfg=EXPANSION_CONFIG) -> pd.DataFrame
"""

from __future__ import annotations

import math
import warnings
from datetime import date, timedelta
from typing import AbstractSet, Collection

import pandas as pd

from ..config import EXPANSION_CONFIG, LEAVE_CODE_CONFIG, ExpansionConfig
from ..core.business_calendar import next_business_day
from ..core.columns import ORACLE_RULES, resolve_columns
from ..core.grid import DetectedTable
from ..core.normalizers import normalize_date, normalize_oracle_leave_code, parse_hours


ORACLE_RECORD_COLUMNS = ["date", "hours", "hours_status", "leave_code"]


def extract_oracle_records(
    table: DetectedTable,
    allow_list: AbstractSet[str] | None = None,
    holidays: Collection[date] | None = None,
) -> pd.DataFrame:

    """

    Build canonical, per-day Oracle leave records from a detected table.

    Args:
        table:
            Detected Oracle table (headers + records).
        allow_list:
            Optional set of digit-string leave codes. When non-empty, only
            rows with a listed (bridged) code are kept.
        holidays:
            Holiday table used by the multi-day expansion. Defaults to the
            configured calendar.

    Returns:
        DataFrame with columns date, hours, hours_status, leave_code, one row
        per business day, each row at most 8 hours.

    Raises:
        MissingColumnsError: if From Date, Hours Recorded or Leave Code cannot
        be resolved from the headers.

    """

    if table.is_empty:
        return pd.DataFrame(columns=ORACLE_RECORD_COLUMNS)

    cols = resolve_columns(table.headers, ORACLE_RULES, source="ORACLE")
    cfg = LEAVE_CODE_CONFIG
    use_allow_list = bool(allow_list)

    records = []
    unmapped = 0
    for row in table.rows:
        day = normalize_date(row.get(cols["date"]))
        if day is None:
            continue

        code = normalize_oracle_leave_code(row.get(cols["leave_code"]))
        if code in cfg.oracle_excluded_codes:
            continue
        if use_allow_list and (code == cfg.missing_code or code not in allow_list):
            continue
        if code != cfg.missing_code and len(code) != 4:
            unmapped += 1

        hours = parse_hours(row.get(cols["hours"]))
        records.append(
            {
                "date": day,
                "hours": hours.hours,
                "hours_status": hours.status,
                "leave_code": code,
            }
        )

    if unmapped > 0:
        warnings.warn(
            f"Oracle leave-code normalization left {unmapped} codes outside the 4-digit DRMIS code space.",
            stacklevel=2,
        )

    return expand_multi_day(pd.DataFrame(records, columns=ORACLE_RECORD_COLUMNS), holidays=holidays)


def _split_hours(
    start: date,
    hours: float,
    holidays: Collection[date] | None,
    cfg: ExpansionConfig,
) -> list[tuple[date, float]]:
    chunks: list[tuple[date, float]] = []
    remaining = hours
    current = start
    while remaining > 0:
        current = next_business_day(current, holidays)
        day_hours = min(cfg.max_hours_per_day, remaining)
        chunks.append((current, day_hours))
        remaining = round(remaining - day_hours, cfg.precision)
        current = current + timedelta(days=1)

    total = sum(h for _, h in chunks)
    if not math.isclose(total, hours, abs_tol=1e-9):
        raise ValueError(f"Multi-day expansion lost hours: {hours} -> {total}")
    return chunks


def expand_multi_day(
    records: pd.DataFrame,
    holidays: Collection[date] | None = None,
    cfg: ExpansionConfig = EXPANSION_CONFIG,
) -> pd.DataFrame:

    """

    Spread entries above `max_hours_per_day` across business days.

    Entries at or below the cap are emitted unchanged. Larger entries start on
    the record's own date when it is a business day (otherwise the next one)
    and emit min(8, remaining) hours per business day with the same leave code
    until the hours are used up. Emitted hours always sum to the original.

    """

    if records.empty:
        return records.reset_index(drop=True)

    expanded = []
    for row in records.to_dict("records"):
        hours = row["hours"]
        if hours <= cfg.max_hours_per_day:
            expanded.append(row)
            continue
        for day, day_hours in _split_hours(row["date"], hours, holidays, cfg):
            expanded.append({**row, "date": day, "hours": day_hours})

    return pd.DataFrame(expanded, columns=records.columns)
