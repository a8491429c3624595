# Docstring for leave_reconcile/engines/reconcile_leave module
"""
reconcile_leave.py

Reconciliation engine for DRMIS vs Oracle leave records.

This engine merges the canonical records produced by
`cleaning.clean_drmis.extract_drmis_records` and
`cleaning.clean_oracle.extract_oracle_records` by day and reports every day
on which the two systems disagree on the leave code or the hours.

Core matching logic
-------------------
1) Default employee
   - The tool reconciles one employee at a time. The first non-empty
     personnel number in the DRMIS records is used for Oracle rows that have
     no DRMIS counterpart ('' when DRMIS has none).

2) DRMIS side
   - One merged row per (date, employee_id); the first DRMIS record for a
     key wins, later duplicates are ignored.

3) Oracle side
   - Each Oracle record claims the first merged row with the same date,
     whatever its employee_id, and overwrites that row's Oracle hours/code.
   - Without such a row a new one is created for the default employee with
     0 DRMIS hours and code '0'.

   Known limitation: matching on date alone means that in a file holding
   several employees an Oracle record can land on another employee's row for
   that date. This is intentional for the single-employee workflow and is
   not corrected here.

4) Classification
   - DRMIS codes are rendered without leading zeros ('0' when blank); Oracle
     codes stay as bridged ('' when Oracle has nothing for the day).
   - Optional allow-list: keep rows whose DRMIS or Oracle code is listed.
   - Mismatch: codes differ as strings OR hours differ numerically.
   - Output sorted ascending by date.

Expected output schema
----------------------
- date, employee_id
- oracle_leave_code, oracle_hours
- drmis_leave_code, drmis_hours
- add_to_edits (True: selected for the CATs edits table)

Public API
----------
- merge_drmis_oracle(drmis_records, oracle_records, allow_list=None) -> pd.DataFrame
- reconcile_drmis_oracle(drmis_records, oracle_records, allow_list=None) -> pd.DataFrame
- default_employee_id(drmis_records) -> str
"""


from __future__ import annotations

from typing import AbstractSet

import pandas as pd

from ..config import LEAVE_CODE_CONFIG
from ..core.normalizers import cell_text, normalize_employee_id, render_code


MERGED_COLUMNS = [
    "date",
    "employee_id",
    "oracle_leave_code",
    "oracle_hours",
    "drmis_leave_code",
    "drmis_hours",
]

MISMATCH_RECORD_COLUMNS = MERGED_COLUMNS + ["add_to_edits"]


def default_employee_id(drmis_records: pd.DataFrame) -> str:
    """First non-empty employee id in the DRMIS records ('' if none)."""
    if drmis_records is None or drmis_records.empty:
        return ""
    for value in drmis_records["employee_id"]:
        emp = normalize_employee_id(value)
        if emp:
            return emp
    return ""


def _drmis_display_code(code) -> str:
    text = cell_text(code)
    if text == "":
        return LEAVE_CODE_CONFIG.missing_code
    return render_code(text)


def merge_drmis_oracle(
        drmis_records: pd.DataFrame,
        oracle_records: pd.DataFrame,
        allow_list: AbstractSet[str] | None = None,
) -> pd.DataFrame:

    """

    Merge DRMIS and Oracle records into one row per day and employee.

    Args:
        drmis_records:
            Output of extract_drmis_records (employee_id, date, hours, leave_code).
        oracle_records:
            Output of extract_oracle_records (date, hours, leave_code).
        allow_list:
            Optional set of codes; when non-empty only rows whose DRMIS or
            Oracle code is listed are kept.

    Returns:
        DataFrame with MERGED_COLUMNS plus an `is_mismatch` flag, in merge
        order (DRMIS days first, then Oracle-only days).

    """

    default_emp = default_employee_id(drmis_records)

    merged: dict[tuple, dict] = {}
    # Oracle rows match on date only: first merged key per date
    first_key_by_date: dict = {}

    if drmis_records is not None and not drmis_records.empty:
        for rec in drmis_records.to_dict("records"):
            emp = normalize_employee_id(rec["employee_id"])
            key = (rec["date"], emp)
            if key in merged:
                continue    # first DRMIS record for the day wins
            first_key_by_date.setdefault(rec["date"], key)
            merged[key] = {
                "date": rec["date"],
                "employee_id": emp,
                "drmis_hours": rec["hours"],
                "drmis_leave_code": rec["leave_code"],
                "oracle_hours": 0.0,
                "oracle_leave_code": "",
            }

    if oracle_records is not None and not oracle_records.empty:
        for rec in oracle_records.to_dict("records"):
            found = first_key_by_date.get(rec["date"])
            if found is not None:
                merged[found]["oracle_hours"] = rec["hours"]
                merged[found]["oracle_leave_code"] = rec["leave_code"]
                continue
            first_key_by_date[rec["date"]] = (rec["date"], default_emp)
            merged[(rec["date"], default_emp)] = {
                "date": rec["date"],
                "employee_id": default_emp,
                "drmis_hours": 0.0,
                "drmis_leave_code": LEAVE_CODE_CONFIG.missing_code,
                "oracle_hours": rec["hours"],
                "oracle_leave_code": rec["leave_code"],
            }

    rows = []
    for entry in merged.values():
        rows.append(
            {
                "date": entry["date"],
                "employee_id": entry["employee_id"] or default_emp,
                "oracle_leave_code": cell_text(entry["oracle_leave_code"]),
                "oracle_hours": float(entry["oracle_hours"] or 0.0),
                "drmis_leave_code": _drmis_display_code(entry["drmis_leave_code"]),
                "drmis_hours": float(entry["drmis_hours"] or 0.0),
            }
        )
    df = pd.DataFrame(rows, columns=MERGED_COLUMNS)

    if allow_list:
        in_scope = df["drmis_leave_code"].isin(allow_list) | df["oracle_leave_code"].isin(allow_list)
        df = df[in_scope].copy()

    # Codes compare as strings, hours numerically
    df["is_mismatch"] = (
        df["drmis_leave_code"].astype(str).ne(df["oracle_leave_code"].astype(str))
        | df["drmis_hours"].astype(float).ne(df["oracle_hours"].astype(float))
    )
    return df.reset_index(drop=True)


def reconcile_drmis_oracle(
        drmis_records: pd.DataFrame,
        oracle_records: pd.DataFrame,
        allow_list: AbstractSet[str] | None = None,
) -> pd.DataFrame:

    """

    Return the days on which DRMIS and Oracle disagree, sorted by date.

    Every returned row is flagged add_to_edits=True so the caller can
    deselect rows before generating the CATs edits.

    """

    merged = merge_drmis_oracle(drmis_records, oracle_records, allow_list=allow_list)
    mismatches = merged[merged["is_mismatch"]].drop(columns=["is_mismatch"]).copy()
    mismatches["add_to_edits"] = True

    if mismatches.empty:
        return pd.DataFrame(columns=MISMATCH_RECORD_COLUMNS)

    # Stable sort keeps merge order within a day
    mismatches = mismatches.sort_values("date", kind="mergesort")
    return mismatches.reset_index(drop=True)[MISMATCH_RECORD_COLUMNS]
