# Docstring for leave_reconcile/engines/cats_edits module
"""
cats_edits.py

Turn reconciliation mismatches into CATs correction entries.

CATs is the DRMIS time-entry screen. For every mismatching day this module
produces the entry a clerk has to key into CATs so that DRMIS agrees with
Oracle, grouped with any supplementary work entries and a running total.

Per mismatch
------------
1) Discrepancy reason
   - "Code Mismatch" when the codes differ as strings, "Hours Mismatch" when
     the hours differ numerically; joined with ", ".

2) Target code and hours
   - Oracle side empty (code blank / '0' AND 0 hours): the DRMIS code (if
     not '0') with 0 hours, i.e. remove the leave in DRMIS.
   - Otherwise: the Oracle code if not '0', else the DRMIS code if not '0',
     else blank; hours = Oracle hours.
   - Codes are rendered without leading zeros.

3) Originals and the replaced flag
   - original_drmis_code / original_drmis_hours come from the DRMIS side
     before resolution.
   - replaced is True only when both codes are present, neither is '0', and
     they differ (the Oracle leave code stands in for the DRMIS one).

Grouping
--------
Each mismatch becomes a CorrectionGroup: one data row, zero or more
supplementary (editable) rows, and one total row. The total is a fold over
the data row and the supplementary rows; the data row is never mutated by
adding supplementary entries.

Public API
----------
- CorrectionEntry, TotalRow, CorrectionGroup
- discrepancy_reason(row) -> str
- build_data_entry(row) -> CorrectionEntry
- generate_correction_groups(mismatches) -> list[CorrectionGroup]
- flatten_groups(groups) -> Iterator[CorrectionEntry | TotalRow]
"""


from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterator, Mapping

import pandas as pd

from ..config import (
    LEAVE_CODE_CONFIG,
    RECONCILE_CONFIG,
    ROW_TYPE_DATA,
    ROW_TYPE_EDITABLE,
    ROW_TYPE_TOTAL,
)
from ..core.normalizers import cell_text, format_display_date, render_code


TOTAL_UNDER = "under"
TOTAL_EQUALS_EIGHT = "equals-eight"
TOTAL_OVER_EIGHT = "over-eight"

REQUIRED_MISMATCH_COLUMNS = [
    "date",
    "employee_id",
    "oracle_leave_code",
    "oracle_hours",
    "drmis_leave_code",
    "drmis_hours",
]


@dataclass(frozen=True)
class CorrectionEntry:
    """One row of the CATs edits table (a data row or a supplementary row)."""

    employee_id: str
    display_date: str
    date: date | None
    work_order: str = ""
    act_code: str = ""
    target_code: str = ""
    hours: float | None = 0.0
    discrepancy_reason: str = ""
    original_drmis_code: str = ""
    original_drmis_hours: float = 0.0
    replaced: bool = False
    row_type: str = ROW_TYPE_DATA


@dataclass(frozen=True)
class TotalRow:
    """Closing row of a group: the label plus the Oracle hours it was seeded with."""

    label: str = RECONCILE_CONFIG.total_row_label
    seed_hours: float = 0.0
    row_type: str = ROW_TYPE_TOTAL


@dataclass
class CorrectionGroup:
    """A data row, its supplementary rows and their total."""

    group_id: int
    data_row: CorrectionEntry
    total_row: TotalRow
    supplementary: list[CorrectionEntry] = field(default_factory=list)

    @property
    def entries(self) -> list[CorrectionEntry]:
        return [self.data_row] + self.supplementary

    @property
    def supplementary_hours(self) -> float:
        return sum(e.hours or 0.0 for e in self.supplementary)

    @property
    def total_hours(self) -> float:
        total = sum(e.hours or 0.0 for e in self.entries)
        return round(total, RECONCILE_CONFIG.hours_precision)

    @property
    def total_status(self) -> str:
        total = self.total_hours
        if total == RECONCILE_CONFIG.regular_day_hours:
            return TOTAL_EQUALS_EIGHT
        if total > RECONCILE_CONFIG.regular_day_hours:
            return TOTAL_OVER_EIGHT
        return TOTAL_UNDER

    def add_supplementary(
        self,
        work_order: str = "",
        act_code: str = "",
        target_code: str = "",
        hours: float | None = None,
    ) -> CorrectionEntry:
        """Append an editable row for the same employee and day."""
        entry = CorrectionEntry(
            employee_id=self.data_row.employee_id,
            display_date=self.data_row.display_date,
            date=self.data_row.date,
            work_order=work_order,
            act_code=act_code,
            target_code=target_code,
            hours=hours,
            row_type=ROW_TYPE_EDITABLE,
        )
        self.supplementary.append(entry)
        return entry

    def incomplete_entries(self) -> list[CorrectionEntry]:
        """Supplementary rows that still lack an AA code or hours."""
        return [e for e in self.supplementary if e.target_code == "" or e.hours is None]


def _is_missing_code(code: str) -> bool:
    return code == "" or code == LEAVE_CODE_CONFIG.missing_code


def discrepancy_reason(row: Mapping) -> str:
    """'Code Mismatch', 'Hours Mismatch', both joined with ', ', or ''."""
    cfg = RECONCILE_CONFIG
    reasons = []
    if cell_text(row["oracle_leave_code"]) != cell_text(row["drmis_leave_code"]):
        reasons.append(cfg.code_mismatch_label)
    if float(row["oracle_hours"] or 0.0) != float(row["drmis_hours"] or 0.0):
        reasons.append(cfg.hours_mismatch_label)
    return ", ".join(reasons)


def _target_code_and_hours(oracle_code: str, oracle_hours: float, drmis_code: str) -> tuple[str, float]:
    # Oracle has nothing for the day: keep the DRMIS code, zero its hours
    if _is_missing_code(oracle_code) and oracle_hours == 0:
        code = "" if _is_missing_code(drmis_code) else render_code(drmis_code)
        return code, 0.0

    if not _is_missing_code(oracle_code):
        code = render_code(oracle_code)
    elif not _is_missing_code(drmis_code):
        code = render_code(drmis_code)
    else:
        code = ""
    return code, oracle_hours


def build_data_entry(row: Mapping) -> CorrectionEntry:
    """Resolve one mismatch row into its CATs data row."""
    oracle_code = cell_text(row["oracle_leave_code"])
    oracle_hours = float(row["oracle_hours"] or 0.0)
    drmis_code = cell_text(row["drmis_leave_code"])

    target_code, target_hours = _target_code_and_hours(oracle_code, oracle_hours, drmis_code)
    replaced = (
        not _is_missing_code(oracle_code)
        and not _is_missing_code(drmis_code)
        and oracle_code != drmis_code
    )

    day = row["date"]
    return CorrectionEntry(
        employee_id=cell_text(row["employee_id"]),
        display_date=format_display_date(day),
        date=day,
        target_code=target_code,
        hours=target_hours,
        discrepancy_reason=discrepancy_reason(row),
        original_drmis_code=drmis_code,
        original_drmis_hours=float(row["drmis_hours"] or 0.0),
        replaced=replaced,
        row_type=ROW_TYPE_DATA,
    )


def generate_correction_groups(mismatches: pd.DataFrame) -> list[CorrectionGroup]:

    """

    Build one CorrectionGroup per mismatch, in mismatch order.

    Rows whose add_to_edits flag is False are skipped, so callers can
    deselect mismatches before generating the edits.

    Raises:
        ValueError: if the mismatch frame lacks a required column.

    """

    missing = [c for c in REQUIRED_MISMATCH_COLUMNS if c not in mismatches.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")

    groups: list[CorrectionGroup] = []
    for row in mismatches.to_dict("records"):
        if not row.get("add_to_edits", True):
            continue
        groups.append(
            CorrectionGroup(
                group_id=len(groups),
                data_row=build_data_entry(row),
                total_row=TotalRow(seed_hours=float(row["oracle_hours"] or 0.0)),
            )
        )
    return groups


def flatten_groups(groups: list[CorrectionGroup]) -> Iterator[CorrectionEntry | TotalRow]:
    """Data row, supplementary rows, then the total row, group by group."""
    for group in groups:
        yield group.data_row
        yield from group.supplementary
        yield group.total_row
