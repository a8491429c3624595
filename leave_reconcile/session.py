# Docstring for leave_reconcile/session module
"""
session.py

Per-load reconciliation context.

Everything a reconciliation run depends on (the two raw grids, the optional
leave-code allow-list, the holiday table, and any manual column mappings) is
held on one ReconciliationSession built when the files are loaded. Every
stage reads its inputs from the session, so a run has no hidden state and a
re-run after a column remap is simply `session.with_mapping(...).run()`.

Pipeline
--------
    raw grids
      -> detect_table (+ apply_column_mapping)
      -> extract_drmis_records / extract_oracle_records
      -> reconcile_drmis_oracle
      -> generate_correction_groups
      -> prefill_groups (detail lookup from the unfiltered DRMIS grid)

Public API
----------
- ReconciliationSession
- ReconciliationResult
"""


from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import AbstractSet, Any, Collection, Mapping, Sequence

import pandas as pd

from .cleaning.clean_drmis import DetailLookup, build_detail_lookup, extract_drmis_records
from .cleaning.clean_oracle import extract_oracle_records
from .core.columns import apply_column_mapping
from .core.grid import DetectedTable, detect_table
from .engines.cats_edits import CorrectionGroup, generate_correction_groups
from .engines.prefill import prefill_groups
from .engines.reconcile_leave import reconcile_drmis_oracle


@dataclass
class ReconciliationResult:
    """Mismatch table, correction groups and the user-facing summary."""

    mismatches: pd.DataFrame
    groups: list[CorrectionGroup]
    prefilled: int = 0

    @property
    def mismatch_count(self) -> int:
        return len(self.mismatches)

    @property
    def message(self) -> str:
        return f"Found {self.mismatch_count} mismatches"


@dataclass(frozen=True)
class ReconciliationSession:

    """

    Inputs of one reconciliation run.

    drmis_grid / oracle_grid:
        Raw first-sheet grids (lists of rows of cell values).
    allow_list:
        Optional digit-string leave codes; None or empty disables filtering.
    holidays:
        Holiday table for the multi-day expansion (None -> configured default).
    drmis_mapping / oracle_mapping:
        Manual {required field label: source header} overrides.

    """

    drmis_grid: Sequence[Sequence[Any]] = field(default_factory=list)
    oracle_grid: Sequence[Sequence[Any]] = field(default_factory=list)
    allow_list: AbstractSet[str] | None = None
    holidays: Collection[date] | None = None
    drmis_mapping: Mapping[str, str] | None = None
    oracle_mapping: Mapping[str, str] | None = None

    def with_mapping(
        self,
        drmis: Mapping[str, str] | None = None,
        oracle: Mapping[str, str] | None = None,
    ) -> "ReconciliationSession":
        """Copy of the session with column overrides for the next run."""
        return replace(
            self,
            drmis_mapping=drmis if drmis is not None else self.drmis_mapping,
            oracle_mapping=oracle if oracle is not None else self.oracle_mapping,
        )

    def drmis_table(self) -> DetectedTable:
        table = detect_table(self.drmis_grid)
        return apply_column_mapping(table, self.drmis_mapping, "DRMIS")

    def oracle_table(self) -> DetectedTable:
        table = detect_table(self.oracle_grid)
        return apply_column_mapping(table, self.oracle_mapping, "ORACLE")

    def detail_lookup(self) -> DetailLookup:
        # Built from the unmapped grid so work-order columns are never dropped
        return build_detail_lookup(detect_table(self.drmis_grid))

    def extract(self) -> tuple[pd.DataFrame, pd.DataFrame]:
        """(drmis_records, oracle_records); raises MissingColumnsError."""
        drmis = extract_drmis_records(self.drmis_table(), allow_list=self.allow_list)
        oracle = extract_oracle_records(
            self.oracle_table(),
            allow_list=self.allow_list,
            holidays=self.holidays,
        )
        return drmis, oracle

    def reconcile(self) -> pd.DataFrame:
        drmis, oracle = self.extract()
        return reconcile_drmis_oracle(drmis, oracle, allow_list=self.allow_list)

    def build_edits(self, mismatches: pd.DataFrame, prefill: bool = True) -> tuple[list[CorrectionGroup], int]:
        """Correction groups for the selected mismatches, optionally prefilled."""
        groups = generate_correction_groups(mismatches)
        filled = prefill_groups(groups, self.detail_lookup()) if prefill else 0
        return groups, filled

    def run(self, prefill: bool = True) -> ReconciliationResult:
        mismatches = self.reconcile()
        groups, filled = self.build_edits(mismatches, prefill=prefill)
        return ReconciliationResult(mismatches=mismatches, groups=groups, prefilled=filled)
