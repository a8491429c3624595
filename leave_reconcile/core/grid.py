# Docstring for leave_reconcile/core/grid module
"""
grid.py

Header-row detection and record building for raw spreadsheet grids.

DRMIS and Oracle exports rarely start with a clean header in row 1: they carry
report titles, run metadata, blank spacer rows, and empty leading or trailing
columns. This module finds the most plausible header row and the column span
that actually holds data, then turns every following non-blank row into a
record keyed by header text.

Core behavior
-------------
1) Header row
   - Score each of the first `scan_limit` rows:
       score = non-empty cell count + keyword_bonus (if any cell contains a
       header keyword such as 'pers', 'date', 'hours', 'a/atype', 'leave')
   - Highest score wins; ties go to the earliest row.

2) Column span
   - Count non-blank values per column below the header row.
   - threshold = max(min_column_count, ceil(column_density * data_row_count))
   - Trim leading, then trailing, columns below the threshold. If nothing
     qualifies the full header width is kept.

3) Records
   - Headers are trimmed strings ('' for empty cells).
   - Rows that are blank across the span are skipped.

Detection never raises: an empty grid yields an empty table.

Public API
----------
- detect_table(grid, scan_limit=None, cfg=GRID_DETECTION_CONFIG) -> DetectedTable
- DetectedTable.to_frame() -> pd.DataFrame
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Sequence

import pandas as pd

from ..config import GRID_DETECTION_CONFIG, GridDetectionConfig
from .normalizers import cell_text, is_blank


Grid = Sequence[Sequence[Any]]


@dataclass
class DetectedTable:
    """Header row plus records keyed by header text."""

    headers: list[str] = field(default_factory=list)
    rows: list[dict[str, Any]] = field(default_factory=list)
    header_index: int | None = None
    column_span: tuple[int, int] | None = None

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def to_frame(self) -> pd.DataFrame:
        """Records as a DataFrame (duplicate headers collapse, last one wins)."""
        columns = list(dict.fromkeys(self.headers))
        return pd.DataFrame(self.rows, columns=columns)


def _row(grid: Grid, index: int) -> Sequence[Any]:
    row = grid[index]
    return row if row is not None else []


def _score_row(row: Sequence[Any], cfg: GridDetectionConfig) -> int:
    texts = [cell_text(c).lower() for c in row]
    non_empty = sum(1 for t in texts if t != "")
    has_keyword = any(k in t for t in texts for k in cfg.header_keywords)
    return non_empty + (cfg.keyword_bonus if has_keyword else 0)


def find_header_row(grid: Grid, scan_limit: int | None = None, cfg: GridDetectionConfig = GRID_DETECTION_CONFIG) -> int:
    """Index of the best-scoring header candidate among the first rows."""
    limit = cfg.scan_limit if scan_limit is None else scan_limit
    best_idx = 0
    best_score = -1
    for i in range(min(limit, len(grid))):
        score = _score_row(_row(grid, i), cfg)
        # strict '>' keeps the earliest row on ties
        if score > best_score:
            best_score = score
            best_idx = i
    return best_idx


def find_column_span(grid: Grid, header_idx: int, cfg: GridDetectionConfig = GRID_DETECTION_CONFIG) -> tuple[int, int]:
    """(first, last) column indexes, inclusive, that carry enough data."""
    col_count = len(_row(grid, header_idx))
    data_rows = len(grid) - (header_idx + 1)

    non_blank = [0] * col_count
    for r in range(header_idx + 1, len(grid)):
        row = _row(grid, r)
        for c in range(min(col_count, len(row))):
            if not is_blank(row[c]):
                non_blank[c] += 1

    threshold = max(cfg.min_column_count, math.ceil(data_rows * cfg.column_density))

    first = 0
    while first < col_count and non_blank[first] < threshold:
        first += 1
    last = col_count - 1
    while last >= first and non_blank[last] < threshold:
        last -= 1
    if first > last:
        first, last = 0, col_count - 1
    return first, last


def detect_table(
    grid: Grid | None,
    scan_limit: int | None = None,
    cfg: GridDetectionConfig = GRID_DETECTION_CONFIG,
) -> DetectedTable:
    """Detect the header row and column span of a raw grid and build records."""
    if not grid:
        return DetectedTable()

    header_idx = find_header_row(grid, scan_limit, cfg)
    first, last = find_column_span(grid, header_idx, cfg)

    header_row = _row(grid, header_idx)
    headers = [cell_text(header_row[c]) for c in range(first, last + 1)]

    records: list[dict[str, Any]] = []
    for r in range(header_idx + 1, len(grid)):
        row = _row(grid, r)
        cells = [row[c] if c < len(row) else None for c in range(first, last + 1)]
        if all(is_blank(v) for v in cells):
            continue
        records.append(dict(zip(headers, cells)))

    return DetectedTable(
        headers=headers,
        rows=records,
        header_index=header_idx,
        column_span=(first, last),
    )
