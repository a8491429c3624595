# Docstring for leave_reconcile/load_data module
"""
load_data.py

Input loader utilities for DRMIS and Oracle Excel exports.

This module provides thin, predictable I/O functions that read workbooks into
raw grids (lists of rows of cell values) with no interpretation. Header
detection, column resolution and normalization happen later, in
`core.grid`, `core.columns` and the `cleaning` extractors, because neither
export has its header in a fixed row.

Design goals
------------
- Separation of concerns: keep file I/O distinct from detection and business logic.
- Repeatability: the same workbook always produces the same grid.
- Fidelity: read with header=None so title rows, blank spacer rows and
  leading empty columns reach the grid detector untouched.

Inputs
------
- DRMIS time/leave export (.xlsx), first sheet.
- Oracle leave export (.xlsx), first sheet.
- Optional leave-code allow-list workbook ('Leave_Codes - Actual Leave.xlsx').

Public API
----------
- load_grid(path, sheet_name=0) -> list[list]
- load_allow_list(path=None) -> frozenset[str] | None

Privacy / compliance note
-------------------------
Never commit real exports to source control. Repository sample files must be
synthetic. Production runs should read files from secure locations.
"""


import re
import warnings
from pathlib import Path
from typing import Any, List, Optional   # For type hinting optional parameters

import pandas as pd   # The main data manipulation library for data tables

# Relative imports from the config module in the same package
from .config import ALLOW_LIST_PATH
from .core.normalizers import cell_text, digits_only


# Matches 'A/AType', 'AAType', 'A/A Type' once whitespace is removed
_ALLOW_LIST_HEADER_RE = re.compile(r"a/?a?type", re.IGNORECASE)



def _resolve_path(path: Optional[Path], label: str) -> Path:
    if path is None or str(path).strip() == "":
        raise ValueError(f"No path provided for the {label} workbook.")
    path = Path(path)     # Ensure path is a Path object
    if not path.exists():
        raise FileNotFoundError(f"{label} Excel file not found at: {path}")
    return path



def load_grid(
        path: Optional[Path],
        sheet_name: Any = 0,     # Sheet name or index, default first sheet
        label: str = "Input",    # Used in error messages only
) -> List[List[Any]]:

    """

    Load one sheet of an Excel workbook as a raw grid.

    Args:
        path:
            Path to the .xlsx file.
        sheet_name:
            Sheet name or index to read (defaults to the first sheet).
        label:
            Name of the source for error messages (e.g. 'DRMIS', 'Oracle').

    Returns:
        List of rows; each row is a list of cell values with blanks as None.

    Raises:
        ValueError: if no path is given.
        FileNotFoundError: if the file does not exist.

    """

    path = _resolve_path(path, label)

    # header=None -> row 0 of the sheet is data, not column names
    df = pd.read_excel(path, sheet_name=sheet_name, header=None, engine="openpyxl")

    # NaN -> None so downstream blank checks see plain Python values
    df = df.astype(object).where(df.notna(), None)
    return df.values.tolist()



def load_allow_list(path: Optional[Path] = None) -> Optional[frozenset]:

    """

    Load the leave-code allow-list.

    The code column is the first header matching an A/A type variant
    ('A/AType', 'AAType', 'A/A Type'); without one the first column is used.
    Values are reduced to their digits and blanks are skipped.

    Args:
        path:
            Allow-list workbook; defaults to config.ALLOW_LIST_PATH.

    Returns:
        frozenset of digit-string codes, or None when the workbook is absent
        or yields no codes (the allow-list is then inactive).

    """

    path = Path(path) if path is not None else ALLOW_LIST_PATH
    if not path.exists():
        warnings.warn(f"Leave-code allow-list not found at {path}; filtering disabled.", stacklevel=2)
        return None

    df = pd.read_excel(path, sheet_name=0, engine="openpyxl")
    if df.empty or len(df.columns) == 0:
        warnings.warn(f"Leave-code allow-list {path} is empty; filtering disabled.", stacklevel=2)
        return None

    column = next(
        (c for c in df.columns if _ALLOW_LIST_HEADER_RE.search(re.sub(r"\s+", "", str(c)))),
        df.columns[0],
    )

    codes = set()
    for value in df[column]:
        if cell_text(value) == "":
            continue
        code = digits_only(value)
        if code:
            codes.add(code)

    if not codes:
        warnings.warn(f"Leave-code allow-list {path} has no codes; filtering disabled.", stacklevel=2)
        return None
    return frozenset(codes)
