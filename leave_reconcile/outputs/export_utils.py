# Docstring for leave_reconcile/outputs/export_utils module
"""
export_utils.py

Utilities for exporting reconciliation outputs to Excel and plain text.

Design goals
------------
- Low friction: one entrypoint for a plain sheet, one for the styled
  business-facing sheets.
- Safe output: ensure parent directories exist before writing files.
- Consistent engine: always use the openpyxl engine for .xlsx output.
- Paste-friendly: the CATs edits table can also be rendered as
  tab-separated text for the clipboard or an email body.

Styled sheets
-------------
- Title in row 1 (merged across the table, bold, size 14, centred), optional
  merged subtitle row.
- Header row filled light green (FFD4EDDA), bold, thin borders.
- Hours columns use the '0.00' number format.
- Total rows bold on grey (FFF0F0F0) with a thick dark-blue bottom border.
- Autofilter on the header row.

Public API
----------
- write_df_excel(df, output_path=None, *, out_dir=REPORTS_OUTPUTS_DIR,
  filename_prefix="export", sheet_name="data", index=False) -> Path
- write_styled_sheet(df, output_path, *, sheet_name, title, subtitle=None,
  subtitle_row=3, header_row=5, column_widths=None, hours_columns=(), total_rows=()) -> Path
- dated_filename(prefix, on=None) -> str
- corrections_to_text(corrections_df, *, employee_id=None, email=False) -> str
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Iterable, Sequence

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from ..config import CATS_EDITS_SUBTITLE, CATS_EDITS_TITLE, REPORTS_OUTPUTS_DIR


HEADER_FILL = "FFD4EDDA"
TOTAL_FILL = "FFF0F0F0"
TOTAL_BORDER_COLOR = "FF284162"
HOURS_FORMAT = "0.00"

EMAIL_GREETING = (
    "Good Day,\n\n"
    "I have just audited an employee's leave and found the following "
    "discrepancies that need to be updated in DRMIS.\n\n"
)
EMAIL_SIGNOFF = "\n\nThanks"

_THIN = Side(style="thin")
_THIN_BORDER = Border(top=_THIN, left=_THIN, bottom=_THIN, right=_THIN)


def _ensure_parent_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def dated_filename(prefix: str, on: date | None = None) -> str:
    """'<prefix>_YYYY-MM-DD.xlsx', e.g. CATs_Edits_2025-04-28.xlsx."""
    day = on or date.today()
    return f"{prefix}_{day.isoformat()}.xlsx"


def write_df_excel(
    df: pd.DataFrame,
    output_path: Path | str | None = None,
    *,
    out_dir: Path | str = REPORTS_OUTPUTS_DIR,
    filename_prefix: str = "export",
    sheet_name: str = "data",
    index: bool = False,
) -> Path:
    """
    Write a DataFrame to a single-sheet Excel file and return the output path.

    If output_path is None, a dated file is created under out_dir with the
    prefix filename_prefix.
    """
    if output_path is None:
        output_path = Path(out_dir) / dated_filename(filename_prefix)
    path = Path(output_path)
    _ensure_parent_dir(path)
    df.to_excel(path, engine="openpyxl", sheet_name=sheet_name, index=index)
    return path


def write_styled_sheet(
    df: pd.DataFrame,
    output_path: Path | str,
    *,
    sheet_name: str,
    title: str,
    subtitle: str | None = None,
    subtitle_row: int = 3,
    header_row: int = 5,
    column_widths: Sequence[float] | None = None,
    hours_columns: Iterable[str] = (),
    total_rows: Iterable[int] = (),
) -> Path:
    """
    Write `df` below a title block and style it for business users.

    Args:
        header_row:
            1-based worksheet row of the column headers; the title is in row
            1 and the subtitle, when given, in `subtitle_row`.
        column_widths:
            Widths in Excel units, one per column; defaults to a width based
            on the header length.
        hours_columns:
            Columns formatted as '0.00'.
        total_rows:
            Positional indexes (0-based, into df) of rows styled as totals.
    """
    path = Path(output_path)
    _ensure_parent_dir(path)

    n_cols = max(len(df.columns), 1)
    last_col = get_column_letter(n_cols)
    hours_idx = {df.columns.get_loc(c) + 1 for c in hours_columns if c in df.columns}
    total_set = set(total_rows)

    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        # startrow is 0-based, header_row is the worksheet row number
        df.to_excel(writer, sheet_name=sheet_name, index=False, startrow=header_row - 1)
        ws = writer.sheets[sheet_name]

        ws.merge_cells(f"A1:{last_col}1")
        ws["A1"] = title
        ws["A1"].font = Font(name="Calibri", size=14, bold=True)
        ws["A1"].alignment = Alignment(horizontal="center", vertical="center")
        ws.row_dimensions[1].height = 20

        if subtitle:
            ws.merge_cells(f"A{subtitle_row}:{last_col}{subtitle_row}")
            cell = ws[f"A{subtitle_row}"]
            cell.value = subtitle
            cell.font = Font(name="Calibri", size=11)
            cell.alignment = Alignment(horizontal="left", vertical="center")

        for col in range(1, n_cols + 1):
            cell = ws.cell(row=header_row, column=col)
            cell.font = Font(name="Calibri", bold=True)
            cell.fill = PatternFill(fill_type="solid", fgColor=HEADER_FILL)
            cell.border = _THIN_BORDER
            cell.alignment = Alignment(horizontal="center", vertical="center")

        total_border = Border(
            top=_THIN,
            left=_THIN,
            right=_THIN,
            bottom=Side(style="thick", color=TOTAL_BORDER_COLOR),
        )
        for pos in range(len(df)):
            excel_row = header_row + 1 + pos
            is_total = pos in total_set
            for col in range(1, n_cols + 1):
                cell = ws.cell(row=excel_row, column=col)
                cell.border = total_border if is_total else _THIN_BORDER
                if col in hours_idx:
                    cell.number_format = HOURS_FORMAT
                    cell.alignment = Alignment(horizontal="right")
                if is_total:
                    cell.font = Font(name="Calibri", bold=True)
                    cell.fill = PatternFill(fill_type="solid", fgColor=TOTAL_FILL)

        widths = column_widths or [max(10, min(30, len(str(c)) + 6)) for c in df.columns]
        for col, width in enumerate(widths, start=1):
            ws.column_dimensions[get_column_letter(col)].width = width

        ws.auto_filter.ref = f"A{header_row}:{last_col}{header_row}"

    return path


def _text_cell(column: str, value) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    if column == "Hours" and not isinstance(value, str):
        return "0" if value == 0 else f"{float(value):.2f}"
    return str(value)


def corrections_to_text(
    corrections_df: pd.DataFrame,
    *,
    employee_id: str | None = None,
    email: bool = False,
) -> str:

    """

    Render the CATs edits table as tab-separated text.

    The clipboard form starts with the title and subtitle; the email form
    starts with a greeting naming the employee and ends with a sign-off.
    A 'Row Type' column, when present, is not rendered.

    """

    columns = [c for c in corrections_df.columns if c != "Row Type"]
    lines = ["\t".join(columns)]
    for row in corrections_df[columns].itertuples(index=False):
        lines.append("\t".join(_text_cell(c, v) for c, v in zip(columns, row)))
    table = "\n".join(lines)

    if email:
        if employee_id is None:
            employee_id = next((str(v) for v in corrections_df.get("Pers No", []) if str(v).strip()), "")
        return f"{EMAIL_GREETING}Employee Number: {employee_id}\n\n{table}{EMAIL_SIGNOFF}"

    return f"{CATS_EDITS_TITLE}\n\n{CATS_EDITS_SUBTITLE}\n\n{table}\n"
