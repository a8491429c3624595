# Docstring for leave_reconcile/build_correction_file module
"""
build_correction_file.py

Generate the Excel deliverables of a DRMIS vs Oracle leave reconciliation.

This module converts engine outputs into business-facing tables and writes
them as styled workbooks:

- the mismatch table from `engines.reconcile_leave.reconcile_drmis_oracle`
  ("Reconciliation Results"), and
- the CATs edits table from `engines.cats_edits` / `engines.prefill`
  ("Modifications to CATs Entries"), the list of changes a clerk keys into
  CATs so that DRMIS agrees with Oracle.

Key design principles
---------------------
- CATs-centric output: column names and order follow the CATs screen
  (Pers No, Date, Work Order, Act, AA Code, Hours, Discrepancy Reason).
- Engine-agnostic: any frame with the canonical mismatch columns can be
  exported.
- Traceability: every correction group closes with a total row, and days
  whose total exceeds the regular 8 hours are reported with a warning.

Expected input schema (mismatches)
----------------------------------
- date, employee_id
- oracle_leave_code, oracle_hours
- drmis_leave_code, drmis_hours
- add_to_edits (optional; False rows are left out of the CATs edits)

Outputs
-------
- build_mismatch_dataframe(mismatches) -> pd.DataFrame
- build_correction_dataframe(groups) -> pd.DataFrame
- write_mismatch_file(mismatch_df, output_path=None) -> Path
- write_correction_file(corrections_df, output_path=None) -> Path
- warn_over_eight(groups) -> list[CorrectionGroup]

Usage (notebooks / scripts)
---------------------------
    from leave_reconcile.session import ReconciliationSession
    from leave_reconcile.load_data import load_grid
    from leave_reconcile.build_correction_file import (
        build_correction_dataframe, write_correction_file,
    )

    session = ReconciliationSession(
        drmis_grid=load_grid("data/raw/drmis.xlsx"),
        oracle_grid=load_grid("data/raw/oracle.xlsx"),
    )
    result = session.run()
    write_correction_file(build_correction_dataframe(result.groups))

Command line
------------
    leave-reconcile --drmis drmis.xlsx --oracle oracle.xlsx \\
        --oracle-map "Leave Code=Absence"

Privacy / compliance note
-------------------------
Leave exports identify employees by personnel number. Never commit real
exports or generated correction files to source control.
"""


from __future__ import annotations      # Type hints are stored as strings at import time

import argparse
import warnings
from datetime import datetime
from pathlib import Path
from typing import Optional

import pandas as pd

from .config import (
    CATS_EDITS_COLUMNS,
    CATS_EDITS_SUBTITLE,
    CATS_EDITS_TITLE,
    DRMIS_OVERRIDE_HEADERS,
    MISMATCH_COLUMNS,
    MISMATCH_TITLE,
    ORACLE_OVERRIDE_HEADERS,
    RECONCILE_CONFIG,
    REPORTS_OUTPUTS_DIR,
    ROW_TYPE_TOTAL,
)
from .core.columns import MissingColumnsError
from .core.normalizers import render_code
from .engines.cats_edits import TOTAL_OVER_EIGHT, CorrectionGroup, flatten_groups
from .outputs.export_utils import dated_filename, write_styled_sheet


CATS_COLUMN_WIDTHS = [12, 12, 12, 8, 10, 8, 30]

ROW_TYPE_COLUMN = "Row Type"



# --- Display helpers ----------------------------------------------------------

def _pers_no(value) -> object:
    # Personnel numbers are shown as numbers, like the CATs screen does
    text = "" if value is None else str(value).strip()
    return int(text) if text.isdigit() else text


def _aa_code(code: str) -> object:
    if code == "":
        return ""
    rendered = render_code(code)
    return int(rendered) if rendered.lstrip("-").isdigit() else rendered



# --- Core functions -----------------------------------------------------------

def build_mismatch_dataframe(mismatches: pd.DataFrame) -> pd.DataFrame:

    """

    Build the display table of reconciliation mismatches.

    Args:
        mismatches:
            DataFrame from reconcile_drmis_oracle().

    Returns:
        DataFrame with columns Date, Pers No, Oracle Leave Code, Oracle Hours,
        Drmis Leave Code, Drmis Hours, one row per mismatch, in input order.

    """

    if mismatches.empty:
        return pd.DataFrame(columns=MISMATCH_COLUMNS)

    rename_map = {
        "date": "Date",
        "employee_id": "Pers No",
        "oracle_leave_code": "Oracle Leave Code",
        "oracle_hours": "Oracle Hours",
        "drmis_leave_code": "Drmis Leave Code",
        "drmis_hours": "Drmis Hours",
    }
    out = mismatches.rename(columns=rename_map)[MISMATCH_COLUMNS].copy()
    out["Pers No"] = out["Pers No"].map(_pers_no)
    return out.reset_index(drop=True)



def build_correction_dataframe(groups: list[CorrectionGroup]) -> pd.DataFrame:

    """

    Flatten correction groups into the CATs edits table.

    Data rows carry Pers No and Date; supplementary rows only the work order,
    activity, code and hours; each group closes with a 'Total Hours' row
    whose hours are the group's folded total.

    Returns:
        DataFrame with CATS_EDITS_COLUMNS plus 'Row Type'.

    """

    out_cols = CATS_EDITS_COLUMNS + [ROW_TYPE_COLUMN]
    if not groups:
        return pd.DataFrame(columns=out_cols)

    rows = []
    for group in groups:
        for entry in flatten_groups([group]):
            if entry.row_type == ROW_TYPE_TOTAL:
                rows.append(
                    ["", "", "", "", entry.label, group.total_hours or "", "", ROW_TYPE_TOTAL]
                )
                continue
            is_data = entry is group.data_row
            rows.append(
                [
                    _pers_no(entry.employee_id) if is_data else "",
                    entry.display_date if is_data else "",
                    entry.work_order,
                    entry.act_code,
                    _aa_code(entry.target_code),
                    "" if entry.hours is None else entry.hours,
                    entry.discrepancy_reason,
                    entry.row_type,
                ]
            )

    return pd.DataFrame(rows, columns=out_cols)



def warn_over_eight(groups: list[CorrectionGroup]) -> list[CorrectionGroup]:
    """Warn about days whose corrected total exceeds the regular work day."""
    over = [g for g in groups if g.total_status == TOTAL_OVER_EIGHT]
    if over:
        days = ", ".join(g.data_row.display_date for g in over)
        warnings.warn(
            f"Employee regular work hours exceeded ({RECONCILE_CONFIG.regular_day_hours:g}h) on: {days}",
            stacklevel=2,
        )
    return over



# Write the Excel files
def write_correction_file(
        corrections_df: pd.DataFrame,
        output_path: Optional[Path | str] = None,
) -> Path:

    """

    Write the CATs edits table to a styled Excel file.

    Args:
        corrections_df:
            DataFrame from build_correction_dataframe().
        output_path:
            Optional explicit path. If None, reports/outputs/CATs_Edits_<date>.xlsx.

    Returns:
        Path to the written Excel file.

    """

    if output_path is None:
        output_path = REPORTS_OUTPUTS_DIR / dated_filename("CATs_Edits")

    total_rows = []
    if ROW_TYPE_COLUMN in corrections_df.columns:
        is_total = corrections_df[ROW_TYPE_COLUMN].eq(ROW_TYPE_TOTAL).to_numpy()
        total_rows = [i for i, flag in enumerate(is_total) if flag]

    sheet_df = corrections_df.drop(columns=[ROW_TYPE_COLUMN], errors="ignore")
    return write_styled_sheet(
        sheet_df,
        output_path,
        sheet_name="CATs Edits",
        title=CATS_EDITS_TITLE,
        subtitle=CATS_EDITS_SUBTITLE,
        subtitle_row=3,
        header_row=5,
        column_widths=CATS_COLUMN_WIDTHS,
        hours_columns=["Hours"],
        total_rows=total_rows,
    )



def write_mismatch_file(
        mismatch_df: pd.DataFrame,
        output_path: Optional[Path | str] = None,
) -> Path:

    """

    Write the mismatch table to a styled Excel file.

    Defaults to reports/outputs/Reconciliation_<date>.xlsx.

    """

    if output_path is None:
        output_path = REPORTS_OUTPUTS_DIR / dated_filename("Reconciliation")

    generated = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    return write_styled_sheet(
        mismatch_df,
        output_path,
        sheet_name="Reconciliation",
        title=MISMATCH_TITLE,
        subtitle=f"Generated: {generated}",
        subtitle_row=2,
        header_row=4,
        hours_columns=["Oracle Hours", "Drmis Hours"],
    )



# --- CLI entry point ------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Reconcile a DRMIS leave export against an Oracle leave export."
    )
    parser.add_argument("--drmis", type=Path, required=True, help="DRMIS time/leave export (.xlsx)")
    parser.add_argument("--oracle", type=Path, required=True, help="Oracle leave export (.xlsx)")
    parser.add_argument(
        "--allow-list",
        type=Path,
        default=None,
        help="Leave-code allow-list workbook (defaults to the configured location)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=REPORTS_OUTPUTS_DIR,
        help="Destination directory for the Excel outputs",
    )
    parser.add_argument(
        "--drmis-map",
        action="append",
        default=[],
        metavar="FIELD=HEADER",
        help=f"Map a required DRMIS field to a column header; fields: {', '.join(DRMIS_OVERRIDE_HEADERS)}",
    )
    parser.add_argument(
        "--oracle-map",
        action="append",
        default=[],
        metavar="FIELD=HEADER",
        help=f"Map a required Oracle field to a column header; fields: {', '.join(ORACLE_OVERRIDE_HEADERS)}",
    )
    parser.add_argument("--no-prefill", action="store_true", help="Skip prefill of work entries")
    parser.add_argument("--print-text", action="store_true", help="Also print the CATs edits as text")
    return parser


def _parse_mapping(
    pairs: list[str],
    fields,
    option: str,
    parser: argparse.ArgumentParser,
) -> Optional[dict[str, str]]:
    """Turn repeated FIELD=HEADER options into a column mapping (None when empty)."""
    mapping: dict[str, str] = {}
    for pair in pairs:
        field, sep, header = pair.partition("=")
        field, header = field.strip(), header.strip()
        if not sep or not field or not header:
            parser.error(f"{option} expects FIELD=HEADER, got {pair!r}")
        if field not in fields:
            parser.error(f"{option}: unknown field {field!r}; expected one of: {', '.join(fields)}")
        mapping[field] = header
    return mapping or None


def _missing_columns_message(err: MissingColumnsError) -> str:
    option = f"--{err.source.lower()}-map"
    available = ", ".join(str(h) for h in err.available) or "(none)"
    return (
        f"{err.source} file is missing required columns: {', '.join(err.missing)}\n"
        f"Available columns: {available}\n"
        f"Map each missing field with {option} FIELD=HEADER, "
        f"e.g. {option} \"{err.missing[0]}=<column header>\""
    )



def main(argv=None) -> None:

    """

    Run the full pipeline from the command line.

      - loads the DRMIS and Oracle workbooks and the optional allow-list,
      - reconciles them, applying any --drmis-map / --oracle-map overrides,
      - builds (and prefills) the CATs edits,
      - writes both styled Excel files.

    Required columns that cannot be detected end the run with a usage error
    listing the available headers, so it can be repeated with a mapping.

    """

    # Imported here so importing this module does not pull in the whole pipeline
    from .load_data import load_allow_list, load_grid
    from .outputs.export_utils import corrections_to_text
    from .session import ReconciliationSession

    parser = _build_parser()
    args = parser.parse_args(argv)
    drmis_mapping = _parse_mapping(args.drmis_map, DRMIS_OVERRIDE_HEADERS, "--drmis-map", parser)
    oracle_mapping = _parse_mapping(args.oracle_map, ORACLE_OVERRIDE_HEADERS, "--oracle-map", parser)

    session = ReconciliationSession(
        drmis_grid=load_grid(args.drmis, label="DRMIS"),
        oracle_grid=load_grid(args.oracle, label="Oracle"),
        allow_list=load_allow_list(args.allow_list),
        drmis_mapping=drmis_mapping,
        oracle_mapping=oracle_mapping,
    )
    try:
        result = session.run(prefill=not args.no_prefill)
    except MissingColumnsError as err:
        parser.error(_missing_columns_message(err))
    print(result.message)

    warn_over_eight(result.groups)

    mismatch_path = write_mismatch_file(
        build_mismatch_dataframe(result.mismatches),
        args.output_dir / dated_filename("Reconciliation"),
    )
    corrections_df = build_correction_dataframe(result.groups)
    corrections_path = write_correction_file(
        corrections_df,
        args.output_dir / dated_filename("CATs_Edits"),
    )

    print(f"Mismatches written to: {mismatch_path}")
    print(f"CATs edits written to: {corrections_path}")
    print(f"Prefilled work entries: {result.prefilled}")

    if args.print_text:
        print(corrections_to_text(corrections_df))



if __name__ == "__main__":
    main()
