#Docstring for leave_reconcile/config module
"""
config.py

Central configuration for the DRMIS vs Oracle leave reconciliation pipeline.

This module defines header detection thresholds, leave-code rules, the
business calendar, required-field labels, and the display/export layouts used
across the project.

It is intentionally the single source of truth for:
- Header detection over messy spreadsheet grids (scan limit, keyword bonus,
  column density threshold)
- Leave-code rules (administrative prefix, Oracle exclusion set)
- Multi-day leave expansion (hours per working day)
- Business calendar (weekend days and the fixed holiday table)
- Required-field labels and the canonical headers used by column overrides
- Output column orders for the mismatch table and the CATs edits table

Design goals
------------
- Consistency: every stage reads the same thresholds and labels.
- Maintainability: business rules are edited in one place.
- Safety: defaults reproduce the behaviour of the original leave tool.

Contents
--------
1) Paths and project defaults
2) Grid detection configuration (GRID_DETECTION_CONFIG)
3) Leave-code configuration (LEAVE_CODE_CONFIG)
4) Multi-day expansion configuration (EXPANSION_CONFIG)
5) Business calendar (BUSINESS_CALENDAR_CONFIG)
6) Reconciliation / edit generation (RECONCILE_CONFIG)
7) Required fields, override headers and output layouts

Usage
-----
All other modules import configuration from here. Example:

    from leave_reconcile.config import LEAVE_CODE_CONFIG, RECONCILE_CONFIG

Privacy note
------------
Time and leave exports identify employees by personnel number. Never commit
real exports to source control; the sample generator produces synthetic data.
"""


from dataclasses import dataclass, field #create simple classes for configuration
from datetime import date
from pathlib import Path #object-oriented filesystem paths instead of strings



# --- Base paths ----------------------------------------------------------------

# leave_reconcile/ -> project root
BASE_DIR = Path(__file__).resolve().parents[1]
#parents[0] = config.py directory = leave_reconcile/
#parents[1] = project root directory

DATA_DIR = BASE_DIR / "data"
SAMPLE_DIR = DATA_DIR / "sample"
RAW_DATA_DIR = DATA_DIR / "raw"

REPORTS_DIR = BASE_DIR / "reports"
REPORTS_FIGURES_DIR = REPORTS_DIR / "figures"
REPORTS_OUTPUTS_DIR = REPORTS_DIR / "outputs"

# The allow-list workbook the original tool fetched next to the app
ALLOW_LIST_FILENAME = "Leave_Codes - Actual Leave.xlsx"
ALLOW_LIST_PATH = SAMPLE_DIR / ALLOW_LIST_FILENAME



# --- Grid detection --------------------------------------------------------------

@dataclass(frozen=True)
class GridDetectionConfig:

    """

    Configuration for header-row detection over raw spreadsheet grids.

    scan_limit:
        Number of leading rows scored as header candidates.
    keyword_bonus:
        Score added to a row when any of its cells contains a header keyword.
    min_column_count:
        Lower bound on non-blank values a column needs below the header row.
    column_density:
        Share of data rows a column must fill to be kept (0.15 = 15%).

    The effective column threshold is:

        max(min_column_count, ceil(column_density * data_row_count))

    """

    scan_limit: int = 30
    keyword_bonus: int = 50
    min_column_count: int = 3
    column_density: float = 0.15
    header_keywords: tuple[str, ...] = (
        "pers",
        "pers.no",
        "pers no",
        "pers_no",
        "date",
        "hours",
        "a/atype",
        "aatype",
        "a a type",
        "a a",
        "leave",
        "leave code",
        "a/a type",
    )


GRID_DETECTION_CONFIG = GridDetectionConfig()



# --- Leave codes ---------------------------------------------------------------

@dataclass(frozen=True)
class LeaveCodeConfig:

    """

    Leave-code rules shared by both extractors.

    missing_code:
        Canonical value for an absent code (blank, whitespace, or dash).
    admin_prefix:
        DRMIS codes starting with this prefix are administrative and dropped.
    oracle_excluded_codes:
        Bridged Oracle codes that are never reconciled.
    oracle_bridge_prefix:
        Prefix added to 3-digit Oracle codes to reach the 4-digit DRMIS space
        (e.g. '110' -> '1110').

    """

    missing_code: str = "0"
    blank_tokens: tuple[str, ...] = ("", "-")
    admin_prefix: str = "30"
    oracle_excluded_codes: frozenset[str] = frozenset({"1200", "1260", "1261", "1660"})
    oracle_bridge_prefix: str = "1"


LEAVE_CODE_CONFIG = LeaveCodeConfig()



# --- Multi-day expansion ---------------------------------------------------------

@dataclass(frozen=True)
class ExpansionConfig:

    """

    Oracle entries above max_hours_per_day span several working days and are
    split into one record per business day, capped at max_hours_per_day.

    """

    max_hours_per_day: float = 8.0
    precision: int = 10   # decimal places kept while splitting (avoids float drift)


EXPANSION_CONFIG = ExpansionConfig()



# --- Business calendar -----------------------------------------------------------

# Canadian federal holidays for 2025, as shipped with the original leave tool.
# This is a fixed single-year table, not a holiday calculator.
HOLIDAYS_2025 = frozenset(
    {
        date(2025, 1, 1),    # New Year's Day
        date(2025, 4, 18),   # Good Friday
        date(2025, 5, 19),   # Victoria Day
        date(2025, 7, 1),    # Canada Day
        date(2025, 8, 4),    # Civic Holiday
        date(2025, 9, 1),    # Labour Day
        date(2025, 9, 30),   # National Day for Truth and Reconciliation
        date(2025, 10, 13),  # Thanksgiving
        date(2025, 11, 11),  # Remembrance Day
        date(2025, 12, 25),  # Christmas Day
        date(2025, 12, 26),  # Boxing Day
    }
)


@dataclass(frozen=True)
class BusinessCalendarConfig:

    """

    weekend_days:
        ISO weekday numbers (Monday=1 .. Sunday=7) that are never business days.
    holidays:
        Default holiday table. Callers may pass their own set instead.

    """

    weekend_days: frozenset[int] = frozenset({6, 7})
    holidays: frozenset[date] = field(default=HOLIDAYS_2025)


BUSINESS_CALENDAR_CONFIG = BusinessCalendarConfig()



# --- Reconciliation / edit generation ----------------------------------------

@dataclass(frozen=True)
class ReconcileConfig:

    """

    Labels and numeric rules used by the reconciler, the edit generator and
    the prefill engine.

    """

    code_mismatch_label: str = "Code Mismatch"
    hours_mismatch_label: str = "Hours Mismatch"
    total_row_label: str = "Total Hours"
    regular_day_hours: float = 8.0
    hours_precision: int = 2


RECONCILE_CONFIG = ReconcileConfig()


# Row types in the CATs edits table (names kept from the original UI classes)
ROW_TYPE_DATA = "data-row"
ROW_TYPE_EDITABLE = "editable-row"
ROW_TYPE_TOTAL = "total-row"



# --- Required fields and column overrides ------------------------------------

# Required-field labels are what a user sees when automatic detection fails.
DRMIS_REQUIRED_FIELDS = ("Pers No", "Date", "Hours", "A/A Type")
ORACLE_REQUIRED_FIELDS = ("From Date", "Hours Recorded", "Leave Code")

# When a user maps a required field to a source header, its values are copied
# under a header the first matcher of that field recognises.
DRMIS_OVERRIDE_HEADERS = {
    # Required field    # Canonical header
    "Pers No":          "Pers No",
    "Date":             "Date",
    "Hours":            "Hours",
    "A/A Type":         "A/AType",
}

ORACLE_OVERRIDE_HEADERS = {
    "From Date":        "From Date",
    "Hours Recorded":   "Hours Recorded",
    "Leave Code":       "Leave Code",
}



# --- Output layouts ----------------------------------------------------------

MISMATCH_COLUMNS = [
    "Date",
    "Pers No",
    "Oracle Leave Code",
    "Oracle Hours",
    "Drmis Leave Code",
    "Drmis Hours",
]

CATS_EDITS_COLUMNS = [
    "Pers No",
    "Date",
    "Work Order",
    "Act",
    "AA Code",
    "Hours",
    "Discrepancy Reason",
]

CATS_EDITS_TITLE = "Modifications to CATs Entries"
CATS_EDITS_SUBTITLE = "These are the changes that need to be made in CATs on DRMIS"
MISMATCH_TITLE = "Reconciliation Results"
