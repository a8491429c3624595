# Docstring for leave_reconcile/core/columns module
"""
columns.py

Required-column resolution for DRMIS and Oracle tables.

Headers differ between exports ('Pers.No.', 'Pers No', 'A/AType', 'A/A type
text', 'From Date', 'Hours Recorded', ...), so each required field is resolved
by a small table of matcher predicates evaluated in priority order against the
lower-cased, trimmed header text. The first matcher that hits any header wins.

When a required field cannot be resolved a MissingColumnsError is raised. It
lists the missing field labels and every available header so the caller can
ask the user for a manual mapping; `apply_column_mapping` then copies the
chosen columns under recognised headers and extraction is retried.

Public API
----------
- MissingColumnsError
- ColumnRule
- contains(*fragments, excluding=()) -> matcher
- equals(text) -> matcher
- resolve_columns(headers, rules, source, required=True) -> dict[str, str]
- apply_column_mapping(table, mapping, source) -> DetectedTable
- DRMIS_RULES / ORACLE_RULES / DETAIL_RULES
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, Sequence

from ..config import (
    DRMIS_OVERRIDE_HEADERS,
    ORACLE_OVERRIDE_HEADERS,
)
from .grid import DetectedTable


Matcher = Callable[[str], bool]


class MissingColumnsError(ValueError):
    """A required field could not be matched to any header."""

    def __init__(self, source: str, missing: Sequence[str], available: Sequence[str]):
        self.source = source
        self.missing = list(missing)
        self.available = list(available)
        super().__init__(
            f"{source} file is missing required columns: {', '.join(self.missing)}. "
            f"Available columns: {', '.join(self.available)}"
        )


@dataclass(frozen=True)
class ColumnRule:
    """A canonical field, its user-facing label and its matchers in priority order."""

    field: str
    label: str
    matchers: tuple[Matcher, ...]


def contains(*fragments: str, excluding: Iterable[str] = ()) -> Matcher:
    excluded = tuple(excluding)

    def _match(header: str) -> bool:
        return all(f in header for f in fragments) and not any(x in header for x in excluded)

    return _match


def equals(text: str) -> Matcher:
    def _match(header: str) -> bool:
        return header == text

    return _match


DRMIS_RULES = (
    ColumnRule("employee_id", "Pers No", (contains("pers", "no"),)),
    ColumnRule("date", "Date", (equals("date"),)),
    ColumnRule("hours", "Hours", (equals("hours"),)),
    ColumnRule("leave_code", "A/A Type", (contains("a/a", "type", excluding=("text",)),)),
)

ORACLE_RULES = (
    ColumnRule("date", "From Date", (contains("from", "date"), equals("date"))),
    ColumnRule("hours", "Hours Recorded", (contains("hours", "recorded"), equals("hours"))),
    ColumnRule("leave_code", "Leave Code", (contains("leave", "code"),)),
)

# Detail lookup columns are best-effort: a missing one just leaves the field blank
DETAIL_RULES = (
    ColumnRule("employee_id", "Pers No", (contains("pers", "no"), equals("pers.no"), equals("pers"))),
    ColumnRule("date", "Date", (equals("date"), contains("date"))),
    ColumnRule("work_order", "Rec. Order", (contains("rec", "order"),)),
    ColumnRule("activity", "Act", (contains("act"),)),
    ColumnRule("leave_code", "A/A Type", (contains("a/a", "type"), equals("a/atype"))),
    ColumnRule("hours", "Hours", (equals("hours"),)),
)


def _find_header(headers: Sequence[str], matchers: Sequence[Matcher]) -> str | None:
    lowered = [(h, str(h).strip().lower()) for h in headers]
    for matcher in matchers:
        for original, low in lowered:
            if matcher(low):
                return original
    return None


def resolve_columns(
    headers: Sequence[str],
    rules: Sequence[ColumnRule],
    source: str,
    *,
    required: bool = True,
) -> dict[str, str]:
    """
    Map each rule's field to the header it matches.

    Raises:
        MissingColumnsError: if `required` and any rule matched nothing.
    """
    resolved: dict[str, str] = {}
    missing: list[str] = []
    for rule in rules:
        header = _find_header(headers, rule.matchers)
        if header is None:
            missing.append(rule.label)
        else:
            resolved[rule.field] = header
    if missing and required:
        raise MissingColumnsError(source, missing, headers)
    return resolved


def apply_column_mapping(
    table: DetectedTable,
    mapping: Mapping[str, str] | None,
    source: str,
) -> DetectedTable:
    """
    Re-key records using a user-supplied {required field label: source header}.

    Each mapped column is copied under a header the automatic detection
    recognises. Every original column is kept and the canonical headers go
    first, so the user's choices win resolution while the auto-detected
    columns still cover the fields the user left unmapped.
    """
    if not mapping:
        return table

    canonical = DRMIS_OVERRIDE_HEADERS if source.upper() == "DRMIS" else ORACLE_OVERRIDE_HEADERS

    unknown_fields = [name for name in mapping if name not in canonical]
    if unknown_fields:
        raise ValueError(
            f"{source}: unknown required fields in column mapping: {unknown_fields}. "
            f"Expected any of: {list(canonical)}"
        )
    unknown_headers = [h for h in mapping.values() if h not in table.headers]
    if unknown_headers:
        raise ValueError(
            f"{source}: column mapping refers to headers not in the file: {unknown_headers}. "
            f"Present columns: {table.headers}"
        )

    renames = [(source_header, canonical[name]) for name, source_header in mapping.items()]
    targets = [new for _, new in renames]
    headers = targets + [h for h in table.headers if h not in targets]

    rows = []
    for row in table.rows:
        rekeyed = dict(row)
        rekeyed.update({new: row.get(old) for old, new in renames})
        rows.append(rekeyed)
    return DetectedTable(
        headers=headers,
        rows=rows,
        header_index=table.header_index,
        column_span=table.column_span,
    )
