from datetime import date

import pytest

from leave_reconcile.cleaning.clean_drmis import DetailEntry, build_detail_lookup, extract_drmis_records
from leave_reconcile.core.columns import MissingColumnsError
from leave_reconcile.core.grid import DetectedTable, detect_table


def _drmis_grid() -> list[list]:
    return [
        ["DRMIS Time Sheet Report", None, None, None, None, None],
        ["Pers.No.", "Date", "Rec. Order", "Act", "A/AType", "Hours"],
        [12345.0, "28.04.2025", "100200300400", "0010", None, 3.25],
        [12345.0, "28.04.2025", None, None, "1110", 4.25],
        [12345.0, "29.04.2025", None, None, "3001", 0.5],
        [12345.0, "not a date", None, None, "1110", 7.5],
        [12345.0, "30.04.2025", "100200300400", "0020", "-", 7.5],
    ]


def test_extract_drmis_records_normalizes_and_filters() -> None:
    records = extract_drmis_records(detect_table(_drmis_grid()))

    assert list(records.columns) == ["employee_id", "date", "hours", "hours_status", "leave_code"]
    # admin code 3001 and the unreadable date are dropped
    assert len(records) == 3
    assert records["employee_id"].tolist() == ["12345", "12345", "12345"]
    assert records["date"].tolist() == [date(2025, 4, 28), date(2025, 4, 28), date(2025, 4, 30)]
    assert records["leave_code"].tolist() == ["0", "1110", "0"]
    assert records["hours"].tolist() == [3.25, 4.25, 7.5]


def test_extract_drmis_records_allow_list() -> None:
    records = extract_drmis_records(detect_table(_drmis_grid()), allow_list=frozenset({"1110"}))

    assert records["leave_code"].tolist() == ["1110"]


def test_extract_drmis_records_allow_list_can_include_missing_code() -> None:
    records = extract_drmis_records(detect_table(_drmis_grid()), allow_list=frozenset({"0"}))

    assert records["leave_code"].tolist() == ["0", "0"]


def test_extract_drmis_records_empty_table() -> None:
    records = extract_drmis_records(DetectedTable())

    assert records.empty is True


def test_extract_drmis_records_missing_columns() -> None:
    table = DetectedTable(headers=["Employee", "Date", "Hours"], rows=[{"Employee": "1", "Date": "x", "Hours": 1}])

    with pytest.raises(MissingColumnsError) as excinfo:
        extract_drmis_records(table)

    assert excinfo.value.missing == ["Pers No", "A/A Type"]


def test_build_detail_lookup_uses_unfiltered_rows() -> None:
    lookup = build_detail_lookup(detect_table(_drmis_grid()))

    day = lookup[(date(2025, 4, 28), "12345")]
    assert day == [
        DetailEntry(work_order="100200300400", activity="0010", code="0", hours=3.25),
        DetailEntry(work_order="", activity="", code="1110", hours=4.25),
    ]
    # admin entries stay available in the lookup
    assert lookup[(date(2025, 4, 29), "12345")][0].code == "3001"
    assert lookup[(date(2025, 4, 30), "12345")][0].code == "0"


def test_build_detail_lookup_without_date_column_is_empty() -> None:
    table = DetectedTable(headers=["Hours"], rows=[{"Hours": 1}])

    assert build_detail_lookup(table) == {}
