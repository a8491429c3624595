from datetime import date

import pandas as pd

from leave_reconcile.cleaning.clean_drmis import DRMIS_RECORD_COLUMNS
from leave_reconcile.cleaning.clean_oracle import ORACLE_RECORD_COLUMNS
from leave_reconcile.engines.reconcile_leave import (
    MISMATCH_RECORD_COLUMNS,
    default_employee_id,
    merge_drmis_oracle,
    reconcile_drmis_oracle,
)


def _drmis(rows: list[tuple]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"employee_id": e, "date": d, "hours": h, "hours_status": "valid", "leave_code": c} for e, d, h, c in rows],
        columns=DRMIS_RECORD_COLUMNS,
    )


def _oracle(rows: list[tuple]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"date": d, "hours": h, "hours_status": "valid", "leave_code": c} for d, h, c in rows],
        columns=ORACLE_RECORD_COLUMNS,
    )


D1 = date(2025, 4, 28)
D2 = date(2025, 4, 29)
D3 = date(2025, 4, 30)


def test_matching_day_is_not_a_mismatch() -> None:
    merged = merge_drmis_oracle(_drmis([("12345", D1, 8.0, "1110")]), _oracle([(D1, 8.0, "1110")]))

    assert merged["is_mismatch"].tolist() == [False]


def test_changed_hours_or_code_is_a_mismatch() -> None:
    hours = reconcile_drmis_oracle(_drmis([("12345", D1, 8.0, "1110")]), _oracle([(D1, 7.0, "1110")]))
    code = reconcile_drmis_oracle(_drmis([("12345", D1, 8.0, "1110")]), _oracle([(D1, 8.0, "1120")]))

    assert len(hours) == 1
    assert len(code) == 1
    assert code.loc[0, "oracle_leave_code"] == "1120"
    assert code.loc[0, "drmis_leave_code"] == "1110"


def test_drmis_only_day_has_empty_oracle_side() -> None:
    result = reconcile_drmis_oracle(_drmis([("12345", D1, 4.25, "1110")]), _oracle([]))

    row = result.iloc[0]
    assert row["employee_id"] == "12345"
    assert row["oracle_leave_code"] == ""
    assert row["oracle_hours"] == 0.0
    assert row["drmis_hours"] == 4.25
    assert bool(row["add_to_edits"]) is True


def test_oracle_only_day_uses_default_employee() -> None:
    drmis = _drmis([("", D1, 8.0, "1110"), ("12345", D2, 8.0, "1110")])
    oracle = _oracle([(D1, 8.0, "1110"), (D2, 8.0, "1110"), (D3, 7.5, "1120")])

    result = reconcile_drmis_oracle(drmis, oracle)

    assert default_employee_id(drmis) == "12345"
    assert len(result) == 1
    row = result.iloc[0]
    assert row["date"] == D3
    assert row["employee_id"] == "12345"
    assert row["drmis_leave_code"] == "0"
    assert row["drmis_hours"] == 0.0


def test_first_drmis_record_per_day_wins() -> None:
    drmis = _drmis([("12345", D1, 8.0, "1110"), ("12345", D1, 2.0, "1120")])

    merged = merge_drmis_oracle(drmis, _oracle([(D1, 8.0, "1110")]))

    assert len(merged) == 1
    assert merged.loc[0, "drmis_hours"] == 8.0
    assert bool(merged.loc[0, "is_mismatch"]) is False


def test_oracle_attaches_to_first_row_of_the_day_regardless_of_employee() -> None:
    drmis = _drmis([("11111", D1, 8.0, "1110"), ("22222", D1, 8.0, "1110")])

    merged = merge_drmis_oracle(drmis, _oracle([(D1, 8.0, "1110")]))

    assert merged["employee_id"].tolist() == ["11111", "22222"]
    assert merged["oracle_hours"].tolist() == [8.0, 0.0]


def test_drmis_codes_render_without_leading_zeros() -> None:
    merged = merge_drmis_oracle(_drmis([("12345", D1, 8.0, "01110")]), _oracle([(D1, 8.0, "1110")]))

    assert merged.loc[0, "drmis_leave_code"] == "1110"
    assert bool(merged.loc[0, "is_mismatch"]) is False


def test_allow_list_keeps_rows_with_either_code_listed() -> None:
    drmis = _drmis([("12345", D1, 8.0, "1110"), ("12345", D2, 8.0, "1500")])
    oracle = _oracle([(D1, 4.0, "1110"), (D2, 4.0, "1500"), (D3, 4.0, "1120")])

    result = reconcile_drmis_oracle(drmis, oracle, allow_list=frozenset({"1110", "1120"}))

    assert result["date"].tolist() == [D1, D3]


def test_output_sorted_by_date_with_expected_columns() -> None:
    drmis = _drmis([("12345", D3, 8.0, "1110"), ("12345", D1, 8.0, "1110")])

    result = reconcile_drmis_oracle(drmis, _oracle([(D2, 8.0, "1120")]))

    assert list(result.columns) == MISMATCH_RECORD_COLUMNS
    assert result["date"].tolist() == [D1, D2, D3]


def test_no_inputs_yield_empty_result() -> None:
    result = reconcile_drmis_oracle(_drmis([]), _oracle([]))

    assert result.empty is True
    assert list(result.columns) == MISMATCH_RECORD_COLUMNS


def test_repeated_oracle_day_updates_the_same_row() -> None:
    merged = merge_drmis_oracle(
        _drmis([("12345", D1, 8.0, "1110")]),
        _oracle([(D2, 4.0, "1110"), (D2, 7.5, "1120"), (D1, 8.0, "1110")]),
    )

    assert merged["date"].tolist() == [D1, D2]
    assert merged["employee_id"].tolist() == ["12345", "12345"]
    assert merged.loc[1, "oracle_hours"] == 7.5
    assert merged.loc[1, "oracle_leave_code"] == "1120"
    assert merged["is_mismatch"].tolist() == [False, True]
