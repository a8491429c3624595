from datetime import date

import pandas as pd
import pytest

from leave_reconcile.cleaning.clean_drmis import DetailEntry
from leave_reconcile.engines.cats_edits import generate_correction_groups
from leave_reconcile.engines.prefill import distribute_proportionally, prefill_group, prefill_groups


D1 = date(2025, 4, 28)
KEY = (D1, "12345")


def _group(oracle_code: str, oracle_hours: float, drmis_code: str, drmis_hours: float):
    mismatch = {
        "date": D1,
        "employee_id": "12345",
        "oracle_leave_code": oracle_code,
        "oracle_hours": oracle_hours,
        "drmis_leave_code": drmis_code,
        "drmis_hours": drmis_hours,
    }
    return generate_correction_groups(pd.DataFrame([mismatch]))[0]


def test_distribute_proportionally_floors_shares_to_cents() -> None:
    assert distribute_proportionally([3.0, 5.0], 4.0) == [1.5, 2.5]


def test_distribute_proportionally_remainder_goes_to_first() -> None:
    shares = distribute_proportionally([1.0, 1.0, 1.0], 1.0)

    assert shares == pytest.approx([0.34, 0.33, 0.33])
    assert sum(shares) == pytest.approx(1.0)


def test_distribute_proportionally_without_available_hours() -> None:
    assert distribute_proportionally([0.0, 0.0], 2.0) == [2.0, 0.0]
    assert distribute_proportionally([], 2.0) == []


def test_removed_leave_is_redistributed_to_work_orders() -> None:
    group = _group("", 0.0, "1110", 4.0)
    lookup = {
        KEY: [
            DetailEntry("WO-A", "0010", "0", 3.0),
            DetailEntry("WO-B", "0020", "0", 5.0),
            DetailEntry("", "", "1110", 4.0),
        ]
    }

    assert prefill_group(group, lookup) is True

    entry = group.supplementary[0]
    assert entry.work_order == "WO-A"
    assert entry.act_code == "0010"
    assert entry.target_code == "0"
    assert entry.hours == 4.5
    assert entry.row_type == "editable-row"
    assert group.data_row.hours == 0.0


def test_existing_supplementary_hours_are_consumed_first() -> None:
    group = _group("", 0.0, "1110", 4.0)
    lookup = {
        KEY: [
            DetailEntry("WO-A", "0010", "0", 3.0),
            DetailEntry("WO-B", "0020", "0", 5.0),
        ]
    }

    assert prefill_group(group, lookup) is True
    assert prefill_group(group, lookup) is True

    second = group.supplementary[1]
    assert second.work_order == "WO-B"
    assert second.hours == 7.5


def test_reduced_leave_is_taken_from_work_in_order() -> None:
    group = _group("1110", 4.0, "1110", 7.5)
    lookup = {
        KEY: [
            DetailEntry("WO-A", "0010", "0", 2.0),
            DetailEntry("WO-B", "0020", "0", 3.0),
            DetailEntry("", "", "1110", 7.5),
        ]
    }

    assert prefill_group(group, lookup) is True
    assert group.supplementary[0].work_order == "WO-B"
    assert group.supplementary[0].hours == 1.0


def test_replaced_leave_excludes_both_codes_and_keeps_work_hours() -> None:
    group = _group("1120", 7.5, "1110", 7.5)
    lookup = {
        KEY: [
            DetailEntry("", "", "1110", 7.5),
            DetailEntry("", "", "1120", 7.5),
            DetailEntry("WO-A", "0010", "0", 0.5),
        ]
    }

    assert group.data_row.replaced is True
    assert prefill_group(group, lookup) is True
    assert group.supplementary[0].work_order == "WO-A"
    assert group.supplementary[0].hours == 0.5


def test_prefill_fails_without_detail_entries() -> None:
    group = _group("", 0.0, "1110", 4.0)

    assert prefill_group(group, {}) is False
    assert prefill_group(group, {(D1, "99999"): [DetailEntry("WO-A", "0010", "0", 3.0)]}) is False
    assert group.supplementary == []


def test_prefill_fails_when_only_leave_entries_exist() -> None:
    group = _group("", 0.0, "1110", 4.0)

    assert prefill_group(group, {KEY: [DetailEntry("", "", "1110", 4.0)]}) is False
    assert group.supplementary == []


def test_prefill_fails_when_no_hours_remain() -> None:
    group = _group("1110", 8.0, "0", 0.0)
    lookup = {KEY: [DetailEntry("WO-A", "0010", "0", 7.5)]}

    assert prefill_group(group, lookup) is False
    assert group.supplementary == []


def test_prefill_groups_counts_filled_groups() -> None:
    groups = [_group("", 0.0, "1110", 4.0), _group("1110", 8.0, "0", 0.0)]
    lookup = {KEY: [DetailEntry("WO-A", "0010", "0", 3.0), DetailEntry("", "", "1110", 4.0)]}

    assert prefill_groups(groups, lookup) == 1
    assert len(groups[0].supplementary) == 1
    assert groups[1].supplementary == []
