# Docstring for leave_reconcile/engines/prefill module
"""
prefill.py

Prefill of supplementary work entries for CATs correction groups.

When a leave entry is added, removed or replaced in DRMIS, the work hours
booked on the same day usually have to move as well. Using the unfiltered
DRMIS detail entries for the day, this engine proposes one supplementary
entry (work order, activity, code, hours) for a correction group.

Steps
-----
1) Candidates: the DRMIS detail entries for (date, employee_id), minus the
   entry carrying the group's leave code and, for replaced leave, minus the
   entry carrying the original DRMIS code (digits-only comparison).
2) Hours already placed in supplementary rows of the group are consumed
   from the candidates first, in list order.
3a) Oracle removed the DRMIS leave (not replaced, original DRMIS hours > 0,
    resolved hours 0): the original DRMIS hours are handed back to the
    candidates proportionally to their available hours. Shares are floored
    to cents and the remainder, rounded to cents, goes to the first
    candidate when positive.
3b) Otherwise: the remaining leave hours (0 for replaced leave) are taken
    from the candidates in list order.
4) The first candidate left with hours > 0 becomes the supplementary entry.

A failed prefill is a normal outcome: the group is left unchanged and the
gap is completed by hand.

Public API
----------
- prefill_group(group, lookup) -> bool
- prefill_groups(groups, lookup) -> int
- distribute_proportionally(available, to_add) -> list[float]
"""


from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from ..cleaning.clean_drmis import DetailEntry, DetailLookup
from ..config import RECONCILE_CONFIG
from ..core.normalizers import digits_only
from .cats_edits import CorrectionGroup


@dataclass
class _Residual:
    work_order: str
    activity: str
    code: str
    hours: float


def _floor_cents(value: float) -> float:
    return math.floor(value * 100) / 100


def _round_cents(value: float) -> float:
    # Half-up, like the spreadsheet rounding clerks expect
    return math.floor(value * 100 + 0.5) / 100


def distribute_proportionally(available: list[float], to_add: float) -> list[float]:
    """
    Return the hours each candidate receives out of `to_add`.

    Shares follow the available hours, floored to cents; the rounding
    remainder goes to the first candidate. With no available hours the
    whole amount goes to the first candidate.
    """
    if not available:
        return []
    total = sum(available)
    if total <= 0:
        return [to_add] + [0.0] * (len(available) - 1)

    shares = [_floor_cents(a / total * to_add) for a in available]
    remainder = _round_cents(to_add - sum(shares))
    if remainder > 0:
        shares[0] += remainder
    return shares


def _consume(residuals: list[_Residual], amount: float) -> None:
    for r in residuals:
        if amount <= 0:
            break
        take = min(r.hours, amount)
        r.hours = max(0.0, r.hours - take)
        amount -= take


def _candidates(entries: Iterable[DetailEntry], group: CorrectionGroup) -> list[_Residual]:
    data = group.data_row
    excluded = {digits_only(data.target_code)}
    if data.replaced and data.original_drmis_code:
        excluded.add(digits_only(data.original_drmis_code))
    return [
        _Residual(e.work_order, e.activity, e.code, float(e.hours or 0.0))
        for e in entries
        if digits_only(e.code) not in excluded
    ]


def prefill_group(group: CorrectionGroup, lookup: DetailLookup) -> bool:

    """

    Try to add one supplementary work entry to a correction group.

    Args:
        group:
            Correction group whose data row describes the mismatch.
        lookup:
            DRMIS detail entries keyed by (date, employee_id).

    Returns:
        True when an entry was appended, False when no candidate had hours
        left (the group is then unchanged).

    """

    data = group.data_row
    if not lookup or data.date is None:
        return False

    residuals = _candidates(lookup.get((data.date, data.employee_id), []), group)
    if not residuals:
        return False

    consumed = group.supplementary_hours
    _consume(residuals, consumed)

    leave_hours = float(data.hours or 0.0)
    oracle_removed = (
        not data.replaced
        and data.original_drmis_hours > 0
        and leave_hours == 0
    )

    if oracle_removed:
        shares = distribute_proportionally([r.hours for r in residuals], data.original_drmis_hours)
        for r, share in zip(residuals, shares):
            r.hours += share
    else:
        remaining = 0.0 if data.replaced else max(0.0, leave_hours - consumed)
        _consume(residuals, remaining)

    pick = next((r for r in residuals if r.hours > 0), None)
    if pick is None:
        return False

    group.add_supplementary(
        work_order=pick.work_order,
        act_code=pick.activity,
        target_code=pick.code,
        hours=round(pick.hours, RECONCILE_CONFIG.hours_precision),
    )
    return True


def prefill_groups(groups: Iterable[CorrectionGroup], lookup: DetailLookup) -> int:
    """Prefill every group once; returns how many received an entry."""
    return sum(1 for group in groups if prefill_group(group, lookup))
