"""
business_calendar.py

Working-day checks used when a multi-day Oracle leave entry is spread across
calendar days.

The holiday table is a fixed, single-year list (see
`config.BUSINESS_CALENDAR_CONFIG`). Callers that need another year pass their
own `holidays` collection.

Public API
----------
- is_business_day(value, holidays=None) -> bool
- next_business_day(value, holidays=None) -> date
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Collection

from ..config import BUSINESS_CALENDAR_CONFIG


def is_business_day(value: date | None, holidays: Collection[date] | None = None) -> bool:
    """False on weekends and listed holidays, True otherwise."""
    if value is None:
        return False
    cfg = BUSINESS_CALENDAR_CONFIG
    if holidays is None:
        holidays = cfg.holidays
    if value in holidays:
        return False
    return value.isoweekday() not in cfg.weekend_days


def next_business_day(value: date, holidays: Collection[date] | None = None) -> date:
    """Return `value` if it is a business day, otherwise the next one."""
    current = value
    while not is_business_day(current, holidays):
        current = current + timedelta(days=1)
    return current
