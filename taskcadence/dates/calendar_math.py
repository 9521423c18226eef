"""Calendar-day helpers shared by the date value objects.

All values are naive datetimes interpreted as UTC.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Union

from dateutil.relativedelta import relativedelta

DateLike = Union[date, datetime]


class PeriodType(str, Enum):
    """Cadence of a recurrence period."""

    INTERVAL = "interval"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


def utcnow() -> datetime:
    """Current instant as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_day(value: DateLike) -> date:
    """Drop the time of day (and tz offset) from a date or datetime."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value.date()
    return value


def at_midnight(value: DateLike) -> datetime:
    return datetime.combine(to_day(value), time(0, 0))


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_months(day: date, months: int) -> date:
    """Add calendar months, clamping the day (Jan 31 + 1 month = Feb 28/29)."""
    return day + relativedelta(months=months)


def first_of_next_month(day: date) -> date:
    return add_months(day.replace(day=1), 1)


def days_between(start: DateLike, end: DateLike) -> int:
    """Whole calendar days from start to end (negative if end is earlier)."""
    return (to_day(end) - to_day(start)).days
