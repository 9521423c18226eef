"""Recurrence date arithmetic.

Computes next occurrence dates and target/limit pairs from a recurrence rule
and a reference date. Pure: no I/O, no clock reads.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence

from taskcadence.dates import DateDomainService, Deadline, days_in_month
from taskcadence.dates.calendar_math import DateLike
from taskcadence.models.constants import (
    DAYS_PER_WEEK,
    DEFAULT_LIMIT_OFFSET_DAYS,
    DEFAULT_TARGET_OFFSET_DAYS,
    TARGET_DATE_RATIO,
)
from taskcadence.models.recurrence import DayOfWeek, RecurrencePattern


@dataclass(frozen=True)
class OccurrenceDates:
    """Soft target and hard limit for one occurrence (midnight UTC)."""

    target_date: datetime
    limit_date: datetime


def _weekday_indexes(days_of_week: Iterable[DayOfWeek]) -> List[int]:
    return sorted({DayOfWeek(d).weekday for d in days_of_week})


def _month_after(year: int, month: int, months: int = 1):
    index = (month - 1) + months
    return year + index // 12, index % 12 + 1


def _candidate(year: int, month: int, day: int):
    """The date, or None when ``day`` overflows the month."""
    try:
        return date(year, month, day)
    except ValueError:
        return None


class RecurrenceDateCalculator:
    """Date calculations for interval, weekday and day-of-month patterns."""

    def __init__(self, date_service: Optional[DateDomainService] = None):
        self.date_service = date_service or DateDomainService()

    def calculate_next_occurrence_date(self, last_date: DateLike, recurrence: RecurrencePattern) -> datetime:
        """Next occurrence strictly after ``last_date``.

        Precedence: interval, then days of week, then days of month, else the
        next calendar day. With an interval and ``max_occurrences > 1`` the
        interval is spread evenly over the period (floor division, at least
        one day).
        """
        last = self.date_service.to_deadline(last_date)

        if recurrence.interval:
            if recurrence.max_occurrences and recurrence.max_occurrences > 1:
                step = max(1, recurrence.interval // recurrence.max_occurrences)
            else:
                step = recurrence.interval
            return last.add_days(step).to_datetime()

        if recurrence.days_of_week:
            return self.get_next_day_of_week(last_date, recurrence.days_of_week)

        if recurrence.days_of_month:
            return self.get_next_day_of_month(last_date, recurrence.days_of_month)

        return last.add_days(1).to_datetime()

    def calculate_occurrence_dates(self, start_date: DateLike, recurrence: RecurrencePattern) -> OccurrenceDates:
        start = self.date_service.to_deadline(start_date)

        if recurrence.interval:
            target = start.add_days(int(recurrence.interval * TARGET_DATE_RATIO))
            limit = start.add_days(recurrence.interval)
            return OccurrenceDates(target.to_datetime(), limit.to_datetime())

        if recurrence.has_day_pattern:
            next_date = self.calculate_next_occurrence_date(start_date, recurrence)
            days_until_next = self.date_service.days_between(start, Deadline.from_date(next_date))
            target = start.add_days(max(1, int(days_until_next * TARGET_DATE_RATIO)))
            return OccurrenceDates(target.to_datetime(), next_date)

        return OccurrenceDates(
            start.add_days(DEFAULT_TARGET_OFFSET_DAYS).to_datetime(),
            start.add_days(DEFAULT_LIMIT_OFFSET_DAYS).to_datetime(),
        )

    # Weekday patterns

    def get_next_day_of_week(self, from_date: DateLike, days_of_week: Sequence[DayOfWeek]) -> datetime:
        """Earliest matching weekday strictly after ``from_date``."""
        return self._search_weekdays(from_date, days_of_week, inclusive=False)

    def get_first_day_of_week_in_period(self, period_start: DateLike, days_of_week: Sequence[DayOfWeek]) -> datetime:
        """Earliest matching weekday on or after ``period_start``."""
        return self._search_weekdays(period_start, days_of_week, inclusive=True)

    def _search_weekdays(self, from_date: DateLike, days_of_week, inclusive: bool) -> datetime:
        targets = _weekday_indexes(days_of_week)
        if not targets:
            raise ValueError("days_of_week must not be empty")
        start = self.date_service.to_deadline(from_date)
        current = start.day_of_week
        offsets = []
        for target in targets:
            offset = (target - current) % DAYS_PER_WEEK
            if offset == 0 and not inclusive:
                offset = DAYS_PER_WEEK
            offsets.append(offset)
        return start.add_days(min(offsets)).to_datetime()

    # Day-of-month patterns

    def get_next_day_of_month(self, from_date: DateLike, days_of_month: Sequence[int]) -> datetime:
        """Earliest matching day of month strictly after ``from_date``.

        Days that do not exist in a month (31 in April, 30 in February) are
        skipped rather than rolled into the following month.
        """
        return self._search_days_of_month(from_date, days_of_month, inclusive=False)

    def get_first_day_of_month_in_period(self, period_start: DateLike, days_of_month: Sequence[int]) -> datetime:
        """Earliest matching day of month on or after ``period_start``."""
        return self._search_days_of_month(period_start, days_of_month, inclusive=True)

    def _search_days_of_month(self, from_date: DateLike, days_of_month, inclusive: bool) -> datetime:
        days = sorted(set(days_of_month))
        if not days:
            raise ValueError("days_of_month must not be empty")
        start = self.date_service.to_deadline(from_date)
        year, month = start.year, start.month

        for day in days:
            if day > start.day_of_month or (inclusive and day == start.day_of_month):
                found = _candidate(year, month, day)
                if found is not None:
                    return Deadline(found).to_datetime()

        next_year, next_month = _month_after(year, month)
        for day in days:
            found = _candidate(next_year, next_month, day)
            if found is not None:
                return Deadline(found).to_datetime()

        # Third month: smallest pattern day, clamped so the search always ends.
        last_year, last_month = _month_after(year, month, 2)
        day = min(days[0], days_in_month(last_year, last_month))
        return Deadline(date(last_year, last_month, day)).to_datetime()
