"""DateDomainService: single entry point for period and day arithmetic."""

from __future__ import annotations

from typing import Optional

from taskcadence.dates.calendar_math import DateLike, PeriodType, days_between
from taskcadence.dates.deadline import Deadline
from taskcadence.dates.instants import EventTime
from taskcadence.dates.period_start import PeriodStart
from taskcadence.errors import RecurrenceConfigurationError


class DateDomainService:
    """Facade over the date value objects."""

    def to_deadline(self, value: DateLike) -> Deadline:
        return Deadline.from_date(value)

    def to_period_start(self, value: DateLike) -> PeriodStart:
        return PeriodStart.from_date(value)

    def add_days(self, deadline: Deadline, days: int) -> Deadline:
        return deadline.add_days(days)

    def add_months(self, deadline: Deadline, months: int) -> Deadline:
        return deadline.add_months(months)

    def days_between(self, start: Deadline, end: Deadline) -> int:
        return days_between(start.day, end.day)

    def calculate_next_period(
        self,
        current: PeriodStart,
        period_type: PeriodType,
        interval_days: Optional[int] = None,
    ) -> PeriodStart:
        """Start of the period that follows ``current``.

        Raises:
            RecurrenceConfigurationError: interval periods without ``interval_days``.
        """
        if period_type == PeriodType.INTERVAL:
            return current.next_period(self._require_interval(interval_days))
        if period_type == PeriodType.WEEKLY:
            return current.next_week()
        if period_type == PeriodType.MONTHLY:
            return current.next_month()
        raise RecurrenceConfigurationError(f"Unknown period type: {period_type!r}")

    def calculate_period_end(
        self,
        period_start: PeriodStart,
        period_type: PeriodType,
        interval_days: Optional[int] = None,
    ) -> Deadline:
        """Exclusive end day of the period starting at ``period_start``.

        Raises:
            RecurrenceConfigurationError: interval periods without ``interval_days``.
        """
        if period_type == PeriodType.INTERVAL:
            return period_start.period_end(self._require_interval(interval_days))
        if period_type == PeriodType.WEEKLY:
            return period_start.week_end()
        if period_type == PeriodType.MONTHLY:
            return period_start.month_end()
        raise RecurrenceConfigurationError(f"Unknown period type: {period_type!r}")

    def validate_event_time_range(self, start: EventTime, finish: EventTime) -> None:
        if not start.is_before(finish):
            raise ValueError("Event finish must be after its start")

    @staticmethod
    def _require_interval(interval_days: Optional[int]) -> int:
        if not interval_days:
            raise RecurrenceConfigurationError("Interval days required for interval period type")
        return interval_days
