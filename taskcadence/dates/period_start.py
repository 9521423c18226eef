"""PeriodStart value object: the first day of a recurrence period."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from taskcadence.dates.calendar_math import DateLike, first_of_next_month
from taskcadence.dates.deadline import Deadline


@dataclass(frozen=True, order=True)
class PeriodStart:
    """Anchor day of a period for period-based habits."""

    deadline: Deadline

    @classmethod
    def from_date(cls, value: DateLike) -> "PeriodStart":
        return cls(Deadline.from_date(value))

    @classmethod
    def from_components(cls, year: int, month: int, day: int) -> "PeriodStart":
        return cls(Deadline.from_components(year, month, day))

    @classmethod
    def today(cls, now: Optional[datetime] = None) -> "PeriodStart":
        return cls(Deadline.today(now))

    def next_period(self, interval_days: int) -> "PeriodStart":
        return PeriodStart(self.deadline.add_days(interval_days))

    def next_week(self) -> "PeriodStart":
        return PeriodStart(self.deadline.add_days(7))

    def next_month(self) -> "PeriodStart":
        # Monthly periods always restart on the 1st.
        return PeriodStart(Deadline(first_of_next_month(self.deadline.day)))

    def period_end(self, interval_days: int) -> Deadline:
        return self.deadline.add_days(interval_days)

    def week_end(self) -> Deadline:
        return self.deadline.add_days(7)

    def month_end(self) -> Deadline:
        """Exclusive end of a monthly period: the 1st of the following month."""
        return Deadline(first_of_next_month(self.deadline.day))

    def is_in_period(self, value: DateLike, interval_days: int) -> bool:
        day = Deadline.from_date(value)
        return not day.is_before(self.deadline) and day.is_before(self.period_end(interval_days))

    @property
    def day_of_week(self) -> int:
        return self.deadline.day_of_week

    @property
    def day_of_month(self) -> int:
        return self.deadline.day_of_month

    def to_datetime(self) -> datetime:
        return self.deadline.to_datetime()

    def isoformat(self) -> str:
        return self.deadline.isoformat()

    def __str__(self) -> str:
        return self.isoformat()
