"""Deadline value object: a calendar day where the time of day does not matter."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from taskcadence.dates.calendar_math import (
    DateLike,
    add_months,
    at_midnight,
    days_between,
    to_day,
    utcnow,
)


@dataclass(frozen=True, order=True)
class Deadline:
    """A UTC calendar day.

    Deadlines compare by day only, so two datetimes on the same UTC day
    produce equal deadlines.
    """

    day: date

    @classmethod
    def from_date(cls, value: DateLike) -> "Deadline":
        return cls(to_day(value))

    @classmethod
    def from_iso(cls, value: str) -> "Deadline":
        return cls.from_date(datetime.fromisoformat(value))

    @classmethod
    def from_components(cls, year: int, month: int, day: int) -> "Deadline":
        return cls(date(year, month, day))

    @classmethod
    def today(cls, now: Optional[datetime] = None) -> "Deadline":
        return cls.from_date(now or utcnow())

    @classmethod
    def tomorrow(cls, now: Optional[datetime] = None) -> "Deadline":
        return cls.today(now).add_days(1)

    @classmethod
    def days_from_now(cls, days: int, now: Optional[datetime] = None) -> "Deadline":
        return cls.today(now).add_days(days)

    # Arithmetic

    def add_days(self, days: int) -> "Deadline":
        return Deadline(self.day + timedelta(days=days))

    def add_months(self, months: int) -> "Deadline":
        return Deadline(add_months(self.day, months))

    def days_until(self, now: Optional[datetime] = None) -> int:
        """Days from today until this deadline (negative if it has passed)."""
        return days_between(Deadline.today(now).day, self.day)

    # Comparison

    def is_before(self, other: "Deadline") -> bool:
        return self.day < other.day

    def is_after(self, other: "Deadline") -> bool:
        return self.day > other.day

    def is_today(self, now: Optional[datetime] = None) -> bool:
        return self == Deadline.today(now)

    def is_past(self, now: Optional[datetime] = None) -> bool:
        return self.is_before(Deadline.today(now))

    def is_future(self, now: Optional[datetime] = None) -> bool:
        return self.is_after(Deadline.today(now))

    # Accessors

    @property
    def year(self) -> int:
        return self.day.year

    @property
    def month(self) -> int:
        return self.day.month

    @property
    def day_of_month(self) -> int:
        return self.day.day

    @property
    def day_of_week(self) -> int:
        """Monday is 0 and Sunday is 6."""
        return self.day.weekday()

    def to_datetime(self) -> datetime:
        """The deadline as a naive UTC datetime at midnight."""
        return at_midnight(self.day)

    # Formatting

    def isoformat(self) -> str:
        return self.day.isoformat()

    def format(self) -> str:
        """Long form, e.g. 'Monday, January 06, 2025'."""
        return self.day.strftime("%A, %B %d, %Y")

    def format_short(self) -> str:
        """Short form, e.g. '06 Jan 2025'."""
        return self.day.strftime("%d %b %Y")

    def __str__(self) -> str:
        return self.isoformat()
