"""EventTime and Timestamp value objects (instant granularity)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from taskcadence.dates.calendar_math import utcnow
from taskcadence.dates.deadline import Deadline


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


@dataclass(frozen=True, order=True)
class EventTime:
    """Start or finish of a calendar event, stored as naive UTC."""

    instant: datetime

    def __post_init__(self):
        object.__setattr__(self, "instant", _as_naive_utc(self.instant))

    @classmethod
    def now(cls) -> "EventTime":
        return cls(utcnow())

    @classmethod
    def from_iso(cls, value: str) -> "EventTime":
        return cls(datetime.fromisoformat(value))

    @classmethod
    def from_components(
        cls,
        year: int,
        month: int,
        day: int,
        hour: int,
        minute: int,
        second: int = 0,
    ) -> "EventTime":
        return cls(datetime(year, month, day, hour, minute, second))

    @classmethod
    def on_day(cls, day: date, time_of_day: time) -> "EventTime":
        """Combine a calendar day with a wall-clock time."""
        return cls(datetime.combine(day, time_of_day.replace(tzinfo=None)))

    @property
    def time_of_day(self) -> time:
        return self.instant.time()

    @property
    def deadline(self) -> Deadline:
        return Deadline.from_date(self.instant)

    def add_minutes(self, minutes: int) -> "EventTime":
        return EventTime(self.instant + timedelta(minutes=minutes))

    def add_hours(self, hours: int) -> "EventTime":
        return EventTime(self.instant + timedelta(hours=hours))

    def add_days(self, days: int) -> "EventTime":
        return EventTime(self.instant + timedelta(days=days))

    def duration_to(self, other: "EventTime") -> timedelta:
        return other.instant - self.instant

    def is_before(self, other: "EventTime") -> bool:
        return self.instant < other.instant

    def is_after(self, other: "EventTime") -> bool:
        return self.instant > other.instant

    def to_datetime(self) -> datetime:
        return self.instant

    def isoformat(self) -> str:
        return self.instant.isoformat()

    def format(self) -> str:
        return self.instant.strftime("%d %b %Y %H:%M")


@dataclass(frozen=True, order=True)
class Timestamp:
    """Audit instant (created_at, completed_at, ...)."""

    instant: datetime

    def __post_init__(self):
        object.__setattr__(self, "instant", _as_naive_utc(self.instant))

    @classmethod
    def now(cls) -> "Timestamp":
        return cls(utcnow())

    @classmethod
    def from_epoch_millis(cls, millis: int) -> "Timestamp":
        return cls(datetime.fromtimestamp(millis / 1000, tz=timezone.utc))

    @classmethod
    def from_iso(cls, value: str) -> "Timestamp":
        return cls(datetime.fromisoformat(value))

    def epoch_millis(self) -> int:
        return int(self.instant.replace(tzinfo=timezone.utc).timestamp() * 1000)

    def add_seconds(self, seconds: int) -> "Timestamp":
        return Timestamp(self.instant + timedelta(seconds=seconds))

    def add_minutes(self, minutes: int) -> "Timestamp":
        return Timestamp(self.instant + timedelta(minutes=minutes))

    def add_days(self, days: int) -> "Timestamp":
        return Timestamp(self.instant + timedelta(days=days))

    def diff_seconds(self, other: "Timestamp") -> int:
        return int((self.instant - other.instant).total_seconds())

    def diff_minutes(self, other: "Timestamp") -> int:
        return self.diff_seconds(other) // 60

    def diff_days(self, other: "Timestamp") -> int:
        return self.diff_seconds(other) // 86400

    def is_before(self, other: "Timestamp") -> bool:
        return self.instant < other.instant

    def is_after(self, other: "Timestamp") -> bool:
        return self.instant > other.instant

    def to_datetime(self) -> datetime:
        return self.instant

    def isoformat(self) -> str:
        return self.instant.isoformat()

    def format(self, fmt: Optional[str] = None) -> str:
        return self.instant.strftime(fmt or "%Y-%m-%d %H:%M:%S")
