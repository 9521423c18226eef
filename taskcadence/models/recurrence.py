"""Recurrence rule models for taskcadence.

A TaskRecurrence is the rule that governs when occurrences exist, never an
occurrence itself.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class DayOfWeek(str, Enum):
    MON = "Mon"
    TUE = "Tue"
    WED = "Wed"
    THU = "Thu"
    FRI = "Fri"
    SAT = "Sat"
    SUN = "Sun"

    @property
    def weekday(self) -> int:
        """Python weekday index (Monday is 0)."""
        return _WEEKDAY_ORDER.index(self)


_WEEKDAY_ORDER = [
    DayOfWeek.MON,
    DayOfWeek.TUE,
    DayOfWeek.WED,
    DayOfWeek.THU,
    DayOfWeek.FRI,
    DayOfWeek.SAT,
    DayOfWeek.SUN,
]


def day_of_week_for(weekday: int) -> DayOfWeek:
    return _WEEKDAY_ORDER[weekday]


def _dedupe(values):
    seen = set()
    out = []
    for v in values:
        if v not in seen:
            seen.add(v)
            out.append(v)
    return out


class RecurrencePattern(BaseModel):
    """Fields shared by stored recurrences and recurrence input."""

    interval: Optional[int] = Field(None, ge=1, description="Days per period")
    days_of_week: Optional[List[DayOfWeek]] = Field(None, description="Weekdays on which it occurs")
    days_of_month: Optional[List[int]] = Field(None, description="Days of month (1-31) on which it occurs")
    max_occurrences: Optional[int] = Field(
        None, ge=1, description="Cap per period (with a cadence) or in total (without one)"
    )
    end_date: Optional[datetime] = Field(None, description="Hard stop for the recurrence")

    @field_validator("days_of_week")
    @classmethod
    def _validate_days_of_week(cls, v):
        if v is None:
            return None
        return _dedupe(v)

    @field_validator("days_of_month")
    @classmethod
    def _validate_days_of_month(cls, v):
        if v is None:
            return None
        for day in v:
            if day < 1 or day > 31:
                raise ValueError(f"day of month must be between 1 and 31, got {day}")
        return _dedupe(v)

    @model_validator(mode="after")
    def _days_patterns_exclusive(self):
        if self.days_of_week and self.days_of_month:
            raise ValueError("days_of_week and days_of_month are mutually exclusive")
        return self

    @property
    def has_day_pattern(self) -> bool:
        return bool(self.days_of_week) or bool(self.days_of_month)

    @property
    def has_cadence(self) -> bool:
        """True when the rule defines a period (interval or day pattern)."""
        return bool(self.interval) or self.has_day_pattern

    @property
    def is_one_off(self) -> bool:
        return self.max_occurrences == 1 and not self.has_cadence


class CreateRecurrence(RecurrencePattern):
    """Recurrence input when a task is created."""

    last_period_start: Optional[datetime] = None


class TaskRecurrence(RecurrencePattern):
    """Stored recurrence rule with its period bookkeeping."""

    id: str = Field(..., description="Recurrence identifier (UUID v4)")
    completed_occurrences: int = Field(0, ge=0, description="Counter for the current period")
    last_period_start: Optional[datetime] = Field(None, description="Anchor day of the current period")
    created_at: Optional[datetime] = None


class RecurrenceUpdate(BaseModel):
    """Partial update of the period bookkeeping fields."""

    completed_occurrences: Optional[int] = Field(None, ge=0)
    last_period_start: Optional[datetime] = None
