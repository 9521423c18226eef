"""Recurrence engine for taskcadence."""

from taskcadence.engine.recurrence_dates import OccurrenceDates, RecurrenceDateCalculator
from taskcadence.engine.period_manager import PeriodManager, period_type_for
from taskcadence.engine.task_type import calculate_task_type

__all__ = [
    "OccurrenceDates",
    "RecurrenceDateCalculator",
    "PeriodManager",
    "period_type_for",
    "calculate_task_type",
]
