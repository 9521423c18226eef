"""Data models for taskcadence."""

from taskcadence.models.recurrence import (
    CreateRecurrence,
    DayOfWeek,
    RecurrencePattern,
    RecurrenceUpdate,
    TaskRecurrence,
)
from taskcadence.models.task import CreateTask, Task, TaskType, TaskWithRecurrence
from taskcadence.models.occurrence import (
    CreateOccurrence,
    InitialDates,
    OccurrenceStatus,
    TaskOccurrence,
)
from taskcadence.models.calendar_event import CalendarEvent, CreateCalendarEvent
from taskcadence.models.fixed import FixedTaskConfig

__all__ = [
    "CreateRecurrence",
    "DayOfWeek",
    "RecurrencePattern",
    "RecurrenceUpdate",
    "TaskRecurrence",
    "CreateTask",
    "Task",
    "TaskType",
    "TaskWithRecurrence",
    "CreateOccurrence",
    "InitialDates",
    "OccurrenceStatus",
    "TaskOccurrence",
    "CalendarEvent",
    "CreateCalendarEvent",
    "FixedTaskConfig",
]
