"""Exceptions raised by the taskcadence scheduling engine."""

from typing import Optional


class TaskCadenceError(Exception):
    """Base class for engine errors."""


class RecurrenceConfigurationError(TaskCadenceError, ValueError):
    """A recurrence is missing fields required by the operation that uses it."""

    def __init__(self, message: str, *, recurrence_id: Optional[str] = None):
        super().__init__(message)
        self.recurrence_id = recurrence_id


class NotFoundError(TaskCadenceError, LookupError):
    """An entity referenced by id does not exist."""

    entity = "Entity"

    def __init__(self, entity_id: str):
        super().__init__(f"{self.entity} {entity_id} not found")
        self.entity_id = entity_id


class TaskNotFoundError(NotFoundError):
    entity = "Task"


class RecurrenceNotFoundError(NotFoundError):
    entity = "Recurrence"


class OccurrenceNotFoundError(NotFoundError):
    entity = "Occurrence"


class CalendarEventNotFoundError(NotFoundError):
    entity = "Calendar event"
