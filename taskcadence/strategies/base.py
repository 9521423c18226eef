"""Strategy interface, contexts and shared helpers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Protocol, Sequence

from taskcadence.models.calendar_event import CalendarEvent
from taskcadence.models.occurrence import OccurrenceStatus, TaskOccurrence
from taskcadence.models.recurrence import TaskRecurrence
from taskcadence.models.task import Task, TaskType
from taskcadence.strategies.actions import TaskLifecycleAction


class PeriodTracker(Protocol):
    """Capability strategies use to count a finished occurrence."""

    def increment_completed_occurrences(self, recurrence_id: str, occurrence_start_date: datetime): ...


@dataclass(frozen=True)
class OccurrenceContext:
    """An occurrence that was just completed or skipped.

    ``all_occurrences`` includes ``occurrence`` with its new status.
    """

    occurrence: TaskOccurrence
    task: Task
    recurrence: Optional[TaskRecurrence]
    all_occurrences: Optional[List[TaskOccurrence]] = None


@dataclass(frozen=True)
class EventContext:
    event: CalendarEvent
    occurrence: Optional[TaskOccurrence] = None
    task: Optional[Task] = None
    recurrence: Optional[TaskRecurrence] = None


@dataclass(frozen=True)
class TaskContext:
    task: Task
    recurrence: Optional[TaskRecurrence]
    last_occurrence: Optional[TaskOccurrence] = None
    all_occurrences: List[TaskOccurrence] = field(default_factory=list)


@dataclass(frozen=True)
class OccurrenceCounts:
    completed: int
    skipped: int
    pending: int

    @property
    def discarded(self) -> int:
        """Completed plus skipped."""
        return self.completed + self.skipped


@dataclass(frozen=True)
class TaskCompletionContext:
    task: Task
    recurrence: Optional[TaskRecurrence]
    all_occurrences: List[TaskOccurrence]

    @property
    def counts(self) -> OccurrenceCounts:
        return count_by_status(self.all_occurrences)


def count_by_status(occurrences: Sequence[TaskOccurrence]) -> OccurrenceCounts:
    completed = sum(1 for o in occurrences if o.status == OccurrenceStatus.COMPLETED)
    skipped = sum(1 for o in occurrences if o.status == OccurrenceStatus.SKIPPED)
    pending = sum(
        1 for o in occurrences
        if o.status in (OccurrenceStatus.PENDING, OccurrenceStatus.IN_PROGRESS)
    )
    return OccurrenceCounts(completed=completed, skipped=skipped, pending=pending)


def all_finished(occurrences: Sequence[TaskOccurrence]) -> bool:
    """True when there is at least one occurrence and none is still open."""
    if not occurrences:
        return False
    return all(o.is_finished for o in occurrences)


class TaskStrategy(ABC):
    """Behaviour of one task type.

    Strategies hold no state besides the injected period tracker, so one
    instance serves every task of its type.
    """

    task_type: TaskType

    def __init__(self, period_tracker: PeriodTracker):
        self.period_tracker = period_tracker

    @abstractmethod
    def on_occurrence_completed(self, context: OccurrenceContext) -> TaskLifecycleAction:
        ...

    @abstractmethod
    def on_occurrence_skipped(self, context: OccurrenceContext) -> TaskLifecycleAction:
        ...

    def on_event_completed(self, context: EventContext) -> TaskLifecycleAction:
        # Fixed events are routed through occurrence completion first.
        return TaskLifecycleAction.no_action()

    def on_event_skipped(self, context: EventContext) -> TaskLifecycleAction:
        return TaskLifecycleAction.no_action()

    def should_create_next_occurrence(self, context: TaskContext) -> bool:
        """Default: only once the latest occurrence is completed or skipped."""
        if context.last_occurrence is None:
            return True
        return context.last_occurrence.is_finished

    def should_generate_backlog_occurrences(self) -> bool:
        return False

    def should_complete_task(self, context: TaskCompletionContext) -> bool:
        return False

    def should_deactivate_task(self, context: TaskCompletionContext) -> bool:
        return False

    def _count_occurrence(self, context: OccurrenceContext) -> None:
        if context.recurrence is not None:
            self.period_tracker.increment_completed_occurrences(
                context.recurrence.id, context.occurrence.start_date
            )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(task_type={self.task_type.value})"
