"""Occurrence and event completion workflow.

Marks statuses, asks the task's strategy what happens next, and hands the
resulting action to ``LifecycleActionInterpreter``.
"""

import logging
from datetime import datetime
from typing import Optional

from taskcadence.dates import utcnow
from taskcadence.errors import CalendarEventNotFoundError, OccurrenceNotFoundError, TaskNotFoundError
from taskcadence.models.occurrence import InitialDates, OccurrenceStatus, TaskOccurrence
from taskcadence.models.task import TaskWithRecurrence
from taskcadence.scheduling.scheduler import TaskSchedulerService
from taskcadence.strategies.actions import ActionType, TaskLifecycleAction
from taskcadence.strategies.base import EventContext, OccurrenceContext

logger = logging.getLogger(__name__)


class LifecycleActionInterpreter:
    """Performs the persistence a strategy action describes."""

    def __init__(self, scheduler: TaskSchedulerService):
        self.scheduler = scheduler

    def execute(self, task_id: str, action: TaskLifecycleAction, now: Optional[datetime] = None):
        if action.type == ActionType.CREATE_NEXT_OCCURRENCE:
            params = action.params
            initial_dates = None
            if params is not None and params.target_time_consumption is not None:
                initial_dates = InitialDates(target_time_consumption=params.target_time_consumption)
            return self.scheduler.create_next_occurrence(task_id, initial_dates, now)
        if action.type in (ActionType.COMPLETE_TASK, ActionType.DEACTIVATE_TASK):
            # Deactivation of a finished fixed task is recorded as completion.
            logger.info(f"Task {task_id}: {action.type.value}")
            return self.scheduler.task_repository.complete_task(task_id, now)
        return None


class OccurrenceCompletionService:
    def __init__(self, scheduler: TaskSchedulerService, interpreter: Optional[LifecycleActionInterpreter] = None):
        self.scheduler = scheduler
        self.interpreter = interpreter or LifecycleActionInterpreter(scheduler)
        self.tasks = scheduler.task_repository
        self.occurrences = scheduler.occurrence_repository
        self.events = scheduler.event_repository

    def _load(self, occurrence_id: str):
        occurrence = self.occurrences.get_occurrence(occurrence_id)
        if occurrence is None:
            raise OccurrenceNotFoundError(occurrence_id)
        task = self.tasks.get_task_with_recurrence(occurrence.task_id)
        if task is None:
            raise TaskNotFoundError(occurrence.task_id)
        return occurrence, task

    def _already_finished(self, occurrence: TaskOccurrence) -> bool:
        if occurrence.is_finished:
            logger.info(f"Occurrence {occurrence.id} is already {occurrence.status.value}; nothing to do")
            return True
        return False

    def _context(self, occurrence: TaskOccurrence, task: TaskWithRecurrence) -> OccurrenceContext:
        return OccurrenceContext(
            occurrence=occurrence,
            task=task,
            recurrence=task.recurrence,
            all_occurrences=self.occurrences.get_occurrences_by_task_id(task.id),
        )

    def complete_occurrence(
        self,
        occurrence_id: str,
        now: Optional[datetime] = None,
        time_consumed: Optional[int] = None,
    ) -> TaskLifecycleAction:
        """Complete an occurrence and its open events, then apply the strategy's action."""
        now = now or utcnow()
        occurrence, task = self._load(occurrence_id)
        if self._already_finished(occurrence):
            return TaskLifecycleAction.no_action()

        for event in self.events.get_events_by_occurrence_id(occurrence_id):
            if not event.is_completed:
                self.events.complete_event(event.id, now)

        occurrence = self.occurrences.update_status(occurrence_id, OccurrenceStatus.COMPLETED, now, time_consumed)

        strategy = self.scheduler.strategy_factory.get_strategy(task, task.recurrence)
        action = strategy.on_occurrence_completed(self._context(occurrence, task))
        if action.type == ActionType.CREATE_NEXT_OCCURRENCE and action.params is not None:
            action = TaskLifecycleAction.create_next_occurrence(
                action.params.task_id,
                action.params.target_time_consumption or occurrence.target_time_consumption,
            )
        self.interpreter.execute(task.id, action, now)
        return action

    def skip_occurrence(self, occurrence_id: str, now: Optional[datetime] = None) -> TaskLifecycleAction:
        """Skip an occurrence; its calendar events are deleted."""
        now = now or utcnow()
        occurrence, task = self._load(occurrence_id)
        if self._already_finished(occurrence):
            return TaskLifecycleAction.no_action()

        for event in self.events.get_events_by_occurrence_id(occurrence_id):
            self.events.delete_event(event.id)

        occurrence = self.occurrences.update_status(occurrence_id, OccurrenceStatus.SKIPPED, now)

        strategy = self.scheduler.strategy_factory.get_strategy(task, task.recurrence)
        action = strategy.on_occurrence_skipped(self._context(occurrence, task))
        self.interpreter.execute(task.id, action, now)
        return action

    def complete_event(self, event_id: str, now: Optional[datetime] = None) -> TaskLifecycleAction:
        """Complete a calendar event.

        Fixed events complete their occurrence (and through it the task
        lifecycle); other events only record the time spent.
        """
        now = now or utcnow()
        event = self.events.get_event(event_id)
        if event is None:
            raise CalendarEventNotFoundError(event_id)
        if event.is_fixed and event.occurrence_id:
            return self.complete_occurrence(event.occurrence_id, now)

        event = self.events.complete_event(event_id, now)
        return self._event_action(event, skipped=False)

    def skip_event(self, event_id: str, now: Optional[datetime] = None) -> TaskLifecycleAction:
        event = self.events.get_event(event_id)
        if event is None:
            raise CalendarEventNotFoundError(event_id)
        if event.is_fixed and event.occurrence_id:
            return self.skip_occurrence(event.occurrence_id, now)

        self.events.delete_event(event_id)
        return self._event_action(event, skipped=True)

    def _event_action(self, event, skipped: bool) -> TaskLifecycleAction:
        if not event.occurrence_id:
            return TaskLifecycleAction.no_action()
        occurrence, task = self._load(event.occurrence_id)
        strategy = self.scheduler.strategy_factory.get_strategy(task, task.recurrence)
        context = EventContext(event=event, occurrence=occurrence, task=task, recurrence=task.recurrence)
        if skipped:
            return strategy.on_event_skipped(context)
        return strategy.on_event_completed(context)
