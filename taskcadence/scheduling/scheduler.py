"""TaskSchedulerService: wires the engine to the repositories.

Single entry point used by the completion workflow, the lifecycle service
and the HTTP layer.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from taskcadence.database.calendar_event_repository import CalendarEventRepository
from taskcadence.database.occurrence_repository import OccurrenceRepository
from taskcadence.database.recurrence_repository import RecurrenceRepository
from taskcadence.database.repository import TaskRepository
from taskcadence.dates import utcnow
from taskcadence.engine.period_manager import PeriodManager
from taskcadence.engine.recurrence_dates import RecurrenceDateCalculator
from taskcadence.errors import RecurrenceConfigurationError, TaskNotFoundError
from taskcadence.models.calendar_event import CalendarEvent
from taskcadence.models.fixed import FixedTaskConfig
from taskcadence.models.occurrence import InitialDates, TaskOccurrence
from taskcadence.models.recurrence import TaskRecurrence
from taskcadence.scheduling.fixed_tasks import FixedTaskService
from taskcadence.scheduling.occurrence_creation import OccurrenceCreationService
from taskcadence.scheduling.occurrence_preview import OccurrencePreviewService
from taskcadence.strategies.factory import TaskStrategyFactory

logger = logging.getLogger(__name__)


class TaskSchedulerService:
    """Recurrence scheduling facade bound to one database session."""

    def __init__(self, db: Session):
        self.task_repository = TaskRepository(db)
        self.occurrence_repository = OccurrenceRepository(db)
        self.recurrence_repository = RecurrenceRepository(db)
        self.event_repository = CalendarEventRepository(db)

        self.date_calculator = RecurrenceDateCalculator()
        self.period_manager = PeriodManager(self.recurrence_repository)
        self.strategy_factory = TaskStrategyFactory(self.period_manager)

        self.occurrence_creation = OccurrenceCreationService(
            self.task_repository,
            self.occurrence_repository,
            self.recurrence_repository,
            self.date_calculator,
            self.period_manager,
        )
        self.occurrence_preview = OccurrencePreviewService(
            self.task_repository,
            self.occurrence_repository,
            self.date_calculator,
            self.period_manager,
            self.strategy_factory,
        )
        self.fixed_tasks = FixedTaskService(self.occurrence_repository, self.event_repository)

    def get_recurrence(self, recurrence_id: str) -> Optional[TaskRecurrence]:
        return self.recurrence_repository.get_recurrence_by_id(recurrence_id)

    def should_create_next_occurrence(self, task_id: str) -> bool:
        """Only once the latest occurrence is completed or skipped (or none exists)."""
        latest = self.occurrence_repository.get_latest_occurrence_by_task_id(task_id)
        return latest is None or latest.is_finished

    def update_recurrence_period(self, recurrence_id: str, now: Optional[datetime] = None) -> Optional[TaskRecurrence]:
        recurrence = self.recurrence_repository.get_recurrence_by_id(recurrence_id, for_update=True)
        if recurrence is None:
            return None
        return self.period_manager.update_recurrence_period(recurrence, now)

    def increment_completed_occurrences(
        self, recurrence_id: str, occurrence_start_date: datetime, now: Optional[datetime] = None
    ) -> TaskRecurrence:
        return self.period_manager.increment_completed_occurrences(recurrence_id, occurrence_start_date, now)

    def has_recurrence_ended(self, recurrence_id: str, now: Optional[datetime] = None) -> bool:
        """True when the recurrence is gone or its end date has passed.

        ``max_occurrences`` never ends a recurrence here: for cadenced rules
        it is a per-period cap.
        """
        recurrence = self.recurrence_repository.get_recurrence_by_id(recurrence_id)
        if recurrence is None:
            return True
        return recurrence.end_date is not None and (now or utcnow()) > recurrence.end_date

    def create_next_occurrence(
        self,
        task_id: str,
        initial_dates: Optional[InitialDates] = None,
        now: Optional[datetime] = None,
    ) -> Optional[TaskOccurrence]:
        """Create the next occurrence if the latest one is finished.

        Returns None when nothing was created: the latest occurrence is still
        open, or the recurrence has ended (the task is then deactivated).
        """
        now = now or utcnow()
        if not self.should_create_next_occurrence(task_id):
            logger.debug(f"Task {task_id}: latest occurrence still open, not creating another")
            return None

        task = self.task_repository.get_task_with_recurrence(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        if task.recurrence_id is None:
            raise RecurrenceConfigurationError(f"Task {task_id} does not have recurrence configured")

        self.update_recurrence_period(task.recurrence_id, now)

        if self.has_recurrence_ended(task.recurrence_id, now):
            logger.info(f"Recurrence of task {task_id} has ended; deactivating")
            self.task_repository.deactivate_task(task_id)
            return None

        return self.occurrence_creation.create_next_occurrence(task_id, initial_dates, now)

    def preview_next_occurrence_date(self, task_id: str, now: Optional[datetime] = None) -> Optional[datetime]:
        return self.occurrence_preview.preview_next_occurrence_date(task_id, now)

    def create_fixed_task_events(
        self, task_id: str, owner_id: str, config: FixedTaskConfig
    ) -> List[Tuple[TaskOccurrence, CalendarEvent]]:
        return self.fixed_tasks.create_fixed_task_events(task_id, owner_id, config)

    def process_recurring_tasks(self, owner_id: str, now: Optional[datetime] = None) -> List[TaskOccurrence]:
        """Create due occurrences for every active recurring task of an owner.

        A failing task is logged and skipped so the rest still get processed.
        """
        created = []
        for task in self.task_repository.list_active_with_recurrence(owner_id):
            try:
                occurrence = self.create_next_occurrence(task.id, now=now)
            except Exception as e:
                logger.warning(f"Failed to create occurrence for task {task.id}: {type(e).__name__}: {str(e)}")
                continue
            if occurrence is not None:
                created.append(occurrence)
        logger.info(f"Processed recurring tasks for {owner_id}: {len(created)} occurrences created")
        return created
