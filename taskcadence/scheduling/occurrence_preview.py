"""Read-only preview of when a task's next occurrence would start."""

from datetime import datetime
from typing import Optional

from taskcadence.database.occurrence_repository import OccurrenceRepository
from taskcadence.database.repository import TaskRepository
from taskcadence.dates import utcnow
from taskcadence.engine.period_manager import PeriodManager
from taskcadence.engine.recurrence_dates import RecurrenceDateCalculator
from taskcadence.errors import TaskNotFoundError
from taskcadence.models.occurrence import TaskOccurrence
from taskcadence.models.recurrence import TaskRecurrence
from taskcadence.strategies.base import TaskContext
from taskcadence.strategies.factory import TaskStrategyFactory


class OccurrencePreviewService:
    """Mirrors OccurrenceCreationService without writing anything."""

    def __init__(
        self,
        task_repository: TaskRepository,
        occurrence_repository: OccurrenceRepository,
        date_calculator: RecurrenceDateCalculator,
        period_manager: PeriodManager,
        strategy_factory: TaskStrategyFactory,
    ):
        self.task_repository = task_repository
        self.occurrence_repository = occurrence_repository
        self.date_calculator = date_calculator
        self.period_manager = period_manager
        self.strategy_factory = strategy_factory

    def preview_next_occurrence_date(self, task_id: str, now: Optional[datetime] = None) -> Optional[datetime]:
        """Date the next occurrence would start on, or None if none would be created."""
        now = now or utcnow()
        task = self.task_repository.get_task_with_recurrence(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        recurrence = task.recurrence
        if recurrence is None:
            return None

        all_occurrences = self.occurrence_repository.get_occurrences_by_task_id(task_id)
        latest = self.occurrence_repository.get_latest_occurrence_by_task_id(task_id)

        strategy = self.strategy_factory.get_strategy(task, recurrence)
        context = TaskContext(
            task=task,
            recurrence=recurrence,
            last_occurrence=latest,
            all_occurrences=all_occurrences,
        )
        if not strategy.should_create_next_occurrence(context):
            return None

        if recurrence.has_cadence:
            return self._preview_recurring(latest, recurrence, now)
        return now

    def _preview_recurring(
        self, latest: Optional[TaskOccurrence], recurrence: TaskRecurrence, now: datetime
    ) -> datetime:
        if latest is None:
            return now
        if self.period_manager.should_start_new_period(recurrence, now) or self.period_manager.has_reached_period_limit(recurrence):
            return self.period_manager.get_next_period_start_by_type(recurrence.last_period_start or now, recurrence)
        return self.date_calculator.calculate_next_occurrence_date(latest.start_date, recurrence)
