"""Creation of the next occurrence for recurring tasks."""

import logging
from datetime import datetime, timedelta
from typing import Optional

from taskcadence.database.occurrence_repository import OccurrenceRepository
from taskcadence.database.recurrence_repository import RecurrenceRepository
from taskcadence.database.repository import TaskRepository
from taskcadence.dates import Deadline, utcnow
from taskcadence.engine.period_manager import PeriodManager
from taskcadence.engine.recurrence_dates import RecurrenceDateCalculator
from taskcadence.errors import RecurrenceConfigurationError, RecurrenceNotFoundError, TaskNotFoundError
from taskcadence.models.constants import DEFAULT_LIMIT_OFFSET_DAYS, DEFAULT_TARGET_OFFSET_DAYS
from taskcadence.models.occurrence import CreateOccurrence, InitialDates, TaskOccurrence
from taskcadence.models.recurrence import TaskRecurrence

logger = logging.getLogger(__name__)


class OccurrenceCreationService:
    """Persists the next occurrence of a task, handling period rollover."""

    def __init__(
        self,
        task_repository: TaskRepository,
        occurrence_repository: OccurrenceRepository,
        recurrence_repository: RecurrenceRepository,
        date_calculator: RecurrenceDateCalculator,
        period_manager: PeriodManager,
    ):
        self.task_repository = task_repository
        self.occurrence_repository = occurrence_repository
        self.recurrence_repository = recurrence_repository
        self.date_calculator = date_calculator
        self.period_manager = period_manager

    def create_next_occurrence(
        self,
        task_id: str,
        initial_dates: Optional[InitialDates] = None,
        now: Optional[datetime] = None,
    ) -> TaskOccurrence:
        """Create and return the next occurrence of ``task_id``.

        One-off tasks get a single occurrence starting ``now``. Recurring
        tasks continue from the latest occurrence (or today); once the period
        limit is reached the next period is started and the occurrence lands
        on its first matching day. ``initial_dates`` override the computed
        target/limit dates and time consumption.

        Raises:
            TaskNotFoundError: unknown task.
            RecurrenceConfigurationError: the task has no recurrence.
            RecurrenceNotFoundError: the task's recurrence row is missing.
        """
        now = now or utcnow()
        initial_dates = initial_dates or InitialDates()

        task = self.task_repository.get_task_with_recurrence(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        if task.recurrence_id is None:
            raise RecurrenceConfigurationError(f"Task {task_id} does not have recurrence configured")

        recurrence = self.recurrence_repository.get_recurrence_by_id(task.recurrence_id)
        if recurrence is None:
            raise RecurrenceNotFoundError(task.recurrence_id)

        if recurrence.is_one_off:
            return self._create_one_off(task_id, initial_dates, now)

        latest = self.occurrence_repository.get_latest_occurrence_by_task_id(task_id)
        if latest is None:
            next_date = Deadline.today(now).to_datetime()
        else:
            next_date = self.date_calculator.calculate_next_occurrence_date(latest.start_date, recurrence)

        if recurrence.has_cadence and self.period_manager.has_reached_period_limit(recurrence):
            recurrence = self.period_manager.advance_to_next_period(recurrence, now)
            next_date = self._first_date_in_period(recurrence)

        dates = self.date_calculator.calculate_occurrence_dates(next_date, recurrence)
        target_time = initial_dates.target_time_consumption
        if target_time is None and latest is not None:
            target_time = latest.target_time_consumption

        occurrence = self.occurrence_repository.create_occurrence(
            CreateOccurrence(
                task_id=task_id,
                start_date=next_date,
                target_date=initial_dates.target_date or dates.target_date,
                limit_date=initial_dates.limit_date or dates.limit_date,
                target_time_consumption=target_time,
            )
        )
        logger.info(f"Created occurrence {occurrence.id} for task {task_id} on {next_date.date()}")
        return occurrence

    def _create_one_off(self, task_id: str, initial_dates: InitialDates, now: datetime) -> TaskOccurrence:
        return self.occurrence_repository.create_occurrence(
            CreateOccurrence(
                task_id=task_id,
                start_date=now,
                target_date=initial_dates.target_date or now + timedelta(days=DEFAULT_TARGET_OFFSET_DAYS),
                limit_date=initial_dates.limit_date or now + timedelta(days=DEFAULT_LIMIT_OFFSET_DAYS),
                target_time_consumption=initial_dates.target_time_consumption,
            )
        )

    def _first_date_in_period(self, recurrence: TaskRecurrence) -> datetime:
        period_start = recurrence.last_period_start
        if recurrence.days_of_week:
            return self.date_calculator.get_first_day_of_week_in_period(period_start, recurrence.days_of_week)
        if recurrence.days_of_month:
            return self.date_calculator.get_first_day_of_month_in_period(period_start, recurrence.days_of_month)
        return period_start
