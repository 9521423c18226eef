"""Task creation: persists the task and its first occurrence(s)."""

import logging
from datetime import datetime
from typing import Optional

from taskcadence.dates import utcnow
from taskcadence.models.fixed import FixedTaskConfig
from taskcadence.models.task import CreateTask, TaskWithRecurrence
from taskcadence.models.task_factory import create_recurrence, create_task_base, default_recurrence
from taskcadence.scheduling.scheduler import TaskSchedulerService

logger = logging.getLogger(__name__)


class TaskLifecycleService:
    def __init__(self, scheduler: TaskSchedulerService):
        self.scheduler = scheduler

    def create_task(self, owner_id: str, data: CreateTask, now: Optional[datetime] = None) -> TaskWithRecurrence:
        """Create a task with its recurrence (a one-off by default).

        Fixed tasks get all their occurrences and events materialized now;
        every other task gets its first occurrence.
        """
        now = now or utcnow()
        recurrence_input = data.recurrence or default_recurrence()
        task = create_task_base(owner_id, data, now)
        recurrence = create_recurrence(recurrence_input, now)

        created = self.scheduler.task_repository.create_task(task, recurrence)
        logger.info(f"Created task {created.id} for {owner_id}")

        if data.is_fixed:
            self.scheduler.create_fixed_task_events(
                created.id,
                owner_id,
                FixedTaskConfig(
                    start_datetime=data.fixed_start_datetime,
                    end_datetime=data.fixed_end_datetime,
                    recurrence=recurrence_input,
                ),
            )
        else:
            self.scheduler.occurrence_creation.create_next_occurrence(created.id, data.initial_dates, now)

        return self.scheduler.task_repository.get_task_with_recurrence(created.id)
