"""Backlog detection for habits that fell behind."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from dateutil.rrule import DAILY, rrule

from taskcadence.dates import Deadline, utcnow
from taskcadence.errors import TaskNotFoundError
from taskcadence.models.constants import SEVERE_BACKLOG_THRESHOLD
from taskcadence.models.occurrence import OccurrenceStatus, TaskOccurrence
from taskcadence.models.recurrence import DayOfWeek, RecurrencePattern
from taskcadence.scheduling.completion import OccurrenceCompletionService
from taskcadence.scheduling.scheduler import TaskSchedulerService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BacklogInfo:
    has_severe_backlog: bool = False
    pending_count: int = 0
    oldest_pending_date: Optional[datetime] = None
    estimated_backlog_count: int = 0
    pending_occurrences: List[TaskOccurrence] = field(default_factory=list)


def estimate_missed_occurrences(recurrence: RecurrencePattern, since: datetime, now: datetime) -> int:
    """Occurrences the rule would have produced from ``since`` through ``now``."""
    if recurrence.interval:
        periods = (Deadline.from_date(now).day - Deadline.from_date(since).day).days // recurrence.interval
        return periods * (recurrence.max_occurrences or 1)

    start = Deadline.from_date(since).to_datetime()
    if recurrence.days_of_week:
        days = rrule(DAILY, dtstart=start, until=now, byweekday=[DayOfWeek(d).weekday for d in recurrence.days_of_week])
    elif recurrence.days_of_month:
        days = rrule(DAILY, dtstart=start, until=now, bymonthday=list(recurrence.days_of_month))
    else:
        return 0
    return days.count()


class BacklogDetectionService:
    def __init__(self, scheduler: TaskSchedulerService, completion: Optional[OccurrenceCompletionService] = None):
        self.scheduler = scheduler
        self.completion = completion or OccurrenceCompletionService(scheduler)

    def detect_backlog(self, task_id: str, now: Optional[datetime] = None) -> BacklogInfo:
        """Summarize the task's open occurrences, oldest first."""
        now = now or utcnow()
        task = self.scheduler.task_repository.get_task_with_recurrence(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        if task.recurrence is None:
            return BacklogInfo()

        pending = [
            o for o in self.scheduler.occurrence_repository.get_occurrences_by_task_id(task_id)
            if o.status in (OccurrenceStatus.PENDING, OccurrenceStatus.IN_PROGRESS)
        ]
        if not pending:
            return BacklogInfo()
        pending.sort(key=lambda o: o.start_date)

        oldest = pending[0]
        return BacklogInfo(
            has_severe_backlog=len(pending) > SEVERE_BACKLOG_THRESHOLD,
            pending_count=len(pending),
            oldest_pending_date=oldest.start_date,
            estimated_backlog_count=estimate_missed_occurrences(task.recurrence, oldest.start_date, now),
            pending_occurrences=pending,
        )

    def skip_backlog_occurrences(self, task_id: str, now: Optional[datetime] = None) -> int:
        """Skip every open occurrence but the newest when the backlog is severe.

        Only task types that generate backlog (habits) are touched. Returns
        the number of occurrences skipped.
        """
        task = self.scheduler.task_repository.get_task_with_recurrence(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        strategy = self.scheduler.strategy_factory.get_strategy(task, task.recurrence)
        if not strategy.should_generate_backlog_occurrences():
            return 0

        info = self.detect_backlog(task_id, now)
        if not info.has_severe_backlog or len(info.pending_occurrences) <= 1:
            return 0

        to_skip = info.pending_occurrences[:-1]
        for occurrence in to_skip:
            self.completion.skip_occurrence(occurrence.id, now)
        logger.info(f"Skipped {len(to_skip)} backlog occurrences of task {task_id}")
        return len(to_skip)
