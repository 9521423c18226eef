"""Eager materialization of fixed tasks.

Fixed tasks get every occurrence and its calendar event up front, so their
strategies never create occurrences lazily.
"""

import logging
from datetime import date, datetime, timedelta
from typing import List, Tuple

from dateutil.rrule import DAILY, rrule

from taskcadence.database.calendar_event_repository import CalendarEventRepository
from taskcadence.database.occurrence_repository import OccurrenceRepository
from taskcadence.dates import Deadline, EventTime
from taskcadence.models.calendar_event import CalendarEvent, CreateCalendarEvent
from taskcadence.models.constants import DEFAULT_FIXED_SPACING_DAYS, DEFAULT_FIXED_WINDOW_DAYS
from taskcadence.models.fixed import FixedTaskConfig
from taskcadence.models.occurrence import CreateOccurrence, TaskOccurrence
from taskcadence.models.recurrence import CreateRecurrence, DayOfWeek

logger = logging.getLogger(__name__)


def fixed_task_dates(start: datetime, recurrence: CreateRecurrence) -> List[date]:
    """Calendar days that get a fixed occurrence, in order."""
    first = Deadline.from_date(start)

    if recurrence.max_occurrences == 1:
        return [first.day]

    if recurrence.has_day_pattern:
        window_end = _window_end(first, recurrence)
        rule_kwargs = {"dtstart": first.to_datetime(), "until": window_end.to_datetime()}
        if recurrence.days_of_week:
            rule_kwargs["byweekday"] = [DayOfWeek(d).weekday for d in recurrence.days_of_week]
        else:
            rule_kwargs["bymonthday"] = list(recurrence.days_of_month)
        days = [d.date() for d in rrule(DAILY, **rule_kwargs)]
    else:
        count = recurrence.max_occurrences or 1
        spacing = recurrence.interval or DEFAULT_FIXED_SPACING_DAYS
        days = [first.add_days(i * spacing).day for i in range(count)]

    if recurrence.max_occurrences:
        days = days[:recurrence.max_occurrences]
    return days


def _window_end(first: Deadline, recurrence: CreateRecurrence) -> Deadline:
    """Inclusive last day of the materialization window."""
    if recurrence.end_date:
        return Deadline.from_date(recurrence.end_date)
    if recurrence.interval:
        return first.add_days(recurrence.interval)
    return first.add_days(DEFAULT_FIXED_WINDOW_DAYS)


class FixedTaskService:
    def __init__(self, occurrence_repository: OccurrenceRepository, event_repository: CalendarEventRepository):
        self.occurrence_repository = occurrence_repository
        self.event_repository = event_repository

    def create_fixed_task_events(
        self,
        task_id: str,
        owner_id: str,
        config: FixedTaskConfig,
    ) -> List[Tuple[TaskOccurrence, CalendarEvent]]:
        """Create one occurrence and one fixed event per scheduled day.

        Each event takes the time of day of ``config.start_datetime`` and
        ``config.end_datetime`` on its own day; a finish that falls before
        the start on the clock rolls into the next day.
        """
        start_time = EventTime(config.start_datetime).time_of_day
        end_time = EventTime(config.end_datetime).time_of_day

        created = []
        for day in fixed_task_dates(config.start_datetime, config.recurrence):
            day_start = Deadline(day).to_datetime()
            occurrence = self.occurrence_repository.create_occurrence(
                CreateOccurrence(task_id=task_id, start_date=day_start, target_date=day_start, limit_date=day_start)
            )
            event_start = EventTime.on_day(day, start_time).to_datetime()
            event_finish = EventTime.on_day(day, end_time).to_datetime()
            if event_finish <= event_start:
                event_finish += timedelta(days=1)
            event = self.event_repository.create_event(
                owner_id,
                CreateCalendarEvent(
                    occurrence_id=occurrence.id,
                    is_fixed=True,
                    start=event_start,
                    finish=event_finish,
                ),
            )
            created.append((occurrence, event))

        logger.info(f"Materialized {len(created)} fixed occurrences for task {task_id}")
        return created
