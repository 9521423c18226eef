"""Period bookkeeping for recurrences that cap occurrences per period.

``PeriodManager`` is the only writer of ``completed_occurrences`` and
``last_period_start``. A period's counter only reflects occurrences whose
start date falls inside that exact window ``[last_period_start, period_end)``.
"""

import logging
from datetime import datetime
from typing import Optional

from taskcadence.database.recurrence_repository import RecurrenceRepository
from taskcadence.dates import DateDomainService, Deadline, PeriodType
from taskcadence.dates.calendar_math import DateLike
from taskcadence.errors import RecurrenceNotFoundError
from taskcadence.models.recurrence import RecurrencePattern, RecurrenceUpdate, TaskRecurrence

logger = logging.getLogger(__name__)


def period_type_for(recurrence: RecurrencePattern) -> Optional[PeriodType]:
    """Cadence of the rule, or None when it defines no period."""
    if recurrence.interval:
        return PeriodType.INTERVAL
    if recurrence.days_of_week:
        return PeriodType.WEEKLY
    if recurrence.days_of_month:
        return PeriodType.MONTHLY
    return None


class PeriodManager:
    """Tracks period windows and the per-period completion counter."""

    def __init__(
        self,
        recurrence_repository: RecurrenceRepository,
        date_service: Optional[DateDomainService] = None,
    ):
        self.recurrence_repository = recurrence_repository
        self.date_service = date_service or DateDomainService()

    def get_period_end(self, period_start: DateLike, recurrence: RecurrencePattern) -> datetime:
        """Exclusive end of the period starting at ``period_start``.

        Interval periods last ``interval`` days, weekday periods 7 days and
        day-of-month periods end on the 1st of the next month. Rules without
        a cadence return ``period_start`` unchanged.
        """
        period_type = period_type_for(recurrence)
        if period_type is None:
            return Deadline.from_date(period_start).to_datetime()
        start = self.date_service.to_period_start(period_start)
        return self.date_service.calculate_period_end(start, period_type, recurrence.interval).to_datetime()

    def get_next_period_start_by_type(self, current_start: DateLike, recurrence: RecurrencePattern) -> datetime:
        period_type = period_type_for(recurrence)
        if period_type is None:
            return Deadline.from_date(current_start).to_datetime()
        start = self.date_service.to_period_start(current_start)
        return self.date_service.calculate_next_period(start, period_type, recurrence.interval).to_datetime()

    def get_period_containing(self, anchor: DateLike, recurrence: RecurrencePattern, value: DateLike) -> datetime:
        """Start of the period (walking forward from ``anchor``) that contains ``value``.

        Returns ``anchor`` itself when ``value`` is before the period end.
        """
        start = Deadline.from_date(anchor).to_datetime()
        if period_type_for(recurrence) is None:
            return start
        day = Deadline.from_date(value)
        while not day.is_before(Deadline.from_date(self.get_period_end(start, recurrence))):
            start = self.get_next_period_start_by_type(start, recurrence)
        return start

    def has_reached_period_limit(self, recurrence: TaskRecurrence) -> bool:
        if not recurrence.max_occurrences:
            return False
        return (recurrence.completed_occurrences or 0) >= recurrence.max_occurrences

    def should_start_new_period(self, recurrence: TaskRecurrence, now: Optional[datetime] = None) -> bool:
        """True iff the rule is capped, anchored, and ``now`` is at or past the period end."""
        if not recurrence.max_occurrences or not recurrence.last_period_start:
            return False
        if period_type_for(recurrence) is None:
            return False
        period_end = Deadline.from_date(self.get_period_end(recurrence.last_period_start, recurrence))
        return not Deadline.today(now).is_before(period_end)

    def increment_completed_occurrences(
        self,
        recurrence_id: str,
        occurrence_start_date: DateLike,
        now: Optional[datetime] = None,
    ) -> TaskRecurrence:
        """Count a completed or skipped occurrence against its period.

        Inside the current window the counter is incremented. At or after the
        window end the anchor fast-forwards to the period containing the
        occurrence and the counter restarts at 1. Occurrences from before the
        window (backlog) leave the counter untouched. Rules without a cadence
        keep a running total.

        An occurrence several periods late jumps straight to its own period
        rather than advancing the anchor by a single period.

        Raises:
            RecurrenceNotFoundError: no recurrence with ``recurrence_id``.
        """
        recurrence = self.recurrence_repository.get_recurrence_by_id(recurrence_id, for_update=True)
        if recurrence is None:
            raise RecurrenceNotFoundError(recurrence_id)

        completed = recurrence.completed_occurrences or 0
        if period_type_for(recurrence) is None:
            return self.recurrence_repository.update_recurrence(
                recurrence_id, RecurrenceUpdate(completed_occurrences=completed + 1)
            )

        anchor = recurrence.last_period_start or Deadline.today(now).to_datetime()
        period_start = Deadline.from_date(anchor)
        period_end = Deadline.from_date(self.get_period_end(period_start.day, recurrence))
        occurrence_day = Deadline.from_date(occurrence_start_date)

        if occurrence_day.is_before(period_start):
            logger.debug(f"Backlog occurrence {occurrence_day} before period {period_start} for recurrence {recurrence_id}")
            return recurrence

        if occurrence_day.is_before(period_end):
            return self.recurrence_repository.update_recurrence(
                recurrence_id,
                RecurrenceUpdate(
                    completed_occurrences=completed + 1,
                    last_period_start=period_start.to_datetime(),
                ),
            )

        new_start = self.get_period_containing(period_start.day, recurrence, occurrence_day.day)
        logger.info(f"Recurrence {recurrence_id} rolled over to period starting {new_start.date()}")
        return self.recurrence_repository.update_recurrence(
            recurrence_id,
            RecurrenceUpdate(completed_occurrences=1, last_period_start=new_start),
        )

    def start_new_period(self, recurrence: TaskRecurrence, period_start: DateLike) -> TaskRecurrence:
        """Anchor ``recurrence`` at ``period_start`` with a fresh counter."""
        start = Deadline.from_date(period_start).to_datetime()
        logger.info(f"Starting period {start.date()} for recurrence {recurrence.id}")
        return self.recurrence_repository.update_recurrence(
            recurrence.id,
            RecurrenceUpdate(completed_occurrences=0, last_period_start=start),
        )

    def advance_to_next_period(self, recurrence: TaskRecurrence, now: Optional[datetime] = None) -> TaskRecurrence:
        """Start the period right after the current one."""
        current = recurrence.last_period_start or Deadline.today(now).to_datetime()
        return self.start_new_period(recurrence, self.get_next_period_start_by_type(current, recurrence))

    def update_recurrence_period(self, recurrence: TaskRecurrence, now: Optional[datetime] = None) -> TaskRecurrence:
        """Fast-forward to the period containing ``now`` when the current one has ended."""
        if not self.should_start_new_period(recurrence, now):
            return recurrence
        today = Deadline.today(now)
        new_start = self.get_period_containing(recurrence.last_period_start, recurrence, today.day)
        return self.start_new_period(recurrence, new_start)
