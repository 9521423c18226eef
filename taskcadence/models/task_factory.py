"""Task and recurrence construction for taskcadence.

Centralizes ids, timestamps and defaults so every creation path agrees.
"""

import uuid
from datetime import datetime
from typing import Optional

from taskcadence.dates import Deadline
from taskcadence.models.recurrence import CreateRecurrence, TaskRecurrence
from taskcadence.models.task import CreateTask, Task


def default_recurrence() -> CreateRecurrence:
    """Tasks created without a rule are one-offs."""
    return CreateRecurrence(max_occurrences=1)


def create_task_base(owner_id: str, data: CreateTask, now: Optional[datetime] = None) -> Task:
    """Build a new active Task from creation input."""
    now = now or datetime.utcnow()
    return Task(
        id=str(uuid.uuid4()),
        owner_id=owner_id,
        name=data.name,
        description=data.description,
        importance=data.importance,
        is_fixed=data.is_fixed,
        is_active=True,
        created_at=now,
        updated_at=now,
    )


def create_recurrence(data: Optional[CreateRecurrence], now: Optional[datetime] = None) -> TaskRecurrence:
    """Build a stored recurrence with a fresh counter.

    Rules with a cadence are anchored at today unless the input already
    names a period start.
    """
    now = now or datetime.utcnow()
    data = data or default_recurrence()
    last_period_start = data.last_period_start
    if last_period_start is None and data.has_cadence:
        last_period_start = Deadline.today(now).to_datetime()
    return TaskRecurrence(
        id=str(uuid.uuid4()),
        interval=data.interval,
        days_of_week=data.days_of_week,
        days_of_month=data.days_of_month,
        max_occurrences=data.max_occurrences,
        end_date=data.end_date,
        completed_occurrences=0,
        last_period_start=last_period_start,
        created_at=now,
    )
