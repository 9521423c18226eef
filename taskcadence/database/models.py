"""SQLAlchemy database models for taskcadence."""

from datetime import datetime
from typing import Union, TypeVar, Type
import uuid
from sqlalchemy import Column, String, Integer, Boolean, DateTime, JSON, ForeignKey

from taskcadence.database.database import Base
from taskcadence.models.occurrence import OccurrenceStatus

T = TypeVar('T')


def enum_to_value(enum_obj: Union[str, T]) -> str:
    """Convert enum to string value (handles both enum and string)."""
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


def value_to_enum(value: str, enum_class: Type[T], default: T) -> T:
    """Convert stored string to enum with fallback to default."""
    if not value:
        return default
    try:
        return enum_class(value)
    except ValueError:
        return default


def _new_id() -> str:
    return str(uuid.uuid4())


class TaskRecurrenceDB(Base):
    """Database model for TaskRecurrence."""

    __tablename__ = "task_recurrences"

    id = Column(String, primary_key=True, default=_new_id)

    # Pattern (days_of_week and days_of_month are mutually exclusive)
    interval = Column(Integer, nullable=True)
    days_of_week = Column(JSON, nullable=True)
    days_of_month = Column(JSON, nullable=True)
    max_occurrences = Column(Integer, nullable=True)
    end_date = Column(DateTime, nullable=True)

    # Period bookkeeping (written only through PeriodManager)
    completed_occurrences = Column(Integer, nullable=False, default=0)
    last_period_start = Column(DateTime, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from taskcadence.models.recurrence import TaskRecurrence

        return TaskRecurrence(
            id=self.id,
            interval=self.interval,
            days_of_week=self.days_of_week or None,
            days_of_month=self.days_of_month or None,
            max_occurrences=self.max_occurrences,
            end_date=self.end_date,
            completed_occurrences=self.completed_occurrences or 0,
            last_period_start=self.last_period_start,
            created_at=self.created_at,
        )

    @classmethod
    def from_pydantic(cls, recurrence):
        """Create database model from a TaskRecurrence."""
        return cls(
            id=recurrence.id,
            interval=recurrence.interval,
            days_of_week=[enum_to_value(d) for d in recurrence.days_of_week] if recurrence.days_of_week else None,
            days_of_month=list(recurrence.days_of_month) if recurrence.days_of_month else None,
            max_occurrences=recurrence.max_occurrences,
            end_date=recurrence.end_date,
            completed_occurrences=recurrence.completed_occurrences,
            last_period_start=recurrence.last_period_start,
            created_at=recurrence.created_at or datetime.utcnow(),
        )


class TaskDB(Base):
    """Database model for Task."""

    __tablename__ = "tasks"

    # Primary key
    id = Column(String, primary_key=True, default=_new_id)

    # Owner association
    owner_id = Column(String, nullable=False, index=True)

    # Basic fields
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    importance = Column(Integer, nullable=False, default=5)

    # Flags
    is_fixed = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    # Owned recurrence (1:1, removed together with the task)
    recurrence_id = Column(String, ForeignKey("task_recurrences.id", ondelete="SET NULL"), nullable=True, unique=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    completed_at = Column(DateTime, nullable=True)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from taskcadence.models.task import Task

        return Task(
            id=self.id,
            owner_id=self.owner_id,
            name=self.name,
            description=self.description,
            importance=self.importance,
            is_fixed=self.is_fixed,
            is_active=self.is_active,
            recurrence_id=self.recurrence_id,
            created_at=self.created_at,
            updated_at=self.updated_at,
            completed_at=self.completed_at,
        )

    @classmethod
    def from_pydantic(cls, task):
        """Create database model from Pydantic model."""
        return cls(
            id=task.id,
            owner_id=task.owner_id,
            name=task.name,
            description=task.description,
            importance=task.importance,
            is_fixed=task.is_fixed,
            is_active=task.is_active,
            recurrence_id=task.recurrence_id,
            created_at=task.created_at,
            updated_at=task.updated_at,
            completed_at=task.completed_at,
        )


class TaskOccurrenceDB(Base):
    """Database model for TaskOccurrence."""

    __tablename__ = "task_occurrences"

    id = Column(String, primary_key=True, default=_new_id)
    task_id = Column(String, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)

    # Dates
    start_date = Column(DateTime, nullable=False, index=True)
    target_date = Column(DateTime, nullable=True)
    limit_date = Column(DateTime, nullable=True)

    # Time tracking (minutes)
    target_time_consumption = Column(Integer, nullable=True)
    time_consumed = Column(Integer, nullable=True)

    status = Column(String, nullable=False, default=OccurrenceStatus.PENDING.value)
    completed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from taskcadence.models.occurrence import TaskOccurrence

        return TaskOccurrence(
            id=self.id,
            task_id=self.task_id,
            start_date=self.start_date,
            target_date=self.target_date,
            limit_date=self.limit_date,
            target_time_consumption=self.target_time_consumption,
            time_consumed=self.time_consumed,
            status=value_to_enum(self.status, OccurrenceStatus, OccurrenceStatus.PENDING),
            completed_at=self.completed_at,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_create(cls, dto):
        """Create database model from a CreateOccurrence DTO."""
        return cls(
            id=_new_id(),
            task_id=dto.task_id,
            start_date=dto.start_date,
            target_date=dto.target_date,
            limit_date=dto.limit_date,
            target_time_consumption=dto.target_time_consumption,
            status=OccurrenceStatus.PENDING.value,
        )


class CalendarEventDB(Base):
    """Database model for CalendarEvent."""

    __tablename__ = "calendar_events"

    id = Column(String, primary_key=True, default=_new_id)
    owner_id = Column(String, nullable=False, index=True)
    occurrence_id = Column(
        String, ForeignKey("task_occurrences.id", ondelete="CASCADE"), nullable=True, index=True
    )

    is_fixed = Column(Boolean, nullable=False, default=False)
    start = Column(DateTime, nullable=False)
    finish = Column(DateTime, nullable=False)

    is_completed = Column(Boolean, nullable=False, default=False)
    dedicated_time = Column(Integer, nullable=True)
    completed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from taskcadence.models.calendar_event import CalendarEvent

        return CalendarEvent(
            id=self.id,
            owner_id=self.owner_id,
            occurrence_id=self.occurrence_id,
            is_fixed=self.is_fixed,
            start=self.start,
            finish=self.finish,
            is_completed=self.is_completed,
            dedicated_time=self.dedicated_time,
            completed_at=self.completed_at,
            created_at=self.created_at,
        )

    @classmethod
    def from_create(cls, owner_id: str, dto):
        """Create database model from a CreateCalendarEvent DTO."""
        return cls(
            id=_new_id(),
            owner_id=owner_id,
            occurrence_id=dto.occurrence_id,
            is_fixed=dto.is_fixed,
            start=dto.start,
            finish=dto.finish,
            is_completed=False,
        )
