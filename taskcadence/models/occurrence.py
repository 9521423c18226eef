"""Occurrence data models for taskcadence."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class OccurrenceStatus(str, Enum):
    """Occurrence status enumeration."""
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    SKIPPED = "Skipped"


FINISHED_STATUSES = (OccurrenceStatus.COMPLETED, OccurrenceStatus.SKIPPED)


class TaskOccurrence(BaseModel):
    """One concrete, dated instance of a task's work."""

    id: str = Field(..., description="Unique occurrence identifier (UUID v4)")
    task_id: str = Field(..., description="Owning task")
    start_date: datetime = Field(..., description="When the occurrence becomes active")
    target_date: Optional[datetime] = Field(None, description="Soft goal")
    limit_date: Optional[datetime] = Field(None, description="Hard deadline")
    target_time_consumption: Optional[int] = Field(None, ge=0, description="Planned minutes")
    time_consumed: Optional[int] = Field(None, ge=0, description="Minutes spent so far")
    status: OccurrenceStatus = Field(OccurrenceStatus.PENDING, description="Lifecycle status")
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_finished(self) -> bool:
        """Completed and skipped occurrences are both 'discarded'."""
        return self.status in FINISHED_STATUSES


class CreateOccurrence(BaseModel):
    """Input for persisting a new occurrence."""

    task_id: str
    start_date: datetime
    target_date: Optional[datetime] = None
    limit_date: Optional[datetime] = None
    target_time_consumption: Optional[int] = Field(None, ge=0)


class InitialDates(BaseModel):
    """Caller-provided overrides for the computed occurrence dates."""

    target_date: Optional[datetime] = None
    limit_date: Optional[datetime] = None
    target_time_consumption: Optional[int] = Field(None, ge=0)

    @model_validator(mode="after")
    def _target_not_after_limit(self):
        if self.target_date and self.limit_date and self.target_date > self.limit_date:
            raise ValueError("target_date must not be after limit_date")
        return self
