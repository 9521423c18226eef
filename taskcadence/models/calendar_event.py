"""Calendar event data models for taskcadence."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class CalendarEvent(BaseModel):
    """A scheduled block of time, optionally bound to an occurrence."""

    id: str = Field(..., description="Unique event identifier (UUID v4)")
    owner_id: str = Field(..., description="User ID who owns this event")
    occurrence_id: Optional[str] = Field(None, description="Associated occurrence, if any")
    is_fixed: bool = Field(False, description="Whether the time block is immovable")
    start: datetime
    finish: datetime
    is_completed: bool = False
    dedicated_time: Optional[int] = Field(None, ge=0, description="Minutes actually dedicated")
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def duration_minutes(self) -> int:
        return int((self.finish - self.start).total_seconds() // 60)


class CreateCalendarEvent(BaseModel):
    """Input for persisting a new calendar event."""

    occurrence_id: Optional[str] = None
    is_fixed: bool = False
    start: datetime
    finish: datetime

    @model_validator(mode="after")
    def _finish_after_start(self):
        if self.finish <= self.start:
            raise ValueError("finish must be after start")
        return self
