"""Input model for eagerly materialized fixed tasks."""

from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from taskcadence.models.recurrence import CreateRecurrence


class FixedTaskConfig(BaseModel):
    """Wall-clock window plus the recurrence that spreads it over days.

    Only the time of day of ``end_datetime`` is used for later days.
    """

    start_datetime: datetime
    end_datetime: datetime
    recurrence: CreateRecurrence = Field(default_factory=lambda: CreateRecurrence(max_occurrences=1))

    @model_validator(mode="after")
    def _end_after_start(self):
        if self.end_datetime <= self.start_datetime:
            raise ValueError("end_datetime must be after start_datetime")
        return self
