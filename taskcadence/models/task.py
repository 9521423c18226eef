"""Task data model for taskcadence."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from taskcadence.models.occurrence import InitialDates
from taskcadence.models.recurrence import CreateRecurrence, TaskRecurrence


class TaskType(str, Enum):
    """Task shape derived from the fixed flag and the recurrence rule.

    Never persisted: it is recomputed on demand by ``calculate_task_type``.
    """
    SINGLE = "Single"
    FINITE_RECURRING = "FiniteRecurring"
    HABIT = "Habit"
    HABIT_PLUS = "HabitPlus"
    FIXED_SINGLE = "FixedSingle"
    FIXED_REPETITIVE = "FixedRepetitive"


class Task(BaseModel):
    """Canonical Task model."""

    id: str = Field(..., description="Unique task identifier (UUID v4)")
    owner_id: str = Field(..., description="User ID who owns this task")
    name: str = Field(..., min_length=1, description="Display name")
    description: Optional[str] = Field(None, description="Free-form description")
    importance: int = Field(5, ge=1, le=10, description="Importance score")
    is_fixed: bool = Field(False, description="Whether occurrences carry wall-clock times")
    is_active: bool = Field(True, description="False once the task is completed or deactivated")
    recurrence_id: Optional[str] = Field(None, description="Owned recurrence rule, if any")
    created_at: datetime = Field(..., description="Task creation timestamp")
    updated_at: datetime = Field(..., description="Task last update timestamp")
    completed_at: Optional[datetime] = Field(None, description="Completion timestamp")


class TaskWithRecurrence(Task):
    """Task with its recurrence rule attached."""

    recurrence: Optional[TaskRecurrence] = None


class CreateTask(BaseModel):
    """Input for creating a task with its recurrence.

    Fixed tasks must carry ``fixed_start_datetime`` and ``fixed_end_datetime``.
    """

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    importance: int = Field(5, ge=1, le=10)
    is_fixed: bool = False
    recurrence: Optional[CreateRecurrence] = None
    fixed_start_datetime: Optional[datetime] = None
    fixed_end_datetime: Optional[datetime] = None
    initial_dates: Optional[InitialDates] = None

    @model_validator(mode="after")
    def _fixed_needs_window(self):
        if self.is_fixed and (self.fixed_start_datetime is None or self.fixed_end_datetime is None):
            raise ValueError("fixed tasks require fixed_start_datetime and fixed_end_datetime")
        return self
