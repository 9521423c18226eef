"""Lifecycle actions returned by task strategies.

Actions are plain data. ``LifecycleActionInterpreter`` performs the
persistence they describe.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ActionType(str, Enum):
    CREATE_NEXT_OCCURRENCE = "CREATE_NEXT_OCCURRENCE"
    COMPLETE_TASK = "COMPLETE_TASK"
    DEACTIVATE_TASK = "DEACTIVATE_TASK"
    NO_ACTION = "NO_ACTION"


@dataclass(frozen=True)
class CreateOccurrenceParams:
    task_id: str
    target_time_consumption: Optional[int] = None


@dataclass(frozen=True)
class TaskLifecycleAction:
    """Next step in a task's lifecycle."""

    type: ActionType
    params: Optional[CreateOccurrenceParams] = field(default=None)

    @classmethod
    def create_next_occurrence(cls, task_id: str, target_time_consumption: Optional[int] = None) -> "TaskLifecycleAction":
        return cls(ActionType.CREATE_NEXT_OCCURRENCE, CreateOccurrenceParams(task_id, target_time_consumption))

    @classmethod
    def complete_task(cls) -> "TaskLifecycleAction":
        return cls(ActionType.COMPLETE_TASK)

    @classmethod
    def deactivate_task(cls) -> "TaskLifecycleAction":
        return cls(ActionType.DEACTIVATE_TASK)

    @classmethod
    def no_action(cls) -> "TaskLifecycleAction":
        return cls(ActionType.NO_ACTION)
