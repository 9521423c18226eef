"""Per-task-type lifecycle strategies."""

from taskcadence.strategies.actions import ActionType, CreateOccurrenceParams, TaskLifecycleAction
from taskcadence.strategies.base import (
    EventContext,
    OccurrenceContext,
    PeriodTracker,
    TaskCompletionContext,
    TaskContext,
    TaskStrategy,
)
from taskcadence.strategies.factory import TaskStrategyFactory

__all__ = [
    "ActionType",
    "CreateOccurrenceParams",
    "TaskLifecycleAction",
    "EventContext",
    "OccurrenceContext",
    "PeriodTracker",
    "TaskCompletionContext",
    "TaskContext",
    "TaskStrategy",
    "TaskStrategyFactory",
]
