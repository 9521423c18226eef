"""Dispatch table from task type to strategy."""

from typing import Dict, List, Optional, Type

from taskcadence.engine.task_type import calculate_task_type
from taskcadence.models.recurrence import RecurrencePattern
from taskcadence.models.task import Task, TaskType
from taskcadence.strategies.base import PeriodTracker, TaskStrategy
from taskcadence.strategies.fixed import FixedRepetitiveStrategy, FixedSingleStrategy
from taskcadence.strategies.habits import HabitPlusStrategy, HabitStrategy
from taskcadence.strategies.single import FiniteRecurringStrategy, SingleTaskStrategy

STRATEGY_CLASSES: Dict[TaskType, Type[TaskStrategy]] = {
    TaskType.SINGLE: SingleTaskStrategy,
    TaskType.FINITE_RECURRING: FiniteRecurringStrategy,
    TaskType.HABIT: HabitStrategy,
    TaskType.HABIT_PLUS: HabitPlusStrategy,
    TaskType.FIXED_SINGLE: FixedSingleStrategy,
    TaskType.FIXED_REPETITIVE: FixedRepetitiveStrategy,
}


class TaskStrategyFactory:
    """Builds one strategy per task type and selects them by classification."""

    def __init__(self, period_tracker: PeriodTracker, strategy_classes: Optional[Dict[TaskType, Type[TaskStrategy]]] = None):
        classes = STRATEGY_CLASSES if strategy_classes is None else strategy_classes
        missing = [t.value for t in TaskType if t not in classes]
        if missing:
            raise ValueError(f"No strategy registered for task types: {', '.join(missing)}")
        self._strategies: Dict[TaskType, TaskStrategy] = {
            task_type: cls(period_tracker) for task_type, cls in classes.items()
        }

    def get_strategy(self, task: Task, recurrence: Optional[RecurrencePattern] = None) -> TaskStrategy:
        return self.get_strategy_by_type(calculate_task_type(recurrence, task))

    def get_strategy_by_type(self, task_type: TaskType) -> TaskStrategy:
        try:
            return self._strategies[TaskType(task_type)]
        except KeyError:
            raise ValueError(f"No strategy found for task type: {task_type}") from None

    def has_strategy(self, task_type: TaskType) -> bool:
        try:
            return TaskType(task_type) in self._strategies
        except ValueError:
            return False

    def registered_types(self) -> List[TaskType]:
        return list(self._strategies)
