"""Tests for task type classification and strategy dispatch."""

import pytest
from datetime import datetime

from taskcadence.engine import calculate_task_type
from taskcadence.models import DayOfWeek, RecurrencePattern, Task, TaskType
from taskcadence.strategies import TaskStrategyFactory
from taskcadence.strategies.factory import STRATEGY_CLASSES


def _task(is_fixed=False):
    now = datetime(2025, 1, 6)
    return Task(id="t1", owner_id="owner-123", name="Task", is_fixed=is_fixed, created_at=now, updated_at=now)


class _NullTracker:
    def increment_completed_occurrences(self, recurrence_id, occurrence_start_date):
        pass


class TestCalculateTaskType:
    """Test every classification branch."""

    @pytest.mark.parametrize("recurrence, expected", [
        (None, TaskType.SINGLE),
        (RecurrencePattern(max_occurrences=1), TaskType.SINGLE),
        (RecurrencePattern(), TaskType.SINGLE),
        (RecurrencePattern(max_occurrences=4), TaskType.FINITE_RECURRING),
        (RecurrencePattern(interval=7), TaskType.HABIT),
        (RecurrencePattern(interval=7, max_occurrences=1), TaskType.HABIT),
        (RecurrencePattern(interval=7, max_occurrences=3), TaskType.HABIT_PLUS),
        (RecurrencePattern(interval=7, days_of_week=[DayOfWeek.MON]), TaskType.HABIT_PLUS),
        (RecurrencePattern(interval=30, days_of_month=[1]), TaskType.HABIT_PLUS),
        # Day patterns without an interval fall through to Single.
        (RecurrencePattern(days_of_week=[DayOfWeek.MON]), TaskType.SINGLE),
    ])
    def test_non_fixed(self, recurrence, expected):
        assert calculate_task_type(recurrence, _task()) == expected

    @pytest.mark.parametrize("recurrence, expected", [
        (None, TaskType.FIXED_SINGLE),
        (RecurrencePattern(max_occurrences=1), TaskType.FIXED_SINGLE),
        (RecurrencePattern(max_occurrences=5), TaskType.FIXED_REPETITIVE),
        (RecurrencePattern(interval=1), TaskType.FIXED_REPETITIVE),
        (RecurrencePattern(interval=7, max_occurrences=1), TaskType.FIXED_SINGLE),
    ])
    def test_fixed_takes_precedence(self, recurrence, expected):
        assert calculate_task_type(recurrence, _task(is_fixed=True)) == expected

    def test_task_type_values(self):
        assert TaskType("HabitPlus") is TaskType.HABIT_PLUS
        assert TaskType.FIXED_REPETITIVE.value == "FixedRepetitive"


class TestTaskStrategyFactory:
    """Test the strategy dispatch table."""

    def test_every_type_has_a_strategy(self):
        factory = TaskStrategyFactory(_NullTracker())
        assert set(factory.registered_types()) == set(TaskType)
        for task_type in TaskType:
            assert factory.get_strategy_by_type(task_type).task_type == task_type

    def test_lookup_by_value(self):
        factory = TaskStrategyFactory(_NullTracker())
        assert factory.get_strategy_by_type("Habit").task_type == TaskType.HABIT
        assert factory.has_strategy("FixedSingle")
        assert not factory.has_strategy("Weekly")

    def test_unknown_type_raises(self):
        factory = TaskStrategyFactory(_NullTracker())
        with pytest.raises(ValueError):
            factory.get_strategy_by_type("Weekly")

    def test_missing_registration_is_rejected(self):
        partial = {k: v for k, v in STRATEGY_CLASSES.items() if k != TaskType.HABIT}
        with pytest.raises(ValueError, match="Habit"):
            TaskStrategyFactory(_NullTracker(), strategy_classes=partial)

    @pytest.mark.parametrize("is_fixed", [False, True])
    @pytest.mark.parametrize("recurrence", [
        None,
        RecurrencePattern(max_occurrences=1),
        RecurrencePattern(max_occurrences=4),
        RecurrencePattern(interval=7),
        RecurrencePattern(interval=7, max_occurrences=3),
        RecurrencePattern(interval=7, days_of_week=[DayOfWeek.MON]),
        RecurrencePattern(days_of_month=[1, 15]),
    ])
    def test_strategy_matches_classification(self, is_fixed, recurrence):
        factory = TaskStrategyFactory(_NullTracker())
        task = _task(is_fixed)
        strategy = factory.get_strategy(task, recurrence)
        assert strategy is not None
        assert strategy.task_type == calculate_task_type(recurrence, task)

    def test_get_strategy_classifies_task(self):
        factory = TaskStrategyFactory(_NullTracker())
        strategy = factory.get_strategy(_task(), RecurrencePattern(max_occurrences=3))
        assert strategy.task_type == TaskType.FINITE_RECURRING
        assert repr(strategy) == "FiniteRecurringStrategy(task_type=FiniteRecurring)"
