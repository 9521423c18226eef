"""Tests for the per-task-type lifecycle strategies."""

import pytest
from datetime import datetime, timedelta

from taskcadence.models import OccurrenceStatus, Task, TaskOccurrence, TaskRecurrence, TaskType
from taskcadence.models.calendar_event import CalendarEvent
from taskcadence.strategies import (
    ActionType,
    EventContext,
    OccurrenceContext,
    TaskCompletionContext,
    TaskContext,
    TaskStrategyFactory,
)
from taskcadence.strategies.base import count_by_status


class FakePeriodTracker:
    """Records increment calls instead of touching the database."""

    def __init__(self):
        self.calls = []

    def increment_completed_occurrences(self, recurrence_id, occurrence_start_date):
        self.calls.append((recurrence_id, occurrence_start_date))


@pytest.fixture
def tracker():
    return FakePeriodTracker()


@pytest.fixture
def factory(tracker):
    return TaskStrategyFactory(tracker)


def _task(is_fixed=False):
    now = datetime(2025, 1, 6)
    return Task(
        id="task-1", owner_id="owner-123", name="Task", is_fixed=is_fixed,
        recurrence_id="rec-1", created_at=now, updated_at=now,
    )


def _recurrence(**pattern):
    return TaskRecurrence(id="rec-1", **pattern)


def _occurrences(*statuses):
    start = datetime(2025, 1, 6)
    return [
        TaskOccurrence(
            id=f"occ-{i}", task_id="task-1", start_date=start + timedelta(days=i),
            status=status, target_time_consumption=45,
        )
        for i, status in enumerate(statuses)
    ]


def _context(occurrences, index, recurrence, is_fixed=False):
    return OccurrenceContext(
        occurrence=occurrences[index],
        task=_task(is_fixed),
        recurrence=recurrence,
        all_occurrences=occurrences,
    )


class TestSingleTaskStrategy:
    def test_completion_and_skip_complete_the_task(self, factory):
        strategy = factory.get_strategy_by_type(TaskType.SINGLE)
        occurrences = _occurrences(OccurrenceStatus.COMPLETED)
        context = _context(occurrences, 0, _recurrence(max_occurrences=1))
        assert strategy.on_occurrence_completed(context).type == ActionType.COMPLETE_TASK
        assert strategy.on_occurrence_skipped(context).type == ActionType.COMPLETE_TASK

    def test_never_creates_next(self, factory):
        strategy = factory.get_strategy_by_type(TaskType.SINGLE)
        assert not strategy.should_create_next_occurrence(TaskContext(task=_task(), recurrence=None))
        assert not strategy.should_generate_backlog_occurrences()


class TestFiniteRecurringStrategy:
    """Test the cap on discarded occurrences."""

    def test_creates_next_below_cap(self, factory, tracker):
        strategy = factory.get_strategy_by_type(TaskType.FINITE_RECURRING)
        occurrences = _occurrences(OccurrenceStatus.COMPLETED, OccurrenceStatus.SKIPPED)
        action = strategy.on_occurrence_completed(_context(occurrences, 0, _recurrence(max_occurrences=5)))

        assert action.type == ActionType.CREATE_NEXT_OCCURRENCE
        assert action.params.task_id == "task-1"
        assert action.params.target_time_consumption == 45
        assert tracker.calls == [("rec-1", datetime(2025, 1, 6))]

    def test_fifth_completion_of_five_completes_task(self, factory):
        strategy = factory.get_strategy_by_type(TaskType.FINITE_RECURRING)
        occurrences = _occurrences(*([OccurrenceStatus.COMPLETED] * 5))
        action = strategy.on_occurrence_completed(_context(occurrences, 4, _recurrence(max_occurrences=5)))
        assert action.type == ActionType.COMPLETE_TASK
        assert action.params is None

    def test_completes_task_at_cap(self, factory):
        strategy = factory.get_strategy_by_type(TaskType.FINITE_RECURRING)
        occurrences = _occurrences(*([OccurrenceStatus.COMPLETED] * 3 + [OccurrenceStatus.SKIPPED] * 2))
        action = strategy.on_occurrence_skipped(_context(occurrences, 4, _recurrence(max_occurrences=5)))
        assert action.type == ActionType.COMPLETE_TASK

    def test_skip_does_not_carry_time_consumption(self, factory):
        strategy = factory.get_strategy_by_type(TaskType.FINITE_RECURRING)
        occurrences = _occurrences(OccurrenceStatus.SKIPPED)
        action = strategy.on_occurrence_skipped(_context(occurrences, 0, _recurrence(max_occurrences=3)))
        assert action.type == ActionType.CREATE_NEXT_OCCURRENCE
        assert action.params.target_time_consumption is None

    def test_missing_recurrence_is_no_action(self, factory, tracker):
        strategy = factory.get_strategy_by_type(TaskType.FINITE_RECURRING)
        occurrences = _occurrences(OccurrenceStatus.COMPLETED)
        action = strategy.on_occurrence_completed(_context(occurrences, 0, None))
        assert action.type == ActionType.NO_ACTION
        assert tracker.calls == []

    def test_should_create_next_and_complete(self, factory):
        strategy = factory.get_strategy_by_type(TaskType.FINITE_RECURRING)
        recurrence = _recurrence(max_occurrences=2)

        one_done = _occurrences(OccurrenceStatus.COMPLETED)
        assert strategy.should_create_next_occurrence(
            TaskContext(task=_task(), recurrence=recurrence, last_occurrence=one_done[-1], all_occurrences=one_done)
        )

        one_open = _occurrences(OccurrenceStatus.PENDING)
        assert not strategy.should_create_next_occurrence(
            TaskContext(task=_task(), recurrence=recurrence, last_occurrence=one_open[-1], all_occurrences=one_open)
        )

        both_done = _occurrences(OccurrenceStatus.COMPLETED, OccurrenceStatus.SKIPPED)
        assert not strategy.should_create_next_occurrence(
            TaskContext(task=_task(), recurrence=recurrence, last_occurrence=both_done[-1], all_occurrences=both_done)
        )
        assert strategy.should_complete_task(
            TaskCompletionContext(task=_task(), recurrence=recurrence, all_occurrences=both_done)
        )


class TestHabitStrategies:
    """Test Habit and HabitPlus."""

    @pytest.mark.parametrize("task_type", [TaskType.HABIT, TaskType.HABIT_PLUS])
    def test_always_creates_next(self, factory, tracker, task_type):
        strategy = factory.get_strategy_by_type(task_type)
        occurrences = _occurrences(OccurrenceStatus.COMPLETED)
        context = _context(occurrences, 0, _recurrence(interval=7, max_occurrences=3))

        completed = strategy.on_occurrence_completed(context)
        skipped = strategy.on_occurrence_skipped(context)

        assert completed.type == ActionType.CREATE_NEXT_OCCURRENCE
        assert completed.params.task_id == "task-1"
        assert completed.params.target_time_consumption is None
        assert skipped.type == ActionType.CREATE_NEXT_OCCURRENCE
        assert len(tracker.calls) == 2

    @pytest.mark.parametrize("status", list(OccurrenceStatus))
    def test_weekly_habit_continues_regardless_of_status(self, factory, status):
        recurrence = _recurrence(interval=7)
        task = _task()
        strategy = factory.get_strategy(task, recurrence)
        assert strategy.task_type == TaskType.HABIT

        occurrences = _occurrences(status)
        action = strategy.on_occurrence_completed(_context(occurrences, 0, recurrence))
        assert action.type == ActionType.CREATE_NEXT_OCCURRENCE
        assert action.params.task_id == "task-1"

    def test_generates_backlog_and_never_completes(self, factory):
        strategy = factory.get_strategy_by_type(TaskType.HABIT_PLUS)
        recurrence = _recurrence(interval=7, max_occurrences=2)
        occurrences = _occurrences(OccurrenceStatus.COMPLETED, OccurrenceStatus.COMPLETED)
        assert strategy.should_generate_backlog_occurrences()
        assert not strategy.should_complete_task(
            TaskCompletionContext(task=_task(), recurrence=recurrence, all_occurrences=occurrences)
        )

    def test_no_recurrence_is_no_action(self, factory, tracker):
        strategy = factory.get_strategy_by_type(TaskType.HABIT)
        occurrences = _occurrences(OccurrenceStatus.COMPLETED)
        assert strategy.on_occurrence_completed(_context(occurrences, 0, None)).type == ActionType.NO_ACTION
        assert tracker.calls == []


class TestFixedStrategies:
    """Test FixedSingle and FixedRepetitive."""

    def test_fixed_single_deactivates(self, factory, tracker):
        strategy = factory.get_strategy_by_type(TaskType.FIXED_SINGLE)
        occurrences = _occurrences(OccurrenceStatus.SKIPPED)
        action = strategy.on_occurrence_skipped(_context(occurrences, 0, _recurrence(max_occurrences=1), True))
        assert action.type == ActionType.DEACTIVATE_TASK
        assert len(tracker.calls) == 1

    def test_fixed_repetitive_deactivates_when_all_finished(self, factory):
        strategy = factory.get_strategy_by_type(TaskType.FIXED_REPETITIVE)
        occurrences = _occurrences(
            OccurrenceStatus.COMPLETED, OccurrenceStatus.SKIPPED, OccurrenceStatus.COMPLETED, OccurrenceStatus.COMPLETED
        )
        action = strategy.on_occurrence_completed(_context(occurrences, 3, _recurrence(max_occurrences=4), True))
        assert action.type == ActionType.DEACTIVATE_TASK

    def test_fixed_repetitive_waits_for_pending(self, factory):
        strategy = factory.get_strategy_by_type(TaskType.FIXED_REPETITIVE)
        occurrences = _occurrences(OccurrenceStatus.COMPLETED, OccurrenceStatus.COMPLETED, OccurrenceStatus.PENDING)
        action = strategy.on_occurrence_completed(_context(occurrences, 1, _recurrence(max_occurrences=3), True))
        assert action.type == ActionType.NO_ACTION

    def test_fixed_strategies_never_create(self, factory):
        for task_type in (TaskType.FIXED_SINGLE, TaskType.FIXED_REPETITIVE):
            strategy = factory.get_strategy_by_type(task_type)
            assert not strategy.should_create_next_occurrence(TaskContext(task=_task(True), recurrence=None))

    def test_should_deactivate(self, factory):
        strategy = factory.get_strategy_by_type(TaskType.FIXED_REPETITIVE)
        recurrence = _recurrence(max_occurrences=2)
        assert not strategy.should_deactivate_task(
            TaskCompletionContext(task=_task(True), recurrence=recurrence, all_occurrences=[])
        )
        assert strategy.should_deactivate_task(
            TaskCompletionContext(
                task=_task(True), recurrence=recurrence,
                all_occurrences=_occurrences(OccurrenceStatus.COMPLETED, OccurrenceStatus.SKIPPED),
            )
        )


class TestEventHandlers:
    def test_event_handlers_take_no_action(self, factory):
        event = CalendarEvent(
            id="e1", owner_id="owner-123", start=datetime(2025, 1, 6, 9), finish=datetime(2025, 1, 6, 10),
        )
        for task_type in TaskType:
            strategy = factory.get_strategy_by_type(task_type)
            assert strategy.on_event_completed(EventContext(event=event)).type == ActionType.NO_ACTION
            assert strategy.on_event_skipped(EventContext(event=event)).type == ActionType.NO_ACTION


def test_count_by_status():
    counts = count_by_status(_occurrences(
        OccurrenceStatus.COMPLETED, OccurrenceStatus.SKIPPED, OccurrenceStatus.PENDING, OccurrenceStatus.IN_PROGRESS,
    ))
    assert (counts.completed, counts.skipped, counts.pending, counts.discarded) == (1, 1, 2, 2)
