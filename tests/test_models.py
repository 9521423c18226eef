"""Tests for pydantic model validation and task construction."""

import pytest
from datetime import datetime
from pydantic import ValidationError

from taskcadence.models import (
    CalendarEvent,
    CreateCalendarEvent,
    CreateRecurrence,
    CreateTask,
    DayOfWeek,
    FixedTaskConfig,
    InitialDates,
    OccurrenceStatus,
    RecurrencePattern,
    TaskOccurrence,
)
from taskcadence.models.recurrence import day_of_week_for
from taskcadence.models.task_factory import create_recurrence, create_task_base, default_recurrence


class TestRecurrencePattern:
    """Test recurrence rule validation."""

    def test_day_patterns_are_mutually_exclusive(self):
        with pytest.raises(ValidationError):
            RecurrencePattern(days_of_week=[DayOfWeek.MON], days_of_month=[1])

    def test_days_of_month_range(self):
        with pytest.raises(ValidationError):
            RecurrencePattern(days_of_month=[0])
        with pytest.raises(ValidationError):
            RecurrencePattern(days_of_month=[32])

    def test_duplicate_days_are_dropped(self):
        pattern = RecurrencePattern(days_of_week=["Mon", "Wed", "Mon"], days_of_month=None)
        assert pattern.days_of_week == [DayOfWeek.MON, DayOfWeek.WED]
        assert RecurrencePattern(days_of_month=[15, 1, 15]).days_of_month == [15, 1]

    def test_interval_and_max_must_be_positive(self):
        with pytest.raises(ValidationError):
            RecurrencePattern(interval=0)
        with pytest.raises(ValidationError):
            RecurrencePattern(max_occurrences=0)

    def test_cadence_flags(self):
        assert RecurrencePattern(max_occurrences=1).is_one_off
        assert not RecurrencePattern(interval=7).is_one_off
        assert RecurrencePattern(interval=7).has_cadence
        assert RecurrencePattern(days_of_month=[1]).has_day_pattern
        assert not RecurrencePattern(max_occurrences=3).has_cadence

    def test_weekday_indexes_start_on_monday(self):
        assert DayOfWeek.MON.weekday == 0
        assert DayOfWeek.SUN.weekday == 6
        assert day_of_week_for(4) == DayOfWeek.FRI


class TestInputModels:
    """Test cross-field validation on creation inputs."""

    def test_fixed_task_requires_window(self):
        with pytest.raises(ValidationError):
            CreateTask(name="Standup", is_fixed=True)

    def test_task_name_required(self):
        with pytest.raises(ValidationError):
            CreateTask(name="")

    def test_initial_dates_target_not_after_limit(self):
        with pytest.raises(ValidationError):
            InitialDates(target_date=datetime(2025, 1, 10), limit_date=datetime(2025, 1, 9))
        dates = InitialDates(target_date=datetime(2025, 1, 9), limit_date=datetime(2025, 1, 9))
        assert dates.target_date == dates.limit_date

    def test_event_finish_after_start(self):
        with pytest.raises(ValidationError):
            CreateCalendarEvent(start=datetime(2025, 1, 6, 10), finish=datetime(2025, 1, 6, 10))

    def test_fixed_config_defaults_to_single_occurrence(self):
        config = FixedTaskConfig(start_datetime=datetime(2025, 1, 6, 9), end_datetime=datetime(2025, 1, 6, 10))
        assert config.recurrence.max_occurrences == 1
        with pytest.raises(ValidationError):
            FixedTaskConfig(start_datetime=datetime(2025, 1, 6, 10), end_datetime=datetime(2025, 1, 6, 9))


class TestDerivedProperties:
    def test_occurrence_is_finished(self):
        base = {"id": "o1", "task_id": "t1", "start_date": datetime(2025, 1, 6)}
        assert not TaskOccurrence(**base).is_finished
        assert not TaskOccurrence(**base, status=OccurrenceStatus.IN_PROGRESS).is_finished
        assert TaskOccurrence(**base, status=OccurrenceStatus.COMPLETED).is_finished
        assert TaskOccurrence(**base, status="Skipped").is_finished

    def test_event_duration(self):
        event = CalendarEvent(
            id="e1",
            owner_id="owner-123",
            start=datetime(2025, 1, 6, 9, 0),
            finish=datetime(2025, 1, 6, 10, 15),
        )
        assert event.duration_minutes == 75


class TestTaskFactory:
    """Test task and recurrence construction defaults."""

    def test_default_recurrence_is_one_off(self):
        assert default_recurrence().is_one_off

    def test_create_task_base(self, now):
        task = create_task_base("owner-123", CreateTask(name="Write report", importance=8), now)
        assert task.owner_id == "owner-123"
        assert task.importance == 8
        assert task.is_active is True
        assert task.created_at == now
        assert task.recurrence_id is None

    def test_cadenced_recurrence_is_anchored_today(self, now):
        recurrence = create_recurrence(CreateRecurrence(interval=7), now)
        assert recurrence.completed_occurrences == 0
        assert recurrence.last_period_start == datetime(2025, 1, 6)

    def test_explicit_anchor_is_kept(self, now):
        anchor = datetime(2025, 1, 1)
        recurrence = create_recurrence(CreateRecurrence(interval=7, last_period_start=anchor), now)
        assert recurrence.last_period_start == anchor

    def test_recurrence_without_cadence_has_no_anchor(self, now):
        recurrence = create_recurrence(CreateRecurrence(max_occurrences=3), now)
        assert recurrence.last_period_start is None
        assert create_recurrence(None, now).max_occurrences == 1
