"""Tests for eager fixed task materialization."""

from datetime import date, datetime

from taskcadence.models import CreateRecurrence, DayOfWeek, FixedTaskConfig
from taskcadence.scheduling.fixed_tasks import fixed_task_dates


START = datetime(2025, 1, 6, 9, 30)


class TestFixedTaskDates:
    """Test which days get a fixed occurrence."""

    def test_single_occurrence(self):
        assert fixed_task_dates(START, CreateRecurrence(max_occurrences=1)) == [date(2025, 1, 6)]

    def test_interval_spacing(self):
        days = fixed_task_dates(START, CreateRecurrence(interval=2, max_occurrences=3))
        assert days == [date(2025, 1, 6), date(2025, 1, 8), date(2025, 1, 10)]

    def test_daily_by_default(self):
        days = fixed_task_dates(START, CreateRecurrence(max_occurrences=3))
        assert days == [date(2025, 1, 6), date(2025, 1, 7), date(2025, 1, 8)]

    def test_weekdays_until_end_date(self):
        rule = CreateRecurrence(days_of_week=[DayOfWeek.MON, DayOfWeek.WED], end_date=datetime(2025, 1, 20))
        assert fixed_task_dates(START, rule) == [
            date(2025, 1, 6), date(2025, 1, 8), date(2025, 1, 13), date(2025, 1, 15), date(2025, 1, 20),
        ]

    def test_weekdays_capped_by_max(self):
        rule = CreateRecurrence(days_of_week=[DayOfWeek.MON, DayOfWeek.WED], max_occurrences=3)
        assert fixed_task_dates(START, rule) == [date(2025, 1, 6), date(2025, 1, 8), date(2025, 1, 13)]

    def test_weekdays_default_window(self):
        rule = CreateRecurrence(days_of_week=[DayOfWeek.FRI])
        days = fixed_task_dates(START, rule)
        assert days[0] == date(2025, 1, 10)
        assert days[-1] == date(2025, 1, 31)
        assert len(days) == 4

    def test_days_of_month_within_interval_window(self):
        rule = CreateRecurrence(days_of_month=[10], interval=40)
        assert fixed_task_dates(START, rule) == [date(2025, 1, 10), date(2025, 2, 10)]


class TestCreateFixedTaskEvents:
    """Test occurrence/event pairs created for fixed tasks."""

    def test_pairs_share_the_wall_clock_window(self, scheduler, make_task, test_owner_id):
        task = make_task(is_fixed=True, interval=1, max_occurrences=2)
        config = FixedTaskConfig(
            start_datetime=START,
            end_datetime=datetime(2025, 1, 6, 10, 30),
            recurrence=CreateRecurrence(interval=1, max_occurrences=2),
        )

        pairs = scheduler.create_fixed_task_events(task.id, test_owner_id, config)

        assert len(pairs) == 2
        for (occurrence, event), day in zip(pairs, (6, 7)):
            assert occurrence.task_id == task.id
            assert occurrence.start_date == datetime(2025, 1, day)
            assert event.occurrence_id == occurrence.id
            assert event.owner_id == test_owner_id
            assert event.is_fixed is True
            assert event.start == datetime(2025, 1, day, 9, 30)
            assert event.finish == datetime(2025, 1, day, 10, 30)

    def test_overnight_window_finishes_next_day(self, scheduler, make_task, test_owner_id):
        task = make_task(is_fixed=True, max_occurrences=1)
        config = FixedTaskConfig(
            start_datetime=datetime(2025, 1, 6, 23, 0),
            end_datetime=datetime(2025, 1, 7, 1, 0),
        )

        [(occurrence, event)] = scheduler.create_fixed_task_events(task.id, test_owner_id, config)

        assert event.start == datetime(2025, 1, 6, 23, 0)
        assert event.finish == datetime(2025, 1, 7, 1, 0)
        assert event.duration_minutes == 120

    def test_events_are_linked_in_storage(self, scheduler, make_task, test_owner_id):
        task = make_task(is_fixed=True, max_occurrences=1)
        config = FixedTaskConfig(start_datetime=START, end_datetime=datetime(2025, 1, 6, 10, 0))

        [(occurrence, event)] = scheduler.create_fixed_task_events(task.id, test_owner_id, config)

        stored = scheduler.event_repository.get_events_by_occurrence_id(occurrence.id)
        assert [e.id for e in stored] == [event.id]
