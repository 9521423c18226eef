"""Strategies for open-ended habits."""

from taskcadence.models.task import TaskType
from taskcadence.strategies.actions import TaskLifecycleAction
from taskcadence.strategies.base import OccurrenceContext, TaskStrategy


class HabitStrategy(TaskStrategy):
    """Interval habit: every finished occurrence spawns the next one."""

    task_type = TaskType.HABIT

    def on_occurrence_completed(self, context: OccurrenceContext) -> TaskLifecycleAction:
        return self._continue(context)

    def on_occurrence_skipped(self, context: OccurrenceContext) -> TaskLifecycleAction:
        return self._continue(context)

    def _continue(self, context: OccurrenceContext) -> TaskLifecycleAction:
        if context.recurrence is None:
            return TaskLifecycleAction.no_action()
        self._count_occurrence(context)
        return TaskLifecycleAction.create_next_occurrence(context.task.id)

    def should_generate_backlog_occurrences(self) -> bool:
        return True


class HabitPlusStrategy(HabitStrategy):
    """Habit with a per-period cap or a day pattern.

    Period rollover is handled by the period tracker when the occurrence is
    counted; the strategy itself never completes the task.
    """

    task_type = TaskType.HABIT_PLUS
