"""Strategies for non-habit tasks: one-off and finite recurring."""

from taskcadence.models.task import TaskType
from taskcadence.strategies.actions import TaskLifecycleAction
from taskcadence.strategies.base import (
    OccurrenceContext,
    TaskCompletionContext,
    TaskContext,
    TaskStrategy,
    count_by_status,
)


class SingleTaskStrategy(TaskStrategy):
    """Exactly one occurrence ever exists; finishing it completes the task."""

    task_type = TaskType.SINGLE

    def on_occurrence_completed(self, context: OccurrenceContext) -> TaskLifecycleAction:
        return TaskLifecycleAction.complete_task()

    def on_occurrence_skipped(self, context: OccurrenceContext) -> TaskLifecycleAction:
        return TaskLifecycleAction.complete_task()

    def should_create_next_occurrence(self, context: TaskContext) -> bool:
        return False

    def should_complete_task(self, context: TaskCompletionContext) -> bool:
        return all(o.is_finished for o in context.all_occurrences) and bool(context.all_occurrences)


class FiniteRecurringStrategy(TaskStrategy):
    """A fixed number of occurrences without a cadence.

    Skipped occurrences count toward the cap the same as completed ones.
    """

    task_type = TaskType.FINITE_RECURRING

    def on_occurrence_completed(self, context: OccurrenceContext) -> TaskLifecycleAction:
        return self._after_discard(context, context.occurrence.target_time_consumption)

    def on_occurrence_skipped(self, context: OccurrenceContext) -> TaskLifecycleAction:
        return self._after_discard(context, None)

    def _after_discard(self, context: OccurrenceContext, target_time_consumption) -> TaskLifecycleAction:
        if context.recurrence is None or context.all_occurrences is None:
            return TaskLifecycleAction.no_action()

        self._count_occurrence(context)

        discarded = count_by_status(context.all_occurrences).discarded
        if discarded < (context.recurrence.max_occurrences or 0):
            return TaskLifecycleAction.create_next_occurrence(context.task.id, target_time_consumption)
        return TaskLifecycleAction.complete_task()

    def should_create_next_occurrence(self, context: TaskContext) -> bool:
        if context.recurrence is None:
            return False
        discarded = count_by_status(context.all_occurrences).discarded
        if discarded >= (context.recurrence.max_occurrences or 0):
            return False
        return super().should_create_next_occurrence(context)

    def should_complete_task(self, context: TaskCompletionContext) -> bool:
        if context.recurrence is None:
            return False
        return context.counts.discarded >= (context.recurrence.max_occurrences or 0)
