"""Strategies for fixed tasks, whose occurrences are all materialized up front."""

from taskcadence.models.task import TaskType
from taskcadence.strategies.actions import TaskLifecycleAction
from taskcadence.strategies.base import (
    OccurrenceContext,
    TaskCompletionContext,
    TaskContext,
    TaskStrategy,
    all_finished,
)


class FixedSingleStrategy(TaskStrategy):
    """One occurrence/event pair; finishing it deactivates the task."""

    task_type = TaskType.FIXED_SINGLE

    def on_occurrence_completed(self, context: OccurrenceContext) -> TaskLifecycleAction:
        self._count_occurrence(context)
        return TaskLifecycleAction.deactivate_task()

    def on_occurrence_skipped(self, context: OccurrenceContext) -> TaskLifecycleAction:
        self._count_occurrence(context)
        return TaskLifecycleAction.deactivate_task()

    def should_create_next_occurrence(self, context: TaskContext) -> bool:
        return False

    def should_deactivate_task(self, context: TaskCompletionContext) -> bool:
        return all_finished(context.all_occurrences)


class FixedRepetitiveStrategy(TaskStrategy):
    """Many pre-generated occurrences; the last one to finish deactivates the task."""

    task_type = TaskType.FIXED_REPETITIVE

    def on_occurrence_completed(self, context: OccurrenceContext) -> TaskLifecycleAction:
        return self._after_discard(context)

    def on_occurrence_skipped(self, context: OccurrenceContext) -> TaskLifecycleAction:
        return self._after_discard(context)

    def _after_discard(self, context: OccurrenceContext) -> TaskLifecycleAction:
        if context.recurrence is None or context.all_occurrences is None:
            return TaskLifecycleAction.no_action()
        self._count_occurrence(context)
        if all_finished(context.all_occurrences):
            return TaskLifecycleAction.deactivate_task()
        return TaskLifecycleAction.no_action()

    def should_create_next_occurrence(self, context: TaskContext) -> bool:
        return False

    def should_deactivate_task(self, context: TaskCompletionContext) -> bool:
        return all_finished(context.all_occurrences)
