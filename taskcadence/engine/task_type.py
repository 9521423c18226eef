"""Task type classification.

Maps ``(task.is_fixed, recurrence)`` to one of the six task shapes.
"""

from typing import Optional

from taskcadence.models.recurrence import RecurrencePattern
from taskcadence.models.task import Task, TaskType


def calculate_task_type(recurrence: Optional[RecurrencePattern], task: Task) -> TaskType:
    """Classify a task. Total: every input yields a type.

    Precedence:
    1. Fixed tasks: FixedSingle without recurrence or with ``max_occurrences == 1``,
       otherwise FixedRepetitive.
    2. No recurrence: Single.
    3. ``max_occurrences == 1`` without interval: Single.
    4. ``max_occurrences > 1`` without interval: FiniteRecurring.
    5. Interval with a day pattern or ``max_occurrences > 1``: HabitPlus,
       interval alone: Habit.
    6. Anything else: Single.
    """
    if task.is_fixed:
        if recurrence is None or recurrence.max_occurrences == 1:
            return TaskType.FIXED_SINGLE
        return TaskType.FIXED_REPETITIVE

    if recurrence is None:
        return TaskType.SINGLE

    max_occurrences = recurrence.max_occurrences
    if not recurrence.interval:
        if max_occurrences == 1:
            return TaskType.SINGLE
        if max_occurrences and max_occurrences > 1:
            return TaskType.FINITE_RECURRING
        return TaskType.SINGLE

    if recurrence.has_day_pattern or (max_occurrences and max_occurrences > 1):
        return TaskType.HABIT_PLUS
    return TaskType.HABIT
