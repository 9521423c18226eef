"""Repository layer for task database operations."""

import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import desc

from taskcadence.models.recurrence import TaskRecurrence
from taskcadence.models.task import Task, TaskWithRecurrence
from taskcadence.database.models import TaskDB, TaskRecurrenceDB
from taskcadence.errors import TaskNotFoundError

logger = logging.getLogger(__name__)


class TaskRepository:
    """Repository for Task database operations."""

    def __init__(self, db: Session):
        self.db = db

    def _with_recurrence(self, task_db: TaskDB) -> TaskWithRecurrence:
        recurrence = None
        if task_db.recurrence_id:
            recurrence_db = self.db.query(TaskRecurrenceDB).filter(
                TaskRecurrenceDB.id == task_db.recurrence_id,
            ).first()
            recurrence = recurrence_db.to_pydantic() if recurrence_db else None
        return TaskWithRecurrence(**task_db.to_pydantic().model_dump(), recurrence=recurrence)

    def _get_row(self, task_id: str) -> TaskDB:
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
        if not task_db:
            raise TaskNotFoundError(task_id)
        return task_db

    def create_task(self, task: Task, recurrence: Optional[TaskRecurrence] = None) -> TaskWithRecurrence:
        """Create a task together with its recurrence rule."""
        try:
            if recurrence is not None:
                self.db.add(TaskRecurrenceDB.from_pydantic(recurrence))
                # The task row references the recurrence, so it must be written first.
                self.db.flush()
                task = task.model_copy(update={"recurrence_id": recurrence.id})
            task_db = TaskDB.from_pydantic(task)
            self.db.add(task_db)
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Created task {task.id}: {task.name[:50]}")
            return self._with_recurrence(task_db)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create task {task.id}: {type(e).__name__}: {str(e)}")
            raise

    def get_task(self, task_id: str) -> Optional[Task]:
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
        return task_db.to_pydantic() if task_db else None

    def get_task_with_recurrence(self, task_id: str) -> Optional[TaskWithRecurrence]:
        """Get a task with its recurrence attached, or None."""
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
        return self._with_recurrence(task_db) if task_db else None

    def list_active_with_recurrence(self, owner_id: str) -> List[TaskWithRecurrence]:
        """Active tasks of an owner that carry a recurrence, oldest first."""
        tasks_db = self.db.query(TaskDB).filter(
            TaskDB.owner_id == owner_id,
            TaskDB.is_active.is_(True),
            TaskDB.recurrence_id.isnot(None),
        ).order_by(TaskDB.created_at).all()
        return [self._with_recurrence(task_db) for task_db in tasks_db]

    def list_by_owner(self, owner_id: str) -> List[Task]:
        """All tasks of an owner, newest first."""
        tasks_db = self.db.query(TaskDB).filter(
            TaskDB.owner_id == owner_id,
        ).order_by(desc(TaskDB.created_at)).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def complete_task(self, task_id: str, now: Optional[datetime] = None) -> Task:
        """Mark a task as completed (inactive with a completion timestamp)."""
        task_db = self._get_row(task_id)
        task_db.is_active = False
        task_db.completed_at = now or datetime.utcnow()
        return self._commit(task_db, "complete")

    def deactivate_task(self, task_id: str) -> Task:
        """Mark a task as inactive without completing it."""
        task_db = self._get_row(task_id)
        task_db.is_active = False
        return self._commit(task_db, "deactivate")

    def _commit(self, task_db: TaskDB, verb: str) -> Task:
        try:
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Task {task_db.id}: {verb} ok")
            return task_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to {verb} task {task_db.id}: {type(e).__name__}: {str(e)}")
            raise

    def delete_task(self, task_id: str) -> bool:
        """Delete a task, its recurrence, and (by FK cascade) its occurrences and events."""
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
        if not task_db:
            return False
        recurrence_id = task_db.recurrence_id
        try:
            self.db.delete(task_db)
            if recurrence_id:
                self.db.query(TaskRecurrenceDB).filter(TaskRecurrenceDB.id == recurrence_id).delete()
            self.db.commit()
            logger.debug(f"Deleted task {task_id}")
            return True
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete task {task_id}: {type(e).__name__}: {str(e)}")
            raise
