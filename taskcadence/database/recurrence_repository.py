"""Repository for TaskRecurrence database operations."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from taskcadence.database.models import TaskRecurrenceDB
from taskcadence.errors import RecurrenceNotFoundError
from taskcadence.models.recurrence import RecurrenceUpdate, TaskRecurrence

logger = logging.getLogger(__name__)


class RecurrenceRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_recurrence_by_id(self, recurrence_id: str, for_update: bool = False) -> Optional[TaskRecurrence]:
        """Load a recurrence.

        With ``for_update`` the row is locked (SELECT ... FOR UPDATE) until the
        next commit, serializing read-modify-write cycles on the counter.
        SQLite ignores the lock clause.
        """
        query = self.db.query(TaskRecurrenceDB).filter(TaskRecurrenceDB.id == recurrence_id)
        if for_update:
            query = query.with_for_update()
        row = query.first()
        return row.to_pydantic() if row else None

    def update_recurrence(self, recurrence_id: str, update: RecurrenceUpdate) -> TaskRecurrence:
        """Apply the fields set on ``update`` and return the stored recurrence."""
        row = self.db.query(TaskRecurrenceDB).filter(TaskRecurrenceDB.id == recurrence_id).first()
        if row is None:
            raise RecurrenceNotFoundError(recurrence_id)
        for field, value in update.model_dump(exclude_unset=True).items():
            setattr(row, field, value)
        try:
            self.db.commit()
            self.db.refresh(row)
            logger.debug(
                f"Updated recurrence {recurrence_id}: completed={row.completed_occurrences} "
                f"period_start={row.last_period_start}"
            )
            return row.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update recurrence {recurrence_id}: {type(e).__name__}: {str(e)}")
            raise
