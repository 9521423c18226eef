"""Repository for TaskOccurrence database operations."""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from taskcadence.database.models import TaskOccurrenceDB, enum_to_value
from taskcadence.errors import OccurrenceNotFoundError
from taskcadence.models.occurrence import CreateOccurrence, OccurrenceStatus, TaskOccurrence

logger = logging.getLogger(__name__)


class OccurrenceRepository:
    def __init__(self, db: Session):
        self.db = db

    def create_occurrence(self, dto: CreateOccurrence) -> TaskOccurrence:
        row = TaskOccurrenceDB.from_create(dto)
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            logger.debug(f"Created occurrence {row.id} for task {dto.task_id} starting {dto.start_date}")
            return row.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create occurrence for task {dto.task_id}: {type(e).__name__}: {str(e)}")
            raise

    def get_occurrence(self, occurrence_id: str) -> Optional[TaskOccurrence]:
        row = self.db.query(TaskOccurrenceDB).filter(TaskOccurrenceDB.id == occurrence_id).first()
        return row.to_pydantic() if row else None

    def get_latest_occurrence_by_task_id(self, task_id: str) -> Optional[TaskOccurrence]:
        """Occurrence with the latest start date (newest created on ties)."""
        row = (
            self.db.query(TaskOccurrenceDB)
            .filter(TaskOccurrenceDB.task_id == task_id)
            .order_by(desc(TaskOccurrenceDB.start_date), desc(TaskOccurrenceDB.created_at))
            .first()
        )
        return row.to_pydantic() if row else None

    def get_occurrences_by_task_id(self, task_id: str) -> List[TaskOccurrence]:
        """All occurrences of a task, oldest start date first."""
        rows = (
            self.db.query(TaskOccurrenceDB)
            .filter(TaskOccurrenceDB.task_id == task_id)
            .order_by(TaskOccurrenceDB.start_date, TaskOccurrenceDB.created_at)
            .all()
        )
        return [row.to_pydantic() for row in rows]

    def update_status(
        self,
        occurrence_id: str,
        status: OccurrenceStatus,
        now: Optional[datetime] = None,
        time_consumed: Optional[int] = None,
    ) -> TaskOccurrence:
        """Set the status; completing stamps ``completed_at``."""
        row = self.db.query(TaskOccurrenceDB).filter(TaskOccurrenceDB.id == occurrence_id).first()
        if row is None:
            raise OccurrenceNotFoundError(occurrence_id)
        row.status = enum_to_value(status)
        if row.status == OccurrenceStatus.COMPLETED.value:
            row.completed_at = now or datetime.utcnow()
        if time_consumed is not None:
            row.time_consumed = time_consumed
        try:
            self.db.commit()
            self.db.refresh(row)
            logger.debug(f"Occurrence {occurrence_id} -> {row.status}")
            return row.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update occurrence {occurrence_id}: {type(e).__name__}: {str(e)}")
            raise
