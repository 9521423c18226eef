"""Repository for CalendarEvent database operations."""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from taskcadence.database.models import CalendarEventDB
from taskcadence.errors import CalendarEventNotFoundError
from taskcadence.models.calendar_event import CalendarEvent, CreateCalendarEvent

logger = logging.getLogger(__name__)


class CalendarEventRepository:
    """Repository for CalendarEvent database operations."""

    def __init__(self, db: Session):
        self.db = db

    def create_event(self, owner_id: str, dto: CreateCalendarEvent) -> CalendarEvent:
        row = CalendarEventDB.from_create(owner_id, dto)
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            logger.debug(f"Created event {row.id} ({row.start} - {row.finish}) for occurrence {dto.occurrence_id}")
            return row.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create event for owner {owner_id}: {type(e).__name__}: {str(e)}")
            raise

    def get_event(self, event_id: str) -> Optional[CalendarEvent]:
        row = self.db.query(CalendarEventDB).filter(CalendarEventDB.id == event_id).first()
        return row.to_pydantic() if row else None

    def get_events_by_occurrence_id(self, occurrence_id: str) -> List[CalendarEvent]:
        rows = (
            self.db.query(CalendarEventDB)
            .filter(CalendarEventDB.occurrence_id == occurrence_id)
            .order_by(CalendarEventDB.start)
            .all()
        )
        return [row.to_pydantic() for row in rows]

    def complete_event(
        self, event_id: str, now: Optional[datetime] = None, dedicated_time: Optional[int] = None
    ) -> CalendarEvent:
        """Mark an event completed; dedicated time defaults to the event length."""
        row = self.db.query(CalendarEventDB).filter(CalendarEventDB.id == event_id).first()
        if row is None:
            raise CalendarEventNotFoundError(event_id)
        row.is_completed = True
        row.completed_at = now or datetime.utcnow()
        if dedicated_time is None:
            dedicated_time = int((row.finish - row.start).total_seconds() // 60)
        row.dedicated_time = dedicated_time
        try:
            self.db.commit()
            self.db.refresh(row)
            return row.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to complete event {event_id}: {type(e).__name__}: {str(e)}")
            raise

    def delete_event(self, event_id: str) -> bool:
        row = self.db.query(CalendarEventDB).filter(CalendarEventDB.id == event_id).first()
        if row is None:
            return False
        try:
            self.db.delete(row)
            self.db.commit()
            return True
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete event {event_id}: {type(e).__name__}: {str(e)}")
            raise
