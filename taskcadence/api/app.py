"""FastAPI web application for taskcadence."""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import Depends, FastAPI, Header, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from taskcadence.database.database import get_db
from taskcadence.errors import NotFoundError, RecurrenceConfigurationError
from taskcadence.models.calendar_event import CalendarEvent
from taskcadence.models.fixed import FixedTaskConfig
from taskcadence.models.occurrence import InitialDates, TaskOccurrence
from taskcadence.models.task import CreateTask, TaskWithRecurrence
from taskcadence.scheduling.backlog import BacklogDetectionService
from taskcadence.scheduling.completion import OccurrenceCompletionService
from taskcadence.scheduling.lifecycle import TaskLifecycleService
from taskcadence.scheduling.scheduler import TaskSchedulerService
from taskcadence.strategies.actions import ActionType

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="taskcadence API",
    description="Recurrence and occurrence lifecycle engine for tasks and habits",
    version="0.1.0",
)


def get_owner_id(x_owner_id: str = Header(..., alias="X-Owner-Id")) -> str:
    """Owner of the request (authentication lives in front of this service)."""
    return x_owner_id


def get_scheduler(db: Session = Depends(get_db)) -> TaskSchedulerService:
    return TaskSchedulerService(db)


# Response models
class NextOccurrenceResponse(BaseModel):
    task_id: str
    next_occurrence_date: Optional[datetime]


class FixedEvent(BaseModel):
    occurrence: TaskOccurrence
    event: CalendarEvent


class LifecycleActionResponse(BaseModel):
    occurrence_id: str
    action: ActionType


class CompleteOccurrenceRequest(BaseModel):
    time_consumed: Optional[int] = None


class BacklogResponse(BaseModel):
    task_id: str
    has_severe_backlog: bool
    pending_count: int
    oldest_pending_date: Optional[datetime]
    estimated_backlog_count: int
    pending_occurrence_ids: List[str]


def _http_error(e: Exception) -> HTTPException:
    """Not-found errors map to 404, misconfigured recurrences to 400."""
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/tasks", response_model=TaskWithRecurrence, status_code=201)
def create_task(
    data: CreateTask,
    owner_id: str = Depends(get_owner_id),
    scheduler: TaskSchedulerService = Depends(get_scheduler),
):
    """Create a task, its recurrence and its first occurrence(s)."""
    try:
        return TaskLifecycleService(scheduler).create_task(owner_id, data)
    except (NotFoundError, RecurrenceConfigurationError) as e:
        raise _http_error(e) from e


@app.get("/tasks/{task_id}/next-occurrence", response_model=NextOccurrenceResponse)
def preview_next_occurrence(task_id: str, scheduler: TaskSchedulerService = Depends(get_scheduler)):
    try:
        next_date = scheduler.preview_next_occurrence_date(task_id)
    except (NotFoundError, RecurrenceConfigurationError) as e:
        raise _http_error(e) from e
    return NextOccurrenceResponse(task_id=task_id, next_occurrence_date=next_date)


@app.post("/tasks/{task_id}/occurrences/next", response_model=Optional[TaskOccurrence])
def create_next_occurrence(
    task_id: str,
    initial_dates: Optional[InitialDates] = None,
    scheduler: TaskSchedulerService = Depends(get_scheduler),
):
    """Create the next occurrence; null when the latest one is still open."""
    try:
        return scheduler.create_next_occurrence(task_id, initial_dates)
    except (NotFoundError, RecurrenceConfigurationError) as e:
        raise _http_error(e) from e


@app.post("/tasks/{task_id}/fixed-events", response_model=List[FixedEvent], status_code=201)
def create_fixed_events(
    task_id: str,
    config: FixedTaskConfig,
    owner_id: str = Depends(get_owner_id),
    scheduler: TaskSchedulerService = Depends(get_scheduler),
):
    if scheduler.task_repository.get_task(task_id) is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    pairs = scheduler.create_fixed_task_events(task_id, owner_id, config)
    return [FixedEvent(occurrence=occurrence, event=event) for occurrence, event in pairs]


@app.post("/occurrences/{occurrence_id}/complete", response_model=LifecycleActionResponse)
def complete_occurrence(
    occurrence_id: str,
    body: Optional[CompleteOccurrenceRequest] = None,
    scheduler: TaskSchedulerService = Depends(get_scheduler),
):
    time_consumed = body.time_consumed if body else None
    try:
        action = OccurrenceCompletionService(scheduler).complete_occurrence(occurrence_id, time_consumed=time_consumed)
    except (NotFoundError, RecurrenceConfigurationError) as e:
        raise _http_error(e) from e
    return LifecycleActionResponse(occurrence_id=occurrence_id, action=action.type)


@app.post("/occurrences/{occurrence_id}/skip", response_model=LifecycleActionResponse)
def skip_occurrence(occurrence_id: str, scheduler: TaskSchedulerService = Depends(get_scheduler)):
    try:
        action = OccurrenceCompletionService(scheduler).skip_occurrence(occurrence_id)
    except (NotFoundError, RecurrenceConfigurationError) as e:
        raise _http_error(e) from e
    return LifecycleActionResponse(occurrence_id=occurrence_id, action=action.type)


@app.get("/tasks/{task_id}/backlog", response_model=BacklogResponse)
def get_backlog(task_id: str, scheduler: TaskSchedulerService = Depends(get_scheduler)):
    try:
        info = BacklogDetectionService(scheduler).detect_backlog(task_id)
    except NotFoundError as e:
        raise _http_error(e) from e
    return BacklogResponse(
        task_id=task_id,
        has_severe_backlog=info.has_severe_backlog,
        pending_count=info.pending_count,
        oldest_pending_date=info.oldest_pending_date,
        estimated_backlog_count=info.estimated_backlog_count,
        pending_occurrence_ids=[o.id for o in info.pending_occurrences],
    )
