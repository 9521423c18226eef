"""Pytest fixtures and configuration for taskcadence tests."""

import pytest
import uuid
from datetime import datetime
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from taskcadence.database.database import Base
from taskcadence.database import models  # noqa: F401  (registers tables)
from taskcadence.database.calendar_event_repository import CalendarEventRepository
from taskcadence.database.occurrence_repository import OccurrenceRepository
from taskcadence.database.recurrence_repository import RecurrenceRepository
from taskcadence.database.repository import TaskRepository
from taskcadence.engine.period_manager import PeriodManager
from taskcadence.models.recurrence import CreateRecurrence
from taskcadence.models.task import CreateTask
from taskcadence.models.task_factory import create_recurrence, create_task_base
from taskcadence.scheduling.scheduler import TaskSchedulerService


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    """
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragmas(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def test_owner_id():
    """Owner ID used for every test task."""
    return "owner-123"


@pytest.fixture
def now():
    """A fixed 'now': Monday 2025-01-06 09:30 UTC."""
    return datetime(2025, 1, 6, 9, 30)


@pytest.fixture
def task_repository(db_session: Session):
    return TaskRepository(db_session)


@pytest.fixture
def recurrence_repository(db_session: Session):
    return RecurrenceRepository(db_session)


@pytest.fixture
def occurrence_repository(db_session: Session):
    return OccurrenceRepository(db_session)


@pytest.fixture
def event_repository(db_session: Session):
    return CalendarEventRepository(db_session)


@pytest.fixture
def period_manager(recurrence_repository):
    return PeriodManager(recurrence_repository)


@pytest.fixture
def scheduler(db_session: Session):
    return TaskSchedulerService(db_session)


@pytest.fixture
def make_task(task_repository, test_owner_id, now):
    """Persist a task and its recurrence without creating any occurrence.

    Usage: ``make_task(interval=7, max_occurrences=3, is_fixed=False)``.
    Pass ``recurrence=None`` explicitly for a task without recurrence.
    """
    def _make(is_fixed=False, recurrence="default", name="Test Task", **pattern):
        data = CreateTask(
            name=name,
            is_fixed=is_fixed,
            fixed_start_datetime=now if is_fixed else None,
            fixed_end_datetime=now.replace(hour=10, minute=30) if is_fixed else None,
        )
        task = create_task_base(test_owner_id, data, now)
        if recurrence is None:
            return task_repository.create_task(task, None)
        if recurrence == "default":
            recurrence = create_recurrence(CreateRecurrence(**pattern), now)
        return task_repository.create_task(task, recurrence)

    return _make


@pytest.fixture
def fake_task_id():
    return str(uuid.uuid4())


@pytest.fixture
def test_client(db_session: Session, test_owner_id):
    """FastAPI test client with the database dependency pointed at the test session."""
    from taskcadence.api.app import app
    from taskcadence.database.database import get_db

    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # The db_session fixture closes the session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app, headers={"X-Owner-Id": test_owner_id}) as client:
        yield client

    app.dependency_overrides.clear()
