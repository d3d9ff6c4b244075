"""Pytest fixtures and configuration for taskpulse tests."""

import pytest
from datetime import datetime, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
import uuid

from taskpulse.database.database import Base
from taskpulse.database import models  # noqa: F401  (registers tables)
from taskpulse.database.repository import TaskRepository
from taskpulse.models.task import Task, Priority


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

# Wednesday; its Sunday-start week runs 2024-01-07 .. 2024-01-13
FIXED_NOW = datetime(2024, 1, 10, 12, 0, 0)


class FakeClock:
    """Settable clock for repository timestamps."""

    def __init__(self, now: datetime):
        self.now = now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now

    def __call__(self) -> datetime:
        return self.now


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
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock():
    return FakeClock(FIXED_NOW)


@pytest.fixture
def task_repository(db_session: Session, clock):
    """Create a TaskRepository instance with a fixed clock."""
    return TaskRepository(db_session, clock=clock)


@pytest.fixture
def sample_task_base():
    """Base task data for creating test tasks.

    Returns a dict with default task attributes that can be overridden.
    """
    return {
        "id": str(uuid.uuid4()),
        "title": "Test Task",
        "description": "Test description",
        "category_id": "1",
        "priority": Priority.MEDIUM,
        "due_date": None,
        "completed": False,
        "completed_at": None,
        "created_at": FIXED_NOW - timedelta(days=1),
        "archived": False,
        "archived_at": None,
        "is_recurring": False,
        "recurring_id": None,
    }


@pytest.fixture
def sample_task(sample_task_base):
    """Create a sample Task object for testing."""
    return Task(**sample_task_base)


@pytest.fixture
def make_task(sample_task_base):
    """Build Task objects with fresh ids and overridden fields."""
    def _make(**overrides) -> Task:
        return Task(**{**sample_task_base, "id": str(uuid.uuid4()), **overrides})
    return _make


@pytest.fixture
def test_client(db_session: Session, clock):
    """Create a FastAPI test client bound to the test session and fixed clock."""
    from taskpulse.api.app import app, get_repository

    def override_get_repository():
        return TaskRepository(db_session, clock=clock)

    app.dependency_overrides[get_repository] = override_get_repository

    with TestClient(app) as client:
        yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()
