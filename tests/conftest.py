"""
Pytest configuration and fixtures for PostDesk API tests.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("REMINDER_SWEEP_ENABLED", "false")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from postdesk.database import Base, get_db
from postdesk.limiter import limiter
from postdesk.main import app
from postdesk.models.event import Event
from postdesk.models.user import User
from postdesk.auth import create_access_token
from postdesk.publishing import PublishResult, SocialPublisher, get_publisher
from postdesk.scheduling import ReminderExecutor, ReminderService, Scheduler, SchedulingState
from postdesk.scheduling.delivery import ReminderDelivery

# Disable rate limiting for tests
limiter.enabled = False

# Use in-memory SQLite for tests with shared connection
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Global session for sharing across requests
_test_session = None


def get_test_db():
    """Get the shared test database session."""
    try:
        yield _test_session
    finally:
        pass


# ============================================================
# SCHEDULING CORE
# ============================================================

class FakeClock:
    """Controllable replacement for utcnow"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


class RecordingDelivery(ReminderDelivery):
    """Records deliveries; set ``fail`` to make every delivery raise"""

    def __init__(self):
        self.delivered = []
        self.fail = False

    def deliver(self, reminder):
        if self.fail:
            raise ConnectionError("relay unavailable")
        self.delivered.append(reminder.id)


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def state():
    return SchedulingState()


@pytest.fixture
def reminder_service(state, clock):
    return ReminderService(state, clock=clock)


@pytest.fixture
def scheduler(state, reminder_service, clock):
    return Scheduler(state, reminder_service, clock=clock)


@pytest.fixture
def delivery():
    return RecordingDelivery()


@pytest.fixture
def executor(reminder_service, delivery, clock):
    return ReminderExecutor(reminder_service, delivery, clock=clock)


# ============================================================
# API
# ============================================================

class FakePublisher(SocialPublisher):
    """Publisher that succeeds unless told otherwise"""

    def __init__(self):
        self.posts = []
        self.succeed = True

    def is_configured(self) -> bool:
        return True

    def create_post(self, data):
        self.posts.append(data)
        if not self.succeed:
            return PublishResult(success=False, error="LinkedIn returned 500")
        return PublishResult(
            success=True,
            post_id=f"urn:li:share:{len(self.posts)}",
            url=f"https://www.linkedin.com/feed/update/urn:li:share:{len(self.posts)}",
            published_at=datetime.now(timezone.utc),
        )


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    global _test_session

    Base.metadata.create_all(bind=engine)
    _test_session = TestingSessionLocal()
    app.dependency_overrides[get_db] = get_test_db

    yield _test_session

    app.dependency_overrides.clear()
    _test_session.close()
    _test_session = None
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def publisher(db):
    fake = FakePublisher()
    app.dependency_overrides[get_publisher] = lambda: fake
    return fake


@pytest.fixture(scope="function")
def client(db, publisher):
    """Create a test client; entering it runs the lifespan and builds fresh stores."""
    with TestClient(app) as c:
        yield c


def make_user(db, email: str, role: str = "MEMBER") -> User:
    user = User(email=email, name=email.split("@")[0], role=role, is_active=True)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': user.id})}"}


@pytest.fixture(scope="function")
def test_user(db):
    return make_user(db, "member@example.com")


@pytest.fixture(scope="function")
def lead_user(db):
    return make_user(db, "lead@example.com", role="LEAD")


@pytest.fixture(scope="function")
def auth_headers(test_user):
    return headers_for(test_user)


@pytest.fixture(scope="function")
def lead_headers(lead_user):
    return headers_for(lead_user)


@pytest.fixture(scope="function")
def event(db):
    event = Event(name="Open Source Summit")
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def iso(dt: datetime) -> str:
    return dt.isoformat().replace("+00:00", "Z")


def from_now(**kwargs) -> datetime:
    return datetime.now(timezone.utc) + timedelta(**kwargs)
