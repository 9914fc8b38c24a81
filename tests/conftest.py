"""
Pytest configuration and fixtures for booth monitor tests.

Each test gets a fresh in-memory SQLite database, a fixed clock and a recording notifier.
"""
import os
from datetime import datetime, timedelta, timezone

import pytest

# Keep the module-level app off any real database or scheduler
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from boothwatch.config import Settings
from boothwatch.core.errors import TransientNotifyError
from boothwatch.db.base import Base
from boothwatch.main import create_app
from boothwatch.models import Booth, HealthLog  # noqa: F401
from boothwatch.services.alerting import AlertingCoordinator
from boothwatch.services.store import BoothStore

API_KEY = "test-api-key"

# 2024-01-01 is a Monday
MONDAY_10AM = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class RecordingNotifier:
    """Notifier double: records every send; booth ids in fail_for raise TransientNotifyError."""

    def __init__(self):
        self.sent: list[tuple[str, dict]] = []
        self.fail_for: set[str] = set()
        self.on_send = None

    def send(self, kind: str, fields: dict) -> bool:
        if self.on_send is not None:
            self.on_send(kind, fields)
        if fields.get("booth_id") in self.fail_for:
            raise TransientNotifyError("slack down")
        self.sent.append((kind, fields))
        return True

    def kinds(self) -> list[str]:
        return [kind for kind, _ in self.sent]

    def booth_ids(self, kind: str | None = None) -> list[str]:
        return [f["booth_id"] for k, f in self.sent if kind is None or k == kind]


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(db):
    return BoothStore(db)


@pytest.fixture
def clock():
    return FixedClock(MONDAY_10AM)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def settings():
    return Settings(_env_file=None, api_key=API_KEY, scheduler_enabled=False)


@pytest.fixture
def coordinator(session_factory, notifier, settings, clock):
    return AlertingCoordinator(session_factory, notifier, settings, clock=clock)


@pytest.fixture
def client(settings, session_factory, notifier, clock):
    app = create_app(settings=settings, session_factory=session_factory, notifier=notifier, clock=clock)
    return TestClient(app)


@pytest.fixture
def add_booth(store, clock):
    """Create a booth pinged `minutes_ago` before the clock, optionally with logs and hours."""

    def _add(
        booth_id: str,
        minutes_ago: float = 0,
        name: str | None = None,
        operating_hours: str | None = None,
        timezone_name: str | None = None,
    ) -> Booth:
        booth = store.create_booth(
            booth_id,
            name or f"Booth {booth_id}",
            clock() - timedelta(minutes=minutes_ago),
            timezone=timezone_name,
        )
        if operating_hours is not None:
            booth.operating_hours = operating_hours
            store.save_booth(booth, clock())
        return booth

    return _add


@pytest.fixture
def add_log(store, clock):
    def _add(booth: Booth, status: str = "healthy", hours_ago: float = 0, metadata_json: str | None = None, message=None):
        return store.append_health_log(
            booth,
            status,
            clock() - timedelta(hours=hours_ago),
            message=message,
            metadata_json=metadata_json,
        )

    return _add
