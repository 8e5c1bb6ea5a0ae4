"""Pytest configuration and fixtures."""

import os
import sys
import tempfile
from datetime import datetime, timedelta

import pytest
import pytest_asyncio
from sqlalchemy.pool import NullPool

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set test environment variables before importing app modules
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{os.path.join(tempfile.gettempdir(), 'applytics-test.db')}",
)
os.environ.setdefault("LOG_LEVEL", "DEBUG")


class FakeClock:
    """Controllable replacement for ``utc_now``."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def set(self, value: datetime) -> None:
        self.now = value

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    """Clock frozen at 2024-01-01 09:00 until a test moves it."""
    return FakeClock(datetime(2024, 1, 1, 9, 0))


@pytest.fixture
def db_url(tmp_path):
    """URL of a throwaway SQLite file."""
    return f"sqlite+aiosqlite:///{tmp_path / 'tracker.db'}"


@pytest_asyncio.fixture
async def engine(db_url):
    """Engine with all tables created."""
    from applytics.core.storage import build_engine, init_models

    engine = build_engine(db_url, poolclass=NullPool)
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    """Session factory bound to the test engine."""
    from applytics.core.storage import build_session_factory

    return build_session_factory(engine)


@pytest.fixture
def application_service(session_factory, clock):
    from applytics.services.application_service import ApplicationService

    return ApplicationService(session_factory, clock)


@pytest.fixture
def catalog_service(session_factory, clock):
    from applytics.services.catalog_service import StatusCatalogService

    return StatusCatalogService(session_factory, clock)


@pytest.fixture
def import_service(session_factory, clock):
    from applytics.services.import_service import ImportService

    return ImportService(session_factory, clock)


@pytest.fixture
def analytics_service(session_factory, clock):
    from applytics.services.analytics_service import AnalyticsService

    return AnalyticsService(session_factory, clock, keyword_limit=10)


@pytest.fixture
def sample_application():
    """ApplicationCreate for a typical application."""
    from applytics.schemas.application import ApplicationCreate

    return ApplicationCreate(
        company="Acme",
        title="Engineer",
        status="Applied",
        date_applied=datetime(2024, 1, 1),
        process_steps=["Phone screen", "Onsite"],
        notes="Referred by a friend",
    )
