"""Pytest configuration and fixtures."""

import os

os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

from collections.abc import AsyncGenerator, Callable  # noqa: E402
from datetime import date, datetime, timedelta  # noqa: E402
from pathlib import Path  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import StaticPool  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from neobarber.booking.time_rules import BusinessCalendar  # noqa: E402
from neobarber.db.init_db import create_tables, drop_tables  # noqa: E402
from neobarber.db.session import get_db  # noqa: E402
from neobarber.main import app  # noqa: E402
from neobarber.services.admission import AppointmentAdmission  # noqa: E402

# Use SQLite for testing (simpler than spinning up postgres)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Fixed reference clock for admission tests: Tuesday 2030-01-01 08:00
FIXED_NOW = datetime(2030, 1, 1, 8, 0)


def next_weekday(start: date, weekday: int) -> date:
    """First date strictly after ``start`` falling on ``weekday`` (Monday=0)."""
    days_ahead = (weekday - start.weekday() - 1) % 7 + 1
    return start + timedelta(days=days_ahead)


def make_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest.fixture(scope="function")
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create async test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )

    await create_tables(engine)

    yield engine

    await drop_tables(engine)

    await engine.dispose()


@pytest.fixture(scope="function")
async def async_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create async database session for tests."""
    async with make_session_factory(async_engine)() as session:
        yield session


@pytest.fixture(scope="function")
async def file_session_factory(
    tmp_path: Path,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Session factory over a file database, one connection per session.

    Used by concurrency tests where every task needs its own session and
    transaction, as concurrent requests would in production.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'neobarber.db'}",
        echo=False,
        connect_args={"timeout": 30},
    )

    await create_tables(engine)

    yield make_session_factory(engine)

    await engine.dispose()


@pytest.fixture
def calendar() -> BusinessCalendar:
    """Default business calendar: Mon-Sat 09:00-20:00, 30-minute slots."""
    return BusinessCalendar()


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def monday() -> date:
    """First Monday after the fixed clock."""
    return next_weekday(FIXED_NOW.date(), 0)


@pytest.fixture
def sunday() -> date:
    """First Sunday after the fixed clock."""
    return next_weekday(FIXED_NOW.date(), 6)


@pytest.fixture
def past_day() -> date:
    """Day before the fixed clock."""
    return FIXED_NOW.date() - timedelta(days=1)


@pytest.fixture
def upcoming_monday() -> date:
    """First Monday after today, for requests that use the wall clock."""
    return next_weekday(date.today(), 0)


@pytest.fixture
def admission(
    async_session: AsyncSession,
    calendar: BusinessCalendar,
    fixed_clock: Callable[[], datetime],
) -> AppointmentAdmission:
    """Admission engine over the in-memory database with a fixed clock."""
    return AppointmentAdmission(async_session, calendar=calendar, clock=fixed_clock)


@pytest.fixture
def booking_fields(monday: date) -> dict[str, str]:
    """A valid booking request on the first Monday after the fixed clock."""
    return {
        "client_name": "Ana",
        "provider_name": "Luis",
        "service": "Haircut",
        "date": monday.isoformat(),
        "time": "10:00",
    }


@pytest.fixture
async def client(async_session: AsyncSession) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Create API test client with overridden dependencies."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield async_session

    app.dependency_overrides[get_db] = override_get_db

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()
