"""
Pytest fixtures for test database, client, clock and ticket data.

Each test gets its own SQLite database file, so sessions opened by the
HTTP client and by the test see the same committed data.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import datetime, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from ticket_sales.main import app
from ticket_sales.api.deps import get_now
from ticket_sales.db.base import Base
from ticket_sales.db.session import get_db
from ticket_sales.domain.ticket import WindowMode
from ticket_sales.models import Event, EventOccurrence, EventTicket

OCCURRENCE_START = datetime(2024, 6, 10, 18, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Current time for request handlers; tests move it explicitly."""

    def __init__(self, now: datetime):
        self.now = now


@pytest.fixture
def clock() -> FrozenClock:
    # Inside the sale window of the relative_ticket fixture
    return FrozenClock(datetime(2024, 6, 4, 10, 0, tzinfo=timezone.utc))


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory, clock) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with one test-database session per request and a frozen clock."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = lambda: clock.now

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession) -> Event:
    event = Event(title="Summer Concert", description="Open air", location="Park Stage")
    db_session.add(event)
    await db_session.commit()
    await db_session.refresh(event)
    return event


@pytest_asyncio.fixture
async def occurrence(db_session: AsyncSession, test_event: Event) -> EventOccurrence:
    occurrence = EventOccurrence(event_id=test_event.id, start_time=OCCURRENCE_START)
    db_session.add(occurrence)
    await db_session.commit()
    await db_session.refresh(occurrence)
    return occurrence


@pytest_asyncio.fixture
async def relative_ticket(db_session: AsyncSession, test_event: Event) -> EventTicket:
    """On sale from 7 days before the occurrence until it starts; 10 units."""
    ticket = EventTicket(
        event_id=test_event.id,
        title="General Admission",
        start_type=WindowMode.TIME_BEFORE.value,
        start_days=7,
        end_type=WindowMode.TIME_BEFORE.value,
        min_per_order=1,
        max_per_order=4,
        total_capacity=10,
    )
    db_session.add(ticket)
    await db_session.commit()
    await db_session.refresh(ticket)
    return ticket


@pytest_asyncio.fixture
async def unlimited_ticket(db_session: AsyncSession, test_event: Event) -> EventTicket:
    """On sale for all of 2024 with no capacity limit."""
    ticket = EventTicket(
        event_id=test_event.id,
        title="Livestream",
        start_type=WindowMode.DATE.value,
        start_date=datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc),
        end_type=WindowMode.DATE.value,
        end_date=datetime(2024, 12, 31, 23, 59, tzinfo=timezone.utc),
        total_capacity=0,
    )
    db_session.add(ticket)
    await db_session.commit()
    await db_session.refresh(ticket)
    return ticket
