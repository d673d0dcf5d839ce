"""
Concurrency tests for the check-then-act booking race.

An availability result is only a snapshot. These tests show that booking on
an unlocked snapshot oversells, and that holding a ReservationLock across the
check and the insert does not.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from ticket_sales.core.errors import LockTimeoutError, TicketUnavailableError
from ticket_sales.domain.availability import UnavailableReason
from ticket_sales.domain.sale_window import RelativeOffset
from ticket_sales.domain.ticket import TicketConfig
from ticket_sales.infrastructure.sql_ledger import SqlBookingLedger
from ticket_sales.models import ReservationTicket
from ticket_sales.schemas.reservation import ReservationCreate
from ticket_sales.services.availability_service import evaluate_availability
from ticket_sales.services.interfaces.ledger import BookingLedger
from ticket_sales.services.interfaces.local_lock import InProcessReservationLock
from ticket_sales.services.reservation_service import create_reservation

OCCURRENCE_ID = 1
OCCURRENCE_START = datetime(2024, 6, 10, 18, 0, tzinfo=timezone.utc)
NOW = datetime(2024, 6, 4, 10, 0, tzinfo=timezone.utc)
CAPACITY = 5
BUYERS = 20

TICKET = TicketConfig(
    id=1,
    event_id=1,
    title="General Admission",
    sale_start=RelativeOffset(days=7),
    sale_end=RelativeOffset(),
    total_capacity=CAPACITY,
)


class InMemoryLedger(BookingLedger):
    """Ledger whose reads yield to the event loop like a real database round trip."""

    def __init__(self):
        self.lines: list[tuple[int, int, int, int]] = []  # reservation, ticket, occurrence, qty

    async def occurrence_start_time(self, occurrence_id: int) -> datetime:
        await asyncio.sleep(0)
        return OCCURRENCE_START

    async def sum_booked_quantity(self, ticket_id, occurrence_id, exclude_reservation_id=None) -> int:
        await asyncio.sleep(0)
        return sum(
            qty
            for reservation_id, t_id, o_id, qty in self.lines
            if t_id == ticket_id and o_id == occurrence_id and reservation_id != exclude_reservation_id
        )

    async def insert(self, reservation_id: int, quantity: int) -> None:
        await asyncio.sleep(0)
        self.lines.append((reservation_id, TICKET.id, OCCURRENCE_ID, quantity))

    @property
    def booked(self) -> int:
        return sum(line[3] for line in self.lines)


async def book_one(ledger: InMemoryLedger, reservation_id: int) -> bool:
    result = await evaluate_availability(ledger, TICKET, OCCURRENCE_ID, NOW)
    if not result.available or not result.allows(1):
        return False
    await ledger.insert(reservation_id, 1)
    return True


@pytest.mark.asyncio
async def test_unlocked_check_then_insert_oversells():
    """Without serialization every buyer sees the same free capacity."""
    ledger = InMemoryLedger()

    outcomes = await asyncio.gather(*(book_one(ledger, i) for i in range(BUYERS)))

    assert sum(outcomes) > CAPACITY
    assert ledger.booked > CAPACITY


@pytest.mark.asyncio
async def test_locked_check_then_insert_never_oversells():
    ledger = InMemoryLedger()
    lock = InProcessReservationLock()

    async def locked_booking(reservation_id: int) -> bool:
        async with lock.hold([(TICKET.id, OCCURRENCE_ID)]):
            return await book_one(ledger, reservation_id)

    outcomes = await asyncio.gather(*(locked_booking(i) for i in range(BUYERS)))

    assert sum(outcomes) == CAPACITY
    assert ledger.booked == CAPACITY

    final = await evaluate_availability(ledger, TICKET, OCCURRENCE_ID, NOW)
    assert final.reason == UnavailableReason.SOLD_OUT


@pytest.mark.asyncio
async def test_lock_keys_are_independent():
    """Holding one (ticket, occurrence) pair does not block another."""
    lock = InProcessReservationLock(timeout=0.5)

    async with lock.hold([(1, 1)]):
        async with lock.hold([(1, 2), (2, 1)]):
            pass


@pytest.mark.asyncio
async def test_lock_timeout_raises():
    lock = InProcessReservationLock(timeout=0.01)

    async with lock.hold([(1, 1)]):
        with pytest.raises(LockTimeoutError):
            async with lock.hold([(1, 1)]):
                pass


@pytest.mark.asyncio
async def test_concurrent_reservations_against_database(
    session_factory, occurrence, relative_ticket, db_session
):
    """Concurrent reservations of single tickets fill capacity exactly."""
    lock = InProcessReservationLock(timeout=30)
    now = occurrence.start_time - timedelta(days=3)

    async def reserve(n: int):
        async with session_factory() as db:
            data = ReservationCreate(
                occurrence_id=occurrence.id,
                name=f"Buyer {n}",
                email=f"buyer{n}@example.com",
                tickets=[{"ticket_id": relative_ticket.id, "quantity": 1}],
            )
            return await create_reservation(db, SqlBookingLedger(db), lock, data, now)

    results = await asyncio.gather(*(reserve(n) for n in range(12)), return_exceptions=True)

    succeeded = [r for r in results if not isinstance(r, Exception)]
    refused = [r for r in results if isinstance(r, TicketUnavailableError)]
    assert len(succeeded) == relative_ticket.total_capacity
    assert len(refused) == 12 - relative_ticket.total_capacity
    assert all(r.result.reason == UnavailableReason.SOLD_OUT for r in refused)

    total = (
        await db_session.execute(
            select(func.sum(ReservationTicket.quantity)).where(
                ReservationTicket.ticket_id == relative_ticket.id
            )
        )
    ).scalar_one()
    assert total == relative_ticket.total_capacity
