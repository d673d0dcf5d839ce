"""
Tests for the SQL booking ledger.
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import OperationalError

from ticket_sales.core.errors import LookupFailure, NotFoundError
from ticket_sales.infrastructure.sql_ledger import SqlBookingLedger
from ticket_sales.models import EventOccurrence, Reservation, ReservationStatus, ReservationTicket

OCCURRENCE_START = datetime(2024, 6, 10, 18, 0, tzinfo=timezone.utc)


async def add_reservation(db, occurrence_id, lines, status=ReservationStatus.PENDING):
    reservation = Reservation(
        occurrence_id=occurrence_id,
        name="Ada",
        email="ada@example.com",
        status=status.value,
        lines=[ReservationTicket(ticket_id=t, quantity=q) for t, q in lines],
    )
    db.add(reservation)
    await db.commit()
    return reservation


class BrokenSession:
    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection reset"))


@pytest.mark.asyncio
async def test_occurrence_start_time(db_session, occurrence):
    ledger = SqlBookingLedger(db_session)
    assert await ledger.occurrence_start_time(occurrence.id) == OCCURRENCE_START


@pytest.mark.asyncio
async def test_occurrence_start_time_unknown(db_session):
    ledger = SqlBookingLedger(db_session)
    with pytest.raises(NotFoundError):
        await ledger.occurrence_start_time(999)


@pytest.mark.asyncio
async def test_sum_is_zero_without_reservations(db_session, occurrence, relative_ticket):
    ledger = SqlBookingLedger(db_session)
    assert await ledger.sum_booked_quantity(relative_ticket.id, occurrence.id) == 0


@pytest.mark.asyncio
async def test_sum_counts_pending_and_confirmed(db_session, occurrence, relative_ticket):
    await add_reservation(db_session, occurrence.id, [(relative_ticket.id, 2)])
    await add_reservation(
        db_session, occurrence.id, [(relative_ticket.id, 3)], ReservationStatus.CONFIRMED
    )

    ledger = SqlBookingLedger(db_session)
    assert await ledger.sum_booked_quantity(relative_ticket.id, occurrence.id) == 5


@pytest.mark.asyncio
async def test_sum_ignores_canceled(db_session, occurrence, relative_ticket):
    await add_reservation(db_session, occurrence.id, [(relative_ticket.id, 2)])
    await add_reservation(
        db_session, occurrence.id, [(relative_ticket.id, 4)], ReservationStatus.CANCELED
    )

    ledger = SqlBookingLedger(db_session)
    assert await ledger.sum_booked_quantity(relative_ticket.id, occurrence.id) == 2


@pytest.mark.asyncio
async def test_sum_excludes_reservation(db_session, occurrence, relative_ticket):
    mine = await add_reservation(db_session, occurrence.id, [(relative_ticket.id, 3)])
    await add_reservation(db_session, occurrence.id, [(relative_ticket.id, 1)])

    ledger = SqlBookingLedger(db_session)
    assert await ledger.sum_booked_quantity(
        relative_ticket.id, occurrence.id, exclude_reservation_id=mine.id
    ) == 1


@pytest.mark.asyncio
async def test_sum_is_scoped_to_ticket_and_occurrence(
    db_session, test_event, occurrence, relative_ticket, unlimited_ticket
):
    other = EventOccurrence(event_id=test_event.id, start_time=OCCURRENCE_START.replace(day=17))
    db_session.add(other)
    await db_session.commit()

    await add_reservation(
        db_session, occurrence.id, [(relative_ticket.id, 2), (unlimited_ticket.id, 7)]
    )
    await add_reservation(db_session, other.id, [(relative_ticket.id, 5)])

    ledger = SqlBookingLedger(db_session)
    assert await ledger.sum_booked_quantity(relative_ticket.id, occurrence.id) == 2
    assert await ledger.sum_booked_quantity(relative_ticket.id, other.id) == 5
    assert await ledger.sum_booked_quantity(unlimited_ticket.id, other.id) == 0


@pytest.mark.asyncio
async def test_database_errors_become_lookup_failures():
    ledger = SqlBookingLedger(BrokenSession())

    with pytest.raises(LookupFailure) as exc_info:
        await ledger.sum_booked_quantity(1, 1)
    assert exc_info.value.operation == "sum_booked"
    assert isinstance(exc_info.value.__cause__, OperationalError)

    with pytest.raises(LookupFailure):
        await ledger.occurrence_start_time(1)
