"""
Reservation service: the booking workflow around the availability core.

CONCURRENCY STRATEGY: Lock, Check, Insert, Commit
=================================================

Problem:
  Two customers try to book the last ticket simultaneously.
  Both evaluate availability, both see remaining=1, both insert.
  Result: Overselling.

Solution:
  Every reservation write runs inside a ReservationLock held on the
  (ticket, occurrence) pairs it touches:

  1. Validate per-order bounds (no lock needed)
  2. Acquire the lock for all pairs, in sorted order
  3. Evaluate availability for each line against the live ledger
  4. Insert or update the reservation lines
  5. Commit, then release the lock

  The commit happens before the lock is released, so the next holder's
  aggregate already includes this reservation.

Editing a reservation evaluates with exclude_reservation_id set, so the
reservation's current quantities do not count against its new ones.

Cancellation only ever frees capacity and therefore takes no lock.
"""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_sales.core.errors import (
    NotFoundError,
    QuantityError,
    ReservationStateError,
    TicketUnavailableError,
)
from ticket_sales.core.logging import get_logger
from ticket_sales.core.metrics import record_reservation_attempt
from ticket_sales.domain.ticket import TicketConfig
from ticket_sales.models.event import EventOccurrence
from ticket_sales.models.reservation import Reservation, ReservationStatus, ReservationTicket
from ticket_sales.schemas.reservation import ReservationCreate, ReservationLine, ReservationUpdate
from ticket_sales.services.availability_service import evaluate_availability
from ticket_sales.services.event_service import get_occurrence
from ticket_sales.services.interfaces.ledger import BookingLedger
from ticket_sales.services.interfaces.reservation_lock import ReservationLock
from ticket_sales.services.ticket_service import get_ticket_for_occurrence

logger = get_logger(__name__)


def check_order_bounds(ticket: TicketConfig, quantity: int) -> None:
    """Per-order limits configured on the ticket."""
    if quantity < ticket.min_per_order:
        raise QuantityError(
            f"At least {ticket.min_per_order} '{ticket.title}' tickets must be ordered"
        )
    if ticket.max_per_order and quantity > ticket.max_per_order:
        raise QuantityError(
            f"At most {ticket.max_per_order} '{ticket.title}' tickets may be ordered"
        )


async def _load_lines(
    db: AsyncSession,
    occurrence: EventOccurrence,
    lines: list[ReservationLine],
) -> list[tuple[TicketConfig, int]]:
    requested = []
    for line in lines:
        ticket = await get_ticket_for_occurrence(db, line.ticket_id, occurrence)
        config = ticket.to_config()
        check_order_bounds(config, line.quantity)
        requested.append((config, line.quantity))
    return requested


async def _ensure_available(
    ledger: BookingLedger,
    ticket: TicketConfig,
    occurrence_id: int,
    quantity: int,
    now: datetime,
    exclude_reservation_id: int | None = None,
) -> None:
    result = await evaluate_availability(
        ledger, ticket, occurrence_id, now, exclude_reservation_id
    )

    if not result.available:
        logger.warning(
            "reservation_rejected",
            ticket_id=ticket.id,
            occurrence_id=occurrence_id,
            reason=result.reason.value,
        )
        raise TicketUnavailableError(ticket.id, result)

    if not result.allows(quantity):
        logger.warning(
            "reservation_rejected",
            ticket_id=ticket.id,
            occurrence_id=occurrence_id,
            reason="insufficient_remaining",
            requested=quantity,
            remaining=result.remaining,
        )
        raise QuantityError(
            f"Only {result.remaining} '{ticket.title}' tickets remaining. Requested: {quantity}"
        )


async def create_reservation(
    db: AsyncSession,
    ledger: BookingLedger,
    lock: ReservationLock,
    data: ReservationCreate,
    now: datetime,
) -> Reservation:
    """
    Reserve one or more ticket types for an occurrence.
    The reservation is committed before this returns.
    """
    occurrence = await get_occurrence(db, data.occurrence_id)
    requested = await _load_lines(db, occurrence, data.tickets)
    keys = [(ticket.id, occurrence.id) for ticket, _ in requested]

    try:
        async with lock.hold(keys):
            for ticket, quantity in requested:
                await _ensure_available(ledger, ticket, occurrence.id, quantity, now)

            reservation = Reservation(
                occurrence_id=occurrence.id,
                name=data.name,
                email=data.email,
                status=ReservationStatus.PENDING.value,
                lines=[
                    ReservationTicket(ticket_id=ticket.id, quantity=quantity)
                    for ticket, quantity in requested
                ],
            )
            db.add(reservation)
            await db.flush()
            await db.commit()
    except (TicketUnavailableError, QuantityError):
        record_reservation_attempt("rejected")
        await db.rollback()
        raise
    except Exception:
        record_reservation_attempt("error")
        await db.rollback()
        raise

    record_reservation_attempt("success")
    logger.info(
        "reservation_created",
        reservation_id=reservation.id,
        occurrence_id=occurrence.id,
        tickets={ticket.id: quantity for ticket, quantity in requested},
        lock=lock.name,
    )
    return reservation


async def get_reservation(db: AsyncSession, reservation_id: int) -> Reservation:
    result = await db.execute(select(Reservation).where(Reservation.id == reservation_id))
    reservation = result.scalar_one_or_none()

    if not reservation:
        raise NotFoundError(f"Reservation {reservation_id} not found")
    return reservation


async def update_reservation(
    db: AsyncSession,
    ledger: BookingLedger,
    lock: ReservationLock,
    reservation_id: int,
    data: ReservationUpdate,
    now: datetime,
) -> Reservation:
    """
    Replace the ticket quantities of an existing reservation.
    Lines not listed in `data` are removed.
    """
    reservation = await get_reservation(db, reservation_id)
    if reservation.is_canceled:
        raise ReservationStateError("A canceled reservation cannot be changed")

    occurrence = await get_occurrence(db, reservation.occurrence_id)
    requested = await _load_lines(db, occurrence, data.tickets)
    keys = [(ticket.id, occurrence.id) for ticket, _ in requested]

    try:
        async with lock.hold(keys):
            for ticket, quantity in requested:
                await _ensure_available(
                    ledger, ticket, occurrence.id, quantity, now,
                    exclude_reservation_id=reservation.id,
                )

            existing = {line.ticket_id: line for line in reservation.lines}
            wanted = {ticket.id: quantity for ticket, quantity in requested}
            for ticket_id, line in existing.items():
                if ticket_id not in wanted:
                    reservation.lines.remove(line)
            for ticket_id, quantity in wanted.items():
                if ticket_id in existing:
                    existing[ticket_id].quantity = quantity
                else:
                    reservation.lines.append(
                        ReservationTicket(ticket_id=ticket_id, quantity=quantity)
                    )

            await db.flush()
            await db.commit()
    except (TicketUnavailableError, QuantityError):
        record_reservation_attempt("rejected")
        await db.rollback()
        raise
    except Exception:
        record_reservation_attempt("error")
        await db.rollback()
        raise

    record_reservation_attempt("success")
    logger.info(
        "reservation_updated",
        reservation_id=reservation.id,
        occurrence_id=occurrence.id,
        tickets=wanted,
        lock=lock.name,
    )
    return reservation


async def confirm_reservation(db: AsyncSession, reservation_id: int) -> Reservation:
    """Mark a pending reservation as confirmed (e.g. after payment)."""
    reservation = await get_reservation(db, reservation_id)

    if reservation.status != ReservationStatus.PENDING.value:
        raise ReservationStateError(f"Reservation is already {reservation.status}")

    reservation.status = ReservationStatus.CONFIRMED.value
    await db.flush()

    logger.info("reservation_confirmed", reservation_id=reservation.id)
    return reservation


async def cancel_reservation(db: AsyncSession, reservation_id: int) -> Reservation:
    """
    Cancel a reservation. Its quantities stop counting toward the booked
    aggregate immediately.
    """
    reservation = await get_reservation(db, reservation_id)

    if reservation.is_canceled:
        raise ReservationStateError("Reservation is already canceled")

    reservation.status = ReservationStatus.CANCELED.value
    await db.flush()

    logger.info(
        "reservation_canceled",
        reservation_id=reservation.id,
        occurrence_id=reservation.occurrence_id,
        released={line.ticket_id: line.quantity for line in reservation.lines},
    )
    return reservation
