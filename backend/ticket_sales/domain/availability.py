"""
Ticket availability for one event occurrence.

CHECK ORDER
===========

  1. Sale window start  -> NOT_YET_ON_SALE (with the instant sales open)
  2. Sale window end    -> SALES_CLOSED
  3. No capacity set    -> available, unbounded (no ledger query)
  4. Booked aggregate   -> available with remaining units, or SOLD_OUT

The window is open only strictly between its start and end: at exactly the
start instant tickets are not yet on sale, at exactly the end instant sales
are closed.

CONCURRENCY
===========

evaluate() is a point-in-time snapshot. Two callers may both see
remaining=1 and both book the last unit. A caller that uses the result to
authorize a new booking MUST hold a lock (or transaction with sufficient
isolation) covering both this evaluation and the reservation insert.
See ticket_sales.services.reservation_service for the booking workflow
that does this.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Awaitable, Callable, Optional, Union

from ticket_sales.domain.sale_window import resolve_sale_end, resolve_sale_start
from ticket_sales.domain.ticket import TicketConfig

# (ticket_id, occurrence_id, exclude_reservation_id) -> booked quantity
BookedLookup = Callable[[int, int, Optional[int]], Awaitable[int]]


class UnavailableReason(str, Enum):
    NOT_YET_ON_SALE = "not_yet_on_sale"
    SALES_CLOSED = "sales_closed"
    SOLD_OUT = "sold_out"


REASON_MESSAGES = {
    UnavailableReason.NOT_YET_ON_SALE: "Tickets are not yet available.",
    UnavailableReason.SALES_CLOSED: "Tickets are no longer available.",
    UnavailableReason.SOLD_OUT: "All tickets have been booked.",
}


@dataclass(frozen=True)
class Available:
    """Ticket is on sale. remaining is None when capacity is unbounded."""

    remaining: int | None = None

    available = True

    @property
    def unbounded(self) -> bool:
        return self.remaining is None

    def allows(self, quantity: int) -> bool:
        return self.remaining is None or quantity <= self.remaining


@dataclass(frozen=True)
class Unavailable:
    reason: UnavailableReason
    available_at: datetime | None = None

    available = False

    @property
    def message(self) -> str:
        return REASON_MESSAGES[self.reason]


AvailabilityResult = Union[Available, Unavailable]


def sale_end_instant(config: TicketConfig, occurrence_start: datetime) -> datetime:
    """Instant at which sales close for the occurrence."""
    return resolve_sale_end(config, occurrence_start)


async def evaluate(
    config: TicketConfig,
    occurrence_id: int,
    occurrence_start: datetime,
    now: datetime,
    booked_lookup: BookedLookup,
    exclude_reservation_id: int | None = None,
) -> AvailabilityResult:
    """
    Decide whether a ticket is on sale for an occurrence and how many units remain.

    booked_lookup is only awaited when the window is open and a finite capacity
    is configured. Errors it raises propagate unchanged.

    Pass exclude_reservation_id when re-evaluating an existing reservation so
    its own quantity is not counted against it.
    """
    sale_start = resolve_sale_start(config, occurrence_start)
    if sale_start >= now:
        return Unavailable(UnavailableReason.NOT_YET_ON_SALE, available_at=sale_start)

    if now >= sale_end_instant(config, occurrence_start):
        return Unavailable(UnavailableReason.SALES_CLOSED)

    if config.is_unbounded:
        return Available()

    capacity = config.total_capacity
    booked = await booked_lookup(config.id, occurrence_id, exclude_reservation_id)

    if booked < capacity:
        return Available(remaining=capacity - booked)
    return Unavailable(UnavailableReason.SOLD_OUT)
