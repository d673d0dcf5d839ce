"""
Availability service: runs the availability core against a booking ledger.

The result is a snapshot. Reservation code that acts on it does so inside a
ReservationLock (see reservation_service); read-only callers such as the
availability endpoint do not need one.
"""

from datetime import datetime
from typing import Optional

from ticket_sales.core.logging import get_logger
from ticket_sales.core.metrics import record_availability
from ticket_sales.domain.availability import AvailabilityResult, evaluate
from ticket_sales.domain.ticket import TicketConfig
from ticket_sales.services.interfaces.ledger import BookingLedger

logger = get_logger(__name__)


async def evaluate_availability(
    ledger: BookingLedger,
    ticket: TicketConfig,
    occurrence_id: int,
    now: datetime,
    exclude_reservation_id: Optional[int] = None,
    occurrence_start: Optional[datetime] = None,
) -> AvailabilityResult:
    """
    Is the ticket on sale for the occurrence at `now`, and how many units remain?

    Callers that already loaded the occurrence pass its start time to skip
    the ledger lookup. LookupFailure from the ledger propagates; it is never
    turned into a sold-out answer.
    """
    if occurrence_start is None:
        occurrence_start = await ledger.occurrence_start_time(occurrence_id)
    result = await evaluate(
        ticket,
        occurrence_id,
        occurrence_start,
        now,
        ledger.sum_booked_quantity,
        exclude_reservation_id,
    )

    outcome = "available" if result.available else result.reason.value
    record_availability(outcome)
    logger.debug(
        "availability_evaluated",
        ticket_id=ticket.id,
        occurrence_id=occurrence_id,
        outcome=outcome,
        remaining=getattr(result, "remaining", None),
        excluded_reservation=exclude_reservation_id,
    )
    return result

