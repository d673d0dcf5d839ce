"""
Ticket availability endpoint. Never cached: every call reads the live ledger.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_sales.api.deps import get_ledger, get_now
from ticket_sales.db.session import get_db
from ticket_sales.domain.availability import sale_end_instant
from ticket_sales.schemas.availability import AvailabilityResponse
from ticket_sales.schemas.ticket import TicketResponse
from ticket_sales.services.availability_service import evaluate_availability
from ticket_sales.services.event_service import get_occurrence
from ticket_sales.services.interfaces.ledger import BookingLedger
from ticket_sales.services.ticket_service import get_ticket, get_ticket_for_occurrence

router = APIRouter(prefix="/tickets", tags=["Tickets"])


@router.get("/{ticket_id}", response_model=TicketResponse)
async def get_ticket_endpoint(ticket_id: int, db: AsyncSession = Depends(get_db)):
    return TicketResponse.from_model(await get_ticket(db, ticket_id))


@router.get("/{ticket_id}/availability", response_model=AvailabilityResponse)
async def ticket_availability_endpoint(
    ticket_id: int,
    occurrence_id: int = Query(...),
    exclude_reservation_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    ledger: BookingLedger = Depends(get_ledger),
    now: datetime = Depends(get_now),
):
    """
    Whether the ticket is on sale for the occurrence and how many units remain.

    Pass exclude_reservation_id when showing the options for editing an
    existing reservation, so its own tickets are counted as free.
    """
    occurrence = await get_occurrence(db, occurrence_id)
    ticket = (await get_ticket_for_occurrence(db, ticket_id, occurrence)).to_config()

    result = await evaluate_availability(
        ledger, ticket, occurrence.id, now, exclude_reservation_id,
        occurrence_start=occurrence.start_time,
    )
    sale_end = sale_end_instant(ticket, occurrence.start_time)
    return AvailabilityResponse.from_result(ticket.id, occurrence.id, result, sale_end)
