"""
Event, occurrence and ticket type endpoints.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_sales.api.deps import get_now
from ticket_sales.db.session import get_db
from ticket_sales.schemas.event import EventCreate, EventResponse, OccurrenceCreate, OccurrenceResponse
from ticket_sales.schemas.ticket import TicketCreate, TicketResponse
from ticket_sales.services.event_service import add_occurrence, create_event, get_event, list_occurrences
from ticket_sales.services.ticket_service import create_ticket, list_tickets

router = APIRouter(prefix="/events", tags=["Events"])


@router.post("/", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(event_data: EventCreate, db: AsyncSession = Depends(get_db)):
    return await create_event(db, event_data)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event_endpoint(event_id: int, db: AsyncSession = Depends(get_db)):
    return await get_event(db, event_id)


@router.post(
    "/{event_id}/occurrences",
    response_model=OccurrenceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_occurrence_endpoint(
    event_id: int,
    occurrence_data: OccurrenceCreate,
    db: AsyncSession = Depends(get_db),
):
    return await add_occurrence(db, event_id, occurrence_data)


@router.get("/{event_id}/occurrences", response_model=list[OccurrenceResponse])
async def list_occurrences_endpoint(event_id: int, db: AsyncSession = Depends(get_db)):
    return await list_occurrences(db, event_id)


@router.post(
    "/{event_id}/tickets",
    response_model=TicketResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_ticket_endpoint(
    event_id: int,
    ticket_data: TicketCreate,
    db: AsyncSession = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """
    Create a ticket type. Returns 422 with every validation message
    when the sale window or price configuration is incomplete.
    """
    ticket = await create_ticket(db, event_id, ticket_data, now)
    return TicketResponse.from_model(ticket)


@router.get("/{event_id}/tickets", response_model=list[TicketResponse])
async def list_tickets_endpoint(event_id: int, db: AsyncSession = Depends(get_db)):
    tickets = await list_tickets(db, event_id)
    return [TicketResponse.from_model(ticket) for ticket in tickets]
