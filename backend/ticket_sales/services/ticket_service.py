"""
Ticket service: creating and reading ticket types.

Creation follows the administrator workflow: defaults are filled in, free
tickets are forced when payments are disabled, then every validation rule is
checked before anything is written.
"""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_sales.core.config import get_settings
from ticket_sales.core.errors import NotFoundError
from ticket_sales.core.logging import get_logger
from ticket_sales.models.event import EventOccurrence
from ticket_sales.models.ticket import EventTicket
from ticket_sales.schemas.ticket import TicketCreate
from ticket_sales.services.event_service import get_event

logger = get_logger(__name__)


async def create_ticket(
    db: AsyncSession,
    event_id: int,
    ticket_data: TicketCreate,
    now: datetime,
) -> EventTicket:
    """
    Create a ticket type for an event.
    Raises ConfigurationError listing every invalid field.
    """
    settings = get_settings()
    await get_event(db, event_id)

    draft = ticket_data.to_draft(default_currency=settings.DEFAULT_CURRENCY)
    draft.apply_defaults(now, payments_enabled=settings.PAYMENTS_ENABLED)
    draft.validate()

    ticket = EventTicket.from_draft(event_id, draft)
    db.add(ticket)
    await db.flush()
    await db.refresh(ticket)

    logger.info(
        "ticket_created",
        ticket_id=ticket.id,
        event_id=event_id,
        kind=ticket.kind,
        start_type=ticket.start_type,
        end_type=ticket.end_type,
        total_capacity=ticket.total_capacity,
    )
    return ticket


async def get_ticket(db: AsyncSession, ticket_id: int) -> EventTicket:
    result = await db.execute(select(EventTicket).where(EventTicket.id == ticket_id))
    ticket = result.scalar_one_or_none()

    if not ticket:
        raise NotFoundError(f"Ticket {ticket_id} not found")
    return ticket


async def list_tickets(db: AsyncSession, event_id: int) -> list[EventTicket]:
    await get_event(db, event_id)
    result = await db.execute(
        select(EventTicket).where(EventTicket.event_id == event_id).order_by(EventTicket.id)
    )
    return list(result.scalars().all())


async def get_ticket_for_occurrence(
    db: AsyncSession,
    ticket_id: int,
    occurrence: EventOccurrence,
) -> EventTicket:
    """Load a ticket, rejecting tickets that belong to a different event."""
    ticket = await get_ticket(db, ticket_id)
    if ticket.event_id != occurrence.event_id:
        raise NotFoundError(f"Ticket {ticket_id} is not sold for occurrence {occurrence.id}")
    return ticket
