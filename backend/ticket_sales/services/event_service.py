"""
Event service handling events and their occurrences.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_sales.core.errors import NotFoundError
from ticket_sales.models.event import Event, EventOccurrence
from ticket_sales.schemas.event import EventCreate, OccurrenceCreate
from ticket_sales.core.logging import get_logger

logger = get_logger(__name__)


async def create_event(db: AsyncSession, event_data: EventCreate) -> Event:
    event = Event(
        title=event_data.title,
        description=event_data.description,
        location=event_data.location,
    )
    db.add(event)
    await db.flush()
    await db.refresh(event)

    logger.info("event_created", event_id=event.id, title=event.title)
    return event


async def get_event(db: AsyncSession, event_id: int) -> Event:
    """Get a single event by ID."""
    result = await db.execute(select(Event).where(Event.id == event_id))
    event = result.scalar_one_or_none()

    if not event:
        raise NotFoundError(f"Event {event_id} not found")
    return event


async def add_occurrence(
    db: AsyncSession,
    event_id: int,
    occurrence_data: OccurrenceCreate,
) -> EventOccurrence:
    """Schedule a new run of an event."""
    await get_event(db, event_id)

    occurrence = EventOccurrence(
        event_id=event_id,
        start_time=occurrence_data.start_time,
        end_time=occurrence_data.end_time,
    )
    db.add(occurrence)
    await db.flush()
    await db.refresh(occurrence)

    logger.info(
        "occurrence_created",
        event_id=event_id,
        occurrence_id=occurrence.id,
        start_time=occurrence.start_time.isoformat(),
    )
    return occurrence


async def list_occurrences(db: AsyncSession, event_id: int) -> list[EventOccurrence]:
    """Occurrences of an event ordered by start time."""
    await get_event(db, event_id)
    result = await db.execute(
        select(EventOccurrence)
        .where(EventOccurrence.event_id == event_id)
        .order_by(EventOccurrence.start_time.asc())
    )
    return list(result.scalars().all())


async def get_occurrence(db: AsyncSession, occurrence_id: int) -> EventOccurrence:
    result = await db.execute(select(EventOccurrence).where(EventOccurrence.id == occurrence_id))
    occurrence = result.scalar_one_or_none()

    if not occurrence:
        raise NotFoundError(f"Occurrence {occurrence_id} not found")
    return occurrence
