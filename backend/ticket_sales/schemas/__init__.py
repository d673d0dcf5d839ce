from ticket_sales.schemas.event import EventCreate, EventResponse, OccurrenceCreate, OccurrenceResponse
from ticket_sales.schemas.ticket import TicketCreate, TicketResponse
from ticket_sales.schemas.availability import AvailabilityResponse
from ticket_sales.schemas.reservation import (
    ReservationCreate, ReservationLine, ReservationResponse, ReservationUpdate,
)

__all__ = [
    "EventCreate", "EventResponse", "OccurrenceCreate", "OccurrenceResponse",
    "TicketCreate", "TicketResponse",
    "AvailabilityResponse",
    "ReservationCreate", "ReservationLine", "ReservationResponse", "ReservationUpdate",
]
