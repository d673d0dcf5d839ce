from ticket_sales.models.event import Event, EventOccurrence
from ticket_sales.models.reservation import Reservation, ReservationStatus, ReservationTicket
from ticket_sales.models.ticket import EventTicket

__all__ = [
    "Event",
    "EventOccurrence",
    "EventTicket",
    "Reservation",
    "ReservationStatus",
    "ReservationTicket",
]
