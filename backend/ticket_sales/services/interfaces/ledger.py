"""
Booking ledger interface.
The availability core reads occurrence start times and booked quantities
through this interface and never talks to storage directly.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional


class BookingLedger(ABC):
    """
    Read-only view of occurrences and reservations.

    Implementations:
    - SqlBookingLedger: aggregates reservation_tickets with SQLAlchemy

    Both methods raise LookupFailure when the backing store cannot answer.
    Results are never cached: every call reflects the store at that moment,
    so a caller acting on them must hold a ReservationLock.
    """

    @abstractmethod
    async def occurrence_start_time(self, occurrence_id: int) -> datetime:
        """
        Start instant of an occurrence (UTC).

        Raises:
            NotFoundError: Unknown occurrence
            LookupFailure: Store unreachable
        """
        pass

    @abstractmethod
    async def sum_booked_quantity(
        self,
        ticket_id: int,
        occurrence_id: int,
        exclude_reservation_id: Optional[int] = None,
    ) -> int:
        """
        Total quantity of a ticket held by non-canceled reservations for an occurrence.

        Args:
            ticket_id: Ticket type
            occurrence_id: Event occurrence
            exclude_reservation_id: Reservation to leave out of the sum

        Returns:
            Booked units (0 when nothing is booked)
        """
        pass
