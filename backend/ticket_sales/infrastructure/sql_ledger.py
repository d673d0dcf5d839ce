"""
SQLAlchemy implementation of the booking ledger.

The booked aggregate is

  SELECT COALESCE(SUM(rt.quantity), 0)
  FROM reservation_tickets rt JOIN reservations r ON r.id = rt.reservation_id
  WHERE rt.ticket_id = :ticket AND r.occurrence_id = :occurrence
    AND r.status <> 'canceled' [AND r.id <> :exclude]

Database errors are logged and re-raised as LookupFailure; nothing is retried.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_sales.core.errors import LookupFailure, NotFoundError
from ticket_sales.core.logging import get_logger
from ticket_sales.core.metrics import record_ledger_lookup
from ticket_sales.models.event import EventOccurrence
from ticket_sales.models.reservation import Reservation, ReservationStatus, ReservationTicket
from ticket_sales.services.interfaces.ledger import BookingLedger

logger = get_logger(__name__)


class SqlBookingLedger(BookingLedger):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def occurrence_start_time(self, occurrence_id: int) -> datetime:
        try:
            result = await self.db.execute(
                select(EventOccurrence.start_time).where(EventOccurrence.id == occurrence_id)
            )
            start_time = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            record_ledger_lookup("occurrence_start", ok=False)
            logger.error("ledger_lookup_failed", operation="occurrence_start", occurrence_id=occurrence_id, error=str(e))
            raise LookupFailure("occurrence_start") from e

        record_ledger_lookup("occurrence_start", ok=True)
        if start_time is None:
            raise NotFoundError(f"Occurrence {occurrence_id} not found")
        return start_time

    async def sum_booked_quantity(
        self,
        ticket_id: int,
        occurrence_id: int,
        exclude_reservation_id: Optional[int] = None,
    ) -> int:
        query = (
            select(func.coalesce(func.sum(ReservationTicket.quantity), 0))
            .join(Reservation, Reservation.id == ReservationTicket.reservation_id)
            .where(
                ReservationTicket.ticket_id == ticket_id,
                Reservation.occurrence_id == occurrence_id,
                Reservation.status != ReservationStatus.CANCELED.value,
            )
        )
        if exclude_reservation_id is not None:
            query = query.where(Reservation.id != exclude_reservation_id)

        try:
            booked = (await self.db.execute(query)).scalar_one()
        except SQLAlchemyError as e:
            record_ledger_lookup("sum_booked", ok=False)
            logger.error(
                "ledger_lookup_failed",
                operation="sum_booked",
                ticket_id=ticket_id,
                occurrence_id=occurrence_id,
                error=str(e),
            )
            raise LookupFailure("sum_booked") from e

        record_ledger_lookup("sum_booked", ok=True)
        return int(booked)
