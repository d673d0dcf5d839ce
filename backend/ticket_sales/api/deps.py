"""
Shared FastAPI dependencies.

`get_now` is the only source of the current time for request handlers, so
tests can pin the clock with app.dependency_overrides.
"""

from datetime import datetime, timezone

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_sales.db.session import get_db
from ticket_sales.infrastructure.sql_ledger import SqlBookingLedger
from ticket_sales.services.interfaces.ledger import BookingLedger
from ticket_sales.services.interfaces.reservation_lock import ReservationLock
from ticket_sales.services.strategy_factory import get_reservation_lock


def get_now() -> datetime:
    return datetime.now(timezone.utc)


def get_ledger(db: AsyncSession = Depends(get_db)) -> BookingLedger:
    return SqlBookingLedger(db)


def get_lock(db: AsyncSession = Depends(get_db)) -> ReservationLock:
    return get_reservation_lock(db)
