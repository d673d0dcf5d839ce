"""
Reservation endpoints with concurrency-safe capacity checks.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_sales.api.deps import get_ledger, get_lock, get_now
from ticket_sales.db.session import get_db
from ticket_sales.schemas.reservation import ReservationCreate, ReservationResponse, ReservationUpdate
from ticket_sales.services.interfaces.ledger import BookingLedger
from ticket_sales.services.interfaces.reservation_lock import ReservationLock
from ticket_sales.services.reservation_service import (
    cancel_reservation,
    confirm_reservation,
    create_reservation,
    get_reservation,
    update_reservation,
)

router = APIRouter(prefix="/reservations", tags=["Reservations"])


@router.post("/", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
async def create_reservation_endpoint(
    data: ReservationCreate,
    db: AsyncSession = Depends(get_db),
    ledger: BookingLedger = Depends(get_ledger),
    lock: ReservationLock = Depends(get_lock),
    now: datetime = Depends(get_now),
):
    """
    Reserve tickets for an occurrence.

    Returns 409 when a ticket is not on sale or sold out, 422 when the
    quantity is outside the per-order limits or above what remains.
    """
    return await create_reservation(db, ledger, lock, data, now)


@router.get("/{reservation_id}", response_model=ReservationResponse)
async def get_reservation_endpoint(reservation_id: int, db: AsyncSession = Depends(get_db)):
    return await get_reservation(db, reservation_id)


@router.patch("/{reservation_id}", response_model=ReservationResponse)
async def update_reservation_endpoint(
    reservation_id: int,
    data: ReservationUpdate,
    db: AsyncSession = Depends(get_db),
    ledger: BookingLedger = Depends(get_ledger),
    lock: ReservationLock = Depends(get_lock),
    now: datetime = Depends(get_now),
):
    """Change ticket quantities. The reservation's own tickets do not count against it."""
    return await update_reservation(db, ledger, lock, reservation_id, data, now)


@router.post("/{reservation_id}/confirm", response_model=ReservationResponse)
async def confirm_reservation_endpoint(reservation_id: int, db: AsyncSession = Depends(get_db)):
    return await confirm_reservation(db, reservation_id)


@router.delete("/{reservation_id}", response_model=ReservationResponse)
async def cancel_reservation_endpoint(reservation_id: int, db: AsyncSession = Depends(get_db)):
    """Cancel a reservation and release its tickets."""
    return await cancel_reservation(db, reservation_id)
