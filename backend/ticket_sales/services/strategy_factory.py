"""
Reservation lock strategy factory.
Configures which locking strategy the booking workflow uses.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ticket_sales.core.config import get_settings
from ticket_sales.services.interfaces.local_lock import InProcessReservationLock
from ticket_sales.services.interfaces.reservation_lock import ReservationLock
from ticket_sales.services.lock_service import RedisReservationLock, RowReservationLock

# Process-wide lock registries; row locks are per session instead
_local_lock: Optional[InProcessReservationLock] = None
_redis_lock: Optional[RedisReservationLock] = None


def get_reservation_lock(db: AsyncSession) -> ReservationLock:
    """
    Get the configured reservation lock.

    Strategy selection via RESERVATION_LOCK:
    - row: SELECT ... FOR UPDATE in the request's transaction (default)
    - local: asyncio locks, single process
    - redis: redis locks, multi-process
    """
    global _local_lock, _redis_lock
    settings = get_settings()
    strategy = settings.RESERVATION_LOCK

    if strategy == "local":
        if _local_lock is None:
            _local_lock = InProcessReservationLock(timeout=settings.RESERVATION_LOCK_TIMEOUT)
        return _local_lock
    if strategy == "redis":
        if _redis_lock is None:
            _redis_lock = RedisReservationLock(
                timeout=settings.RESERVATION_LOCK_TIMEOUT,
                ttl=settings.RESERVATION_LOCK_TTL,
            )
        return _redis_lock
    return RowReservationLock(db)
