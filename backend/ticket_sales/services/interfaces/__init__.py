"""
Service interfaces for dependency inversion.
Allows swapping storage and locking implementations without changing business logic.
"""

from .ledger import BookingLedger
from .reservation_lock import LockKey, ReservationLock
from .local_lock import InProcessReservationLock

__all__ = ['BookingLedger', 'LockKey', 'ReservationLock', 'InProcessReservationLock']
