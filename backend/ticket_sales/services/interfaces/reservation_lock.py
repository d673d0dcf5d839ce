"""
Reservation lock strategy interface.
Serializes the availability read and the reservation write for a
(ticket, occurrence) pair so concurrent callers cannot oversell.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Iterable

LockKey = tuple[int, int]  # (ticket_id, occurrence_id)


def lock_name(key: LockKey) -> str:
    ticket_id, occurrence_id = key
    return f"reservation-lock:{ticket_id}:{occurrence_id}"


class ReservationLock(ABC):
    """
    Interface for reservation locking strategies.

    Implementations:
    - RowReservationLock: SELECT ... FOR UPDATE on the ticket rows (database)
    - InProcessReservationLock: asyncio locks, single process only
    - RedisReservationLock: redis locks shared by all processes

    The caller must commit its reservation before leaving the held section.
    """

    name: str = "abstract"

    @abstractmethod
    def hold(self, keys: Iterable[LockKey]) -> AbstractAsyncContextManager[None]:
        """
        Acquire every key, in sorted order, for the duration of the block.

        Raises:
            LockTimeoutError: A key could not be acquired in time
        """
        pass
