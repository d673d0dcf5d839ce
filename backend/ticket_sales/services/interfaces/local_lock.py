"""
In-process reservation lock.
One asyncio.Lock per (ticket, occurrence); only protects callers running in
the same event loop. A key's lock is dropped once no caller holds or awaits it.
"""

from collections import Counter
from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncIterator, Iterable, Optional

import asyncio

from ticket_sales.core.errors import LockTimeoutError
from ticket_sales.services.interfaces.reservation_lock import LockKey, ReservationLock, lock_name


class InProcessReservationLock(ReservationLock):
    """
    No cross-process coordination.

    Use when:
    - A single worker process serves bookings
    - Tests and local development
    """

    name = "local"

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout
        self._locks: dict[LockKey, asyncio.Lock] = {}
        self._users: Counter[LockKey] = Counter()

    @asynccontextmanager
    async def hold(self, keys: Iterable[LockKey]) -> AsyncIterator[None]:
        async with AsyncExitStack() as stack:
            for key in sorted(set(keys)):
                lock = self._checkout(key)
                stack.callback(self._checkin, key)
                try:
                    await asyncio.wait_for(lock.acquire(), timeout=self.timeout)
                except asyncio.TimeoutError:
                    raise LockTimeoutError(lock_name(key))
                stack.callback(lock.release)
            yield

    def _checkout(self, key: LockKey) -> asyncio.Lock:
        self._users[key] += 1
        return self._locks.setdefault(key, asyncio.Lock())

    def _checkin(self, key: LockKey) -> None:
        self._users[key] -= 1
        if self._users[key] <= 0:
            del self._users[key]
            del self._locks[key]
