"""
Reservation lock strategies backed by external systems.

Row locking:
  SELECT id FROM event_tickets WHERE id IN (...) ORDER BY id FOR UPDATE
  inside the caller's transaction. Locks are released by the commit or
  rollback that ends the transaction, so the reservation service commits
  inside the held section. Granularity is the ticket (all occurrences).
  SQLite has no FOR UPDATE; there the database-wide write lock applies.

Redis locking:
  One redis lock per (ticket, occurrence) with a TTL, so a crashed worker
  cannot block sales forever. Shared by all API processes.
"""

import time
from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncIterator, Iterable, Optional

import redis.asyncio as redis
from redis.exceptions import LockError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_sales.core.errors import LockTimeoutError
from ticket_sales.core.logging import get_logger
from ticket_sales.core.metrics import reservation_lock_wait
from ticket_sales.infrastructure.redis_client import get_redis
from ticket_sales.models.ticket import EventTicket
from ticket_sales.services.interfaces.reservation_lock import LockKey, ReservationLock, lock_name

logger = get_logger(__name__)


class RowReservationLock(ReservationLock):
    """
    Database row locks on the ticket rows.

    Use when:
    - PostgreSQL is the only shared state (default)
    - Booking volume per ticket is moderate
    """

    name = "row"

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def hold(self, keys: Iterable[LockKey]) -> AsyncIterator[None]:
        ticket_ids = sorted({ticket_id for ticket_id, _ in keys})
        started = time.perf_counter()
        await self.db.execute(
            select(EventTicket.id)
            .where(EventTicket.id.in_(ticket_ids))
            .order_by(EventTicket.id)
            .with_for_update()
        )
        reservation_lock_wait.labels(strategy=self.name).observe(time.perf_counter() - started)
        yield


class RedisReservationLock(ReservationLock):
    """
    Distributed locks in Redis.

    Use when:
    - Several API processes or hosts book the same tickets
    - Row locks on hot tickets become a bottleneck
    """

    name = "redis"

    def __init__(
        self,
        client: Optional[redis.Redis] = None,
        timeout: float = 10.0,
        ttl: float = 30.0,
    ):
        self.redis = client or get_redis()
        self.timeout = timeout
        self.ttl = ttl

    @asynccontextmanager
    async def hold(self, keys: Iterable[LockKey]) -> AsyncIterator[None]:
        async with AsyncExitStack() as stack:
            started = time.perf_counter()
            for key in sorted(set(keys)):
                name = lock_name(key)
                lock = self.redis.lock(name, timeout=self.ttl, blocking_timeout=self.timeout)
                if not await lock.acquire():
                    logger.warning("reservation_lock_timeout", lock=name, timeout=self.timeout)
                    raise LockTimeoutError(name)
                stack.push_async_callback(self._release, lock, name)
            reservation_lock_wait.labels(strategy=self.name).observe(time.perf_counter() - started)
            yield

    async def _release(self, lock, name: str) -> None:
        try:
            await lock.release()
        except LockError:
            # TTL expired while held; another worker may have entered the section
            logger.error("reservation_lock_expired", lock=name, ttl=self.ttl)
