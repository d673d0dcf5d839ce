"""
Tests for reservation lock strategies and their selection.
"""

import asyncio

import pytest
from redis.exceptions import LockError

from ticket_sales.core.config import get_settings
from ticket_sales.core.errors import LockTimeoutError
from ticket_sales.services import strategy_factory
from ticket_sales.services.interfaces.local_lock import InProcessReservationLock
from ticket_sales.services.interfaces.reservation_lock import lock_name
from ticket_sales.services.lock_service import RedisReservationLock, RowReservationLock


class FakeLock:
    def __init__(self, client, name, acquirable=True, expired=False):
        self.client = client
        self.name = name
        self.acquirable = acquirable
        self.expired = expired

    async def acquire(self):
        if self.acquirable:
            self.client.events.append(("acquire", self.name))
        return self.acquirable

    async def release(self):
        if self.expired:
            raise LockError("Cannot release an unlocked lock")
        self.client.events.append(("release", self.name))


class FakeRedis:
    """Records lock calls; names listed in `busy` never acquire."""

    def __init__(self, busy=(), expired=()):
        self.busy = set(busy)
        self.expired = set(expired)
        self.events = []
        self.options = {}

    def lock(self, name, timeout=None, blocking_timeout=None):
        self.options[name] = (timeout, blocking_timeout)
        return FakeLock(self, name, name not in self.busy, name in self.expired)


def test_lock_name():
    assert lock_name((3, 7)) == "reservation-lock:3:7"


@pytest.mark.asyncio
async def test_redis_lock_acquires_in_sorted_order():
    client = FakeRedis()
    lock = RedisReservationLock(client, timeout=2.0, ttl=15.0)

    async with lock.hold([(5, 1), (2, 1), (5, 1)]):
        client.events.append(("body", None))

    assert client.events == [
        ("acquire", "reservation-lock:2:1"),
        ("acquire", "reservation-lock:5:1"),
        ("body", None),
        ("release", "reservation-lock:5:1"),
        ("release", "reservation-lock:2:1"),
    ]
    assert client.options["reservation-lock:2:1"] == (15.0, 2.0)


@pytest.mark.asyncio
async def test_redis_lock_timeout_releases_acquired_locks():
    client = FakeRedis(busy={"reservation-lock:5:1"})
    lock = RedisReservationLock(client)

    with pytest.raises(LockTimeoutError) as exc_info:
        async with lock.hold([(2, 1), (5, 1)]):
            pytest.fail("section entered without every lock")

    assert exc_info.value.key == "reservation-lock:5:1"
    assert client.events == [
        ("acquire", "reservation-lock:2:1"),
        ("release", "reservation-lock:2:1"),
    ]


@pytest.mark.asyncio
async def test_redis_lock_expired_on_release_is_logged_not_raised():
    client = FakeRedis(expired={"reservation-lock:1:1"})
    lock = RedisReservationLock(client)

    async with lock.hold([(1, 1)]):
        pass


@pytest.mark.asyncio
async def test_redis_lock_releases_when_section_raises():
    client = FakeRedis()
    lock = RedisReservationLock(client)

    with pytest.raises(RuntimeError):
        async with lock.hold([(1, 1)]):
            raise RuntimeError("insert failed")

    assert ("release", "reservation-lock:1:1") in client.events


@pytest.mark.asyncio
async def test_local_lock_released_after_error():
    lock = InProcessReservationLock(timeout=0.1)

    with pytest.raises(RuntimeError):
        async with lock.hold([(1, 1)]):
            raise RuntimeError("insert failed")

    async with lock.hold([(1, 1)]):
        pass


@pytest.mark.asyncio
async def test_local_lock_forgets_released_keys():
    lock = InProcessReservationLock(timeout=0.1)

    for occurrence_id in range(5):
        async with lock.hold([(1, occurrence_id), (2, occurrence_id)]):
            assert len(lock._locks) == 2

    assert lock._locks == {}


@pytest.mark.asyncio
async def test_local_lock_kept_while_a_caller_waits():
    lock = InProcessReservationLock(timeout=1)
    entered = asyncio.Event()
    release = asyncio.Event()
    order = []

    async def first():
        async with lock.hold([(1, 1)]):
            order.append("first")
            entered.set()
            await release.wait()

    async def second():
        await entered.wait()
        async with lock.hold([(1, 1)]):
            order.append("second")

    first_task = asyncio.create_task(first())
    second_task = asyncio.create_task(second())
    await entered.wait()
    while lock._users[(1, 1)] < 2:
        await asyncio.sleep(0)

    assert len(lock._locks) == 1
    release.set()
    await asyncio.gather(first_task, second_task)

    assert order == ["first", "second"]
    assert lock._locks == {}


@pytest.mark.asyncio
async def test_local_lock_forgets_key_after_timeout():
    lock = InProcessReservationLock(timeout=0.01)

    async with lock.hold([(1, 1)]):
        with pytest.raises(LockTimeoutError):
            async with lock.hold([(1, 1)]):
                pass
        assert lock._users[(1, 1)] == 1

    assert lock._locks == {}


@pytest.mark.asyncio
async def test_row_lock_holds_inside_transaction(db_session, relative_ticket, unlimited_ticket):
    lock = RowReservationLock(db_session)

    async with lock.hold([(unlimited_ticket.id, 1), (relative_ticket.id, 1)]):
        assert db_session.in_transaction()


def test_factory_defaults_to_row_lock():
    assert isinstance(strategy_factory.get_reservation_lock(None), RowReservationLock)


def test_factory_local_lock_is_shared(monkeypatch):
    monkeypatch.setattr(get_settings(), "RESERVATION_LOCK", "local")
    monkeypatch.setattr(strategy_factory, "_local_lock", None)

    first = strategy_factory.get_reservation_lock(None)
    second = strategy_factory.get_reservation_lock(None)

    assert isinstance(first, InProcessReservationLock)
    assert first is second
    assert first.timeout == get_settings().RESERVATION_LOCK_TIMEOUT
