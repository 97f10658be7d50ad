# appointly/core/locks.py
"""
Per-(provider, date) critical sections for booking admission.

Two appointments can only conflict when they share a provider and a date,
so admission and rescheduling serialize on that pair and nothing wider.
The in-memory backend covers a single API process; the Redis backend
covers several instances sharing one database.
"""
import logging
import threading
from contextlib import contextmanager
from datetime import date
from functools import lru_cache
from typing import Dict, Iterator

from redis.exceptions import LockError

from appointly.config.redis import RedisKeys
from appointly.config.settings import get_settings
from appointly.core.exceptions import BookingConflictError

logger = logging.getLogger(__name__)

BUSY_MESSAGE = "Another booking for this day is being processed, please try again"


class InMemoryBookingLock:
    """Keyed mutex registry for single-instance deployments"""

    def __init__(self, blocking_timeout: float = 5.0):
        self.blocking_timeout = blocking_timeout
        # key -> [lock, number of holders and waiters]
        self._locks: Dict[str, list] = {}
        self._registry_lock = threading.Lock()

    def _checkout(self, key: str) -> threading.Lock:
        with self._registry_lock:
            entry = self._locks.get(key)
            if entry is None:
                entry = [threading.Lock(), 0]
                self._locks[key] = entry
            entry[1] += 1
            return entry[0]

    def _checkin(self, key: str) -> None:
        with self._registry_lock:
            entry = self._locks[key]
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[key]

    @contextmanager
    def hold(self, provider_id: int, day: date) -> Iterator[None]:
        key = RedisKeys.BOOKING_LOCK.format(provider_id=provider_id, date=day.isoformat())
        lock = self._checkout(key)

        try:
            if not lock.acquire(timeout=self.blocking_timeout):
                logger.warning(f"Timed out waiting for {key}")
                raise BookingConflictError(BUSY_MESSAGE)
            try:
                yield
            finally:
                lock.release()
        finally:
            self._checkin(key)


class RedisBookingLock:
    """Distributed lock shared by every API instance"""

    def __init__(self, client, timeout: float = 10.0, blocking_timeout: float = 5.0):
        self.client = client
        self.timeout = timeout
        self.blocking_timeout = blocking_timeout

    @contextmanager
    def hold(self, provider_id: int, day: date) -> Iterator[None]:
        key = RedisKeys.BOOKING_LOCK.format(provider_id=provider_id, date=day.isoformat())
        lock = self.client.lock(
            key,
            timeout=self.timeout,
            blocking_timeout=self.blocking_timeout,
        )

        if not lock.acquire():
            logger.warning(f"Timed out waiting for {key}")
            raise BookingConflictError(BUSY_MESSAGE)
        try:
            yield
        finally:
            try:
                lock.release()
            except LockError as e:
                # The lock expired while held; the transaction has already finished
                logger.warning(f"Lock {key} expired before release: {e}")


def build_booking_lock(backend: str):
    settings = get_settings()

    if backend == "memory":
        return InMemoryBookingLock(
            blocking_timeout=settings.BOOKING_LOCK_BLOCKING_TIMEOUT_SECONDS
        )

    if backend == "redis":
        from appointly.config.redis import get_redis

        return RedisBookingLock(
            get_redis(),
            timeout=settings.BOOKING_LOCK_TIMEOUT_SECONDS,
            blocking_timeout=settings.BOOKING_LOCK_BLOCKING_TIMEOUT_SECONDS,
        )

    raise ValueError(f"Unknown BOOKING_LOCK_BACKEND: {backend!r}")


@lru_cache()
def get_booking_lock():
    """Process-wide lock backend selected by BOOKING_LOCK_BACKEND"""
    backend = get_settings().BOOKING_LOCK_BACKEND.lower()
    logger.info(f"Using '{backend}' booking lock backend")
    return build_booking_lock(backend)
