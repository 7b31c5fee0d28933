"""
Per-division regeneration locks.

Two reconciliations against the same existing-game set could both decide to
create the same new week, so regeneration of one division is serialized.
Different divisions never wait on each other.

- DivisionLockRegistry: process-local RLock per division (API process, tests).
- RedisDivisionLock: cross-process lock for Celery workers sharing Redis.
"""

from contextlib import contextmanager
from threading import Lock, RLock
from typing import Dict, Iterator, Optional

import redis

from league_scheduler.core.config import (
    REDIS_URL, DIVISION_LOCK_TIMEOUT_SECONDS, DIVISION_LOCK_TTL_SECONDS, DIVISION_LOCK_PREFIX
)
from league_scheduler.core.errors import RegenerationInProgress
from league_scheduler.core.logging_config import get_logger

logger = get_logger(__name__)


class DivisionLockRegistry:
    """Hands out one re-entrant lock per division id."""

    def __init__(self, timeout_s: Optional[float] = DIVISION_LOCK_TIMEOUT_SECONDS):
        self.timeout_s = timeout_s
        self._locks: Dict[str, RLock] = {}
        self._guard = Lock()

    def _lock_for(self, division_id: str) -> RLock:
        with self._guard:
            lock = self._locks.get(division_id)
            if lock is None:
                lock = self._locks[division_id] = RLock()
            return lock

    @contextmanager
    def hold(self, division_id: str) -> Iterator[None]:
        """
        Serialize a regeneration for one division.

        Raises:
            RegenerationInProgress: the lock was not acquired within timeout_s.
        """
        lock = self._lock_for(division_id)
        if self.timeout_s is None:
            acquired = lock.acquire()
        else:
            acquired = lock.acquire(timeout=max(0.0, float(self.timeout_s)))
        if not acquired:
            logger.warning("Division %s regeneration lock timed out", division_id)
            raise RegenerationInProgress.for_division(division_id, self.timeout_s)
        try:
            yield
        finally:
            lock.release()


class RedisDivisionLock:
    """
    Same contract as DivisionLockRegistry, backed by redis-py locks.

    The lock expires after DIVISION_LOCK_TTL_SECONDS so a crashed worker
    cannot block a division forever.
    """

    def __init__(
        self,
        client: Optional[redis.Redis] = None,
        timeout_s: float = DIVISION_LOCK_TIMEOUT_SECONDS,
        ttl_s: int = DIVISION_LOCK_TTL_SECONDS,
    ):
        self.client = client or redis.Redis.from_url(REDIS_URL)
        self.timeout_s = timeout_s
        self.ttl_s = ttl_s

    @contextmanager
    def hold(self, division_id: str) -> Iterator[None]:
        lock = self.client.lock(
            f"{DIVISION_LOCK_PREFIX}{division_id}",
            timeout=self.ttl_s,
            blocking_timeout=self.timeout_s,
        )
        if not lock.acquire():
            logger.warning("Division %s redis lock timed out", division_id)
            raise RegenerationInProgress.for_division(division_id, self.timeout_s)
        try:
            yield
        finally:
            try:
                lock.release()
            except redis.exceptions.LockError:
                logger.warning("Division %s redis lock expired before release", division_id)
