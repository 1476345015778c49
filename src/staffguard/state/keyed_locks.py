"""Per-key asyncio locks serializing commands that target the same member."""

import asyncio
import contextlib
from typing import AsyncIterator, Dict

from staffguard.util.logger import get_logger

logger = get_logger("keyed_locks")


class KeyedLocks:
    """Hands out one :class:`asyncio.Lock` per key.

    Locks are dropped once nobody holds or waits on them, so the registry
    only grows with the number of keys in flight.
    """

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._waiters: Dict[str, int] = {}

    @contextlib.asynccontextmanager
    async def lock(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        if lock.locked():
            logger.debug("[KEYED LOCKS] Waiting for lock %s", key)
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                self._locks.pop(key, None)

    def is_locked(self, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)
