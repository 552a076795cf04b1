"""In-process keyed locks.

Serializes work on one key (a story slug) across concurrent requests in
the same process. Separate processes or replicas are not coordinated.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class KeyedLocks:
    """A table of asyncio locks created on demand, one per key.

    Entries are dropped once no task holds or waits for them, so the table
    only grows with the number of keys in use at the same time.

    Examples:
        >>> locks = KeyedLocks()
        >>> async with locks.hold("Budget+2024"):
        ...     ...
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        """Hold the lock for key for the duration of the block."""
        if not self.enabled:
            yield
            return

        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._locks[key]
