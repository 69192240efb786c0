"""Per-key asyncio locks serializing history mutations."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Hashable


class KeyedLockRegistry:
    """
    Hands out one asyncio.Lock per key.

    Locks are dropped once no task holds or waits on them, so the registry
    only grows with the number of keys in flight.
    """

    def __init__(self):
        self._locks: Dict[Hashable, asyncio.Lock] = {}
        self._users: Dict[Hashable, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncGenerator[None, None]:
        """Hold the lock for key for the duration of the block."""
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._users[key] = self._users.get(key, 0) + 1

        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]
