"""In-memory snapshot store for testing."""

from __future__ import annotations

import asyncio
import time
from typing import Callable, Dict, Optional, Tuple

from .base import SnapshotStore


class InMemorySnapshotStore(SnapshotStore):
    """Process-local store with expiry.

    Values are replaced whole under a lock, so readers never see a partial
    write. ``clock`` can be swapped in tests to simulate expiry.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._data: Dict[str, Tuple[bytes, float]] = {}
        self._clock = clock
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[bytes]:
        async with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            data, expires_at = entry
            if self._clock() >= expires_at:
                del self._data[key]
                return None
            return data

    async def set(self, key: str, data: bytes, ttl: int) -> None:
        if ttl <= 0:
            raise ValueError("ttl must be a positive number of seconds")
        async with self._lock:
            self._data[key] = (bytes(data), self._clock() + ttl)

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._data.pop(key, None)

    def keys(self) -> list[str]:
        now = self._clock()
        return sorted(k for k, (_, exp) in self._data.items() if exp > now)
