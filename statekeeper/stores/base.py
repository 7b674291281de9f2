"""Base interface for snapshot stores."""

from __future__ import annotations

import abc
from typing import Optional


class SnapshotStore(metaclass=abc.ABCMeta):
    """Abstract key-value store holding serialized snapshots.

    Implementations raise ``StoreUnavailable`` for backend failures and return
    ``None`` for a missing or expired key.
    """

    async def connect(self) -> None:
        """Open connection to backend (no-op by default)."""
        pass

    async def disconnect(self) -> None:
        """Close connection to backend (no-op by default)."""
        pass

    @abc.abstractmethod
    async def get(self, key: str) -> Optional[bytes]:
        """Return the bytes stored under ``key`` or ``None``."""
        raise NotImplementedError

    @abc.abstractmethod
    async def set(self, key: str, data: bytes, ttl: int) -> None:
        """Replace the value under ``key``, expiring after ``ttl`` seconds."""
        raise NotImplementedError

    @abc.abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        raise NotImplementedError

    async def __aenter__(self) -> "SnapshotStore":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.disconnect()
