"""Snapshot store factory and initialization."""

from __future__ import annotations

import os
from typing import Optional

from ..config import StatekeeperConfig, load_config
from .base import SnapshotStore
from .inmemory import InMemorySnapshotStore
from .redis import RedisSnapshotStore

_store_instance: SnapshotStore | None = None


def get_store(
    backend: Optional[str] = None, config: Optional[StatekeeperConfig] = None
) -> SnapshotStore:
    """Factory function to get the configured snapshot store.

    Without explicit arguments the same instance is returned on every call,
    so an in-memory store keeps its contents for the life of the process.
    """

    global _store_instance
    if _store_instance is not None and backend is None and config is None:
        return _store_instance

    config = config or load_config()
    backend = (
        backend or os.getenv("STATEKEEPER_STORE") or config.store.backend
    ).lower()

    if backend == "inmemory":
        store: SnapshotStore = InMemorySnapshotStore()
    elif backend == "redis":
        redis_conf = config.store.redis
        store = RedisSnapshotStore(
            host=redis_conf.host,
            port=redis_conf.port,
            db=redis_conf.db,
            password=redis_conf.password,
            url=redis_conf.url,
            socket_timeout=redis_conf.socket_timeout,
        )
    else:
        raise ValueError(f"Unsupported store backend: {backend}")

    _store_instance = store
    return store


__all__ = [
    "SnapshotStore",
    "InMemorySnapshotStore",
    "RedisSnapshotStore",
    "get_store",
]
