import time
from typing import Callable, List, Tuple

import pytest

import statekeeper.stores as stores
from statekeeper.stores import InMemorySnapshotStore


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    """Keep tests independent of any local config file, env or cached store."""
    monkeypatch.setenv("STATEKEEPER_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.delenv("STATEKEEPER_STORE", raising=False)
    monkeypatch.delenv("STATEKEEPER_REDIS_URL", raising=False)
    monkeypatch.setattr(stores, "_store_instance", None)


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SpyStore(InMemorySnapshotStore):
    """In-memory store that records every call."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        super().__init__(clock)
        self.gets: List[str] = []
        self.sets: List[Tuple[str, bytes, int]] = []

    async def get(self, key):
        self.gets.append(key)
        return await super().get(key)

    async def set(self, key, data, ttl):
        self.sets.append((key, data, ttl))
        await super().set(key, data, ttl)


class FakeRedis:
    """Minimal stand-in for a ``redis.asyncio.Redis`` client."""

    def __init__(self) -> None:
        self.data = {}
        self.set_calls = []
        self.closed = False

    async def ping(self):
        return True

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self.set_calls.append((key, value, ex))
        self.data[key] = value
        return True

    async def delete(self, key):
        return 1 if self.data.pop(key, None) is not None else 0

    async def aclose(self):
        self.closed = True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def spy_store(clock) -> SpyStore:
    return SpyStore(clock)


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()

