"""Snapshot store tests."""

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from statekeeper.exceptions import StoreUnavailable
from statekeeper.stores import InMemorySnapshotStore, RedisSnapshotStore


@pytest.mark.asyncio
async def test_inmemory_store_get_set_delete(clock):
    store = InMemorySnapshotStore(clock)

    assert await store.get("k") is None
    await store.set("k", b"one", ttl=10)
    assert await store.get("k") == b"one"
    await store.set("k", b"two", ttl=10)
    assert await store.get("k") == b"two"
    assert store.keys() == ["k"]

    await store.delete("k")
    assert await store.get("k") is None
    await store.delete("k")


@pytest.mark.asyncio
async def test_inmemory_store_expires_entries(clock):
    store = InMemorySnapshotStore(clock)
    await store.set("k", b"v", ttl=60)

    clock.advance(59)
    assert await store.get("k") == b"v"

    # reads do not extend the lifetime
    clock.advance(1)
    assert await store.get("k") is None
    assert store.keys() == []


@pytest.mark.asyncio
async def test_inmemory_store_write_refreshes_ttl(clock):
    store = InMemorySnapshotStore(clock)
    await store.set("k", b"v1", ttl=60)
    clock.advance(50)
    await store.set("k", b"v2", ttl=60)
    clock.advance(50)

    assert await store.get("k") == b"v2"


@pytest.mark.asyncio
async def test_inmemory_store_rejects_non_positive_ttl():
    store = InMemorySnapshotStore()

    with pytest.raises(ValueError):
        await store.set("k", b"v", ttl=0)


@pytest.mark.asyncio
async def test_redis_store_uses_set_with_expiry(fake_redis):
    store = RedisSnapshotStore(client=fake_redis)

    assert await store.get("owner:1:order:state") is None
    await store.set("owner:1:order:state", b"data", ttl=259200)

    assert fake_redis.set_calls == [("owner:1:order:state", b"data", 259200)]
    assert await store.get("owner:1:order:state") == b"data"

    await store.delete("owner:1:order:state")
    assert await store.get("owner:1:order:state") is None

    await store.disconnect()
    assert fake_redis.closed


@pytest.mark.asyncio
async def test_redis_store_returns_bytes_for_decoded_clients(fake_redis):
    fake_redis.data["k"] = "text"
    store = RedisSnapshotStore(client=fake_redis)

    assert await store.get("k") == b"text"


class BrokenRedis:
    async def ping(self):
        raise RedisConnectionError("refused")

    async def get(self, key):
        raise RedisConnectionError("refused")

    async def set(self, key, value, ex=None):
        raise RedisTimeoutError("timed out")

    async def delete(self, key):
        raise OSError("network unreachable")


@pytest.mark.asyncio
async def test_redis_store_wraps_backend_errors():
    store = RedisSnapshotStore(client=BrokenRedis())

    with pytest.raises(StoreUnavailable):
        await store.get("k")
    with pytest.raises(StoreUnavailable):
        await store.set("k", b"v", ttl=10)
    with pytest.raises(StoreUnavailable):
        await store.delete("k")


def test_redis_store_defaults():
    store = RedisSnapshotStore()

    assert store.host == "localhost"
    assert store.port == 6379
    assert store.url is None
