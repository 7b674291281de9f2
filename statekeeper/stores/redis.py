"""Redis snapshot store."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from ..exceptions import StoreUnavailable
from .base import SnapshotStore

logger = logging.getLogger(__name__)


class RedisSnapshotStore(SnapshotStore):
    """Redis-backed store using ``GET`` and ``SET key value EX ttl``."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: Optional[str] = None,
        url: Optional[str] = None,
        socket_timeout: Optional[float] = None,
        client: Optional[Any] = None,
    ) -> None:
        self.host = host
        self.port = port
        self.db = db
        self.password = password
        self.url = url
        self.socket_timeout = socket_timeout
        self._redis: Optional[Any] = client

    async def connect(self) -> None:
        """Connect to Redis."""
        if self._redis is not None:
            return
        if self.url:
            self._redis = redis.Redis.from_url(
                self.url, socket_timeout=self.socket_timeout
            )
        else:
            self._redis = redis.Redis(
                host=self.host,
                port=self.port,
                db=self.db,
                password=self.password,
                socket_timeout=self.socket_timeout,
            )
        try:
            await self._redis.ping()
        except (RedisError, OSError) as e:
            self._redis = None
            raise StoreUnavailable(f"Cannot reach Redis: {e}") from e
        logger.info(f"Snapshot store connected to Redis {self.url or f'{self.host}:{self.port}'}")

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    async def get(self, key: str) -> Optional[bytes]:
        if not self._redis:
            await self.connect()
        try:
            value = await self._redis.get(key)
        except (RedisError, OSError, asyncio.TimeoutError) as e:
            raise StoreUnavailable(f"GET {key} failed: {e}") from e
        if value is None:
            return None
        return value.encode("utf-8") if isinstance(value, str) else value

    async def set(self, key: str, data: bytes, ttl: int) -> None:
        if not self._redis:
            await self.connect()
        try:
            await self._redis.set(key, data, ex=ttl)
        except (RedisError, OSError, asyncio.TimeoutError) as e:
            raise StoreUnavailable(f"SET {key} failed: {e}") from e

    async def delete(self, key: str) -> None:
        if not self._redis:
            await self.connect()
        try:
            await self._redis.delete(key)
        except (RedisError, OSError, asyncio.TimeoutError) as e:
            raise StoreUnavailable(f"DEL {key} failed: {e}") from e
