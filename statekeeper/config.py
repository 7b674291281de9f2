from __future__ import annotations

import os
from typing import Literal, Optional

import yaml
from pydantic import BaseModel

DEFAULT_TTL_SECONDS = 259200  # 3 days


class RedisConfig(BaseModel):
    """Configuration for the Redis snapshot store."""

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: Optional[str] = None
    url: Optional[str] = None
    socket_timeout: Optional[float] = 5.0


class StoreConfig(BaseModel):
    """Snapshot store settings."""

    backend: Literal["inmemory", "redis"] = "inmemory"
    ttl_seconds: int = DEFAULT_TTL_SECONDS
    redis: RedisConfig = RedisConfig()


class StatekeeperConfig(BaseModel):
    """Top-level configuration model."""

    store: StoreConfig = StoreConfig()


def load_config(path: Optional[str] = None) -> StatekeeperConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to STATEKEEPER_CONFIG env
            variable or 'config.yaml' in the current directory.
    """

    config_path = path or os.getenv("STATEKEEPER_CONFIG", "config.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = StatekeeperConfig(**data)
    else:
        config = StatekeeperConfig()

    env_backend = os.getenv("STATEKEEPER_STORE")
    if env_backend:
        config.store.backend = env_backend.lower()
    env_redis_url = os.getenv("STATEKEEPER_REDIS_URL")
    if env_redis_url:
        config.store.redis.url = env_redis_url
    return config
