# src/status/store_factory.py - v1
"""Factory for status store instantiation."""

from __future__ import annotations

from floodgate.config.settings import Settings
from floodgate.status.base_status_store import BaseStatusStore


def create_status_store(settings: Settings | None = None) -> BaseStatusStore:
    """Instantiate the configured status backend.

    Args:
        settings: Application settings. Defaults to the in-memory backend.

    Returns:
        Configured BaseStatusStore implementation.
    """
    backend = "memory" if settings is None else settings.status_backend

    if backend == "memory":
        from floodgate.status.memory_store import MemoryStatusStore
        return MemoryStatusStore()

    if backend == "redis":
        from floodgate.status.redis_store import RedisStatusStore
        if settings is None or not settings.status_redis_url:
            raise ValueError(
                "STATUS_REDIS_URL must be set when STATUS_BACKEND=redis"
            )
        return RedisStatusStore(redis_url=settings.status_redis_url)

    raise ValueError(f"Unsupported status backend: {backend!r}")
