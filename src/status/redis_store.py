# src/status/redis_store.py - v1
"""Redis-based status store (STATUS_BACKEND=redis).

Requires 'redis' package: pip install redis.
Each record is a Redis hash, so a merge is a single HSET of only the
supplied fields and concurrent workers writing distinct fields of the
shared job key cannot clobber one another.
"""

from __future__ import annotations

import logging

from floodgate.status.base_status_store import BaseStatusStore

logger = logging.getLogger(__name__)


class RedisStatusStore(BaseStatusStore):
    """Redis-backed status store shared by every worker process."""

    def __init__(self, redis_url: str) -> None:
        try:
            import redis
        except ImportError as e:
            raise ImportError(
                "redis package required: pip install redis"
            ) from e

        self._client = redis.Redis.from_url(redis_url, decode_responses=True)

    async def get(self, key: str) -> dict[str, str]:
        """Retrieve all fields of a record."""
        return dict(self._client.hgetall(key) or {})

    async def merge(self, key: str, fields: dict[str, str]) -> dict[str, str]:
        """Write the supplied fields and read back the full record."""
        if fields:
            pipe = self._client.pipeline()
            pipe.hset(key, mapping=fields)
            pipe.hgetall(key)
            _, record = pipe.execute()
            logger.debug("Merged %d fields into %s", len(fields), key)
            return dict(record or {})
        return await self.get(key)

    async def delete(self, key: str) -> None:
        """Remove a record."""
        self._client.delete(key)

    def close(self) -> None:
        """Close the Redis connection."""
        self._client.close()
