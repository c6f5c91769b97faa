"""Redis implementation of DistributedCache.

Values are stored as JSON strings with a per-key TTL. Errors are not
handled here: callers decide that a failing cache tier is a miss.
"""

import json
from typing import Any

import redis.asyncio as redis

from creator_search.config import get_cache_client


class RedisDistributedCache:
    """Plain key/value cache on top of ``redis.asyncio``.

    Satisfies the DistributedCache protocol through structural typing.
    """

    def __init__(self, redis_client: redis.Redis) -> None:
        """Initialize the distributed cache.

        Args:
            redis_client: Async Redis client (required).
        """
        self._client = redis_client

    @classmethod
    def create(cls) -> "RedisDistributedCache | None":
        """Factory method returning None when no cache URL is configured."""
        client = get_cache_client()
        if client is None:
            return None
        return cls(client)

    async def get(self, key: str) -> Any | None:
        raw = await self._client.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        await self._client.set(key, json.dumps(value), ex=ttl)

    async def delete(self, key: str) -> None:
        await self._client.delete(key)

    async def close(self) -> None:
        """Close the Redis client."""
        await self._client.aclose()
