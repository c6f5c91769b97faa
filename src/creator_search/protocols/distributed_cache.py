"""Distributed cache protocol.

A remote key-value store with TTL that keeps warm data across process
restarts. Values are JSON-serializable. Implementations may raise on
any call; callers treat every failure as a cache miss.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class DistributedCache(Protocol):
    """Protocol for distributed key-value caches."""

    async def get(self, key: str) -> Any | None:
        """Return the decoded value for ``key``, or None when absent."""
        ...

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Store ``value`` under ``key`` for ``ttl`` seconds."""
        ...

    async def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        ...
