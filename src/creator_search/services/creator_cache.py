"""Tiered cache of published creators.

Keeps an immutable snapshot of every published creator (lightweight
fields only) in process memory, mirrored to the distributed cache so a
cold process can warm up without hitting the document store.
"""

import asyncio
import logging
import time
from collections.abc import Callable

from creator_search.config import settings
from creator_search.entities import (
    LIGHTWEIGHT_FIELDS,
    CacheEntry,
    CreatorFilters,
    CreatorRecord,
    Snapshot,
)
from creator_search.protocols import CreatorStore, DistributedCache
from creator_search.services.background import BackgroundTasks

logger = logging.getLogger(__name__)

SNAPSHOT_CACHE_KEY = "creators:keyword-cache"


def filter_creators(snapshot: Snapshot, filters: CreatorFilters) -> Snapshot:
    """Apply conjunctive filters to a snapshot.

    Category and language test membership, region and gender test
    equality. Returns a new tuple; the input is left untouched.
    """
    result = snapshot
    if filters.category:
        result = tuple(c for c in result if filters.category in c.categories)
    if filters.region:
        result = tuple(c for c in result if c.region == filters.region)
    if filters.language:
        result = tuple(c for c in result if filters.language in c.languages)
    if filters.gender:
        result = tuple(c for c in result if c.gender == filters.gender)
    return result


class CreatorCache:
    """Serve the published-creator snapshot with minimal latency.

    Resolution order on every ``get_snapshot()`` call:
        1. In-process entry within TTL (no I/O)
        2. Distributed cache (survives cold starts)
        3. Document store (authoritative, repopulates both tiers)

    A distributed cache failure only forgoes that tier. Concurrent cold
    starts may both hit the store; the last assignment wins, which is
    safe because snapshots are never mutated.

    Example:
        ```python
        cache = CreatorCache(store=store, distributed_cache=redis_cache)
        snapshot = await cache.get_snapshot()
        yoga = filter_creators(snapshot, CreatorFilters(category="yoga"))
        ```
    """

    def __init__(
        self,
        store: CreatorStore,
        distributed_cache: DistributedCache | None = None,
        background: BackgroundTasks | None = None,
        ttl: int | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the creator cache.

        Args:
            store: Authoritative creator document store (required).
            distributed_cache: Optional remote cache tier.
            background: Dispatcher for write-backs. Defaults to a private one.
            ttl: Snapshot TTL in seconds. Defaults to settings.
            clock: Time source, injectable for tests.
        """
        self._store = store
        self._remote = distributed_cache
        self._background = background or BackgroundTasks()
        self._ttl = ttl or settings.snapshot_ttl
        self._clock = clock
        self._entry: CacheEntry[Snapshot] | None = None
        self._write_back: asyncio.Task | None = None

    async def get_snapshot(self) -> Snapshot:
        """Return all published creators as an immutable snapshot."""
        now = self._clock()

        # 1. In-process
        entry = self._entry
        if entry is not None and entry.is_fresh(self._ttl, now):
            return entry.value

        # 2. Distributed cache
        remote = await self._read_remote()
        if remote is not None:
            self._entry = CacheEntry(remote, now)
            logger.debug(f"Creator snapshot restored from distributed cache ({len(remote)})")
            return remote

        # 3. Document store
        documents = await self._store.fetch_published(LIGHTWEIGHT_FIELDS)
        snapshot: Snapshot = tuple(
            CreatorRecord.from_document(doc) for doc in documents if doc.get("is_published")
        )
        self._entry = CacheEntry(snapshot, now)
        logger.info(f"Creator snapshot loaded from store ({len(snapshot)} creators)")

        if self._remote is not None:
            payload = [record.to_dict() for record in snapshot]
            self._write_back = self._background.spawn(
                self._remote.set(SNAPSHOT_CACHE_KEY, payload, self._ttl),
                "creator snapshot write-back",
            )

        return snapshot

    async def _read_remote(self) -> Snapshot | None:
        if self._remote is None:
            return None
        try:
            cached = await self._remote.get(SNAPSHOT_CACHE_KEY)
            if not isinstance(cached, list) or not cached:
                return None
            return tuple(CreatorRecord.from_document(doc) for doc in cached)
        except Exception as e:
            logger.warning(f"Distributed cache read failed: {e!r}")
            return None

    def invalidate(self) -> None:
        """Drop both tiers. The remote delete is best-effort and not awaited.

        A write-back still in flight is cancelled so it cannot restore
        the dropped snapshot after the delete.
        """
        self._entry = None
        if self._write_back is not None and not self._write_back.done():
            self._write_back.cancel()
        self._write_back = None
        if self._remote is not None:
            self._background.spawn(
                self._remote.delete(SNAPSHOT_CACHE_KEY),
                "creator snapshot invalidation",
            )
        logger.info("Creator snapshot invalidated")

    @property
    def ttl(self) -> int:
        """Get the snapshot TTL in seconds."""
        return self._ttl

    @property
    def distributed_cache(self) -> DistributedCache | None:
        """Get the remote cache tier, if any."""
        return self._remote

    @property
    def background(self) -> BackgroundTasks:
        """Get the write-back dispatcher."""
        return self._background
