"""Keyword search over the creator snapshot.

Maintains one full fuzzy index over the whole snapshot and a bounded,
recency-ordered cache of indices built over filtered subsets. Both are
invalidated by snapshot identity: CreatorCache never mutates a snapshot
in place, so ``is`` is enough to detect a refresh.
"""

import asyncio
import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass

from creator_search.config import settings
from creator_search.entities import CreatorFilters, Snapshot
from creator_search.protocols import DistributedCache
from creator_search.services.background import BackgroundTasks
from creator_search.services.creator_cache import CreatorCache, filter_creators
from creator_search.services.fuzzy_index import (
    DEFAULT_KEYS,
    DEFAULT_THRESHOLD,
    FuzzyIndex,
    KeywordMatch,
)

logger = logging.getLogger(__name__)

INDEX_CACHE_KEY = "creators:keyword-index"


@dataclass
class FilteredIndexEntry:
    """A fuzzy index over one filtered subset of a snapshot."""

    key: str
    index: FuzzyIndex
    snapshot: Snapshot
    last_used: float


class KeywordIndex:
    """Fuzzy keyword search backed by CreatorCache.

    Example:
        ```python
        keyword_index = KeywordIndex(creator_cache)
        matches = await keyword_index.search("street food", limit=20)
        matches = await keyword_index.search(
            "street food", limit=20, filters=CreatorFilters(region="th")
        )
        ```
    """

    def __init__(
        self,
        creator_cache: CreatorCache,
        distributed_cache: DistributedCache | None = None,
        background: BackgroundTasks | None = None,
        index_ttl: int | None = None,
        filtered_ttl: int | None = None,
        capacity: int | None = None,
        keys: tuple[tuple[str, float], ...] = DEFAULT_KEYS,
        threshold: float = DEFAULT_THRESHOLD,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the keyword index.

        Args:
            creator_cache: Source of snapshots (required).
            distributed_cache: Where serialized full indices are persisted.
                Defaults to the creator cache's remote tier.
            background: Dispatcher for write-backs. Defaults to the creator cache's.
            index_ttl: TTL of the serialized full index. Defaults to settings.
            filtered_ttl: TTL of filtered sub-indices. Defaults to settings.
            capacity: Maximum number of filtered sub-indices. Defaults to settings.
            keys: Weighted fields to match against.
            threshold: Fuzziness threshold shared by all indices.
            clock: Time source, injectable for tests.
        """
        self._creators = creator_cache
        self._remote = distributed_cache or creator_cache.distributed_cache
        self._background = background or creator_cache.background
        self._index_ttl = index_ttl or settings.index_cache_ttl
        self._filtered_ttl = filtered_ttl or settings.filtered_index_ttl
        self._capacity = capacity or settings.filtered_index_capacity
        self._keys = keys
        self._threshold = threshold
        self._clock = clock

        self._full_index: FuzzyIndex | None = None
        self._full_snapshot: Snapshot | None = None
        self._filtered: OrderedDict[str, FilteredIndexEntry] = OrderedDict()
        self._write_back: asyncio.Task | None = None

    async def search(
        self,
        query: str,
        limit: int,
        filters: CreatorFilters | None = None,
    ) -> list[KeywordMatch]:
        """Return up to ``limit`` matches, best first."""
        snapshot = await self._creators.get_snapshot()

        if filters is None or filters.is_empty:
            index = await self._full(snapshot)
        else:
            index = self._filtered_index(snapshot, filters)

        return index.search(query, limit)

    async def _full(self, snapshot: Snapshot) -> FuzzyIndex:
        if self._full_index is not None and self._full_snapshot is snapshot:
            return self._full_index

        index = await self._restore(snapshot)
        if index is None:
            index = FuzzyIndex(snapshot, keys=self._keys, threshold=self._threshold)
            logger.info(f"Built keyword index over {len(snapshot)} creators")
            if self._remote is not None:
                self._write_back = self._background.spawn(
                    self._remote.set(INDEX_CACHE_KEY, index.to_dict(), self._index_ttl),
                    "keyword index write-back",
                )

        self._full_index = index
        self._full_snapshot = snapshot
        return index

    async def _restore(self, snapshot: Snapshot) -> FuzzyIndex | None:
        if self._remote is None:
            return None
        try:
            payload = await self._remote.get(INDEX_CACHE_KEY)
        except Exception as e:
            logger.warning(f"Distributed cache read failed for keyword index: {e!r}")
            return None
        if payload is None:
            return None

        index = FuzzyIndex.from_dict(payload, snapshot, keys=self._keys, threshold=self._threshold)
        if index is None:
            logger.debug("Serialized keyword index is stale, rebuilding")
        else:
            logger.debug("Keyword index restored from distributed cache")
        return index

    def _filtered_index(self, snapshot: Snapshot, filters: CreatorFilters) -> FuzzyIndex:
        key = filters.cache_key()
        now = self._clock()

        entry = self._filtered.get(key)
        if (
            entry is not None
            and entry.snapshot is snapshot
            and now - entry.last_used < self._filtered_ttl
        ):
            entry.last_used = now
            self._filtered.move_to_end(key)
            return entry.index

        subset = filter_creators(snapshot, filters)
        index = FuzzyIndex(subset, keys=self._keys, threshold=self._threshold)
        self._filtered[key] = FilteredIndexEntry(
            key=key, index=index, snapshot=snapshot, last_used=now
        )
        self._filtered.move_to_end(key)

        while len(self._filtered) > self._capacity:
            evicted, _ = self._filtered.popitem(last=False)
            logger.debug(f"Evicted filtered keyword index {evicted!r}")

        return index

    def invalidate(self) -> None:
        """Forget every built index, locally and (best-effort) remotely.

        The next search rebuilds lazily.
        """
        self._full_index = None
        self._full_snapshot = None
        self._filtered.clear()
        if self._write_back is not None and not self._write_back.done():
            self._write_back.cancel()
        self._write_back = None
        if self._remote is not None:
            self._background.spawn(
                self._remote.delete(INDEX_CACHE_KEY),
                "keyword index invalidation",
            )

    @property
    def filtered_count(self) -> int:
        """Number of cached filtered sub-indices."""
        return len(self._filtered)

    @property
    def filtered_keys(self) -> list[str]:
        """Filtered sub-index keys, least recently used first."""
        return list(self._filtered)
