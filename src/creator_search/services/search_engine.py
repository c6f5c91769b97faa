"""Process-wide search engine.

Holds the shared cache state (creator snapshot, keyword indices) and the
services built on it. Construct one per process and pass it to whatever
serves requests; the caches refresh themselves on their TTLs.
"""

import logging

from creator_search.config import Settings, settings as default_settings
from creator_search.protocols import CreatorStore, DistributedCache, EmbeddingProvider
from creator_search.repositories import (
    RedisCreatorStore,
    RedisDistributedCache,
    VoyageEmbeddingProvider,
)
from creator_search.services.background import BackgroundTasks
from creator_search.services.creator_cache import CreatorCache
from creator_search.services.hybrid_search import HybridSearchService
from creator_search.services.keyword_index import KeywordIndex
from creator_search.services.similarity_resolver import SimilarityResolver

logger = logging.getLogger(__name__)


class SearchEngine:
    """Wiring of CreatorCache, KeywordIndex, HybridSearchService and SimilarityResolver.

    Example:
        ```python
        engine = SearchEngine.create()
        try:
            matches = await engine.search.search("ceramics", limit=10)
        finally:
            await engine.aclose()
        ```
    """

    def __init__(
        self,
        store: CreatorStore,
        embedding_provider: EmbeddingProvider,
        distributed_cache: DistributedCache | None = None,
        config: Settings | None = None,
    ) -> None:
        """Initialize all services over the given collaborators.

        Args:
            store: Creator document store (required).
            embedding_provider: Query embedding service (required).
            distributed_cache: Optional remote cache tier.
            config: Settings to read knobs from. Defaults to the global settings.
        """
        config = config or default_settings
        self._store = store
        self._embeddings = embedding_provider
        self._remote = distributed_cache
        self.background = BackgroundTasks()

        self.creator_cache = CreatorCache(
            store=store,
            distributed_cache=distributed_cache,
            background=self.background,
            ttl=config.snapshot_ttl,
        )
        self.keyword_index = KeywordIndex(
            creator_cache=self.creator_cache,
            index_ttl=config.index_cache_ttl,
            filtered_ttl=config.filtered_index_ttl,
            capacity=config.filtered_index_capacity,
        )
        self.search = HybridSearchService(
            store=store,
            keyword_index=self.keyword_index,
            embedding_provider=embedding_provider,
            semantic_weight=config.semantic_weight,
            embedding_timeout=config.embedding_timeout,
            semantic_overfetch=config.semantic_overfetch,
            keyword_overfetch=config.keyword_overfetch,
        )
        self.similarity = SimilarityResolver(
            store=store,
            background=self.background,
            overfetch=config.similar_overfetch,
        )

    @classmethod
    def create(cls, config: Settings | None = None) -> "SearchEngine":
        """Factory method building Redis and Voyage clients from settings."""
        config = config or default_settings
        store = RedisCreatorStore.create(dimension=config.embedding_dimension)
        embedding_provider = VoyageEmbeddingProvider.create()
        distributed_cache = RedisDistributedCache.create()

        logger.info(
            f"Search engine created (model={embedding_provider.model_name}, "
            f"distributed_cache={'on' if distributed_cache else 'off'})"
        )
        return cls(
            store=store,
            embedding_provider=embedding_provider,
            distributed_cache=distributed_cache,
            config=config,
        )

    async def warm(self) -> int:
        """Load the snapshot and full keyword index ahead of traffic.

        Returns:
            Number of creators in the snapshot
        """
        snapshot = await self.creator_cache.get_snapshot()
        await self.keyword_index.search("warmup", limit=1)
        return len(snapshot)

    def invalidate(self) -> None:
        """Drop cached creators and indices after bulk external writes."""
        self.creator_cache.invalidate()
        self.keyword_index.invalidate()

    async def aclose(self) -> None:
        """Wait for pending write-backs, then close every client."""
        await self.background.drain()
        for resource in (self._embeddings, self._store, self._remote):
            close = getattr(resource, "close", None)
            if close is not None:
                await close()
        logger.info("Search engine shut down")
