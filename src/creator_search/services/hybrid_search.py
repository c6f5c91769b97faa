"""Hybrid creator search.

This service orchestrates the semantic path (query embedding + vector
KNN on the document store) and the keyword path (KeywordIndex), then
blends both score sets into one ranked list.
"""

import asyncio
import logging
from typing import Any

from creator_search.config import settings
from creator_search.entities import (
    CreatorFilters,
    SearchMatch,
    SearchMode,
    without_embedding,
)
from creator_search.exceptions import UpstreamUnavailableError
from creator_search.protocols import CreatorStore, EmbeddingProvider
from creator_search.services.fuzzy_index import KeywordMatch
from creator_search.services.keyword_index import KeywordIndex

logger = logging.getLogger(__name__)

# id -> (score, creator document)
ScoredHits = dict[str, tuple[float, dict[str, Any]]]


def merge_results(
    semantic: ScoredHits,
    keyword: ScoredHits,
    mode: SearchMode,
    semantic_weight: float,
    limit: int,
) -> list[SearchMatch]:
    """Blend two scored hit sets into one ranked, truncated list.

    Every identifier from either side is kept; a side that missed an
    identifier contributes 0. The semantic document wins when both
    sides carry one.
    """
    matches = []
    for creator_id in {**semantic, **keyword}:
        semantic_score, semantic_doc = semantic.get(creator_id, (0.0, None))
        keyword_score, keyword_doc = keyword.get(creator_id, (0.0, None))

        if mode is SearchMode.SEMANTIC:
            combined = semantic_score
        elif mode is SearchMode.KEYWORD:
            combined = keyword_score
        else:
            combined = semantic_weight * semantic_score + (1 - semantic_weight) * keyword_score

        creator = semantic_doc if semantic_doc is not None else keyword_doc
        matches.append(
            SearchMatch(
                id=creator_id,
                semantic_score=semantic_score,
                keyword_score=keyword_score,
                combined_score=combined,
                creator=without_embedding(creator or {}),
            )
        )

    matches.sort(key=lambda m: m.combined_score, reverse=True)
    return matches[:limit]


class HybridSearchService:
    """Semantic, keyword and hybrid search over published creators.

    Failure policy for the semantic path:
    - semantic-only mode: errors propagate as UpstreamUnavailableError
    - hybrid mode: errors are logged and the path contributes nothing

    Example:
        ```python
        service = HybridSearchService(
            store=store,
            keyword_index=keyword_index,
            embedding_provider=VoyageEmbeddingProvider.create(),
        )
        matches = await service.search("home barista", mode=SearchMode.HYBRID, limit=20)
        ```
    """

    def __init__(
        self,
        store: CreatorStore,
        keyword_index: KeywordIndex,
        embedding_provider: EmbeddingProvider,
        semantic_weight: float | None = None,
        embedding_timeout: float | None = None,
        semantic_overfetch: int | None = None,
        keyword_overfetch: int | None = None,
    ) -> None:
        """Initialize the search service.

        Args:
            store: Creator document store used for vector KNN (required).
            keyword_index: Fuzzy keyword index (required).
            embedding_provider: Query embedding service (required).
            semantic_weight: Default weight of the semantic score in hybrid mode.
            embedding_timeout: Seconds before the embedding call is abandoned.
            semantic_overfetch: KNN candidates fetched per requested result.
            keyword_overfetch: Keyword matches fetched per requested result.
        """
        self._store = store
        self._keywords = keyword_index
        self._embeddings = embedding_provider
        self._weight = settings.semantic_weight if semantic_weight is None else semantic_weight
        self._timeout = embedding_timeout or settings.embedding_timeout
        self._semantic_overfetch = semantic_overfetch or settings.semantic_overfetch
        self._keyword_overfetch = keyword_overfetch or settings.keyword_overfetch

        if not 0 <= self._weight <= 1:
            raise ValueError("Semantic weight must be between 0 and 1")

    async def search(
        self,
        query: str,
        mode: SearchMode = SearchMode.HYBRID,
        limit: int = 20,
        filters: CreatorFilters | None = None,
        semantic_weight: float | None = None,
    ) -> list[SearchMatch]:
        """Run the search and return up to ``limit`` ranked matches.

        Args:
            query: Free-text query
            mode: hybrid, semantic or keyword
            limit: Maximum number of results
            filters: Optional conjunctive filters
            semantic_weight: Override the default hybrid weight

        Returns:
            Matches sorted by combined score, best first

        Raises:
            UpstreamUnavailableError: In semantic-only mode, if embedding or KNN fails
        """
        filters = filters or CreatorFilters()
        weight = self._weight if semantic_weight is None else semantic_weight
        if not 0 <= weight <= 1:
            raise ValueError("Semantic weight must be between 0 and 1")

        if mode is SearchMode.SEMANTIC:
            semantic = await self._semantic(query, limit, filters)
            keyword: ScoredHits = {}
        elif mode is SearchMode.KEYWORD:
            semantic = {}
            keyword = await self._keyword(query, limit, filters)
        else:
            semantic, keyword = await asyncio.gather(
                self._semantic_degraded(query, limit, filters),
                self._keyword(query, limit, filters),
            )

        return merge_results(semantic, keyword, mode, weight, limit)

    async def _embed(self, query: str) -> list[float]:
        try:
            return await asyncio.wait_for(self._embeddings.encode(query), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            raise UpstreamUnavailableError(
                f"Embedding provider timed out after {self._timeout}s"
            ) from e

    async def _semantic(self, query: str, limit: int, filters: CreatorFilters) -> ScoredHits:
        vector = await self._embed(query)
        neighbours = await self._store.find_nearest(vector, limit * self._semantic_overfetch)

        hits: ScoredHits = {}
        for document, distance in neighbours:
            if not document.get("is_published") or not filters.matches(document):
                continue
            hits[str(document["id"])] = (1.0 - distance, without_embedding(document))
        return hits

    async def _semantic_degraded(
        self, query: str, limit: int, filters: CreatorFilters
    ) -> ScoredHits:
        try:
            return await self._semantic(query, limit, filters)
        except UpstreamUnavailableError as e:
            logger.warning(f"Semantic search degraded to keyword-only: {e}")
            return {}

    async def _keyword(self, query: str, limit: int, filters: CreatorFilters) -> ScoredHits:
        matches: list[KeywordMatch] = await self._keywords.search(
            query, limit * self._keyword_overfetch, filters
        )
        return {match.id: (match.score, match.creator.to_dict()) for match in matches}

    @property
    def semantic_weight(self) -> float:
        """Get the default hybrid weight."""
        return self._weight
