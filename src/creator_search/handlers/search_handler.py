"""Boundary handlers for search operations.

Handlers convert between DTOs (the contract exposed upward) and service
calls. Domain errors (CreatorNotFoundError, UpstreamUnavailableError)
pass through unchanged for the routing layer to map.
"""

import time
from datetime import datetime, timezone

from creator_search.dto import (
    SearchMeta,
    SearchRequest,
    SearchResponse,
    SearchResultItem,
    SimilarRequest,
    SimilarResponse,
    SimilarResultItem,
)
from creator_search.entities import CreatorFilters
from creator_search.services import SearchEngine


class SearchHandler:
    """Handlers for search and similar-creator requests.

    Example:
        ```python
        engine = SearchEngine.create()
        handler = SearchHandler(engine=engine)

        response = await handler.search(SearchRequest(query="pottery"))
        ```
    """

    def __init__(self, engine: SearchEngine) -> None:
        """Initialize the search handler.

        Args:
            engine: The process-wide search engine (required).
        """
        self._engine = engine

    async def search(self, request: SearchRequest) -> SearchResponse:
        """Handle a creator search request.

        Args:
            request: The search request DTO

        Returns:
            SearchResponse with ranked results and metadata
        """
        start_time = time.time()

        matches = await self._engine.search.search(
            query=request.query,
            mode=request.mode,
            limit=request.limit,
            filters=CreatorFilters(**request.filters.model_dump()),
            semantic_weight=request.semantic_weight,
        )

        lookup_time_ms = (time.time() - start_time) * 1000

        results = [
            SearchResultItem(
                id=match.id,
                name=match.name,
                slug=match.slug,
                semantic_score=match.semantic_score,
                keyword_score=match.keyword_score,
                combined_score=match.combined_score,
                creator=match.creator,
            )
            for match in matches
        ]

        return SearchResponse(
            results=results,
            meta=SearchMeta(
                query=request.query,
                mode=request.mode.value,
                result_count=len(results),
                timestamp=datetime.now(timezone.utc).isoformat(),
                lookup_time_ms=lookup_time_ms,
            ),
        )

    async def similar(self, request: SimilarRequest) -> SimilarResponse:
        """Handle a similar-creators request.

        Raises:
            CreatorNotFoundError: If the source creator does not exist
        """
        result = await self._engine.similarity.resolve(request.creator_id, request.limit)

        return SimilarResponse(
            results=[
                SimilarResultItem(
                    id=item.id,
                    name=item.name,
                    slug=item.slug,
                    similarity=item.similarity,
                    distance=item.distance,
                    precomputed=result.precomputed,
                )
                for item in result.results
            ],
            fallback=result.fallback,
            precomputed=result.precomputed,
        )

    async def invalidate(self) -> dict:
        """Handle a cache invalidation request after bulk creator writes.

        Returns:
            Dict with invalidation result
        """
        self._engine.invalidate()
        return {
            "success": True,
            "message": "Creator caches invalidated",
        }
