"""Similar-creator resolution.

Stages, terminal on the first that applies:
    1. Precomputed list stored on the source document
    2. Live vector KNN from the source embedding (result written back)
    3. Creators sharing the source's first category
"""

import logging
import time
from collections.abc import Callable
from typing import Any

from creator_search.config import settings
from creator_search.entities import (
    EMBEDDING_FIELD,
    SIMILAR_FIELD,
    SimilarCreator,
    SimilarityResult,
)
from creator_search.exceptions import CreatorNotFoundError
from creator_search.protocols import CreatorStore
from creator_search.services.background import BackgroundTasks

logger = logging.getLogger(__name__)


class SimilarityResolver:
    """Resolve "creators similar to X" from the cheapest available source.

    Example:
        ```python
        resolver = SimilarityResolver(store=store, background=background)
        result = await resolver.resolve("creator-123", limit=8)
        if result.fallback:
            ...  # category matches only, similarity is 0
        ```
    """

    def __init__(
        self,
        store: CreatorStore,
        background: BackgroundTasks | None = None,
        overfetch: int | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the resolver.

        Args:
            store: Creator document store (required).
            background: Dispatcher for the similarity write-back.
            overfetch: KNN candidates per requested result. Defaults to settings.
            clock: Time source for the write-back timestamp.
        """
        self._store = store
        self._background = background or BackgroundTasks()
        self._overfetch = overfetch or settings.similar_overfetch
        self._clock = clock

    async def resolve(self, creator_id: str, limit: int = 8) -> SimilarityResult:
        """Return up to ``limit`` creators similar to ``creator_id``.

        Raises:
            CreatorNotFoundError: If the source creator does not exist
            UpstreamUnavailableError: If the document store fails
        """
        source = await self._store.get(creator_id)
        if source is None:
            raise CreatorNotFoundError(creator_id)

        precomputed = source.get(SIMILAR_FIELD)
        if isinstance(precomputed, list) and precomputed:
            return SimilarityResult(
                results=[SimilarCreator.from_cached(entry) for entry in precomputed[:limit]],
                fallback=False,
                precomputed=True,
            )

        embedding = source.get(EMBEDDING_FIELD)
        if isinstance(embedding, list) and embedding:
            return await self._nearest(creator_id, embedding, limit)

        return await self._by_category(creator_id, source, limit)

    async def _nearest(
        self, creator_id: str, embedding: list[float], limit: int
    ) -> SimilarityResult:
        neighbours = await self._store.find_nearest(embedding, self._overfetch * (limit + 1))

        results = [
            SimilarCreator(
                id=str(document["id"]),
                name=document.get("name"),
                slug=document.get("slug"),
                similarity=1.0 - distance,
                distance=distance,
            )
            for document, distance in neighbours
            if document["id"] != creator_id and document.get("is_published")
        ][:limit]

        if results:
            self._background.spawn(
                self._store.save_similar(
                    creator_id, [r.to_cached() for r in results], self._clock()
                ),
                f"similarity write-back for {creator_id}",
            )
        else:
            logger.debug(f"Vector search found no similar creators for {creator_id}")

        return SimilarityResult(results=results, fallback=False)

    async def _by_category(
        self, creator_id: str, source: dict[str, Any], limit: int
    ) -> SimilarityResult:
        categories = source.get("categories")
        if not isinstance(categories, list) or not categories:
            return SimilarityResult(results=[], fallback=True)

        # Only the first category is matched
        documents = await self._store.find_by_category(categories[0], limit + 1)
        results = [
            SimilarCreator(
                id=str(document["id"]),
                name=document.get("name"),
                slug=document.get("slug"),
                similarity=0.0,
            )
            for document in documents
            if document["id"] != creator_id
        ][:limit]
        return SimilarityResult(results=results, fallback=True)
