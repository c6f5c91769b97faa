"""Creator Search - hybrid search and tiered caching over creator profiles.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (CreatorStore, DistributedCache, EmbeddingProvider)
    - repositories: Data access implementations (Redis, Voyage AI)
    - services: Caching, keyword indexing, hybrid ranking, similarity
    - handlers: Boundary handlers returning DTOs
    - dto: Data transfer objects (contract exposed upward)
    - entities: Domain models (internal)

Usage:
    ```python
    from creator_search import SearchEngine, SearchHandler, SearchRequest

    engine = SearchEngine.create()
    handler = SearchHandler(engine=engine)
    response = await handler.search(SearchRequest(query="vegan baking"))
    ```
"""

from creator_search.config import get_cache_client, get_redis_client, settings
from creator_search.dto import SearchRequest, SimilarRequest
from creator_search.entities import (
    CreatorFilters,
    CreatorRecord,
    SearchMatch,
    SearchMode,
    SimilarCreator,
    SimilarityResult,
)
from creator_search.exceptions import (
    CreatorNotFoundError,
    CreatorSearchError,
    EmbeddingProviderError,
    UpstreamUnavailableError,
)
from creator_search.handlers import SearchHandler
from creator_search.protocols import CreatorStore, DistributedCache, EmbeddingProvider
from creator_search.repositories import (
    RedisCreatorStore,
    RedisDistributedCache,
    VoyageEmbeddingProvider,
)
from creator_search.services import (
    CreatorCache,
    HybridSearchService,
    KeywordIndex,
    SearchEngine,
    SimilarityResolver,
)

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    "get_cache_client",
    # Protocols (interfaces)
    "CreatorStore",
    "DistributedCache",
    "EmbeddingProvider",
    # Services (business logic)
    "CreatorCache",
    "KeywordIndex",
    "HybridSearchService",
    "SimilarityResolver",
    "SearchEngine",
    # Handlers
    "SearchHandler",
    # Repositories (data access)
    "RedisCreatorStore",
    "RedisDistributedCache",
    "VoyageEmbeddingProvider",
    # Entities (domain models)
    "CreatorFilters",
    "CreatorRecord",
    "SearchMatch",
    "SearchMode",
    "SimilarCreator",
    "SimilarityResult",
    # DTOs
    "SearchRequest",
    "SimilarRequest",
    # Errors
    "CreatorSearchError",
    "CreatorNotFoundError",
    "UpstreamUnavailableError",
    "EmbeddingProviderError",
]
