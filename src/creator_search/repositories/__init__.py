"""Repository layer for data access.

This layer abstracts external dependencies (Redis, embedding APIs)
behind protocol-based interfaces. The repositories are protocol-based
(structural typing), not inheritance-based.
"""

from creator_search.protocols import CreatorStore, DistributedCache, EmbeddingProvider

from .redis_creator_store import RedisCreatorStore
from .redis_distributed_cache import RedisDistributedCache
from .voyage_embedding_provider import VoyageEmbeddingProvider

__all__ = [
    "CreatorStore",
    "DistributedCache",
    "EmbeddingProvider",
    "RedisCreatorStore",
    "RedisDistributedCache",
    "VoyageEmbeddingProvider",
]
