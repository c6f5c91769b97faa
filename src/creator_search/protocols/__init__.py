"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Redis → Firestore, Voyage → OpenAI, etc.)
- Unit testing with in-memory implementations
- Clear separation of concerns
"""

from .creator_store import CreatorStore
from .distributed_cache import DistributedCache
from .embedding_provider import EmbeddingProvider

__all__ = [
    "CreatorStore",
    "DistributedCache",
    "EmbeddingProvider",
]
