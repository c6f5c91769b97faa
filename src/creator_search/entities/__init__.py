"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .cache_entry import CacheEntry
from .creator import (
    EMBEDDING_FIELD,
    LIGHTWEIGHT_FIELDS,
    SIMILAR_AT_FIELD,
    SIMILAR_FIELD,
    CreatorFilters,
    CreatorProfile,
    CreatorRecord,
    Snapshot,
    without_embedding,
)
from .search_match import SearchMatch, SearchMode
from .similar_creator import SimilarCreator, SimilarityResult

__all__ = [
    "CacheEntry",
    "CreatorFilters",
    "CreatorProfile",
    "CreatorRecord",
    "EMBEDDING_FIELD",
    "LIGHTWEIGHT_FIELDS",
    "SIMILAR_AT_FIELD",
    "SIMILAR_FIELD",
    "SearchMatch",
    "SearchMode",
    "SimilarCreator",
    "SimilarityResult",
    "Snapshot",
    "without_embedding",
]
