"""Service layer for business logic.

This layer contains the search and caching logic. Services depend on
protocols (interfaces), not concrete implementations, making them
testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (DTOs)  -> (Business) -> (Data Access)

Usage:
    ```python
    from creator_search.services import SearchEngine

    engine = SearchEngine.create()
    matches = await engine.search.search("ceramics", limit=10)
    similar = await engine.similarity.resolve("creator-123", limit=8)
    ```
"""

from .background import BackgroundTasks
from .creator_cache import CreatorCache, filter_creators
from .fuzzy_index import FuzzyIndex, KeywordMatch
from .hybrid_search import HybridSearchService, merge_results
from .keyword_index import FilteredIndexEntry, KeywordIndex
from .search_engine import SearchEngine
from .similarity_resolver import SimilarityResolver

__all__ = [
    "BackgroundTasks",
    "CreatorCache",
    "FilteredIndexEntry",
    "FuzzyIndex",
    "HybridSearchService",
    "KeywordIndex",
    "KeywordMatch",
    "SearchEngine",
    "SimilarityResolver",
    "filter_creators",
    "merge_results",
]
