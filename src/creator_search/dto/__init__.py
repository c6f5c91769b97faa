"""Data Transfer Objects for the engine boundary.

These Pydantic models define the contract exposed to the routing layer.
Internal domain logic should use entities from the entities package.
"""

from .requests import SearchFilters, SearchRequest, SimilarRequest
from .responses import (
    SearchMeta,
    SearchResponse,
    SearchResultItem,
    SimilarResponse,
    SimilarResultItem,
)

__all__ = [
    "SearchFilters",
    "SearchRequest",
    "SimilarRequest",
    "SearchMeta",
    "SearchResponse",
    "SearchResultItem",
    "SimilarResponse",
    "SimilarResultItem",
]
