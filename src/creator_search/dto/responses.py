"""Response DTOs for the search engine boundary."""

from typing import Any

from pydantic import BaseModel, Field


class SearchResultItem(BaseModel):
    """Single ranked search result."""

    id: str = Field(..., description="Creator identifier")
    name: Any = Field(None, description="Creator name")
    slug: Any = Field(None, description="Creator slug")
    semantic_score: float = Field(..., description="1 - cosine distance, 0 if absent")
    keyword_score: float = Field(..., description="Fuzzy match similarity, 0 if absent")
    combined_score: float = Field(..., description="Score results are ranked by")
    creator: dict[str, Any] | None = Field(None, description="Creator document without embedding")


class SearchMeta(BaseModel):
    """Search metadata."""

    query: str
    mode: str
    result_count: int = Field(..., ge=0)
    timestamp: str = Field(..., description="ISO-8601 time the response was built")
    lookup_time_ms: float = Field(..., description="Time taken for the search in milliseconds")


class SearchResponse(BaseModel):
    """Response DTO for a creator search."""

    results: list[SearchResultItem] = Field(default_factory=list)
    meta: SearchMeta


class SimilarResultItem(BaseModel):
    """Single similar creator."""

    id: str
    name: str | None = None
    slug: str | None = None
    similarity: float = Field(..., description="1 - cosine distance, 0 for category matches")
    distance: float | None = Field(None, description="Cosine distance from a live vector search")
    precomputed: bool = False


class SimilarResponse(BaseModel):
    """Response DTO for a similar-creators lookup."""

    results: list[SimilarResultItem] = Field(default_factory=list)
    fallback: bool = Field(..., description="True when no vector similarity was available")
    precomputed: bool = Field(False, description="True when served from the cached field")
