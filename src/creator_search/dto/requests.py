"""Request DTOs for the search engine boundary."""

from pydantic import BaseModel, Field

from creator_search.entities import SearchMode


class SearchFilters(BaseModel):
    """Optional conjunctive filters for a search."""

    category: str | None = Field(None, max_length=100)
    region: str | None = Field(None, max_length=100)
    language: str | None = Field(None, max_length=100)
    gender: str | None = Field(None, max_length=20)


class SearchRequest(BaseModel):
    """Request DTO for a creator search.

    The handler will convert this to internal calls to the service layer.
    """

    query: str = Field(..., description="Free-text search query", min_length=2, max_length=500)
    mode: SearchMode = Field(SearchMode.HYBRID, description="hybrid, semantic or keyword")
    limit: int = Field(20, description="Maximum number of results", ge=1, le=50)
    semantic_weight: float | None = Field(
        None,
        description="Weight of the semantic score in hybrid mode (0-1), defaults to settings",
        ge=0.0,
        le=1.0,
    )
    filters: SearchFilters = Field(default_factory=SearchFilters)

    model_config = {"str_strip_whitespace": True}


class SimilarRequest(BaseModel):
    """Request DTO for a similar-creators lookup."""

    creator_id: str = Field(
        ...,
        description="Source creator identifier",
        min_length=1,
        max_length=128,
        pattern=r"^[a-zA-Z0-9_-]+$",
    )
    limit: int = Field(8, description="Maximum number of similar creators", ge=1, le=20)
