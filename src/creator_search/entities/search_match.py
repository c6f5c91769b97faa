"""Search match domain entity."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SearchMode(str, Enum):
    """How semantic and keyword scores are combined."""

    HYBRID = "hybrid"
    SEMANTIC = "semantic"
    KEYWORD = "keyword"


@dataclass(frozen=True)
class SearchMatch:
    """A single ranked search result.

    Attributes:
        id: Creator identifier
        semantic_score: 1 - cosine distance, 0 when the semantic path missed it
        keyword_score: Fuzzy match similarity, 0 when the keyword path missed it
        combined_score: The score results are ranked by
        creator: Creator document with the embedding stripped
    """

    id: str
    semantic_score: float = 0.0
    keyword_score: float = 0.0
    combined_score: float = 0.0
    creator: dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> Any:
        return self.creator.get("name")

    @property
    def slug(self) -> Any:
        return self.creator.get("slug")
