"""Similar-creator domain entities."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SimilarCreator:
    """One creator similar to a source creator.

    Attributes:
        id: Creator identifier
        name: Creator name
        slug: URL slug
        similarity: 1 - cosine distance, or 0 for category matches
        distance: Raw cosine distance when a live vector search produced it
    """

    id: str
    name: str | None = None
    slug: str | None = None
    similarity: float = 0.0
    distance: float | None = None

    @classmethod
    def from_cached(cls, entry: dict[str, Any]) -> "SimilarCreator":
        """Build from a stored {id, score, slug, name} entry."""
        return cls(
            id=str(entry.get("id")),
            name=entry.get("name"),
            slug=entry.get("slug"),
            similarity=float(entry.get("score") or 0.0),
        )

    def to_cached(self) -> dict[str, Any]:
        """Form written back onto the source creator document."""
        return {"id": self.id, "score": self.similarity, "slug": self.slug, "name": self.name}


@dataclass(frozen=True)
class SimilarityResult:
    """Outcome of a similar-creators lookup.

    ``precomputed`` means the list came from the cached field on the
    source document; ``fallback`` means no vector similarity was available.
    """

    results: list[SimilarCreator] = field(default_factory=list)
    fallback: bool = False
    precomputed: bool = False
