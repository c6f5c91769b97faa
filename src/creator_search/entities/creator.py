"""Creator domain entities."""

from dataclasses import dataclass, field
from typing import Any

EMBEDDING_FIELD = "embedding"
SIMILAR_FIELD = "precomputed_similar"
SIMILAR_AT_FIELD = "precomputed_similar_at"

# Fields read from the document store for the lightweight projection
LIGHTWEIGHT_FIELDS = [
    "name",
    "slug",
    "categories",
    "category",
    "topics",
    "region",
    "languages",
    "gender",
    "is_published",
    "profile",
]


def _string_list(value: Any) -> tuple[str, ...]:
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value if v is not None)
    return ()


def without_embedding(document: dict[str, Any]) -> dict[str, Any]:
    """Return a shallow copy of ``document`` minus the embedding vector."""
    return {k: v for k, v in document.items() if k != EMBEDDING_FIELD}


@dataclass(frozen=True)
class CreatorProfile:
    """Nested profile text of a creator."""

    display_name: str | None = None
    short_bio: str | None = None
    bio: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "CreatorProfile | None":
        if not isinstance(data, dict):
            return None
        return cls(
            display_name=data.get("displayName"),
            short_bio=data.get("shortBio"),
            bio=data.get("bio"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "displayName": self.display_name,
            "shortBio": self.short_bio,
            "bio": self.bio,
        }


@dataclass(frozen=True)
class CreatorRecord:
    """Lightweight projection of a published creator.

    Records are never mutated. A refresh replaces the whole snapshot, so
    holding a reference to a record or a snapshot is always safe.

    Attributes:
        id: Stable unique identifier
        name: Creator name
        slug: URL slug
        categories: Ordered category list
        category: Optional single (legacy) category
        topics: Topic list
        region: Region code
        languages: Spoken languages
        gender: Gender label
        is_published: Publication flag (always True inside the cache)
        profile: Nested profile text
    """

    id: str
    name: str = ""
    slug: str = ""
    categories: tuple[str, ...] = ()
    category: str | None = None
    topics: tuple[str, ...] = ()
    region: str | None = None
    languages: tuple[str, ...] = ()
    gender: str | None = None
    is_published: bool = True
    profile: CreatorProfile | None = field(default=None)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "CreatorRecord":
        """Build a record from a store document or a cached dict."""
        return cls(
            id=str(document["id"]),
            name=document.get("name") or "",
            slug=document.get("slug") or "",
            categories=_string_list(document.get("categories")),
            category=document.get("category"),
            topics=_string_list(document.get("topics")),
            region=document.get("region"),
            languages=_string_list(document.get("languages")),
            gender=document.get("gender"),
            is_published=bool(document.get("is_published", True)),
            profile=CreatorProfile.from_dict(document.get("profile")),
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable form, shaped like the store document."""
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "categories": list(self.categories),
            "category": self.category,
            "topics": list(self.topics),
            "region": self.region,
            "languages": list(self.languages),
            "gender": self.gender,
            "is_published": self.is_published,
            "profile": self.profile.to_dict() if self.profile else None,
        }


# An immutable point-in-time collection of records. Consumers compare
# snapshots with ``is``: a new tuple means the data was refreshed.
Snapshot = tuple[CreatorRecord, ...]


@dataclass(frozen=True)
class CreatorFilters:
    """Conjunctive search filters. None or empty string means unset."""

    category: str | None = None
    region: str | None = None
    language: str | None = None
    gender: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.category or self.region or self.language or self.gender)

    def cache_key(self) -> str:
        """Deterministic key for the filtered-index cache."""
        return "|".join(
            value or "" for value in (self.category, self.region, self.language, self.gender)
        )

    def matches(self, document: dict[str, Any]) -> bool:
        """Apply the filters to a raw store document."""
        if self.category and self.category not in (document.get("categories") or []):
            return False
        if self.region and document.get("region") != self.region:
            return False
        if self.language and self.language not in (document.get("languages") or []):
            return False
        if self.gender and document.get("gender") != self.gender:
            return False
        return True
