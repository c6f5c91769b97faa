"""Creator document store protocol.

Defines the interface for the authoritative store of creator documents.
The search engine only reads from it, with one exception: similarity
results are written back onto the source document.

Implementations can include:
- Redis Stack JSON documents with a vector index (default)
- Firestore
- PostgreSQL with pgvector
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CreatorStore(Protocol):
    """Protocol for creator document stores.

    Documents are plain dicts carrying at least an ``id`` key. Any class
    implementing these coroutines satisfies the protocol, no explicit
    inheritance needed.
    """

    async def fetch_published(self, fields: list[str]) -> list[dict[str, Any]]:
        """Fetch every published creator, projected to ``fields``.

        Args:
            fields: Top-level document fields to return

        Returns:
            List of projected documents (``id`` always included)
        """
        ...

    async def get(self, creator_id: str) -> dict[str, Any] | None:
        """Fetch one full creator document.

        Args:
            creator_id: The creator identifier

        Returns:
            The document, or None if it does not exist
        """
        ...

    async def get_many(self, creator_ids: list[str]) -> list[dict[str, Any]]:
        """Fetch several full creator documents in one round trip.

        Args:
            creator_ids: Identifiers to fetch

        Returns:
            Documents that exist, in request order
        """
        ...

    async def find_nearest(
        self,
        vector: list[float],
        limit: int,
    ) -> list[tuple[dict[str, Any], float]]:
        """Approximate nearest-neighbour search on the embedding field.

        No equality filters are applied: callers post-filter.

        Args:
            vector: The query embedding vector
            limit: Maximum number of neighbours to return

        Returns:
            List of (document, cosine distance) tuples, closest first
        """
        ...

    async def find_by_category(self, category: str, limit: int) -> list[dict[str, Any]]:
        """Find published creators whose categories contain ``category``.

        Args:
            category: Category value to match
            limit: Maximum number of documents to return

        Returns:
            Matching documents
        """
        ...

    async def save_similar(
        self,
        creator_id: str,
        entries: list[dict[str, Any]],
        computed_at: float,
    ) -> None:
        """Persist a resolved similarity list onto a creator document.

        Args:
            creator_id: The source creator identifier
            entries: List of {id, score, slug, name} dicts
            computed_at: Unix timestamp of the computation
        """
        ...
