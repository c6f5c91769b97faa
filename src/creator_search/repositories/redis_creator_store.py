"""Redis implementation of CreatorStore.

Creators live as RedisJSON documents under ``<index_name>:<creator_id>``
and are indexed by a Redis Stack search index (HNSW vector field plus
tag fields). It's the default implementation and satisfies the
CreatorStore protocol.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError
from redisvl.exceptions import RedisVLError
from redisvl.index import AsyncSearchIndex
from redisvl.query import FilterQuery, VectorQuery
from redisvl.query.filter import Tag

from creator_search.config import get_redis_client, settings
from creator_search.entities import EMBEDDING_FIELD, SIMILAR_AT_FIELD, SIMILAR_FIELD
from creator_search.exceptions import UpstreamUnavailableError

logger = logging.getLogger(__name__)

PAGE_SIZE = 500


class RedisCreatorStore:
    """Redis Stack document store using an HNSW vector index.

    This class satisfies the CreatorStore protocol through structural
    typing - no explicit inheritance needed.

    Uses Redis Stack's search with:
    - JSON storage, one document per creator
    - TAG fields for the publication flag, categories, region, languages and gender
    - HNSW vector field with COSINE distance for KNN queries

    Redis and redisvl failures are re-raised as UpstreamUnavailableError.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        index_name: str | None = None,
        dimension: int | None = None,
    ) -> None:
        """Initialize the creator store.

        Args:
            redis_client: Async Redis client. If None, creates default.
            index_name: Name of the search index, also the key prefix.
            dimension: Embedding vector dimension.
        """
        self._client = redis_client or get_redis_client()
        self._index_name = index_name or settings.creator_index_name
        self._dimension = dimension or settings.embedding_dimension
        self._index: AsyncSearchIndex | None = None

    @classmethod
    def create(
        cls,
        index_name: str | None = None,
        dimension: int | None = None,
    ) -> "RedisCreatorStore":
        """Factory method to create RedisCreatorStore with defaults."""
        return cls(index_name=index_name, dimension=dimension)

    def _schema(self) -> dict[str, Any]:
        return {
            "index": {
                "name": self._index_name,
                "prefix": f"{self._index_name}:",
                "storage_type": "json",
            },
            "fields": [
                {"name": "is_published", "type": "tag", "path": "$.is_published"},
                {"name": "slug", "type": "tag", "path": "$.slug"},
                {"name": "categories", "type": "tag", "path": "$.categories[*]"},
                {"name": "region", "type": "tag", "path": "$.region"},
                {"name": "languages", "type": "tag", "path": "$.languages[*]"},
                {"name": "gender", "type": "tag", "path": "$.gender"},
                {
                    "name": EMBEDDING_FIELD,
                    "type": "vector",
                    "path": f"$.{EMBEDDING_FIELD}",
                    "attrs": {
                        "dims": self._dimension,
                        "algorithm": "hnsw",
                        "distance_metric": "cosine",
                        "datatype": "float32",
                    },
                },
            ],
        }

    async def _ensure_index(self) -> AsyncSearchIndex:
        """Ensure the Redis search index exists."""
        if self._index is not None:
            return self._index

        index = AsyncSearchIndex.from_dict(self._schema(), redis_client=self._client)
        async with self._upstream("index creation"):
            if await index.exists():
                logger.info(f"Using existing index: {self._index_name}")
            else:
                await index.create(overwrite=False)
                logger.info(f"Created new index: {self._index_name}")

        self._index = index
        return index

    @asynccontextmanager
    async def _upstream(self, operation: str):
        try:
            yield
        except (RedisError, RedisVLError) as e:
            raise UpstreamUnavailableError(f"Creator store {operation} failed: {e}") from e

    def _key(self, creator_id: str) -> str:
        return f"{self._index_name}:{creator_id}"

    def _creator_id(self, key: str) -> str:
        return key.removeprefix(f"{self._index_name}:")

    @staticmethod
    def _published() -> Any:
        return Tag("is_published") == "true"

    async def _search_ids(self, query: FilterQuery | VectorQuery) -> list[dict[str, Any]]:
        index = await self._ensure_index()
        async with self._upstream("search"):
            return await index.query(query)

    async def fetch_published(self, fields: list[str]) -> list[dict[str, Any]]:
        """Fetch every published creator, projected to ``fields``.

        Identifiers come from paging the tag index; the projection is
        read with one multi-path JSON.GET per document in a pipeline.
        """
        index = await self._ensure_index()
        query = FilterQuery(
            filter_expression=self._published(),
            return_fields=["slug"],
            num_results=PAGE_SIZE,
        )

        keys: list[str] = []
        async with self._upstream("published scan"):
            async for page in index.paginate(query, page_size=PAGE_SIZE):
                keys.extend(row["id"] for row in page)

        if not keys:
            return []

        paths = [f"$.{name}" for name in fields]
        async with self._upstream("projection read"):
            pipe = self._client.json().pipeline(transaction=False)
            for key in keys:
                pipe.get(key, *paths)
            rows = await pipe.execute()

        documents = []
        for key, row in zip(keys, rows):
            if row is None:
                continue
            document: dict[str, Any] = {"id": self._creator_id(key)}
            for name, path in zip(fields, paths):
                values = row.get(path) if isinstance(row, dict) else None
                document[name] = values[0] if values else None
            documents.append(document)

        logger.debug(f"Fetched {len(documents)} published creators")
        return documents

    async def get(self, creator_id: str) -> dict[str, Any] | None:
        """Fetch one full creator document."""
        async with self._upstream("get"):
            data = await self._client.json().get(self._key(creator_id))
        if not isinstance(data, dict):
            return None
        return {"id": creator_id, **data}

    async def get_many(self, creator_ids: list[str]) -> list[dict[str, Any]]:
        """Fetch several full documents with a single JSON.MGET."""
        if not creator_ids:
            return []

        keys = [self._key(creator_id) for creator_id in creator_ids]
        async with self._upstream("batched get"):
            rows = await self._client.json().mget(keys, "$")

        documents = []
        for creator_id, row in zip(creator_ids, rows):
            # JSONPath results come back wrapped in a list
            data = row[0] if isinstance(row, list) and row else row
            if isinstance(data, dict):
                documents.append({"id": creator_id, **data})
        return documents

    async def find_nearest(
        self,
        vector: list[float],
        limit: int,
    ) -> list[tuple[dict[str, Any], float]]:
        """KNN over the embedding field, returning (document, cosine distance)."""
        query = VectorQuery(
            vector=vector,
            vector_field_name=EMBEDDING_FIELD,
            return_fields=["slug"],
            num_results=limit,
        )
        rows = await self._search_ids(query)

        distances = {
            self._creator_id(row["id"]): float(row.get("vector_distance", 2.0)) for row in rows
        }
        documents = await self.get_many(list(distances))

        matches = [(document, distances[document["id"]]) for document in documents]
        matches.sort(key=lambda m: m[1])
        return matches

    async def find_by_category(self, category: str, limit: int) -> list[dict[str, Any]]:
        """Published creators whose categories contain ``category``."""
        query = FilterQuery(
            filter_expression=self._published() & (Tag("categories") == category),
            return_fields=["slug"],
            num_results=limit,
        )
        rows = await self._search_ids(query)
        return await self.get_many([self._creator_id(row["id"]) for row in rows])

    async def save_similar(
        self,
        creator_id: str,
        entries: list[dict[str, Any]],
        computed_at: float,
    ) -> None:
        """Write a similarity list onto the creator document."""
        key = self._key(creator_id)
        async with self._upstream("similarity write-back"):
            await self._client.json().set(key, f"$.{SIMILAR_FIELD}", entries)
            await self._client.json().set(key, f"$.{SIMILAR_AT_FIELD}", computed_at)

    async def health_check(self) -> bool:
        """Check if Redis is accessible."""
        try:
            return bool(await self._client.ping())
        except RedisError:
            return False

    async def close(self) -> None:
        """Close the Redis client."""
        await self._client.aclose()

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
