"""
Shared fixtures and in-memory implementations of the protocols.
"""

import asyncio
import copy
import json

import pytest

from creator_search.entities import SIMILAR_AT_FIELD, SIMILAR_FIELD
from creator_search.exceptions import EmbeddingProviderError, UpstreamUnavailableError
from creator_search.services import BackgroundTasks, CreatorCache, KeywordIndex


SAMPLE_CREATORS = [
    {
        "id": "a1",
        "name": "Maya Chen",
        "slug": "maya-chen",
        "categories": ["cooking", "travel"],
        "topics": ["street food", "noodles"],
        "region": "sg",
        "languages": ["en", "zh"],
        "gender": "female",
        "is_published": True,
        "profile": {"displayName": "Maya Cooks", "shortBio": "Street food explorer"},
        "embedding": [1.0, 0.0, 0.0],
    },
    {
        "id": "b2",
        "name": "Leo Park",
        "slug": "leo-park",
        "categories": ["fitness"],
        "topics": ["yoga", "mobility"],
        "region": "us",
        "languages": ["en"],
        "gender": "male",
        "is_published": True,
        "profile": {"displayName": "Leo Park", "shortBio": "Daily yoga flows"},
        "embedding": [0.0, 1.0, 0.0],
    },
    {
        "id": "c3",
        "name": "Ana Souza",
        "slug": "ana-souza",
        "categories": ["cooking"],
        "topics": ["baking", "desserts"],
        "region": "br",
        "languages": ["pt", "en"],
        "gender": "female",
        "is_published": True,
        "profile": {"displayName": "Ana Souza", "shortBio": "Sourdough and sweets"},
    },
    {
        "id": "d4",
        "name": "Hidden Chef",
        "slug": "hidden-chef",
        "categories": ["cooking"],
        "topics": ["knives"],
        "region": "us",
        "languages": ["en"],
        "gender": "male",
        "is_published": False,
    },
]


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryCreatorStore:
    """CreatorStore over a dict of documents, recording every call."""

    def __init__(self, documents=None) -> None:
        self.documents = {doc["id"]: copy.deepcopy(doc) for doc in documents or []}
        self.calls: list[tuple] = []
        # Scripted KNN answer: list of (creator_id, distance)
        self.neighbours: list[tuple[str, float]] = []
        self.fail_nearest = False
        self.fail_save = False

    def call_count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    async def fetch_published(self, fields):
        self.calls.append(("fetch_published",))
        return [
            {"id": doc["id"], **{name: copy.deepcopy(doc.get(name)) for name in fields}}
            for doc in self.documents.values()
            if doc.get("is_published")
        ]

    async def get(self, creator_id):
        self.calls.append(("get", creator_id))
        doc = self.documents.get(creator_id)
        return copy.deepcopy(doc) if doc is not None else None

    async def get_many(self, creator_ids):
        self.calls.append(("get_many", tuple(creator_ids)))
        return [copy.deepcopy(self.documents[i]) for i in creator_ids if i in self.documents]

    async def find_nearest(self, vector, limit):
        self.calls.append(("find_nearest", limit))
        if self.fail_nearest:
            raise UpstreamUnavailableError("vector index offline")
        return [
            (copy.deepcopy(self.documents[creator_id]), distance)
            for creator_id, distance in self.neighbours[:limit]
        ]

    async def find_by_category(self, category, limit):
        self.calls.append(("find_by_category", category, limit))
        matches = [
            copy.deepcopy(doc)
            for doc in self.documents.values()
            if doc.get("is_published") and category in (doc.get("categories") or [])
        ]
        return matches[:limit]

    async def save_similar(self, creator_id, entries, computed_at):
        self.calls.append(("save_similar", creator_id))
        if self.fail_save:
            raise UpstreamUnavailableError("write rejected")
        self.documents[creator_id][SIMILAR_FIELD] = entries
        self.documents[creator_id][SIMILAR_AT_FIELD] = computed_at


class InMemoryDistributedCache:
    """DistributedCache keeping JSON-encoded values, like the Redis one."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.fail_reads = False
        self.fail_writes = False
        self.write_delay = 0.0
        self.reads = 0

    async def get(self, key):
        self.reads += 1
        if self.fail_reads:
            raise ConnectionError("cache unreachable")
        raw = self.data.get(key)
        return json.loads(raw) if raw is not None else None

    async def set(self, key, value, ttl):
        if self.write_delay:
            await asyncio.sleep(self.write_delay)
        if self.fail_writes:
            raise ConnectionError("cache unreachable")
        self.data[key] = json.dumps(value)
        self.ttls[key] = ttl

    async def delete(self, key):
        if self.fail_writes:
            raise ConnectionError("cache unreachable")
        self.data.pop(key, None)


class FakeEmbeddingProvider:
    """EmbeddingProvider returning a fixed vector."""

    def __init__(self, vector=None, error=None, delay: float = 0.0) -> None:
        self.vector = vector or [1.0, 0.0, 0.0]
        self.error = error
        self.delay = delay
        self.calls: list[str] = []

    @property
    def dimension(self) -> int:
        return len(self.vector)

    @property
    def model_name(self) -> str:
        return "fake-embedder"

    async def encode(self, text):
        self.calls.append(text)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.vector)

    async def is_available(self):
        return self.error is None

    async def close(self):
        return None


def failing_embedder() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider(error=EmbeddingProviderError("Voyage AI API error (503)"))


@pytest.fixture
def clock():
    """Controllable clock shared by the caches."""
    return FakeClock()


@pytest.fixture
def store():
    """Document store seeded with the sample creators."""
    return InMemoryCreatorStore(SAMPLE_CREATORS)


@pytest.fixture
def remote():
    """Empty distributed cache."""
    return InMemoryDistributedCache()


@pytest.fixture
def background():
    """Write-back dispatcher."""
    return BackgroundTasks()


@pytest.fixture
def creator_cache(store, remote, background, clock):
    """CreatorCache over the sample store with a distributed tier."""
    return CreatorCache(
        store=store,
        distributed_cache=remote,
        background=background,
        ttl=300,
        clock=clock,
    )


@pytest.fixture
def keyword_index(creator_cache, clock):
    """KeywordIndex over the creator cache."""
    return KeywordIndex(
        creator_cache=creator_cache,
        index_ttl=600,
        filtered_ttl=300,
        capacity=20,
        clock=clock,
    )
