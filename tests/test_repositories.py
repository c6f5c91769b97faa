"""
Tests for the Redis and Voyage AI repositories.
"""

import json

import httpx
import pytest
import pytest_asyncio
import redis.asyncio as redis
from redis.asyncio.retry import Retry
from redis.backoff import NoBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redisvl.exceptions import RedisSearchError

from conftest import FakeEmbeddingProvider
from creator_search.entities import SearchMode
from creator_search.exceptions import EmbeddingProviderError, UpstreamUnavailableError
from creator_search.repositories import (
    RedisCreatorStore,
    RedisDistributedCache,
    VoyageEmbeddingProvider,
)
from creator_search.services import HybridSearchService


class RecordingRedis:
    """Minimal async Redis client keeping raw string values."""

    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.expiry: dict[str, int] = {}

    async def get(self, key):
        return self.values.get(key)

    async def set(self, key, value, ex=None):
        self.values[key] = value
        self.expiry[key] = ex

    async def delete(self, key):
        self.values.pop(key, None)


def voyage(handler, api_key="test-key") -> VoyageEmbeddingProvider:
    return VoyageEmbeddingProvider(
        api_key=api_key,
        model_name="voyage-3",
        base_url="https://voyage.test/v1",
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


@pytest_asyncio.fixture
async def unreachable_client():
    client = redis.from_url(
        "redis://127.0.0.1:1",
        decode_responses=True,
        socket_connect_timeout=1,
        retry=Retry(NoBackoff(), 0),
    )
    yield client
    await client.aclose()


class TestRedisCreatorStore:
    """Tests for RedisCreatorStore error mapping."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [RedisConnectionError("connection refused"), RedisSearchError("index info failed")],
    )
    async def test_driver_errors_become_upstream_errors(self, error):
        store = RedisCreatorStore(redis_client=redis.Redis(), index_name="creators", dimension=3)

        with pytest.raises(UpstreamUnavailableError, match="search failed"):
            async with store._upstream("search"):
                raise error

        await store.close()

    @pytest.mark.asyncio
    async def test_unreachable_store_raises_upstream_error(self, unreachable_client):
        store = RedisCreatorStore(
            redis_client=unreachable_client, index_name="creators", dimension=3
        )

        with pytest.raises(UpstreamUnavailableError):
            await store.find_nearest([1.0, 0.0, 0.0], limit=4)

    @pytest.mark.asyncio
    async def test_unreachable_store_degrades_hybrid_search(self, unreachable_client, keyword_index):
        store = RedisCreatorStore(
            redis_client=unreachable_client, index_name="creators", dimension=3
        )
        service = HybridSearchService(
            store=store,
            keyword_index=keyword_index,
            embedding_provider=FakeEmbeddingProvider(),
        )

        matches = await service.search("yoga", mode=SearchMode.HYBRID, limit=5)

        assert [m.id for m in matches] == ["b2"]


class TestRedisDistributedCache:
    """Tests for RedisDistributedCache."""

    @pytest.mark.asyncio
    async def test_values_round_trip_as_json_with_ttl(self):
        client = RecordingRedis()
        cache = RedisDistributedCache(client)

        await cache.set("creators:keyword-cache", [{"id": "a1", "topics": ["noodles"]}], 300)

        assert json.loads(client.values["creators:keyword-cache"]) == [
            {"id": "a1", "topics": ["noodles"]}
        ]
        assert client.expiry["creators:keyword-cache"] == 300
        assert await cache.get("creators:keyword-cache") == [{"id": "a1", "topics": ["noodles"]}]

    @pytest.mark.asyncio
    async def test_missing_and_deleted_keys_read_as_none(self):
        cache = RedisDistributedCache(RecordingRedis())

        assert await cache.get("absent") is None
        await cache.set("present", {"v": 1}, 60)
        await cache.delete("present")
        assert await cache.get("present") is None


class TestVoyageEmbeddingProvider:
    """Tests for VoyageEmbeddingProvider."""

    @pytest.mark.asyncio
    async def test_encodes_query_with_query_input_type(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"data": [{"embedding": [0.1, 0.2, 0.3]}]})

        provider = voyage(handler)

        assert await provider.encode("street food") == [0.1, 0.2, 0.3]
        body = json.loads(requests[0].content)
        assert body == {"input": ["street food"], "model": "voyage-3", "input_type": "query"}
        assert requests[0].headers["Authorization"] == "Bearer test-key"
        assert str(requests[0].url) == "https://voyage.test/v1/embeddings"
        await provider.close()

    @pytest.mark.asyncio
    async def test_status_error_is_provider_error(self):
        provider = voyage(lambda request: httpx.Response(503, text="overloaded"))

        with pytest.raises(EmbeddingProviderError, match="503"):
            await provider.encode("yoga")
        await provider.close()

    @pytest.mark.asyncio
    async def test_non_json_body_is_provider_error(self):
        provider = voyage(lambda request: httpx.Response(200, text="<html>gateway</html>"))

        with pytest.raises(EmbeddingProviderError, match="non-JSON"):
            await provider.encode("yoga")
        await provider.close()

    @pytest.mark.asyncio
    async def test_unexpected_format_is_provider_error(self):
        provider = voyage(lambda request: httpx.Response(200, json={"data": []}))

        with pytest.raises(EmbeddingProviderError, match="Unexpected response format"):
            await provider.encode("yoga")
        await provider.close()

    @pytest.mark.asyncio
    async def test_missing_api_key_is_provider_error(self, monkeypatch):
        provider = VoyageEmbeddingProvider(api_key="", base_url="https://voyage.test/v1")
        monkeypatch.setattr(provider, "_api_key", None)

        with pytest.raises(EmbeddingProviderError, match="VOYAGE_API_KEY"):
            await provider.encode("yoga")

    @pytest.mark.asyncio
    async def test_gateway_page_degrades_hybrid_search(self, store, keyword_index):
        provider = voyage(lambda request: httpx.Response(200, text="<html>gateway</html>"))
        service = HybridSearchService(
            store=store, keyword_index=keyword_index, embedding_provider=provider
        )

        matches = await service.search("yoga", mode=SearchMode.HYBRID, limit=5)

        assert [m.id for m in matches] == ["b2"]
        assert store.call_count("find_nearest") == 0
        await provider.close()
