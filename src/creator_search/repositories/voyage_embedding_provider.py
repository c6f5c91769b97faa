"""Voyage AI query embedding provider.

Uses ``input_type="query"`` for asymmetric semantic search: queries are
embedded differently from the creator documents they are matched
against, which gives better retrieval.

Requirements:
    - A Voyage AI API key in ``VOYAGE_API_KEY``
    - Creator documents embedded with the same model family

Models available:
- voyage-3 (1024 dims)
- voyage-3-lite (512 dims)
- voyage-3-large (1024 dims)
"""

import httpx

from creator_search.config import settings
from creator_search.exceptions import EmbeddingProviderError


class VoyageEmbeddingProvider:
    """Voyage-based implementation of EmbeddingProvider protocol.

    This class satisfies the EmbeddingProvider protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        provider = VoyageEmbeddingProvider.create()
        embedding = await provider.encode("travel vlogs in japan")
        print(len(embedding))  # 1024
        ```
    """

    MODEL_DIMENSIONS = {
        "voyage-3": 1024,
        "voyage-3-large": 1024,
        "voyage-3-lite": 512,
        "voyage-3.5": 1024,
        "voyage-3.5-lite": 1024,
    }

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Voyage embedding provider.

        Args:
            api_key: Voyage API key. Defaults to settings.voyage_api_key.
            model_name: Name of the Voyage model. Defaults to settings.voyage_model.
            base_url: Voyage API base URL. Defaults to settings.voyage_base_url.
            timeout: Request timeout in seconds. Defaults to settings.embedding_timeout.
            client: Preconfigured HTTP client. Created lazily when None.
        """
        self._api_key = api_key or settings.voyage_api_key
        self._model_name = (model_name or settings.voyage_model).strip()
        self._base_url = (base_url or settings.voyage_base_url).rstrip("/")
        self._timeout = timeout or settings.embedding_timeout
        self._client: httpx.AsyncClient | None = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    @classmethod
    def create(
        cls,
        api_key: str | None = None,
        model_name: str | None = None,
    ) -> "VoyageEmbeddingProvider":
        """Factory method to create VoyageEmbeddingProvider with defaults."""
        return cls(api_key=api_key, model_name=model_name)

    @property
    def dimension(self) -> int:
        """Get the embedding vector dimension."""
        return self.MODEL_DIMENSIONS.get(self._model_name, settings.embedding_dimension)

    @property
    def model_name(self) -> str:
        return self._model_name

    async def encode(self, text: str) -> list[float]:
        """Generate the query embedding for ``text``.

        Raises:
            EmbeddingProviderError: If the key is missing, the request fails
                or the response format is invalid
        """
        if not self._api_key:
            raise EmbeddingProviderError("VOYAGE_API_KEY environment variable is required")

        payload = {
            "input": [text],
            "model": self._model_name,
            "input_type": "query",
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        try:
            response = await self.client.post(
                f"{self._base_url}/embeddings", json=payload, headers=headers
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise EmbeddingProviderError(
                f"Voyage AI API error ({e.response.status_code}): {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise EmbeddingProviderError(f"Voyage AI request failed: {e}") from e
        except ValueError as e:
            raise EmbeddingProviderError(f"Voyage AI returned a non-JSON body: {e}") from e

        try:
            return [float(x) for x in data["data"][0]["embedding"]]
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise EmbeddingProviderError(f"Unexpected response format: {data}") from e

    async def is_available(self) -> bool:
        """Check if the embedding provider is available."""
        try:
            await self.encode("test")
            return True
        except EmbeddingProviderError:
            return False

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
