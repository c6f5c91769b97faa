"""Embedding provider protocol.

Defines the interface for any embedding generation service that can
convert a search query to a vector embedding.

Implementations can include:
- Voyage AI (API, default)
- OpenAI embeddings (API)
- Ollama (local)
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Protocol for query embedding services.

    Example:
        ```python
        from creator_search.protocols import EmbeddingProvider

        provider: EmbeddingProvider = VoyageEmbeddingProvider.create()
        vector = await provider.encode("vegan cooking")
        ```
    """

    @property
    def dimension(self) -> int:
        """Return the dimension of the embedding vectors."""
        ...

    @property
    def model_name(self) -> str:
        """Return the name/identifier of the model."""
        ...

    async def encode(self, text: str) -> list[float]:
        """Generate the embedding vector for a search query.

        Args:
            text: The query text

        Returns:
            The embedding vector as a list of floats
        """
        ...

    async def is_available(self) -> bool:
        """Check if the embedding provider is reachable."""
        ...

    async def close(self) -> None:
        """Release any underlying connections."""
        ...
