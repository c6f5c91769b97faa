"""Error taxonomy for the search engine.

Cache-tier failures never appear here: they are absorbed where they
happen and logged. Only failures a caller has to react to are typed.
"""


class CreatorSearchError(Exception):
    """Base class for errors raised by the search engine."""


class CreatorNotFoundError(CreatorSearchError):
    """Raised when a similarity lookup names an unknown creator."""

    def __init__(self, creator_id: str) -> None:
        super().__init__(f"Creator not found: {creator_id}")
        self.creator_id = creator_id


class UpstreamUnavailableError(CreatorSearchError):
    """Raised when the document store or embedding provider fails."""


class EmbeddingProviderError(UpstreamUnavailableError):
    """Raised when the embedding provider fails or returns garbage."""
