"""Cache entry domain entity."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached value plus the time it was loaded.

    Attributes:
        value: The cached value
        loaded_at: Unix timestamp when the value was loaded
    """

    value: T
    loaded_at: float

    def is_fresh(self, ttl: float, now: float) -> bool:
        """Whether the entry is still within ``ttl`` seconds of loading."""
        return now - self.loaded_at < ttl
