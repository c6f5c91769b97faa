import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import redis.asyncio as redis
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Redis (document store)
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")
    creator_index_name: str = os.getenv("CREATOR_INDEX_NAME", "creators")

    # Distributed cache (optional, disabled when unset)
    cache_redis_url: str | None = os.getenv("CACHE_REDIS_URL")

    # Cache TTLs in seconds
    snapshot_ttl: int = int(os.getenv("SNAPSHOT_TTL", "300"))
    index_cache_ttl: int = int(os.getenv("INDEX_CACHE_TTL", "600"))
    filtered_index_ttl: int = int(os.getenv("FILTERED_INDEX_TTL", "300"))
    filtered_index_capacity: int = int(os.getenv("FILTERED_INDEX_CAPACITY", "20"))

    # Ranking
    semantic_weight: float = float(os.getenv("SEMANTIC_WEIGHT", "0.7"))
    semantic_overfetch: int = int(os.getenv("SEMANTIC_OVERFETCH", "4"))
    keyword_overfetch: int = int(os.getenv("KEYWORD_OVERFETCH", "2"))
    similar_overfetch: int = int(os.getenv("SIMILAR_OVERFETCH", "2"))
    search_limit_max: int = int(os.getenv("SEARCH_LIMIT_MAX", "50"))
    similar_limit_max: int = int(os.getenv("SIMILAR_LIMIT_MAX", "20"))

    # Embedding
    embedding_dimension: int = int(os.getenv("EMBEDDING_DIMENSION", "1024"))
    embedding_timeout: float = float(os.getenv("EMBEDDING_TIMEOUT", "5.0"))
    voyage_api_key: str | None = os.getenv("VOYAGE_API_KEY")
    voyage_model: str = os.getenv("VOYAGE_MODEL", "voyage-3")
    voyage_base_url: str = os.getenv("VOYAGE_BASE_URL", "https://api.voyageai.com/v1")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def distributed_cache_enabled(self) -> bool:
        """Whether a distributed cache URL is configured."""
        return bool(self.cache_redis_url)

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if not 0 <= self.semantic_weight <= 1:
            raise ValueError("SEMANTIC_WEIGHT must be between 0 and 1")

        if self.filtered_index_capacity < 1:
            raise ValueError("FILTERED_INDEX_CAPACITY must be at least 1")

        for name in ("semantic_overfetch", "keyword_overfetch", "similar_overfetch"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name.upper()} must be at least 1, got {getattr(self, name)}")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create an async Redis client for the creator document store."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=True,
    )


def get_cache_client() -> redis.Redis | None:
    """Create an async Redis client for the distributed cache, if configured."""
    if not settings.distributed_cache_enabled:
        return None
    return redis.from_url(settings.cache_redis_url, decode_responses=True)


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for scripts and workers."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
