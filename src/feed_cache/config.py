import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import redis.asyncio as redis
from dotenv import load_dotenv

load_dotenv()

# Names shown per render (name1..name4 in the merge variables)
NAMES_PER_REQUEST = 4


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Key-value store
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")
    kv_backend: str = os.getenv("KV_BACKEND", "redis")  # "redis" or "memory"
    kv_namespace: str = os.getenv("KV_NAMESPACE", "feed_cache")

    # LLM (OpenAI-compatible chat completions)
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    openai_base_url: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-5.2-chat-latest")

    # Incinerator widget
    cinder_api_key: str | None = os.getenv("CINDER_API_KEY")
    jup_api_key: str | None = os.getenv("JUP_API_KEY")
    incinerator_fresh_ttl: int = int(os.getenv("INCINERATOR_FRESH_TTL", "300"))  # 5 minutes
    incinerator_stale_ttl: int = int(os.getenv("INCINERATOR_STALE_TTL", "3600"))  # 1 hour

    # Recipes widget
    spoonacular_api_key: str | None = os.getenv("SPOONACULAR_API_KEY")
    cuisines: str = os.getenv("CUISINES", "Italian,Mexican,Thai,Indian,Japanese,French,Greek,Cajun")
    recipes_batch_size: int = int(os.getenv("RECIPES_BATCH_SIZE", "10"))
    recipes_low_water_mark: int = int(os.getenv("RECIPES_LOW_WATER_MARK", "0"))  # 0 disables refill

    # Names widget
    names_batch_size: int = int(os.getenv("NAMES_BATCH_SIZE", "20"))
    names_low_water_mark: int = int(os.getenv("NAMES_LOW_WATER_MARK", "8"))
    names_max_recent: int = int(os.getenv("NAMES_MAX_RECENT", "50"))
    names_max_pool: int = int(os.getenv("NAMES_MAX_POOL", "60"))

    # Upstream HTTP
    upstream_timeout: float = float(os.getenv("UPSTREAM_TIMEOUT", "8.0"))
    upstream_retries: int = int(os.getenv("UPSTREAM_RETRIES", "2"))
    upstream_backoff: float = float(os.getenv("UPSTREAM_BACKOFF", "0.1"))

    # Background tasks
    background_drain_timeout: float = float(os.getenv("BACKGROUND_DRAIN_TIMEOUT", "30.0"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    @property
    def cuisine_list(self) -> list[str]:
        """Configured cuisines, stripped and without blanks."""
        return [c.strip() for c in self.cuisines.split(",") if c.strip()]

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.kv_backend not in ("redis", "memory"):
            raise ValueError(f"KV_BACKEND must be 'redis' or 'memory', got {self.kv_backend!r}")

        if not 0 < self.incinerator_fresh_ttl < self.incinerator_stale_ttl:
            raise ValueError("INCINERATOR_FRESH_TTL must be positive and below INCINERATOR_STALE_TTL")

        if self.names_batch_size < NAMES_PER_REQUEST:
            raise ValueError(f"NAMES_BATCH_SIZE must be at least {NAMES_PER_REQUEST}")

        if self.names_max_pool and self.names_max_pool < self.names_batch_size:
            raise ValueError("NAMES_MAX_POOL must be 0 (unbounded) or at least NAMES_BATCH_SIZE")

        if self.recipes_batch_size < 1:
            raise ValueError("RECIPES_BATCH_SIZE must be at least 1")

        if self.upstream_retries < 0 or self.upstream_timeout <= 0:
            raise ValueError("UPSTREAM_RETRIES must be >= 0 and UPSTREAM_TIMEOUT > 0")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create an asyncio Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=True,
    )


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for the service."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
