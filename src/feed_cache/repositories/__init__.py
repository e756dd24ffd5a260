"""Repository layer for data access.

This layer abstracts external dependencies (Redis, third-party REST APIs,
LLM endpoints) behind protocol-based interfaces. This enables:
- Easy swapping of implementations (Redis → in-memory, OpenAI → compatible APIs)
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from feed_cache.protocols import ChatProvider, KVStore

from .incinerator_repository import IncineratorRepository, IncineratorStats
from .memory_kv_repository import InMemoryKVRepository
from .openai_provider import OpenAIChatProvider
from .price_repository import SolPriceRepository
from .redis_kv_repository import RedisKVRepository
from .spoonacular_repository import SpoonacularRepository
from .upstream_fetcher import UpstreamError, UpstreamFetcher, first_available

__all__ = [
    "KVStore",
    "ChatProvider",
    "RedisKVRepository",
    "InMemoryKVRepository",
    "UpstreamFetcher",
    "UpstreamError",
    "first_available",
    "OpenAIChatProvider",
    "SolPriceRepository",
    "IncineratorRepository",
    "IncineratorStats",
    "SpoonacularRepository",
]
