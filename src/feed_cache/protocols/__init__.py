"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Redis → in-memory, OpenAI → any compatible API)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from feed_cache.protocols import KVStore, ChatProvider

    # Type hints work with any implementation
    store: KVStore = RedisKVRepository.create()    # works
    store: KVStore = InMemoryKVRepository()        # also works
    ```
"""

from .chat_provider import ChatProvider
from .kv_store import KVStore

__all__ = [
    "KVStore",
    "ChatProvider",
]
