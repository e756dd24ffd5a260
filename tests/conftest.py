"""
Shared fixtures for the feed cache tests.
"""

import json
import random
from collections.abc import Callable

import httpx
import pytest

from feed_cache.repositories import InMemoryKVRepository, UpstreamFetcher
from feed_cache.services import BackgroundTaskRunner


class FakeClock:
    """Settable wall clock."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FailingKVStore:
    """KV store whose every operation fails, like an unreachable Redis."""

    async def get(self, key):
        raise ConnectionError("store unreachable")

    async def put(self, key, value, expiration_ttl=None):
        raise ConnectionError("store unreachable")

    async def delete(self, key):
        raise ConnectionError("store unreachable")

    async def health_check(self):
        return False


class FakeChatProvider:
    """ChatProvider returning canned replies in order (None once exhausted)."""

    def __init__(self, replies=None, error: Exception | None = None):
        self.replies = list(replies or [])
        self.error = error
        self.prompts: list[str] = []

    @property
    def model_name(self) -> str:
        return "fake-model"

    async def complete(self, prompt: str, max_tokens: int) -> str | None:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.replies.pop(0) if self.replies else None


def names_reply(names: list[str]) -> str:
    """Model reply wrapping the given names in the expected JSON shape."""
    payload = {"names": [{"name": n, "meaning": f"meaning of {n}"} for n in names]}
    return f"Here you go:\n{json.dumps(payload)}\nEnjoy!"


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """Async HTTP client answering every request with ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def store():
    """Empty in-memory KV store."""
    return InMemoryKVRepository()


@pytest.fixture
def failing_store():
    """KV store that raises on every call."""
    return FailingKVStore()


@pytest.fixture
def runner():
    """Background task runner."""
    return BackgroundTaskRunner()


@pytest.fixture
def clock():
    """Fake wall clock."""
    return FakeClock()


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(42)


@pytest.fixture
def make_fetcher():
    """Factory for an UpstreamFetcher over a mock transport, without backoff."""

    def _make(handler, retries: int = 2) -> UpstreamFetcher:
        return UpstreamFetcher(client=mock_client(handler), retries=retries, timeout=1.0, backoff=0.0)

    return _make
