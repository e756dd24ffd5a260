"""Outbound HTTP with timeout, retry and provider fallback.

All upstream APIs (stats feeds, price oracles, recipe search, LLM
completions) go through ``UpstreamFetcher`` so they share one
``httpx.AsyncClient`` and one retry policy.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

import httpx

from feed_cache.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class UpstreamError(RuntimeError):
    """An upstream API answered, but not with anything usable."""


class UpstreamFetcher:
    """Retrying HTTP client for third-party JSON APIs.

    Policy per call:
    - up to ``retries + 1`` attempts
    - each attempt bounded by ``timeout`` seconds
    - linear backoff of ``backoff * attempt_number`` between attempts
    - a non-2xx response is retried, and returned as-is once retries are
      exhausted (status handling is left to the caller)
    - a transport failure (timeout, connection error) is retried, and
      re-raised once retries are exhausted

    Example:
        ```python
        fetcher = UpstreamFetcher.create()
        response = await fetcher.fetch("GET", "https://example.com/stats")
        if response.is_success:
            data = response.json()
        ```
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        retries: int | None = None,
        timeout: float | None = None,
        backoff: float | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            client: Shared async HTTP client. If None, one is created lazily.
            retries: Extra attempts after the first. Defaults to settings.
            timeout: Per-attempt timeout in seconds. Defaults to settings.
            backoff: Base delay in seconds for linear backoff. Defaults to settings.
        """
        self._client = client
        self._retries = settings.upstream_retries if retries is None else retries
        self._timeout = timeout or settings.upstream_timeout
        self._backoff = settings.upstream_backoff if backoff is None else backoff

    @classmethod
    def create(cls, client: httpx.AsyncClient | None = None) -> "UpstreamFetcher":
        """Factory method to create UpstreamFetcher with settings defaults."""
        return cls(client=client)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    async def fetch(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
        json: Any = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """Send a request with retry and per-attempt timeout.

        Args:
            method: HTTP method
            url: Absolute URL
            headers: Optional request headers
            params: Optional query parameters
            json: Optional JSON body
            timeout: Override the per-attempt timeout

        Returns:
            The first 2xx response, or the last response once retries are exhausted

        Raises:
            httpx.TransportError: If every attempt failed at the network level
        """
        seconds = timeout or self._timeout
        attempts = self._retries + 1

        for attempt in range(1, attempts + 1):
            try:
                response = await self._attempt(method, url, seconds, headers=headers, params=params, json=json)
            except httpx.TransportError as e:
                if attempt == attempts:
                    logger.warning(f"{method} {url} failed after {attempts} attempts: {e!r}")
                    raise
                logger.debug(f"{method} {url} attempt {attempt} failed: {e!r}")
            else:
                if response.is_success or attempt == attempts:
                    return response
                logger.debug(f"{method} {url} attempt {attempt} returned {response.status_code}")

            await asyncio.sleep(self._backoff * attempt)

        # The loop always returns or raises on its final attempt
        raise RuntimeError(f"Failed to fetch {url}")

    async def _attempt(self, method: str, url: str, seconds: float, **kwargs: Any) -> httpx.Response:
        """One request, aborted as a whole after ``seconds``.

        httpx timeouts bound each phase separately; the outer deadline also
        bounds a response that keeps trickling in.
        """
        try:
            async with asyncio.timeout(seconds):
                return await self.client.request(method, url, timeout=httpx.Timeout(seconds), **kwargs)
        except TimeoutError as e:
            raise httpx.TimeoutException(f"No response from {url} within {seconds}s") from e

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None


async def first_available(
    providers: Sequence[Callable[[], Awaitable[T | None]]],
    default: T,
) -> T:
    """Return the first usable value from an ordered list of providers.

    Providers are tried one at a time. A provider that raises, or returns
    a falsy value, is skipped. When every provider fails, ``default`` is
    returned; callers must read it as "unknown", not as a real value.

    Args:
        providers: Zero-argument coroutine functions, most preferred first
        default: Value returned when no provider succeeds

    Returns:
        The first truthy provider result, or ``default``
    """
    for provider in providers:
        name = getattr(provider, "__name__", repr(provider))
        try:
            value = await provider()
        except Exception as e:
            logger.warning(f"Provider {name} failed: {e!r}")
            continue
        if value:
            return value
        logger.debug(f"Provider {name} returned no value")

    logger.warning(f"All {len(providers)} providers failed, using default {default!r}")
    return default
