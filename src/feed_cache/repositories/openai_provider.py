"""OpenAI chat completion provider.

Sends a single user message to ``{base_url}/chat/completions`` with a
bearer token. Failures are reported as ``None`` so callers can switch to
their own fallback content instead of failing the request.
"""

import logging

import httpx

from feed_cache.config import settings
from feed_cache.repositories.upstream_fetcher import UpstreamFetcher

logger = logging.getLogger(__name__)


class OpenAIChatProvider:
    """OpenAI-compatible implementation of the ChatProvider protocol.

    This class satisfies the ChatProvider protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        provider = OpenAIChatProvider.create(fetcher=UpstreamFetcher.create())
        content = await provider.complete("Reply with {} only", max_tokens=20)
        ```
    """

    def __init__(
        self,
        fetcher: UpstreamFetcher,
        api_key: str | None = None,
        model_name: str | None = None,
        base_url: str | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            fetcher: Retrying HTTP client
            api_key: Bearer token. Defaults to settings.openai_api_key.
            model_name: Chat model. Defaults to settings.openai_model.
            base_url: API base URL. Defaults to settings.openai_base_url.
        """
        self._fetcher = fetcher
        self._api_key = api_key or settings.openai_api_key or ""
        self._model_name = model_name or settings.openai_model
        self._base_url = (base_url or settings.openai_base_url).rstrip("/")

    @classmethod
    def create(cls, fetcher: UpstreamFetcher, model_name: str | None = None) -> "OpenAIChatProvider":
        """Factory method to create OpenAIChatProvider with settings defaults."""
        return cls(fetcher=fetcher, model_name=model_name)

    @property
    def model_name(self) -> str:
        """Get the model name/identifier."""
        return self._model_name

    async def complete(self, prompt: str, max_tokens: int) -> str | None:
        """Generate a completion for a single user prompt.

        Args:
            prompt: The user message
            max_tokens: Upper bound on completion tokens

        Returns:
            The completion text, or None on any error status, error body,
            transport failure, or empty content
        """
        try:
            response = await self._fetcher.fetch(
                "POST",
                f"{self._base_url}/chat/completions",
                headers={"Authorization": f"Bearer {self._api_key}"},
                json={
                    "model": self._model_name,
                    "messages": [{"role": "user", "content": prompt}],
                    "max_completion_tokens": max_tokens,
                },
            )
        except httpx.TransportError as e:
            logger.warning(f"OpenAI request failed: {e!r}")
            return None

        if not response.is_success:
            logger.warning(f"OpenAI API error: {response.status_code} - {response.text[:500]}")
            return None

        try:
            data = response.json()
        except ValueError:
            logger.warning("OpenAI returned a non-JSON body")
            return None

        if not isinstance(data, dict):
            logger.warning("OpenAI returned an unexpected payload")
            return None

        error = data.get("error")
        if error:
            message = error.get("message", error) if isinstance(error, dict) else error
            logger.warning(f"OpenAI error: {message}")
            return None

        usage = data.get("usage")
        if usage:
            logger.info(
                f"LLM tokens used - prompt: {usage.get('prompt_tokens')}, "
                f"completion: {usage.get('completion_tokens')}, total: {usage.get('total_tokens')}"
            )

        choices = data.get("choices") or []
        content = (choices[0].get("message") or {}).get("content") if choices else None
        if not content:
            logger.warning("Empty response from OpenAI")
            return None

        return content
