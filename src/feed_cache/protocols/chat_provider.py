"""Chat completion provider protocol.

Defines the interface for any LLM service that turns a single user
prompt into a text completion.

Implementations can include:
- OpenAI chat completions (default)
- Any OpenAI-compatible endpoint (vLLM, Ollama's /v1, etc.)
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ChatProvider(Protocol):
    """Protocol for chat completion services.

    Example:
        ```python
        provider: ChatProvider = OpenAIChatProvider.create()
        content = await provider.complete("Say hi as JSON", max_tokens=50)
        ```
    """

    @property
    def model_name(self) -> str:
        """Return the name/identifier of the model."""
        ...

    async def complete(self, prompt: str, max_tokens: int) -> str | None:
        """Generate a completion for a single user prompt.

        Args:
            prompt: The user message
            max_tokens: Upper bound on completion tokens

        Returns:
            The completion text, or None when the provider returned an
            error status, an error body, or empty content
        """
        ...
