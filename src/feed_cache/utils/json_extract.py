"""Pull a JSON value out of free-form LLM output."""

import json
from typing import Any

_decoder = json.JSONDecoder()


def extract_json(text: str) -> Any | None:
    """Return the first well-formed JSON object or array embedded in text.

    Models often wrap JSON in prose or markdown fences. Every ``{`` or
    ``[`` is tried as a start position, left to right, and the first one
    that decodes completely wins.

    Args:
        text: Raw model output

    Returns:
        The decoded dict or list, or None if no JSON value is found
    """
    for index, char in enumerate(text):
        if char not in "{[":
            continue
        try:
            value, _ = _decoder.raw_decode(text, index)
        except json.JSONDecodeError:
            continue
        return value
    return None
