"""Small text helpers for display-sized strings."""

import re

_TAG_RE = re.compile(r"<[^>]*>")
_SPACE_RE = re.compile(r"\s+")


def strip_html(text: str) -> str:
    """Remove HTML tags and collapse whitespace."""
    return _SPACE_RE.sub(" ", _TAG_RE.sub(" ", text)).strip()


def truncate_at_boundary(text: str, limit: int = 150, min_sentence: int = 80) -> str:
    """Shorten text to ``limit`` characters at a natural break.

    Ends at the last full stop if it falls after ``min_sentence``
    characters, otherwise at the last word boundary followed by "...".
    """
    if len(text) <= limit:
        return text

    truncated = text[:limit]
    last_period = truncated.rfind(".")
    if last_period > min_sentence:
        return truncated[: last_period + 1]

    last_space = truncated.rfind(" ")
    if last_space == -1:
        return truncated + "..."
    return truncated[:last_space] + "..."
