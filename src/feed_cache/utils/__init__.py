"""Utility modules for feed cache."""

from .json_extract import extract_json
from .text import strip_html, truncate_at_boundary

__all__ = [
    "extract_json",
    "strip_html",
    "truncate_at_boundary",
]
