"""Handler layer for HTTP endpoints.

This layer contains the HTTP request/response handlers, one per widget.
Handlers depend on services (business logic), not directly on repositories.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)
"""

from .incinerator_handler import IncineratorHandler
from .names_handler import NamesHandler
from .recipes_handler import RecipesHandler

__all__ = [
    "NamesHandler",
    "RecipesHandler",
    "IncineratorHandler",
]
