"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract: the flat merge
variables each widget renders, and the debug payloads of ``/api``.

Internal domain logic should use entities from the entities package.
"""

from .responses import (
    CacheInfo,
    ErrorResponse,
    HealthCheckResponse,
    IncineratorMergeVariables,
    NameItem,
    NamesDebugResponse,
    NamesMergeVariables,
    RecipeMergeVariables,
)

__all__ = [
    "CacheInfo",
    "ErrorResponse",
    "HealthCheckResponse",
    "NameItem",
    "NamesMergeVariables",
    "NamesDebugResponse",
    "RecipeMergeVariables",
    "IncineratorMergeVariables",
]
