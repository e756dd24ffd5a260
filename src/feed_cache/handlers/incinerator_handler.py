"""HTTP handlers for the incinerator widget."""

import logging
from typing import Any

from fastapi import HTTPException, status

from feed_cache.dto import IncineratorMergeVariables
from feed_cache.entities import SnapshotResultEntity
from feed_cache.services import IncineratorService
from feed_cache.services.incinerator_service import RAW_KEY

logger = logging.getLogger(__name__)


class IncineratorHandler:
    """HTTP handlers for the incinerator widget."""

    def __init__(self, incinerator_service: IncineratorService) -> None:
        """Initialize the incinerator handler.

        Args:
            incinerator_service: The incinerator service for business logic (required).
        """
        self._incinerator = incinerator_service

    async def _get_metrics(self) -> SnapshotResultEntity:
        try:
            return await self._incinerator.get_metrics()
        except Exception as e:
            logger.error(f"Sol Incinerator error: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=str(e) or "Unknown error",
            ) from e

    async def merge_variables(self) -> IncineratorMergeVariables:
        """Handle GET /incinerator requests."""
        result = await self._get_metrics()
        return IncineratorMergeVariables.from_snapshot(result.data)

    async def debug(self) -> dict[str, Any]:
        """Handle GET /incinerator/api requests.

        Returns:
            Merge variables, the raw source values, and snapshot state
        """
        result = await self._get_metrics()
        return {
            **IncineratorMergeVariables.from_snapshot(result.data).model_dump(),
            "raw": result.data.get(RAW_KEY),
            "cache": {
                "freshness": result.freshness.value,
                "age_seconds": round(result.age_seconds, 1),
                "degraded": result.degraded,
            },
        }
