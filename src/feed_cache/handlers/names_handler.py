"""HTTP handlers for the names widget."""

import logging

from fastapi import HTTPException, status

from feed_cache.config import NAMES_PER_REQUEST
from feed_cache.dto import CacheInfo, NameItem, NamesDebugResponse, NamesMergeVariables
from feed_cache.services import NamesResult, NamesService

logger = logging.getLogger(__name__)


class NamesHandler:
    """HTTP handlers for the names widget.

    Converts NamesService results into merge variables and maps every
    failure to an HTTP 500.
    """

    def __init__(self, names_service: NamesService) -> None:
        """Initialize the names handler.

        Args:
            names_service: The names service for business logic (required).
        """
        self._names = names_service

    async def _get_names(self) -> NamesResult:
        try:
            return await self._names.get_names()
        except Exception as e:
            logger.error(f"Names error: {e!r}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=str(e) or "Unknown error",
            ) from e

    async def merge_variables(self) -> NamesMergeVariables:
        """Handle GET /names requests.

        Returns:
            NamesMergeVariables with four names and meanings

        Raises:
            HTTPException: If fewer than four names could be produced
        """
        result = await self._get_names()
        names = result.names
        if len(names) < NAMES_PER_REQUEST:
            logger.error(f"Not enough names returned: {names}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to generate names",
            )

        flat = {}
        for index, entry in enumerate(names, start=1):
            flat[f"name{index}"] = entry.name
            flat[f"meaning{index}"] = entry.meaning
        return NamesMergeVariables(**flat)

    async def debug(self) -> NamesDebugResponse:
        """Handle GET /names/api requests.

        Returns:
            NamesDebugResponse with names, the recent list and pool state
        """
        result = await self._get_names()
        cache_info = await self._names.cache_info()
        return NamesDebugResponse(
            names=[NameItem(name=n.name, meaning=n.meaning) for n in result.names],
            recentNames=result.recent_names,
            cacheInfo=CacheInfo(**cache_info) if cache_info else None,
            source=result.acquisition.source.value,
        )
