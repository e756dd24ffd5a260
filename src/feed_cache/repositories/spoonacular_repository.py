"""Spoonacular recipe search access."""

import logging
from typing import Any

from feed_cache.config import settings
from feed_cache.repositories.upstream_fetcher import UpstreamFetcher

logger = logging.getLogger(__name__)

SPOONACULAR_RANDOM_URL = "https://api.spoonacular.com/recipes/random"


class SpoonacularRepository:
    """Fetches random main-course recipes for a cuisine."""

    def __init__(self, fetcher: UpstreamFetcher, api_key: str | None = None) -> None:
        self._fetcher = fetcher
        self._api_key = api_key or settings.spoonacular_api_key or ""

    async def fetch_random(self, cuisine: str, count: int) -> list[dict[str, Any]]:
        """Fetch up to ``count`` random recipes with full information.

        Args:
            cuisine: Spoonacular cuisine filter
            count: Number of recipes to request

        Returns:
            Recipe records; empty when the API answered with an error status

        Raises:
            httpx.TransportError: If the API was unreachable after retries
        """
        logger.info(f"Calling Spoonacular API for {count} {cuisine} recipes...")
        response = await self._fetcher.fetch(
            "GET",
            SPOONACULAR_RANDOM_URL,
            params={
                "apiKey": self._api_key,
                "number": str(count),
                "cuisine": cuisine,
                "instructionsRequired": "true",
                "addRecipeInformation": "true",
                "fillIngredients": "true",
                "includeNutrition": "false",
                "tags": "main course",
            },
        )

        if not response.is_success:
            logger.warning(f"Spoonacular API error: {response.status_code} - {response.text[:500]}")
            return []

        recipes = response.json().get("recipes") or []
        logger.info(f"Spoonacular returned {len(recipes)} recipes")
        return recipes
