"""HTTP handlers for the recipes widget."""

import logging
from typing import Any

from fastapi import HTTPException, status

from feed_cache.dto import RecipeMergeVariables
from feed_cache.services import RecipeResult, RecipesService

logger = logging.getLogger(__name__)


class RecipesHandler:
    """HTTP handlers for the recipes widget."""

    def __init__(self, recipes_service: RecipesService) -> None:
        """Initialize the recipes handler.

        Args:
            recipes_service: The recipes service for business logic (required).
        """
        self._recipes = recipes_service

    async def _get_recipe(self) -> RecipeResult:
        try:
            recipe = await self._recipes.get_recipe()
        except Exception as e:
            logger.error(f"Main handler error: {e!r}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=str(e) or "Unknown error",
            ) from e

        if recipe is None:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to fetch recipe",
            )
        return recipe

    @staticmethod
    def _to_merge_variables(recipe: RecipeResult) -> RecipeMergeVariables:
        return RecipeMergeVariables(
            title=recipe.title,
            cuisine=recipe.cuisine,
            cook_time=recipe.cook_time,
            ingredients=recipe.ingredients,
            instructions=recipe.instructions,
            image_url=recipe.image_url,
        )

    async def merge_variables(self) -> RecipeMergeVariables:
        """Handle GET /recipes requests."""
        return self._to_merge_variables(await self._get_recipe())

    async def debug(self) -> dict[str, Any]:
        """Handle GET /recipes/api requests.

        Returns:
            Merge variables plus the raw recipe, pool state and the cuisine
            the served batch was requested for
        """
        recipe = await self._get_recipe()
        return {
            **self._to_merge_variables(recipe).model_dump(),
            "raw_recipe": recipe.raw_recipe,
            "cache_info": await self._recipes.cache_info(),
            "pool_cuisine": recipe.pool_cuisine,
        }
