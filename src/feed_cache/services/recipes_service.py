"""Recipes widget business logic."""

import logging
import random
from dataclasses import dataclass
from typing import Any

from feed_cache.protocols import ChatProvider
from feed_cache.repositories import SpoonacularRepository
from feed_cache.services.pool_cache_service import PoolCacheService
from feed_cache.utils import extract_json, strip_html, truncate_at_boundary

logger = logging.getLogger(__name__)

IMAGE_URL_TEMPLATE = "https://img.spoonacular.com/recipes/{id}-636x393.jpg"
MAX_INGREDIENTS = 15
NO_INSTRUCTIONS = "Instructions not available for this recipe."
# Pooled recipes carry the cuisine their batch was requested for
POOL_CUISINE_KEY = "requestedCuisine"

FORMAT_PROMPT = """You are formatting a recipe for a small e-ink display. Be extremely concise.

Recipe: {title}
Requested Cuisine: {cuisine}
Cuisines from API: {api_cuisines}

Ingredients:
{ingredients}

Instructions:
{instructions}

Please provide:
1. TITLE: A clear, appetizing title focusing on the FOOD itself. Remove cooking method terms (like "foil packs", "sheet pan", "one pot", "instant pot", "slow cooker", "skillet"). Focus on main ingredients and flavors. Remove brand names. Keep it concise (max 6 words). Example: "Garlic Lemon Shrimp Foil Packs" -> "Garlic Lemon Shrimp".
2. INGREDIENTS: List ALL key ingredients with amounts (max 15 items). Include the main protein, vegetables, sauces, spices, and any sides mentioned. Don't skip anything important!
3. INSTRUCTIONS: Summarize the cooking method in 3-4 sentences (max 80 words total). Include key steps and techniques.
4. COOK_TIME: Estimate total time to make the recipe based ONLY on the ingredients and instructions above. Return a short string like "45 min", "1 hr 30 min", or "2 hrs".
5. CUISINE: Determine the ACTUAL cuisine based on the dish's ingredients, cooking techniques, and origin - NOT the requested cuisine. If it's Southern US, prefer a specific label like "Cajun", "Creole", "Southern", or "Soul Food" instead of "American" when appropriate. Ignore brand names. If it isn't clearly regional, say "American" or the correct origin. Be accurate.

Respond in this exact JSON format:
{{"title": "...", "ingredients": "...", "instructions": "...", "cook_time": "...", "cuisine": "..."}}"""


@dataclass(frozen=True)
class RecipeResult:
    """A recipe ready for display, with its source record."""

    title: str
    cuisine: str
    cook_time: str
    ingredients: str
    instructions: str
    image_url: str
    pool_cuisine: str
    raw_recipe: dict[str, Any]


class RecipesService:
    """Serves one recipe per request from a pool of Spoonacular results.

    The pool is filled a batch at a time, for whichever cuisine was
    picked when it ran dry; each served recipe is condensed by the LLM.
    """

    def __init__(
        self,
        pool: PoolCacheService,
        recipes: SpoonacularRepository,
        provider: ChatProvider,
        cuisines: list[str],
        rng: random.Random | None = None,
        max_tokens: int = 600,
    ) -> None:
        if not cuisines:
            raise ValueError("At least one cuisine is required")
        self._pool = pool
        self._recipes = recipes
        self._provider = provider
        self._cuisines = cuisines
        self._rng = rng or random.Random()
        self._max_tokens = max_tokens

    async def get_recipe(self) -> RecipeResult | None:
        """Get one formatted recipe, or None if none could be fetched."""
        cuisine = self._rng.choice(self._cuisines)

        async def fetch(count: int) -> list[dict[str, Any]]:
            logger.info(f"Fetching {count} new recipes for cuisine: {cuisine}")
            recipes = await self._recipes.fetch_random(cuisine, count)
            return [{**recipe, POOL_CUISINE_KEY: cuisine} for recipe in recipes]

        acquisition = await self._pool.acquire(1, fetch=fetch)
        if not acquisition.items:
            return None

        recipe = acquisition.items[0]
        pool_cuisine = recipe.get(POOL_CUISINE_KEY) or cuisine
        logger.info(f"Serving recipe ({acquisition.source.value}, {acquisition.remaining} cached): {recipe.get('title')}")
        formatted = await self.format_recipe(recipe, pool_cuisine)

        return RecipeResult(
            title=formatted.get("title") or recipe.get("title", ""),
            cuisine=formatted.get("cuisine") or pool_cuisine,
            cook_time=formatted.get("cook_time") or "Time unknown",
            ingredients=formatted.get("ingredients", ""),
            instructions=formatted.get("instructions", ""),
            image_url=image_url(recipe),
            pool_cuisine=pool_cuisine,
            raw_recipe=recipe,
        )

    async def format_recipe(self, recipe: dict[str, Any], requested_cuisine: str) -> dict[str, str]:
        """Condense a recipe with the LLM, or format it plainly on any failure."""
        try:
            content = await self._provider.complete(
                build_format_prompt(recipe, requested_cuisine),
                max_tokens=self._max_tokens,
            )
        except Exception as e:
            logger.warning(f"Recipe formatting request failed: {e!r}")
            content = None

        if content:
            parsed = extract_json(content)
            if isinstance(parsed, dict):
                logger.info(f"LLM formatting successful for: {parsed.get('title')}")
                return {k: str(v) for k, v in parsed.items() if v is not None}
            logger.warning(f"No JSON found in formatting response for recipe {recipe.get('id')}")

        return fallback_format(recipe, requested_cuisine)

    async def cache_info(self) -> dict[str, Any] | None:
        """Pool description for debug payloads."""
        return await self._pool.pool_info()


def build_format_prompt(recipe: dict[str, Any], requested_cuisine: str) -> str:
    ingredients = "\n".join(i.get("original", "") for i in recipe.get("extendedIngredients") or [])
    return FORMAT_PROMPT.format(
        title=recipe.get("title", ""),
        cuisine=requested_cuisine,
        api_cuisines=", ".join(recipe.get("cuisines") or []) or "Unknown",
        ingredients=ingredients,
        instructions=recipe.get("instructions") or "No instructions provided",
    )


def fallback_format(recipe: dict[str, Any], requested_cuisine: str) -> dict[str, str]:
    """Plain formatting used when the LLM is unavailable."""
    ingredients = recipe.get("extendedIngredients") or []
    return {
        "title": recipe.get("title", ""),
        "ingredients": ", ".join(i.get("name", "") for i in ingredients[:MAX_INGREDIENTS]),
        "instructions": fallback_instructions(recipe),
        "cook_time": f"{recipe.get('readyInMinutes') or '?'} min",
        "cuisine": requested_cuisine,
    }


def fallback_instructions(recipe: dict[str, Any]) -> str:
    raw = recipe.get("instructions")
    if not raw:
        return NO_INSTRUCTIONS
    plain = strip_html(raw)
    if not plain:
        return NO_INSTRUCTIONS
    return truncate_at_boundary(plain)


def image_url(recipe: dict[str, Any]) -> str:
    """Largest Spoonacular image for the recipe."""
    if recipe.get("id"):
        return IMAGE_URL_TEMPLATE.format(id=recipe["id"])
    return recipe.get("image") or ""
