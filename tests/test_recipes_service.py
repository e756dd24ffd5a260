"""
Tests for the recipes service.
"""

import json

import pytest

from conftest import FakeChatProvider
from feed_cache.services import PoolCacheService, RecipesService
from feed_cache.services.recipes_service import fallback_format, fallback_instructions, image_url

RECIPE = {
    "id": 715538,
    "title": "Garlic Lemon Shrimp Foil Packs",
    "readyInMinutes": 25,
    "cuisines": ["Mediterranean"],
    "image": "https://img.spoonacular.com/recipes/715538-312x231.jpg",
    "extendedIngredients": [
        {"name": "shrimp", "original": "1 lb shrimp"},
        {"name": "garlic", "original": "3 cloves garlic"},
    ],
    "instructions": "<ol><li>Heat the grill.</li><li>Fold the foil.</li></ol>",
}


def recipes(count: int) -> list[dict]:
    return [{**RECIPE, "id": i, "title": f"Recipe {i}"} for i in range(count)]


class StubSpoonacular:
    def __init__(self, batch):
        self.batch = batch
        self.calls = []

    async def fetch_random(self, cuisine, count):
        self.calls.append((cuisine, count))
        return self.batch[:count]


def make_service(store, runner, rng, spoonacular, provider, cuisines=("Thai",)):
    pool = PoolCacheService(store=store, key="recipe_cache", runner=runner, batch_size=10, fill_mode="batch")
    return RecipesService(pool=pool, recipes=spoonacular, provider=provider, cuisines=list(cuisines), rng=rng)


def test_image_url_prefers_large_image():
    assert image_url(RECIPE) == "https://img.spoonacular.com/recipes/715538-636x393.jpg"
    assert image_url({"image": "https://example.com/x.jpg"}) == "https://example.com/x.jpg"
    assert image_url({"id": 0, "image": "https://example.com/y.jpg"}) == "https://example.com/y.jpg"
    assert image_url({}) == ""


def test_fallback_instructions_strip_html():
    assert fallback_instructions(RECIPE) == "Heat the grill. Fold the foil."
    assert fallback_instructions({"instructions": "<p></p>"}) == "Instructions not available for this recipe."


def test_fallback_instructions_truncate():
    text = "Word " * 60

    result = fallback_instructions({"instructions": text})

    assert result.endswith("...")
    assert len(result) <= 153


def test_fallback_format():
    formatted = fallback_format(RECIPE, "Thai")

    assert formatted["ingredients"] == "shrimp, garlic"
    assert formatted["cook_time"] == "25 min"
    assert formatted["cuisine"] == "Thai"


@pytest.mark.asyncio
async def test_get_recipe_fills_pool_with_batch(store, runner, rng):
    spoonacular = StubSpoonacular(recipes(10))
    reply = json.dumps(
        {
            "title": "Garlic Lemon Shrimp",
            "ingredients": "1 lb shrimp, 3 cloves garlic",
            "instructions": "Grill it.",
            "cook_time": "25 min",
            "cuisine": "Mediterranean",
        }
    )
    service = make_service(store, runner, rng, spoonacular, FakeChatProvider([f"```json\n{reply}\n```"]))

    recipe = await service.get_recipe()

    assert recipe.title == "Garlic Lemon Shrimp"
    assert recipe.cuisine == "Mediterranean"
    assert recipe.raw_recipe["id"] == 0
    assert recipe.pool_cuisine == "Thai"
    assert spoonacular.calls == [("Thai", 10)]
    assert (await service.cache_info())["cached_count"] == 9


@pytest.mark.asyncio
async def test_get_recipe_without_llm_uses_fallback(store, runner, rng):
    await store.put("recipe_cache", {"items": [RECIPE], "fetched_at": 1.0})
    spoonacular = StubSpoonacular([])
    service = make_service(store, runner, rng, spoonacular, FakeChatProvider())

    recipe = await service.get_recipe()

    assert recipe.title == RECIPE["title"]
    assert recipe.cook_time == "25 min"
    assert recipe.image_url.endswith("715538-636x393.jpg")
    assert spoonacular.calls == []


@pytest.mark.asyncio
async def test_get_recipe_none_when_upstream_empty(store, runner, rng):
    service = make_service(store, runner, rng, StubSpoonacular([]), FakeChatProvider())

    assert await service.get_recipe() is None


@pytest.mark.asyncio
async def test_pooled_recipe_keeps_batch_cuisine(store, runner, rng):
    """A recipe pooled for one cuisine is labelled with it when served later."""
    thai = make_service(store, runner, rng, StubSpoonacular(recipes(10)), FakeChatProvider())
    await thai.get_recipe()

    italian = make_service(store, runner, rng, StubSpoonacular([]), FakeChatProvider(), cuisines=["Italian"])
    recipe = await italian.get_recipe()

    assert recipe.pool_cuisine == "Thai"
    assert recipe.cuisine == "Thai"
    assert recipe.raw_recipe["id"] == 1
