"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services built once per app in the lifespan, stored in app.state
    - Dependency functions retrieve handlers from request.app.state
    - Background tasks drained before the app shuts down
"""

import random
from collections.abc import Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Annotated

import httpx
from fastapi import Depends, FastAPI, Request

from feed_cache.config import Settings, settings
from feed_cache.handlers import IncineratorHandler, NamesHandler, RecipesHandler
from feed_cache.protocols import KVStore
from feed_cache.repositories import (
    IncineratorRepository,
    InMemoryKVRepository,
    OpenAIChatProvider,
    RedisKVRepository,
    SolPriceRepository,
    SpoonacularRepository,
    UpstreamFetcher,
)
from feed_cache.services import (
    BackgroundTaskRunner,
    IncineratorService,
    NameGenerator,
    NamesService,
    PoolCacheService,
    RecentItemsService,
    RecipesService,
    SnapshotCacheService,
)

NAMES_CACHE_KEY = "names_cache"
RECENT_NAMES_KEY = "recent_names"
RECIPES_CACHE_KEY = "recipe_cache"
INCINERATOR_CACHE_KEY = "sol-incinerator-data"


@dataclass
class ServiceContainer:
    """Everything the app builds at startup and tears down at shutdown."""

    store: KVStore
    fetcher: UpstreamFetcher
    runner: BackgroundTaskRunner
    names_handler: NamesHandler
    recipes_handler: RecipesHandler
    incinerator_handler: IncineratorHandler

    async def aclose(self) -> None:
        """Release HTTP and store connections."""
        await self.fetcher.close()
        close = getattr(self.store, "close", None)
        if close is not None:
            await close()


def build_container(
    config: Settings = settings,
    store: KVStore | None = None,
    http_client: httpx.AsyncClient | None = None,
    rng: random.Random | None = None,
) -> ServiceContainer:
    """Wire repositories, services and handlers.

    Args:
        config: Settings to build from
        store: Key-value store override. Defaults to the configured backend.
        http_client: Shared HTTP client override (e.g. with a mock transport)
        rng: Random source shared by generators and cuisine picks

    Returns:
        A ready ServiceContainer
    """
    if store is None:
        store = InMemoryKVRepository() if config.kv_backend == "memory" else RedisKVRepository.create(
            namespace=config.kv_namespace
        )

    rng = rng or random.Random()
    fetcher = UpstreamFetcher(
        client=http_client,
        retries=config.upstream_retries,
        timeout=config.upstream_timeout,
        backoff=config.upstream_backoff,
    )
    runner = BackgroundTaskRunner()
    provider = OpenAIChatProvider(
        fetcher=fetcher,
        api_key=config.openai_api_key,
        model_name=config.openai_model,
        base_url=config.openai_base_url,
    )

    # Names: pool of generated names, refilled in the background
    names_service = NamesService(
        pool=PoolCacheService(
            store=store,
            key=NAMES_CACHE_KEY,
            runner=runner,
            batch_size=config.names_batch_size,
            low_water_mark=config.names_low_water_mark,
            max_pool_size=config.names_max_pool or None,
            fill_mode="shortfall",
        ),
        recent=RecentItemsService(store=store, key=RECENT_NAMES_KEY, max_length=config.names_max_recent),
        generator=NameGenerator(provider=provider, rng=rng),
    )

    # Recipes: pool filled a batch at a time when it runs dry
    recipes_service = RecipesService(
        pool=PoolCacheService(
            store=store,
            key=RECIPES_CACHE_KEY,
            runner=runner,
            batch_size=config.recipes_batch_size,
            low_water_mark=config.recipes_low_water_mark,
            fill_mode="batch",
        ),
        recipes=SpoonacularRepository(fetcher=fetcher, api_key=config.spoonacular_api_key),
        provider=provider,
        cuisines=config.cuisine_list,
        rng=rng,
    )

    # Incinerator: one snapshot, stale-while-revalidate
    incinerator_service = IncineratorService(
        snapshot=SnapshotCacheService(
            store=store,
            key=INCINERATOR_CACHE_KEY,
            runner=runner,
            fresh_ttl=config.incinerator_fresh_ttl,
            stale_ttl=config.incinerator_stale_ttl,
        ),
        stats=IncineratorRepository(fetcher=fetcher, api_key=config.cinder_api_key),
        prices=SolPriceRepository(fetcher=fetcher, jup_api_key=config.jup_api_key),
    )

    return ServiceContainer(
        store=store,
        fetcher=fetcher,
        runner=runner,
        names_handler=NamesHandler(names_service=names_service),
        recipes_handler=RecipesHandler(recipes_service=recipes_service),
        incinerator_handler=IncineratorHandler(incinerator_service=incinerator_service),
    )


def get_container(request: Request) -> ServiceContainer:
    """Dependency injection for the ServiceContainer from app.state.

    Raises:
        RuntimeError: If the container is not initialized
    """
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise RuntimeError("ServiceContainer not initialized. Check lifespan setup.")
    return container


def get_names_handler(request: Request) -> NamesHandler:
    """Dependency injection for NamesHandler."""
    return get_container(request).names_handler


def get_recipes_handler(request: Request) -> RecipesHandler:
    """Dependency injection for RecipesHandler."""
    return get_container(request).recipes_handler


def get_incinerator_handler(request: Request) -> IncineratorHandler:
    """Dependency injection for IncineratorHandler."""
    return get_container(request).incinerator_handler


def create_lifespan(
    container_factory: Callable[[], ServiceContainer],
    drain_timeout: float | None = None,
):
    """Build a lifespan context manager around a container factory.

    Args:
        container_factory: Called once at startup
        drain_timeout: Seconds to wait for background tasks at shutdown.
            Defaults to settings.

    Returns:
        An async context manager suitable for ``FastAPI(lifespan=...)``
    """
    timeout = settings.background_drain_timeout if drain_timeout is None else drain_timeout

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        container = container_factory()
        app.state.container = container

        print("✓ Feed services initialized")
        print(f"✓ Store: {type(container.store).__name__}")
        print(f"✓ Health: {await container.store.health_check()}")

        yield

        # Background refills outlive their requests; let them finish
        await container.runner.drain(timeout=timeout)
        await container.aclose()
        del app.state.container
        print("✓ Feed services shut down")

    return lifespan


# Type aliases for cleaner dependency injection
ContainerDep = Annotated[ServiceContainer, Depends(get_container)]
