from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from feed_cache.api.dependencies import (
    ContainerDep,
    ServiceContainer,
    build_container,
    create_lifespan,
    get_incinerator_handler,
    get_names_handler,
    get_recipes_handler,
)
from feed_cache.config import configure_logging, settings
from feed_cache.dto import ErrorResponse, HealthCheckResponse

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}

WIDGETS = {
    "names": get_names_handler,
    "recipes": get_recipes_handler,
    "incinerator": get_incinerator_handler,
}


def widget_router(get_handler: Callable[[Request], Any]) -> APIRouter:
    """Routes shared by every widget: health, debug payload, merge variables.

    Any path other than ``/health`` and ``/api`` serves the merge variables.
    """
    router = APIRouter(responses={500: {"model": ErrorResponse}})

    @router.get("/health", response_class=PlainTextResponse)
    async def widget_health() -> str:
        """Liveness probe for the widget."""
        return "OK"

    @router.get("/api")
    async def widget_debug(handler=Depends(get_handler)) -> Any:
        """Merge variables plus raw upstream and cache data."""
        return await handler.debug()

    @router.get("")
    @router.get("/{path:path}")
    async def widget_merge_variables(handler=Depends(get_handler)) -> Any:
        """Flat merge variables for the display."""
        return await handler.merge_variables()

    return router


def create_app(
    container_factory: Callable[[], ServiceContainer] | None = None,
    drain_timeout: float | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        container_factory: Builds the services at startup. Defaults to
            ``build_container()`` with the global settings.
        drain_timeout: Shutdown wait for background tasks, in seconds

    Returns:
        The configured FastAPI app
    """
    configure_logging()

    app = FastAPI(
        title="Feed Cache API",
        description="Merge-variable feeds for display widgets with a Redis-backed read-through cache",
        version="0.1.0",
        lifespan=create_lifespan(container_factory or build_container, drain_timeout),
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def open_cors_header(request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("Access-Control-Allow-Origin", "*")
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=CORS_HEADERS,
        )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc) or "Unknown error"},
            headers=CORS_HEADERS,
        )

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "Feed Cache API",
            "version": "0.1.0",
            "description": "Merge-variable feeds for display widgets",
            "endpoints": {name: f"/{name}" for name in WIDGETS} | {"health": "/health", "docs": "/docs"},
        }

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(container: ContainerDep) -> HealthCheckResponse:
        """Service health check (key-value store reachability)."""
        store_healthy = await container.store.health_check()
        if not store_healthy:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Key-value store unreachable",
            )
        return HealthCheckResponse(
            status="healthy",
            store_healthy=True,
            background_tasks=container.runner.get_stats(),
        )

    for name, get_handler in WIDGETS.items():
        app.include_router(widget_router(get_handler), prefix=f"/{name}", tags=[name])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "feed_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
