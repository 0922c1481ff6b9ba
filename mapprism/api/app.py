"""
Main API application module for MapPrism.

This module creates and configures the FastAPI application with its routers,
request logging and the database lifecycle.
"""

import time
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.responses import JSONResponse

from mapprism.api.exception_handlers import setup_exception_handlers
from mapprism.api.routers import job, recipe
from mapprism.api.security import verify_api_token
from mapprism.settings import Settings, get_settings
from mapprism.utils.db_manager import DatabaseManager
from mapprism.utils.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Opens the store handle on startup and closes it on shutdown.
    """
    settings: Settings = app.state.settings
    if not settings.api_token:
        logger.warning("api_token is not set; authenticated endpoints will answer 500")

    db_manager = DatabaseManager(settings)
    app.state.db_manager = db_manager
    if settings.create_tables_on_startup:
        await db_manager.create_db_and_tables_async()

    logger.info("Application startup complete")

    try:
        yield
    finally:
        await db_manager.close()
        app.state.db_manager = None
        logger.info("Application shutdown")


async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Log each request and turn unhandled errors into a bare 500 response."""
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        response = JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    elapsed_ms = (time.perf_counter() - started) * 1000
    if request.app.state.settings.log_requests:
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f} ms"
        )
    return response


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use; defaults to the cached global settings

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="MapPrism",
        description="Recipe validation and job materialization for data-processing pipelines",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
        root_path=settings.root_url if settings.root_url != "/" else "",
    )
    app.state.settings = settings
    app.state.db_manager = None

    app.middleware("http")(log_requests)
    setup_exception_handlers(app)

    @app.get("/health", tags=["Health"])
    async def health() -> dict[str, str]:
        """Liveness probe; no authentication required."""
        return {"status": "ok"}

    authenticated = [Depends(verify_api_token)]
    app.include_router(
        recipe.router, prefix="/recipes", tags=["Recipes"], dependencies=authenticated
    )
    app.include_router(job.router, prefix="/jobs", tags=["Jobs"], dependencies=authenticated)

    return app


# Create default application instance
app = create_app()
