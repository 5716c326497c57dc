"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockpilot import __version__
from stockpilot.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from stockpilot.api.middleware.error_handler import setup_exception_handlers
from stockpilot.api.routes import (
    archive_router,
    health_router,
    items_router,
    reports_router,
    suggestions_router,
    warehouses_router,
)
from stockpilot.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Prepares the inventory store on startup and releases it on shutdown.
    """
    from stockpilot.application.locks import reset_store_lock
    from stockpilot.infrastructure.storage import (
        get_inventory_store,
        reset_inventory_store,
    )

    settings = get_settings()
    configure_logging()

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        storage_backend=settings.storage.backend,
    )

    # The lock belongs to the event loop serving this app
    reset_store_lock()

    try:
        await get_inventory_store().initialize()
        logger.info("storage_initialized", backend=settings.storage.backend)
    except Exception as e:
        logger.error("storage_init_failed", error=str(e))
        raise

    # Warm up LLM provider (optional)
    if settings.llm.warmup_on_start:
        from stockpilot.infrastructure.llm import get_llm_provider

        health_status = await get_llm_provider().check_health()
        logger.info(
            "llm_provider_ready",
            healthy=health_status.available,
            error=health_status.error,
        )

    logger.info("application_started")

    yield

    logger.info("application_stopping")
    await reset_inventory_store()
    reset_store_lock()
    logger.info("application_stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title="Stock Pilot Inventory API",
        description="Warehouse inventory ledger, transaction reports and archive",
        version=__version__,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Add middleware
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    # CORS
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Report-Id", "X-Report-Reprint", "Content-Disposition"],
        )

    setup_exception_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(warehouses_router)
    app.include_router(items_router)
    app.include_router(reports_router)
    app.include_router(archive_router)
    app.include_router(suggestions_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        """API info."""
        return {
            "name": settings.app_name,
            "version": __version__,
            "health": "/api/health",
        }

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "stockpilot.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
