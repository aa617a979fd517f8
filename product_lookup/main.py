"""Product lookup API main application module.

This module builds the FastAPI application and configures core
middleware, routers, exception handlers and the startup/shutdown
lifecycle of the database connection pool.
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from product_lookup.api.diagnostics import router as diagnostics_router
from product_lookup.api.errors import register_exception_handlers
from product_lookup.api.health import router as health_router
from product_lookup.api.middleware import setup_middleware
from product_lookup.api.products import router as products_router
from product_lookup.domain.exceptions import PoolUninitialized
from product_lookup.infrastructure.config import Settings, settings as default_settings
from product_lookup.infrastructure.database import ConnectionPool
from product_lookup.infrastructure.logging_setup import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Startup creates the connection pool and verifies connectivity with
    bounded retries. If the database never answers the pool is closed
    and startup fails, which stops the server with a non-zero status.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    settings: Settings = app.state.settings

    # Startup
    logger.info(
        "Starting product lookup API",
        version=settings.api_version,
        environment=settings.environment,
        diagnostics=settings.diagnostics_enabled,
    )

    pool = ConnectionPool.from_settings(settings)
    await pool.initialize()

    ready = await pool.wait_until_ready(
        attempts=settings.startup_check_attempts,
        timeout=settings.startup_check_timeout,
        backoff=settings.startup_check_backoff,
    )
    if not ready:
        await pool.shutdown()
        raise PoolUninitialized(
            f"Database unreachable after {settings.startup_check_attempts} attempts"
        )

    app.state.pool = pool
    app.state.started_at = time.monotonic()

    yield

    # Shutdown
    logger.info("Shutting down product lookup API")
    app.state.pool = None
    await pool.shutdown()


# ============================================================================
# Application Factory
# ============================================================================


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    The diagnostic raw-SQL router is decided here, once, from settings.

    Args:
        settings: Settings to use; defaults to the environment settings.

    Returns:
        Configured application; the pool is created by its lifespan.
    """
    settings = settings or default_settings
    configure_logging(settings)

    app = FastAPI(
        title="Product Lookup API",
        description="Read-only lookup over the ERP product catalog",
        version=settings.api_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.pool = None

    # CORS middleware (must be added before custom middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_middleware(app, settings)
    register_exception_handlers(app, settings)

    app.include_router(health_router, tags=["Health"])
    app.include_router(products_router)

    if settings.diagnostics_enabled:
        logger.warning("Diagnostic query endpoint enabled", path="/api/query")
        app.include_router(diagnostics_router)

    return app


app = create_app()
