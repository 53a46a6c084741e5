"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures logging, routes, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from credential_registry.adapters.events.console import ConsoleEventSink
from credential_registry.adapters.repository.memory import InMemoryRegistryRepository
from credential_registry.adapters.repository.postgres import (
    PostgresRegistryRepository,
    run_migrations,
)
from credential_registry.api.v1 import router as v1_router
from credential_registry.config.settings import get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Credential Registry API v1 - Authorize issuers, issue, verify and revoke credentials",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Configures logging
    - Creates the configured repository (connection pool + migrations for PostgreSQL)
    - Closes connection pool on shutdown
    """
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    logger.info("Starting application...")

    pool = None
    if settings.storage_backend == "postgres":
        logger.info("Connecting to database...")

        # Create connection pool with explicit sizing
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )

        logger.info("Running database migrations...")
        run_migrations(pool)
        app.state.repository = PostgresRegistryRepository(pool)
    else:
        logger.info("Using in-memory registry storage")
        app.state.repository = InMemoryRegistryRepository()

    # Store adapters in app state for dependency injection
    app.state.pool = pool
    app.state.event_sink = ConsoleEventSink()

    logger.info("Application startup complete (admin: %s)", settings.admin_principal)

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


app = FastAPI(
    title="credential-registry",
    description="Credential Registry API - Records authorized issuers and the professional "
    "credentials they issue, and answers validity queries",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application (and database, when configured) are healthy.
    Raises exception if database connection fails.
    """
    pool = getattr(request.app.state, "pool", None)
    if pool is not None:
        with pool.connection() as conn:
            conn.execute("SELECT 1")

    return {"status": "healthy"}
