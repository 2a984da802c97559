"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures logging, the signup store and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from src.adapters.repository.memory import InMemorySignupRepository
from src.adapters.repository.postgres import PostgresSignupRepository, create_pool, run_migrations
from src.api.models import HealthResponse
from src.api.routes import router
from src.config.settings import get_settings
from src.domain.exceptions import StorageError

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "waitlist",
        "description": "Pre-launch waitlist - Join with an email and explicit consent",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the signup store selected by settings
    - For Postgres: opens the connection pool and runs migrations
    - Closes the connection pool on shutdown
    """
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    logger.info("Starting application...")
    pool = None

    if settings.store_backend == "memory":
        logger.warning("Using in-memory signup store; data is lost on restart")
        app.state.repository = InMemorySignupRepository()
    else:
        logger.info("Connecting to database...")
        pool = create_pool(
            settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
            timeout_seconds=settings.store_timeout_seconds,
        )

        logger.info("Running database migrations...")
        run_migrations(pool)

        app.state.repository = PostgresSignupRepository(
            pool, timeout_seconds=settings.store_timeout_seconds
        )

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


app = FastAPI(
    title="waitlist",
    description="Waitlist Signup API - Collects consented interest signups exactly once",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

app.include_router(router)


@app.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse | JSONResponse:
    """
    Readiness check with store validation.

    Returns 200 if the signup store answers, 503 otherwise.
    """
    repository = request.app.state.repository
    try:
        await run_in_threadpool(repository.ping)
    except StorageError as e:
        logger.error("Health check failed: %s", e)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy"},
        )
    return HealthResponse(status="healthy")
