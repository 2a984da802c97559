"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory signup repository
- Registration service without retry delays
- Test client wired to the in-memory store
- PostgreSQL pool and repository (skipped when no database is reachable)
"""

from collections.abc import Generator

import psycopg
import pytest
from fastapi.testclient import TestClient
from psycopg_pool import ConnectionPool

from src.adapters.repository.memory import InMemorySignupRepository
from src.adapters.repository.postgres import PostgresSignupRepository, create_pool, run_migrations
from src.api.main import app
from src.config.settings import get_settings
from src.domain.registration import RegistrationService


@pytest.fixture
def repository() -> InMemorySignupRepository:
    """Fresh in-memory repository for each test."""
    return InMemorySignupRepository()


@pytest.fixture
def service(repository: InMemorySignupRepository) -> RegistrationService:
    """Registration service that never sleeps between retries."""
    return RegistrationService(repository=repository, sleep=lambda _: None)


@pytest.fixture
def client(repository: InMemorySignupRepository) -> Generator[TestClient, None, None]:
    """
    Test client for the full application backed by the in-memory store.

    The lifespan is not entered (no ``with`` block), so no database
    connection is attempted; the repository is placed on app.state directly.
    """
    app.state.repository = repository
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def pg_pool() -> Generator[ConnectionPool, None, None]:
    """
    Connection pool for the database in DATABASE_URL, with migrations applied.

    Tests using this fixture are skipped when the database is unreachable.
    """
    settings = get_settings()
    try:
        with psycopg.connect(settings.database_url, connect_timeout=2):
            pass
    except psycopg.OperationalError as e:
        pytest.skip(f"PostgreSQL not reachable: {e}")

    pool = create_pool(
        settings.database_url,
        min_size=1,
        max_size=25,
        timeout_seconds=settings.store_timeout_seconds,
    )
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def pg_repository(pg_pool: ConnectionPool) -> PostgresSignupRepository:
    """Postgres repository over an empty signups table."""
    with pg_pool.connection() as conn:
        conn.execute("DELETE FROM signups")
        conn.commit()
    return PostgresSignupRepository(pg_pool)
