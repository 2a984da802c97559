"""Repository adapters - Signup store implementations."""

from .memory import InMemorySignupRepository
from .postgres import PostgresSignupRepository, create_pool, run_migrations

__all__ = ["InMemorySignupRepository", "PostgresSignupRepository", "create_pool", "run_migrations"]
