"""
PostgreSQL repository adapter - Implements SignupRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Concurrency Design - Insert-If-Absent:
--------------------------------------
The ``signups.email`` column carries a UNIQUE constraint. insert_if_absent()
uses ``INSERT ... ON CONFLICT (email) DO NOTHING RETURNING ...``, so when
several writers race on one email exactly one INSERT returns a row and the
others return nothing. This holds across any number of service instances.

Every write is a single statement committed on its own, so a submission is
either fully visible or not visible at all.

Timeouts:
---------
Pool checkout, connection establishment and statement execution are all
bounded by ``timeout_seconds``. Driver errors (including PoolTimeout and
QueryCanceled) are re-raised as the domain's StorageError, except data,
integrity and programming errors, which become PermanentStorageError.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

import psycopg
from psycopg_pool import ConnectionPool

from src.domain.exceptions import PermanentStorageError, StorageError
from src.domain.signup import Signup, SignupDraft, UseCase

logger = logging.getLogger(__name__)

_COLUMNS = "id, email, name, use_case, consent, submitted_at"

# Same statement, same failure: never worth a retry
_PERMANENT_ERRORS = (psycopg.DataError, psycopg.IntegrityError, psycopg.ProgrammingError)


class PostgresSignupRepository:
    """
    Implements SignupRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool, timeout_seconds: float = 3.0) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
            timeout_seconds: Maximum wait for a pooled connection
        """
        self._pool = pool
        self._timeout = timeout_seconds

    @contextmanager
    def _connection(self) -> Iterator[psycopg.Connection]:
        """Borrow a pooled connection, translating driver errors to StorageError."""
        try:
            with self._pool.connection(timeout=self._timeout) as conn:
                yield conn
        except _PERMANENT_ERRORS as e:
            raise PermanentStorageError(f"{type(e).__name__}: {e}") from e
        except psycopg.Error as e:
            raise StorageError(f"{type(e).__name__}: {e}") from e

    def find_by_email(self, email: str) -> Signup | None:
        sql = f"SELECT {_COLUMNS} FROM signups WHERE email = %s"

        with self._connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (email,))
            row = cursor.fetchone()
            conn.commit()
        return _row_to_signup(row) if row is not None else None

    def insert_if_absent(self, draft: SignupDraft, submitted_at: datetime) -> Signup | None:
        """
        Atomically insert a signup unless the email is already stored.

        The database generates ``id``. ``consent`` is written as TRUE
        unconditionally and a CHECK constraint rejects anything else.

        Returns:
            The inserted Signup, or None if the email already exists
        """
        sql = f"""
            INSERT INTO signups (email, name, use_case, consent, submitted_at)
            VALUES (%s, %s, %s, TRUE, %s)
            ON CONFLICT (email) DO NOTHING
            RETURNING {_COLUMNS}
        """
        use_case = draft.use_case.value if draft.use_case is not None else None

        with self._connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (draft.email, draft.name, use_case, submitted_at))
            row = cursor.fetchone()
            conn.commit()
        return _row_to_signup(row) if row is not None else None

    def update_by_email(
        self, email: str, name: str | None, use_case: UseCase | None
    ) -> Signup | None:
        """
        Update name/use_case; NULL parameters keep the stored value.

        Identity columns (id, email, submitted_at) are not in the SET list.
        """
        sql = f"""
            UPDATE signups
            SET name = COALESCE(%s, name),
                use_case = COALESCE(%s, use_case),
                updated_at = NOW()
            WHERE email = %s
            RETURNING {_COLUMNS}
        """
        use_case_value = use_case.value if use_case is not None else None

        with self._connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (name, use_case_value, email))
            row = cursor.fetchone()
            conn.commit()
        return _row_to_signup(row) if row is not None else None

    def ping(self) -> None:
        with self._connection() as conn:
            conn.execute("SELECT 1")


def _row_to_signup(row: tuple) -> Signup:
    return Signup(
        id=str(row[0]),
        email=row[1],
        name=row[2],
        use_case=UseCase(row[3]) if row[3] is not None else None,
        consent=row[4],
        submitted_at=row[5],
    )


def create_pool(
    database_url: str, min_size: int, max_size: int, timeout_seconds: float
) -> ConnectionPool:
    """
    Create a connection pool whose connections enforce the store timeout.

    ``statement_timeout`` makes the server cancel long-running statements,
    so no request waits on the database indefinitely.
    """
    return ConnectionPool(
        conninfo=database_url,
        min_size=min_size,
        max_size=max_size,
        timeout=timeout_seconds,
        open=True,
        kwargs={
            "connect_timeout": max(1, int(timeout_seconds)),
            "options": f"-c statement_timeout={int(timeout_seconds * 1000)}",
        },
    )


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)
                conn.commit()

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
