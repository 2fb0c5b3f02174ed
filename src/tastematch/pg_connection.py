"""
PostgreSQL connection manager.

Provides the same interface as TasteDB but using PostgreSQL via psycopg3,
with connection pooling for concurrent ranking requests.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from .core.config import get_settings


class PostgresDB:
    """
    PostgreSQL database connection manager.

    Every call checks a connection out of the pool, so one instance can be
    shared by concurrent requests.
    """

    dialect = "postgres"

    def __init__(
        self,
        connection_string: Optional[str] = None,
        min_pool_size: int = 1,
        max_pool_size: Optional[int] = None,
        pool_timeout: Optional[float] = None,
    ):
        """
        Initialize the PostgreSQL connection manager.

        Args:
            connection_string: PostgreSQL connection URL. Defaults to the DATABASE_URL setting.
            min_pool_size: Minimum connections to keep in pool.
            max_pool_size: Maximum connections in pool. Defaults to DATABASE_POOL_SIZE.
            pool_timeout: Seconds to wait for a free connection. Defaults to DATABASE_POOL_TIMEOUT.
        """
        settings = get_settings()
        self.connection_string = connection_string or settings.database_url
        if not self.connection_string:
            raise ValueError(
                "DATABASE_URL environment variable required or connection_string must be provided"
            )

        self._max_pool_size = max_pool_size or settings.database_pool_size
        self._min_pool_size = min(min_pool_size, self._max_pool_size)

        self._pool = ConnectionPool(
            self.connection_string,
            min_size=self._min_pool_size,
            max_size=self._max_pool_size,
            timeout=pool_timeout or settings.database_pool_timeout,
            kwargs={"row_factory": dict_row},
            open=True,
        )

    @contextmanager
    def get_connection(self) -> Iterator[psycopg.Connection]:
        """Get a connection from the pool."""
        with self._pool.connection() as conn:
            yield conn

    @contextmanager
    def transaction(self) -> Iterator[psycopg.Cursor]:
        """
        Execute queries within a transaction.

        Automatically commits on success, rolls back on failure.
        """
        with self.get_connection() as conn:
            with conn.transaction():
                with conn.cursor() as cur:
                    yield cur

    @contextmanager
    def bounded(self, timeout_ms: int) -> Iterator[psycopg.Cursor]:
        """
        Open a transaction whose statements are cancelled after ``timeout_ms``.

        A cancelled statement raises psycopg.errors.QueryCanceled.
        A timeout of 0 disables the bound.
        """
        with self.transaction() as cur:
            if timeout_ms > 0:
                cur.execute(
                    "SELECT set_config('statement_timeout', %s, true)",
                    (str(timeout_ms),),
                )
            yield cur

    def execute(self, query: str, params: Any = ()) -> None:
        """Execute a single query without returning results."""
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
            conn.commit()

    def executescript(self, sql: str) -> None:
        """Execute a SQL script (multiple statements)."""
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(sql)
            conn.commit()

    def fetchone(self, query: str, params: Any = ()) -> Optional[dict[str, Any]]:
        """Execute a query and fetch one result as a dict."""
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                row = cur.fetchone()
                return dict(row) if row else None

    def fetchall(self, query: str, params: Any = ()) -> list[dict[str, Any]]:
        """Execute a query and fetch all results as dicts."""
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                return [dict(row) for row in cur.fetchall()]

    def close(self) -> None:
        """Close the connection pool."""
        self._pool.close()

    def is_initialized(self) -> bool:
        """Check if the database has been initialized with schema."""
        result = self.fetchone(
            "SELECT EXISTS(SELECT 1 FROM information_schema.tables WHERE table_name = 'meta') as exists"
        )
        return result["exists"] if result else False

    # =========================================================================
    # Metadata
    # =========================================================================

    def get_meta(self, key: str) -> Optional[str]:
        """Get a metadata value."""
        result = self.fetchone("SELECT value FROM meta WHERE key = %s", (key,))
        return result["value"] if result else None

    def set_meta(self, key: str, value: str) -> None:
        """Set a metadata value."""
        self.execute(
            """
            INSERT INTO meta (key, value, updated_at)
            VALUES (%s, %s, NOW())
            ON CONFLICT(key) DO UPDATE SET value = EXCLUDED.value, updated_at = NOW()
            """,
            (key, value),
        )


# =========================================================================
# Database Factory - Choose between SQLite and PostgreSQL
# =========================================================================

_db: Optional[Any] = None


def get_db(use_postgres: Optional[bool] = None) -> Any:
    """
    Get the global database instance based on configuration.

    Args:
        use_postgres: Force PostgreSQL if True, SQLite if False.
                     If None, PostgreSQL is used when DATABASE_URL is set.

    Returns:
        Database instance (PostgresDB or TasteDB)
    """
    global _db

    if _db is None:
        if use_postgres is None:
            use_postgres = get_settings().use_postgres

        if use_postgres:
            _db = PostgresDB()
        else:
            from .connection import TasteDB

            _db = TasteDB()

    return _db


def close_db() -> None:
    """Close the global database connection."""
    global _db
    if _db is not None:
        _db.close()
        _db = None
