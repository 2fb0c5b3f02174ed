"""
SQLite connection manager for the local taste database.

Provides a unified interface for database operations with support for
both read-only and read-write modes, plus a deadline helper that bounds
long-running statements.
"""

from __future__ import annotations

import sqlite3
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional

from .core.config import get_settings

# Number of SQLite virtual machine instructions between deadline checks
PROGRESS_HANDLER_STEPS = 1000


class TasteDB:
    """
    SQLite database connection manager.

    Holds a single connection shared across threads; a re-entrant lock
    serializes statement execution on it.
    """

    dialect = "sqlite"

    def __init__(
        self,
        db_path: Optional[Path] = None,
        read_only: bool = False,
    ):
        """
        Initialize the database connection manager.

        Args:
            db_path: Path to the SQLite database file. Defaults to the SQLITE_PATH setting.
            read_only: If True, opens database in read-only mode
        """
        self.db_path = Path(db_path) if db_path else get_settings().sqlite_path
        self.read_only = read_only
        self._connection: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()

    def _get_connection_uri(self) -> str:
        """Build the SQLite connection URI."""
        uri = f"file:{self.db_path}"
        if self.read_only:
            uri += "?mode=ro"
        return uri

    def _create_connection(self) -> sqlite3.Connection:
        """Create a new database connection."""
        # Ensure directory exists for write mode
        if not self.read_only:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(
            self._get_connection_uri(),
            uri=True,
            check_same_thread=False,
            isolation_level=None,  # Autocommit mode
        )

        # Deleting an entity removes its preference vector
        conn.execute("PRAGMA foreign_keys = ON")

        if not self.read_only:
            conn.execute("PRAGMA journal_mode = WAL")
        conn.execute("PRAGMA synchronous = NORMAL")

        # Return dicts instead of tuples
        conn.row_factory = sqlite3.Row

        return conn

    @property
    def connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._connection is None:
            self._connection = self._create_connection()
        return self._connection

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Cursor]:
        """
        Execute queries within a transaction.

        Automatically commits on success, rolls back on failure.
        """
        with self._lock:
            conn = self.connection
            cur = conn.cursor()
            try:
                cur.execute("BEGIN")
                yield cur
                cur.execute("COMMIT")
            except Exception:
                cur.execute("ROLLBACK")
                raise
            finally:
                cur.close()

    @contextmanager
    def deadline(self, timeout_ms: int) -> Iterator[None]:
        """
        Interrupt any statement still running after ``timeout_ms``.

        An interrupted statement raises sqlite3.OperationalError("interrupted").
        A timeout of 0 disables the bound.
        """
        if timeout_ms <= 0:
            yield
            return

        expires_at = time.monotonic() + timeout_ms / 1000

        def _check() -> int:
            return 1 if time.monotonic() > expires_at else 0

        with self._lock:
            self.connection.set_progress_handler(_check, PROGRESS_HANDLER_STEPS)
            try:
                yield
            finally:
                self.connection.set_progress_handler(None, PROGRESS_HANDLER_STEPS)

    def execute(self, query: str, params: Any = ()) -> None:
        """Execute a single query without returning results."""
        with self._lock:
            self.connection.execute(query, params)

    def executescript(self, sql: str) -> None:
        """Execute a SQL script (multiple statements)."""
        with self._lock:
            self.connection.executescript(sql)

    def fetchone(self, query: str, params: Any = ()) -> Optional[dict[str, Any]]:
        """Execute a query and fetch one result as a dict."""
        with self._lock:
            row = self.connection.execute(query, params).fetchone()
            return dict(row) if row else None

    def fetchall(self, query: str, params: Any = ()) -> list[dict[str, Any]]:
        """Execute a query and fetch all results as dicts."""
        with self._lock:
            rows = self.connection.execute(query, params).fetchall()
            return [dict(row) for row in rows]

    def exists(self) -> bool:
        """Check if the database file exists."""
        return self.db_path.exists()

    def is_initialized(self) -> bool:
        """Check if the database has been initialized with schema."""
        if not self.exists():
            return False

        result = self.fetchone(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='meta'"
        )
        return result is not None

    # =========================================================================
    # Metadata
    # =========================================================================

    def get_meta(self, key: str) -> Optional[str]:
        """Get a metadata value."""
        result = self.fetchone("SELECT value FROM meta WHERE key = ?", (key,))
        return result["value"] if result else None

    def set_meta(self, key: str, value: str) -> None:
        """Set a metadata value."""
        self.execute(
            """
            INSERT INTO meta (key, value, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
            """,
            (key, value, int(time.time())),
        )
