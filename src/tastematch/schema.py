"""
Database schema management for the taste database.

Creates the entity and preference vector tables for either backend and
tracks the schema version in the meta table.
"""

from __future__ import annotations

import logging
from typing import Any

from .core.types import (
    COMPONENT_NAMES,
    ENTITIES_TABLE,
    MAX_COMPONENT_VALUE,
    META_TABLE,
    MIN_COMPONENT_VALUE,
    VECTORS_TABLE,
)

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1"


def _component_columns(column_type: str) -> str:
    return ",\n    ".join(
        f"{name} {column_type} NOT NULL "
        f"CHECK ({name} BETWEEN {MIN_COMPONENT_VALUE} AND {MAX_COMPONENT_VALUE})"
        for name in COMPONENT_NAMES
    )


SQLITE_SCHEMA = f"""
CREATE TABLE IF NOT EXISTS {META_TABLE} (
    key TEXT PRIMARY KEY,
    value TEXT,
    updated_at INTEGER
);

CREATE TABLE IF NOT EXISTS {ENTITIES_TABLE} (
    id INTEGER PRIMARY KEY,
    email TEXT NOT NULL UNIQUE,
    created_at INTEGER NOT NULL DEFAULT (strftime('%s', 'now'))
);

CREATE TABLE IF NOT EXISTS {VECTORS_TABLE} (
    entity_id INTEGER PRIMARY KEY REFERENCES {ENTITIES_TABLE}(id) ON DELETE CASCADE,
    {_component_columns("REAL")},
    updated_at INTEGER NOT NULL DEFAULT (strftime('%s', 'now'))
);
"""

# NUMERIC(2,1) holds both the integer and the one-decimal variants exactly.
POSTGRES_SCHEMA = f"""
CREATE TABLE IF NOT EXISTS {META_TABLE} (
    key TEXT PRIMARY KEY,
    value TEXT,
    updated_at TIMESTAMPTZ
);

CREATE TABLE IF NOT EXISTS {ENTITIES_TABLE} (
    id BIGINT GENERATED BY DEFAULT AS IDENTITY PRIMARY KEY,
    email TEXT NOT NULL UNIQUE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS {VECTORS_TABLE} (
    entity_id BIGINT PRIMARY KEY REFERENCES {ENTITIES_TABLE}(id) ON DELETE CASCADE,
    {_component_columns("NUMERIC(2, 1)")},
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""


def init_schema(db: Any) -> None:
    """
    Create all tables if they do not exist and record the schema version.

    Args:
        db: TasteDB or PostgresDB (must be writable)
    """
    if getattr(db, "read_only", False):
        raise RuntimeError("Cannot initialize database in read-only mode")

    script = POSTGRES_SCHEMA if db.dialect == "postgres" else SQLITE_SCHEMA

    logger.info("Initializing %s schema", db.dialect)
    db.executescript(script)
    db.set_meta("schema_version", SCHEMA_VERSION)
    logger.info("Schema version %s ready", SCHEMA_VERSION)


def get_schema_version(db: Any) -> str:
    """Get the current schema version."""
    if not db.is_initialized():
        return "0"

    return db.get_meta("schema_version") or "unknown"


def get_table_counts(db: Any) -> dict[str, int]:
    """Get row counts for the entity and vector tables."""
    counts = {}
    for table in (ENTITIES_TABLE, VECTORS_TABLE):
        result = db.fetchone(f"SELECT COUNT(*) AS count FROM {table}")
        counts[table] = result["count"] if result else 0
    return counts
