"""
Repository abstraction layer.

Provides database-agnostic access to entities and their preference vectors,
allowing the ranker to run against SQLite or PostgreSQL unchanged.

Usage:
    from tastematch.repositories import get_vector_store

    store = get_vector_store(db)
    vector = store.get_vector(42)
    matches = store.compute_ranked_scores(42, n=10)
"""

from typing import Any

from .base import VectorStore

__all__ = [
    "VectorStore",
    "get_vector_store",
]


def get_vector_store(db: Any, **options: Any) -> VectorStore:
    """
    Get the vector store matching a database connection.

    Args:
        db: TasteDB or PostgresDB
        **options: Precision and timeout overrides passed to the store

    Returns:
        VectorStore implementation for the connection's dialect
    """
    if db.dialect == "postgres":
        from .postgres import PostgresVectorStore

        return PostgresVectorStore(db, **options)

    from .sqlite import SqliteVectorStore

    return SqliteVectorStore(db, **options)
