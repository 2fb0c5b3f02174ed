"""
Pytest configuration for tastematch tests.

SQLite fixtures live on tmp_path, so the push-down SQL is exercised without
any external service. PostgreSQL tests opt in through ``postgres_url``.
"""

import os

import pytest

from tastematch.connection import TasteDB
from tastematch.core.models import make_vector
from tastematch.repositories.sqlite import SqliteVectorStore
from tastematch.schema import init_schema
from tastematch.seeders import seed_population


@pytest.fixture
def db(tmp_path):
    """Initialized SQLite database in a temporary directory."""
    database = TasteDB(db_path=tmp_path / "tastematch.sqlite")
    init_schema(database)
    yield database
    database.close()


@pytest.fixture
def store(db):
    """Empty SQLite vector store with default precision."""
    return SqliteVectorStore(db, component_precision=1, score_precision=1, query_timeout_ms=0)


@pytest.fixture
def small_store(store):
    """
    Store with five hand-picked entities (ids 1-5).

    Against entity 1, entities 2 and 3 tie under both scoring strategies.
    """
    for index, values in enumerate(
        [
            [3, 2, 1, 5, 4],
            [1, 4, 3, 4, 5],
            [5, 0, 3, 4, 3],
            [3, 2, 1, 5, 3],
            [0, 0, 0, 0, 0],
        ],
        start=1,
    ):
        store.add_entity(f"email-{index}@taste.com", make_vector(values))
    return store


@pytest.fixture
def seeded_store(store):
    """Store with a reproducible population of 300 whole-number vectors."""
    seed_population(store, count=300, seed=7, precision=0)
    return store


@pytest.fixture(scope="session")
def postgres_url():
    """Get the PostgreSQL database URL."""
    url = os.environ.get("DATABASE_URL")
    if not url:
        pytest.skip("DATABASE_URL not set")
    return url
