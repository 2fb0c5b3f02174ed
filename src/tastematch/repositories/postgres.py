"""
PostgreSQL vector store.

Provides the PostgreSQL implementation of VectorStore. Components are stored
as NUMERIC(2,1) so the push-down statement computes distances and weights in
exact decimal arithmetic.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterable, Iterator, Optional

import psycopg
from psycopg import errors as pg_errors

from ..core.config import get_settings
from ..core.errors import InvalidArgumentError, MissingDataError, StorageTimeoutError
from ..core.models import Match, PreferenceVector, round_half_up
from ..core.types import COMPONENT_NAMES, ENTITIES_TABLE, VECTORS_TABLE, ScoringStrategy
from ..queries.matching import POSTGRES, build_ranked_scores_query, ranked_scores_params
from .base import VectorStore

if TYPE_CHECKING:
    from ..pg_connection import PostgresDB

logger = logging.getLogger(__name__)

_COLUMNS = ", ".join(COMPONENT_NAMES)
_PLACEHOLDERS = ", ".join("%s" for _ in COMPONENT_NAMES)
_ASSIGNMENTS = ", ".join(f"{name} = %s" for name in COMPONENT_NAMES)


class PostgresVectorStore(VectorStore):
    """PostgreSQL implementation of the preference vector store."""

    def __init__(
        self,
        db: "PostgresDB",
        *,
        component_precision: Optional[int] = None,
        score_precision: Optional[int] = None,
        query_timeout_ms: Optional[int] = None,
        validate_components: Optional[bool] = None,
    ):
        settings = get_settings()
        self.db = db
        self.component_precision = (
            settings.component_precision if component_precision is None else component_precision
        )
        self.score_precision = (
            settings.score_precision if score_precision is None else score_precision
        )
        self.query_timeout_ms = (
            settings.query_timeout_ms if query_timeout_ms is None else query_timeout_ms
        )
        self.validate_components = (
            settings.validate_components if validate_components is None else validate_components
        )

    @contextmanager
    def _bounded(self, operation: str) -> Iterator[psycopg.Cursor]:
        """Run a bulk read in its own transaction under statement_timeout."""
        try:
            with self.db.bounded(self.query_timeout_ms) as cur:
                yield cur
        except pg_errors.QueryCanceled as e:
            logger.warning("%s exceeded %d ms", operation, self.query_timeout_ms)
            raise StorageTimeoutError(
                f"{operation} exceeded {self.query_timeout_ms} ms",
                timeout_ms=self.query_timeout_ms,
            ) from e

    # =========================================================================
    # Reads
    # =========================================================================

    def get_vector(self, entity_id: int) -> PreferenceVector | None:
        row = self.db.fetchone(
            f"SELECT {_COLUMNS} FROM {VECTORS_TABLE} WHERE entity_id = %s",
            (entity_id,),
        )
        return PreferenceVector.from_row(row) if row else None

    def get_all_vectors(self) -> list[tuple[int, PreferenceVector]]:
        with self._bounded("get_all_vectors") as cur:
            cur.execute(
                f"SELECT entity_id, {_COLUMNS} FROM {VECTORS_TABLE} ORDER BY entity_id"
            )
            rows = cur.fetchall()
        return [(row["entity_id"], PreferenceVector.from_row(row)) for row in rows]

    def compute_ranked_scores(
        self,
        reference_id: int,
        n: int,
        scoring: ScoringStrategy = ScoringStrategy.weighted,
    ) -> list[Match]:
        if n <= 0:
            raise InvalidArgumentError(f"n must be positive, got {n}")

        query = build_ranked_scores_query(scoring, POSTGRES)
        params = ranked_scores_params(
            reference_id, n, self.component_precision, self.score_precision
        )

        with self._bounded("compute_ranked_scores") as cur:
            cur.execute(query, params)
            rows = cur.fetchall()

        return [
            Match(
                entity_id=row["entity_id"],
                score=round_half_up(row["score"], self.score_precision),
            )
            for row in rows
        ]

    # =========================================================================
    # Writes
    # =========================================================================

    def add_entity(self, email: str, vector: PreferenceVector) -> int:
        vector = self.prepare_vector(vector)
        try:
            with self.db.transaction() as cur:
                cur.execute(
                    f"INSERT INTO {ENTITIES_TABLE} (email) VALUES (%s) RETURNING id",
                    (email,),
                )
                entity_id = cur.fetchone()["id"]
                cur.execute(
                    f"INSERT INTO {VECTORS_TABLE} (entity_id, {_COLUMNS}) VALUES (%s, {_PLACEHOLDERS})",
                    (entity_id, *vector.values),
                )
        except pg_errors.UniqueViolation as e:
            raise InvalidArgumentError(f"Entity with email {email} already exists") from e
        return entity_id

    def add_entities(self, rows: Iterable[tuple[str, PreferenceVector]]) -> int:
        rows = [(email, self.prepare_vector(vector)) for email, vector in rows]
        if not rows:
            return 0

        try:
            with self.db.transaction() as cur:
                cur.executemany(
                    f"INSERT INTO {ENTITIES_TABLE} (email) VALUES (%s)",
                    [(email,) for email, _ in rows],
                )
                cur.executemany(
                    f"""
                    INSERT INTO {VECTORS_TABLE} (entity_id, {_COLUMNS})
                    SELECT id, {_PLACEHOLDERS} FROM {ENTITIES_TABLE} WHERE email = %s
                    """,
                    [(*vector.values, email) for email, vector in rows],
                )
        except pg_errors.UniqueViolation as e:
            raise InvalidArgumentError(f"Batch contains an existing email: {e}") from e
        return len(rows)

    def update_vector(self, entity_id: int, vector: PreferenceVector) -> None:
        vector = self.prepare_vector(vector)
        with self.db.transaction() as cur:
            cur.execute(
                f"""
                UPDATE {VECTORS_TABLE}
                SET {_ASSIGNMENTS}, updated_at = NOW()
                WHERE entity_id = %s
                """,
                (*vector.values, entity_id),
            )
            if cur.rowcount == 0:
                raise MissingDataError(entity_id)

    def delete_entity(self, entity_id: int) -> bool:
        with self.db.transaction() as cur:
            cur.execute(f"DELETE FROM {ENTITIES_TABLE} WHERE id = %s", (entity_id,))
            return cur.rowcount > 0

    def clear(self) -> None:
        self.db.execute(f"TRUNCATE {ENTITIES_TABLE} RESTART IDENTITY CASCADE")

    def count(self) -> int:
        result = self.db.fetchone(f"SELECT COUNT(*) AS count FROM {VECTORS_TABLE}")
        return result["count"] if result else 0

    def max_entity_id(self) -> int:
        result = self.db.fetchone(f"SELECT COALESCE(MAX(id), 0) AS max_id FROM {ENTITIES_TABLE}")
        return result["max_id"] if result else 0
