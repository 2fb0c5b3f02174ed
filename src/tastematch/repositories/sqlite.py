"""
SQLite vector store.

Local-first implementation of VectorStore on top of TasteDB. Push-down
ranking runs the shared set-based statement from queries.matching.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterable, Iterator, Optional

from ..core.config import get_settings
from ..core.errors import InvalidArgumentError, MissingDataError, StorageTimeoutError
from ..core.models import Match, PreferenceVector, round_half_up
from ..core.types import COMPONENT_NAMES, ENTITIES_TABLE, VECTORS_TABLE, ScoringStrategy
from ..queries.matching import SQLITE, build_ranked_scores_query, ranked_scores_params
from .base import VectorStore

if TYPE_CHECKING:
    from ..connection import TasteDB

logger = logging.getLogger(__name__)

_COLUMNS = ", ".join(COMPONENT_NAMES)
_PLACEHOLDERS = ", ".join("?" for _ in COMPONENT_NAMES)
_ASSIGNMENTS = ", ".join(f"{name} = ?" for name in COMPONENT_NAMES)


class SqliteVectorStore(VectorStore):
    """SQLite implementation of the preference vector store."""

    def __init__(
        self,
        db: "TasteDB",
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
    def _bounded(self, operation: str) -> Iterator[None]:
        """Run a bulk read under the query deadline."""
        try:
            with self.db.deadline(self.query_timeout_ms):
                yield
        except sqlite3.OperationalError as e:
            if "interrupted" not in str(e):
                raise
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
            f"SELECT {_COLUMNS} FROM {VECTORS_TABLE} WHERE entity_id = ?",
            (entity_id,),
        )
        return PreferenceVector.from_row(row) if row else None

    def get_all_vectors(self) -> list[tuple[int, PreferenceVector]]:
        with self._bounded("get_all_vectors"):
            rows = self.db.fetchall(
                f"SELECT entity_id, {_COLUMNS} FROM {VECTORS_TABLE} ORDER BY entity_id"
            )
        return [(row["entity_id"], PreferenceVector.from_row(row)) for row in rows]

    def compute_ranked_scores(
        self,
        reference_id: int,
        n: int,
        scoring: ScoringStrategy = ScoringStrategy.weighted,
    ) -> list[Match]:
        # SQLite treats a negative LIMIT as "no limit"
        if n <= 0:
            raise InvalidArgumentError(f"n must be positive, got {n}")

        query = build_ranked_scores_query(scoring, SQLITE)
        params = ranked_scores_params(
            reference_id, n, self.component_precision, self.score_precision
        )

        with self._bounded("compute_ranked_scores"):
            rows = self.db.fetchall(query, params)

        # REAL round-trips can be off by one ulp; snap back onto the decimal grid
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
                cur.execute(f"INSERT INTO {ENTITIES_TABLE} (email) VALUES (?)", (email,))
                entity_id = cur.lastrowid
                cur.execute(
                    f"INSERT INTO {VECTORS_TABLE} (entity_id, {_COLUMNS}) VALUES (?, {_PLACEHOLDERS})",
                    (entity_id, *vector.values),
                )
        except sqlite3.IntegrityError as e:
            if "UNIQUE" not in str(e):
                raise
            raise InvalidArgumentError(f"Entity with email {email} already exists") from e
        return entity_id

    def add_entities(self, rows: Iterable[tuple[str, PreferenceVector]]) -> int:
        rows = [(email, self.prepare_vector(vector)) for email, vector in rows]
        if not rows:
            return 0

        try:
            with self.db.transaction() as cur:
                cur.executemany(
                    f"INSERT INTO {ENTITIES_TABLE} (email) VALUES (?)",
                    [(email,) for email, _ in rows],
                )
                cur.executemany(
                    f"""
                    INSERT INTO {VECTORS_TABLE} (entity_id, {_COLUMNS})
                    SELECT id, {_PLACEHOLDERS} FROM {ENTITIES_TABLE} WHERE email = ?
                    """,
                    [(*vector.values, email) for email, vector in rows],
                )
        except sqlite3.IntegrityError as e:
            if "UNIQUE" not in str(e):
                raise
            raise InvalidArgumentError(f"Batch contains an existing email: {e}") from e
        return len(rows)

    def update_vector(self, entity_id: int, vector: PreferenceVector) -> None:
        vector = self.prepare_vector(vector)
        with self.db.transaction() as cur:
            cur.execute(
                f"""
                UPDATE {VECTORS_TABLE}
                SET {_ASSIGNMENTS}, updated_at = strftime('%s', 'now')
                WHERE entity_id = ?
                """,
                (*vector.values, entity_id),
            )
            if cur.rowcount == 0:
                raise MissingDataError(entity_id)

    def delete_entity(self, entity_id: int) -> bool:
        with self.db.transaction() as cur:
            cur.execute(f"DELETE FROM {ENTITIES_TABLE} WHERE id = ?", (entity_id,))
            return cur.rowcount > 0

    def clear(self) -> None:
        self.db.execute(f"DELETE FROM {ENTITIES_TABLE}")

    def count(self) -> int:
        result = self.db.fetchone(f"SELECT COUNT(*) AS count FROM {VECTORS_TABLE}")
        return result["count"] if result else 0

    def max_entity_id(self) -> int:
        result = self.db.fetchone(f"SELECT COALESCE(MAX(id), 0) AS max_id FROM {ENTITIES_TABLE}")
        return result["max_id"] if result else 0
