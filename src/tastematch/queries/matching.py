"""
SQL builder for set-based match scoring.

Renders the scorer's formula as a single statement so the database scores
every candidate in one pass and returns only (entity_id, score) rows:

    WITH reference  -> the reference entity's vector
         distances  -> |reference - candidate| per component, snapped to the
                       stored grid, then rounded half away from zero
         weighted   -> tiered weights (or pass-through for naive scoring)
    SELECT entity_id, ROUND((1 - total / max_total) * 100, precision)

All values, including the policy constants, are bound as named parameters.
Column names come from COMPONENT_NAMES only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from ..core.types import (
    COMPONENT_NAMES,
    LARGE_DISTANCE_WEIGHT,
    MAX_COMPONENT_VALUE,
    SMALL_DISTANCE_WEIGHT,
    STORED_PRECISION,
    VECTORS_TABLE,
    WEIGHT_THRESHOLD,
    ScoringStrategy,
)


@dataclass(frozen=True)
class Dialect:
    """Placeholder style and type names for one SQL backend."""

    param: Callable[[str], str]
    numeric_type: str
    float_type: str


SQLITE = Dialect(
    param=lambda key: f":{key}",
    numeric_type="REAL",
    float_type="REAL",
)

# NUMERIC keeps PostgreSQL arithmetic exact on NUMERIC(2,1) columns.
POSTGRES = Dialect(
    param=lambda key: f"%({key})s",
    numeric_type="NUMERIC",
    float_type="DOUBLE PRECISION",
)


def _distance_column(name: str, dialect: Dialect) -> str:
    # REAL subtraction can land just off the stored grid; the inner ROUND
    # puts it back before halves are rounded.
    p = dialect.param
    return (
        f"ROUND(ROUND(ABS(r.{name} - c.{name}), CAST({p('stored_precision')} AS INTEGER)), "
        f"CAST({p('component_precision')} AS INTEGER)) AS d_{name}"
    )


def _weighted_column(name: str, strategy: ScoringStrategy, dialect: Dialect) -> str:
    if strategy is ScoringStrategy.naive:
        return f"d_{name} AS w_{name}"

    p = dialect.param
    num = dialect.numeric_type
    return (
        f"CASE WHEN d_{name} <= CAST({p('threshold')} AS {num}) "
        f"THEN d_{name} * CAST({p('small_weight')} AS {num}) "
        f"ELSE d_{name} * CAST({p('large_weight')} AS {num}) END AS w_{name}"
    )


def build_ranked_scores_query(
    strategy: ScoringStrategy,
    dialect: Dialect,
    table: str = VECTORS_TABLE,
) -> str:
    """
    Build the push-down ranking statement for a scoring strategy.

    Args:
        strategy: Scoring strategy to render
        dialect: Target SQL backend
        table: Preference vector table

    Returns:
        SQL text expecting the parameters from ranked_scores_params()
    """
    strategy = ScoringStrategy(strategy)
    p = dialect.param
    num = dialect.numeric_type

    reference_columns = ", ".join(COMPONENT_NAMES)
    distance_columns = ",\n                ".join(
        _distance_column(name, dialect) for name in COMPONENT_NAMES
    )
    weighted_columns = ",\n                ".join(
        _weighted_column(name, strategy, dialect) for name in COMPONENT_NAMES
    )
    total = " + ".join(f"w_{name}" for name in COMPONENT_NAMES)

    return f"""
        WITH reference AS (
            SELECT entity_id, {reference_columns}
            FROM {table}
            WHERE entity_id = {p('reference_id')}
        ),
        distances AS (
            SELECT
                c.entity_id,
                {distance_columns}
            FROM reference r
            JOIN {table} c ON c.entity_id <> r.entity_id
        ),
        weighted AS (
            SELECT
                entity_id,
                {weighted_columns}
            FROM distances
        )
        SELECT
            entity_id,
            CAST(ROUND(
                (1 - ({total}) / CAST({p('max_total')} AS {num})) * 100,
                CAST({p('score_precision')} AS INTEGER)
            ) AS {dialect.float_type}) AS score
        FROM weighted
        ORDER BY score DESC, entity_id ASC
        LIMIT {p('limit')}
    """


def ranked_scores_params(
    reference_id: int,
    limit: int,
    component_precision: int,
    score_precision: int,
) -> dict[str, Any]:
    """Bind values for build_ranked_scores_query()."""
    return {
        "reference_id": reference_id,
        "limit": limit,
        "component_precision": component_precision,
        "stored_precision": STORED_PRECISION,
        "score_precision": score_precision,
        "threshold": WEIGHT_THRESHOLD,
        "small_weight": SMALL_DISTANCE_WEIGHT,
        "large_weight": LARGE_DISTANCE_WEIGHT,
        "max_total": float(len(COMPONENT_NAMES) * MAX_COMPONENT_VALUE),
    }
