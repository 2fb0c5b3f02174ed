"""
Similarity scorer for preference vectors.

Scores two vectors as a percentage built from per-component distances:

    distance_i = |a_i - b_i|
    weighted_i = distance_i * 0.5   if distance_i <= 2   (weighted strategy)
                 distance_i * 1.5   if distance_i > 2
                 distance_i                              (naive strategy)
    score      = (1 - sum(weighted_i) / (components * 5)) * 100

The normalizer is the unweighted maximum distance for both strategies, so the
weighted strategy can leave [0, 100] when many components differ by more
than 2. That behaviour is kept as is.

Distances are taken exactly in decimal and rounded to the component
precision before weighting. Halves round away from zero, as SQL ROUND does,
so a distance of 2.5 at precision 0 becomes 3 here and in the SQL rendition
in queries.matching alike. With inputs carrying at most one decimal, every
score is an exact multiple of 0.2.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from ..core.errors import InvalidArgumentError
from ..core.models import Match, round_half_up, to_decimal
from ..core.types import (
    DEFAULT_COMPONENT_PRECISION,
    DEFAULT_SCORE_PRECISION,
    LARGE_DISTANCE_WEIGHT,
    MAX_COMPONENT_VALUE,
    SMALL_DISTANCE_WEIGHT,
    WEIGHT_THRESHOLD,
    ScoringStrategy,
)


def component_distance(x: float, y: float, precision: int) -> float:
    """Absolute difference of two components, rounded half away from zero."""
    return round_half_up(abs(to_decimal(x) - to_decimal(y)), precision)


def weigh_distance(distance: float, strategy: ScoringStrategy) -> float:
    """Apply the strategy's weighting to a single component distance."""
    if strategy is ScoringStrategy.naive:
        return distance
    if distance <= WEIGHT_THRESHOLD:
        return distance * SMALL_DISTANCE_WEIGHT
    return distance * LARGE_DISTANCE_WEIGHT


def score(
    a: Sequence[float],
    b: Sequence[float],
    strategy: ScoringStrategy = ScoringStrategy.weighted,
    *,
    component_precision: int = DEFAULT_COMPONENT_PRECISION,
    score_precision: int = DEFAULT_SCORE_PRECISION,
) -> float:
    """
    Compute the similarity score between two preference vectors.

    Args:
        a: First vector (PreferenceVector or any sequence of numbers)
        b: Second vector, same dimensionality as ``a``
        strategy: Naive (linear) or weighted (tiered) distance policy
        component_precision: Decimal places distances are rounded to
        score_precision: Decimal places of the returned score

    Returns:
        Similarity percentage; 100.0 for identical vectors

    Raises:
        InvalidArgumentError: If the vectors differ in dimensionality or are empty
    """
    a_values = tuple(a)
    b_values = tuple(b)

    if len(a_values) != len(b_values):
        raise InvalidArgumentError(
            f"Cannot score vectors of different dimensionality "
            f"({len(a_values)} vs {len(b_values)})"
        )
    if not a_values:
        raise InvalidArgumentError("Cannot score empty vectors")

    strategy = ScoringStrategy(strategy)
    max_total_distance = len(a_values) * MAX_COMPONENT_VALUE

    total = sum(
        weigh_distance(component_distance(x, y, component_precision), strategy)
        for x, y in zip(a_values, b_values)
    )

    return round_half_up((1 - total / max_total_distance) * 100, score_precision)


class SimilarityScorer:
    """
    Scores preference vectors with a fixed precision configuration.

    The ranker holds one of these so that every candidate in a ranking is
    scored with the same precision settings.
    """

    def __init__(
        self,
        component_precision: int = DEFAULT_COMPONENT_PRECISION,
        score_precision: int = DEFAULT_SCORE_PRECISION,
    ):
        self.component_precision = component_precision
        self.score_precision = score_precision

    def score(
        self,
        a: Sequence[float],
        b: Sequence[float],
        strategy: ScoringStrategy = ScoringStrategy.weighted,
    ) -> float:
        return score(
            a,
            b,
            strategy,
            component_precision=self.component_precision,
            score_precision=self.score_precision,
        )

    def score_candidates(
        self,
        reference: Sequence[float],
        candidates: Iterable[tuple[int, Sequence[float]]],
        strategy: ScoringStrategy = ScoringStrategy.weighted,
    ) -> list[Match]:
        """
        Score every candidate against one reference vector.

        Args:
            reference: Reference vector
            candidates: (entity_id, vector) pairs
            strategy: Scoring strategy

        Returns:
            Unsorted list of Match, one per candidate
        """
        reference_values = tuple(reference)
        return [
            Match(entity_id=entity_id, score=self.score(reference_values, vector, strategy))
            for entity_id, vector in candidates
        ]
