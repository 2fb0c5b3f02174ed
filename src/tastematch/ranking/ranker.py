"""
Top-N match ranking.

Ranks every other entity in the population against a reference entity
using one of two interchangeable strategies:

- in_memory: one read for the reference vector, one bulk read for all
  vectors, scoring in Python with SimilarityScorer
- push_down: one set-based statement that scores, orders and limits
  inside the database

Both strategies order by score descending and break ties by ascending
entity id, so they return identical sequences for the same population.
"""

from __future__ import annotations

import heapq
import logging
import time
from typing import Iterable, Optional, Sequence

from ..core.errors import InvalidArgumentError, MissingDataError
from ..core.models import Match
from ..core.types import RankingStrategy, ScoringStrategy
from ..repositories.base import VectorStore
from ..scoring.scorer import SimilarityScorer

logger = logging.getLogger(__name__)


def match_sort_key(match: Match) -> tuple[float, int]:
    """Score descending, then entity id ascending."""
    return (-match.score, match.entity_id)


def _check_limit(n: int) -> None:
    if isinstance(n, bool) or not isinstance(n, int):
        raise InvalidArgumentError(f"n must be an integer, got {n!r}")
    if n <= 0:
        raise InvalidArgumentError(f"n must be positive, got {n}")


def rank_candidates(
    reference_id: int,
    reference_vector: Sequence[float],
    candidates: Iterable[tuple[int, Sequence[float]]],
    n: int,
    scoring: ScoringStrategy = ScoringStrategy.weighted,
    scorer: Optional[SimilarityScorer] = None,
) -> list[Match]:
    """
    Score candidates against a reference vector and keep the best ``n``.

    Args:
        reference_id: Entity being matched; excluded from the result
        reference_vector: That entity's vector
        candidates: (entity_id, vector) pairs, may include the reference
        n: Number of matches to keep
        scoring: Scoring strategy
        scorer: Scorer carrying the precision configuration

    Returns:
        At most ``n`` matches, best first

    Raises:
        InvalidArgumentError: If n is not a positive integer
    """
    _check_limit(n)
    scorer = scorer or SimilarityScorer()

    others = ((entity_id, vector) for entity_id, vector in candidates if entity_id != reference_id)
    matches = scorer.score_candidates(reference_vector, others, ScoringStrategy(scoring))

    return heapq.nsmallest(n, matches, key=match_sort_key)


class Ranker:
    """
    Retrieves the top-N most similar entities for a reference entity.

    Holds no per-request state; one instance can serve concurrent requests
    as long as the store can.
    """

    def __init__(self, store: VectorStore, scorer: Optional[SimilarityScorer] = None):
        """
        Initialize the ranker.

        Args:
            store: Storage collaborator providing vectors and push-down scoring
            scorer: In-process scorer. Defaults to one using the store's precision.
        """
        self.store = store
        self.scorer = scorer or SimilarityScorer(
            component_precision=store.component_precision,
            score_precision=store.score_precision,
        )

    def top_matches(
        self,
        reference_id: int,
        n: int,
        strategy: RankingStrategy = RankingStrategy.in_memory,
        scoring: ScoringStrategy = ScoringStrategy.weighted,
    ) -> list[Match]:
        """
        Get the ``n`` entities most similar to ``reference_id``.

        Args:
            reference_id: Entity to match
            n: Maximum number of matches
            strategy: Where scoring runs (in_memory or push_down)
            scoring: Naive or weighted scoring

        Returns:
            ``min(n, population - 1)`` matches, best first, never including the reference

        Raises:
            InvalidArgumentError: If n is not a positive integer
            MissingDataError: If the reference entity has no vector
            StorageTimeoutError: If the bulk read exceeds the store's timeout
        """
        _check_limit(n)
        strategy = RankingStrategy(strategy)
        scoring = ScoringStrategy(scoring)

        started = time.perf_counter()
        if strategy is RankingStrategy.in_memory:
            matches = self._rank_in_memory(reference_id, n, scoring)
        else:
            matches = self._rank_push_down(reference_id, n, scoring)

        logger.debug(
            "Ranked %d matches for entity %s (%s, %s) in %.4fs",
            len(matches),
            reference_id,
            strategy.value,
            scoring.value,
            time.perf_counter() - started,
        )
        return matches

    def _rank_in_memory(
        self,
        reference_id: int,
        n: int,
        scoring: ScoringStrategy,
    ) -> list[Match]:
        reference = self.store.get_vector(reference_id)
        if reference is None:
            raise MissingDataError(reference_id)

        candidates = self.store.get_all_vectors()
        return rank_candidates(reference_id, reference, candidates, n, scoring, self.scorer)

    def _rank_push_down(
        self,
        reference_id: int,
        n: int,
        scoring: ScoringStrategy,
    ) -> list[Match]:
        matches = self.store.compute_ranked_scores(reference_id, n, scoring)

        # An empty result is ambiguous: no candidates, or no reference vector
        if not matches and not self.store.has_vector(reference_id):
            raise MissingDataError(reference_id)

        return sorted(matches, key=match_sort_key)[:n]
