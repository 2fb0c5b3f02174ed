"""
Matching service implementation.

Provides a clean interface over the Ranker with vector store binding,
used by the API and the CLI.
"""

import logging
from typing import Optional

from ..core.config import get_settings
from ..core.errors import MissingDataError
from ..core.models import Match, PreferenceVector
from ..core.types import RankingStrategy, ScoringStrategy
from ..ranking import Ranker
from ..repositories import VectorStore, get_vector_store

logger = logging.getLogger(__name__)


class MatchingService:
    """
    Taste matching service.

    Features:
    - Top-N matches through in-memory or push-down ranking
    - Pairwise score between two entities
    - Registration and profile updates
    """

    def __init__(self, store: VectorStore):
        """
        Initialize matching service.

        Args:
            store: Vector store holding the population
        """
        self._store = store
        self._ranker = Ranker(store)

    @property
    def store(self) -> VectorStore:
        return self._store

    @property
    def ranker(self) -> Ranker:
        return self._ranker

    def top_matches(
        self,
        entity_id: int,
        n: Optional[int] = None,
        strategy: Optional[RankingStrategy] = None,
        scoring: Optional[ScoringStrategy] = None,
    ) -> list[Match]:
        """
        Get the entities most similar to ``entity_id``.

        Unset arguments fall back to DEFAULT_TOP_N, DEFAULT_RANKING_STRATEGY
        and DEFAULT_SCORING_STRATEGY.
        """
        settings = get_settings()
        return self._ranker.top_matches(
            entity_id,
            n if n is not None else settings.default_top_n,
            strategy or settings.default_ranking_strategy,
            scoring or settings.default_scoring_strategy,
        )

    def score_pair(
        self,
        entity_id: int,
        other_id: int,
        scoring: Optional[ScoringStrategy] = None,
    ) -> float:
        """
        Score two entities against each other.

        Raises:
            MissingDataError: If either entity has no vector
        """
        first = self._store.get_vector(entity_id)
        if first is None:
            raise MissingDataError(entity_id)
        second = self._store.get_vector(other_id)
        if second is None:
            raise MissingDataError(other_id)

        return self._ranker.scorer.score(
            first, second, scoring or get_settings().default_scoring_strategy
        )

    def register(self, email: str, vector: PreferenceVector) -> int:
        """Create an entity with its taste profile and return its ID."""
        entity_id = self._store.add_entity(email, vector)
        logger.info("Registered entity %d", entity_id)
        return entity_id

    def update_profile(self, entity_id: int, vector: PreferenceVector) -> PreferenceVector:
        """
        Replace an entity's taste profile.

        Returns:
            The vector as stored, quantized to the store's precision

        Raises:
            MissingDataError: If the entity has no vector
        """
        self._store.update_vector(entity_id, vector)
        return self._store.prepare_vector(vector)

    def get_status(self) -> dict:
        """Get service status."""
        return {
            "service": "matching",
            "population": self._store.count(),
            "strategies": [strategy.value for strategy in RankingStrategy],
            "scoring": [scoring.value for scoring in ScoringStrategy],
            "methodology": {
                "algorithm": "Tiered absolute distance over five taste components",
                "tie_break": "Ascending entity id",
                "component_precision": self._store.component_precision,
                "score_precision": self._store.score_precision,
            },
        }


# Singleton instance with lazy store binding
_matching_service: MatchingService | None = None


def get_matching_service(db=None) -> MatchingService:
    """
    Get or create the matching service.

    Args:
        db: Database connection. Defaults to the configured global database.

    Returns:
        MatchingService instance
    """
    global _matching_service
    if _matching_service is None:
        if db is None:
            from ..pg_connection import get_db

            db = get_db()
        _matching_service = MatchingService(get_vector_store(db))
    return _matching_service


def reset_matching_service() -> None:
    """Drop the cached service (used at shutdown and in tests)."""
    global _matching_service
    _matching_service = None
