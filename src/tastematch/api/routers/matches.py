"""
Matches router - serves taste matches for an entity.

Endpoints:
- GET /{entity_id} - Top-N most similar entities
- GET /{entity_id}/score/{other_id} - Score between two entities

Rankings are computed per request, either in process or pushed down to
the database, depending on the ``strategy`` query parameter.
"""

from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel

from ...core.config import get_settings
from ...core.types import RankingStrategy, ScoringStrategy
from ..dependencies import ServiceDependency

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================


class MatchResponse(BaseModel):
    """A matched entity with its score."""

    entity_id: int
    score: float
    label: str


class MatchesResponse(BaseModel):
    """Ranked matches for a reference entity."""

    entity_id: int
    strategy: RankingStrategy
    scoring: ScoringStrategy
    limit: int
    matches: list[MatchResponse]


class PairScoreResponse(BaseModel):
    """Score between two entities."""

    entity_id: int
    other_id: int
    scoring: ScoringStrategy
    score: float
    label: str


# =============================================================================
# Helper Functions
# =============================================================================


def get_match_label(score: float) -> str:
    """Convert a match percentage to a human-readable label."""
    if score >= 95:
        return "Nearly Identical"
    elif score >= 85:
        return "Very Similar"
    elif score >= 75:
        return "Similar"
    elif score >= 60:
        return "Somewhat Similar"
    elif score >= 40:
        return "Moderately Similar"
    else:
        return "Different"


# =============================================================================
# Endpoints
# =============================================================================


@router.get("/{entity_id}", response_model=MatchesResponse)
def get_matches(
    entity_id: int,
    service: ServiceDependency,
    limit: Annotated[
        int | None, Query(ge=1, le=100, description="Number of matches (defaults to DEFAULT_TOP_N)")
    ] = None,
    strategy: Annotated[
        RankingStrategy | None, Query(description="in_memory or push_down")
    ] = None,
    scoring: Annotated[
        ScoringStrategy | None, Query(description="naive or weighted")
    ] = None,
) -> MatchesResponse:
    """
    Get the entities whose taste is closest to the specified entity.

    Matches are ordered by score (highest first); equal scores are ordered
    by entity id. The entity itself is never included.
    """
    settings = get_settings()
    limit = limit or settings.default_top_n
    strategy = strategy or settings.default_ranking_strategy
    scoring = scoring or settings.default_scoring_strategy

    matches = service.top_matches(entity_id, limit, strategy, scoring)

    return MatchesResponse(
        entity_id=entity_id,
        strategy=strategy,
        scoring=scoring,
        limit=limit,
        matches=[
            MatchResponse(
                entity_id=match.entity_id,
                score=match.score,
                label=get_match_label(match.score),
            )
            for match in matches
        ],
    )


@router.get("/{entity_id}/score/{other_id}", response_model=PairScoreResponse)
def get_pair_score(
    entity_id: int,
    other_id: int,
    service: ServiceDependency,
    scoring: Annotated[
        ScoringStrategy | None, Query(description="naive or weighted")
    ] = None,
) -> PairScoreResponse:
    """Score two entities against each other."""
    scoring = scoring or get_settings().default_scoring_strategy
    score = service.score_pair(entity_id, other_id, scoring)

    return PairScoreResponse(
        entity_id=entity_id,
        other_id=other_id,
        scoring=scoring,
        score=score,
        label=get_match_label(score),
    )
