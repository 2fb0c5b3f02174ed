"""
tastematch - top-N taste matching over preference vectors

Every entity carries a five-component taste profile (apple, banana, orange,
strawberry, peach), each rated 0 to 5. Two profiles are scored by a tiered
absolute distance and turned into a match percentage; the top N matches for
an entity can be ranked in process or pushed down to the database.

Key Features:
- Naive and weighted scoring with deterministic rounding
- In-memory and push-down ranking with identical results
- SQLite (local) and PostgreSQL stores
- Seeded population generator and strategy benchmark

Usage:
    from tastematch import TasteDB, init_schema, get_vector_store, Ranker, RankingStrategy

    db = TasteDB("tastematch.sqlite")
    init_schema(db)
    store = get_vector_store(db)

    ranker = Ranker(store)
    matches = ranker.top_matches(42, n=10, strategy=RankingStrategy.push_down)
"""

from .connection import TasteDB
from .core import (
    InvalidArgumentError,
    Match,
    MissingDataError,
    PreconditionViolationError,
    PreferenceVector,
    RankingStrategy,
    ScoringStrategy,
    StorageTimeoutError,
    TasteMatchError,
    make_vector,
)
from .ranking import Ranker, rank_candidates
from .repositories import VectorStore, get_vector_store
from .schema import init_schema
from .scoring import SimilarityScorer, score

__all__ = [
    # Connection
    "TasteDB",
    # Schema
    "init_schema",
    # Stores
    "VectorStore",
    "get_vector_store",
    # Scoring and ranking
    "SimilarityScorer",
    "score",
    "Ranker",
    "rank_candidates",
    # Models
    "PreferenceVector",
    "Match",
    "make_vector",
    "RankingStrategy",
    "ScoringStrategy",
    # Errors
    "TasteMatchError",
    "InvalidArgumentError",
    "PreconditionViolationError",
    "MissingDataError",
    "StorageTimeoutError",
]
