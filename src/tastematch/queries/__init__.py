"""
SQL builders shared by the storage backends.
"""

from .matching import POSTGRES, SQLITE, Dialect, build_ranked_scores_query, ranked_scores_params

__all__ = [
    "Dialect",
    "SQLITE",
    "POSTGRES",
    "build_ranked_scores_query",
    "ranked_scores_params",
]
