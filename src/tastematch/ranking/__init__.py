"""
Top-N ranking over a population of preference vectors.
"""

from .ranker import Ranker, match_sort_key, rank_candidates

__all__ = ["Ranker", "match_sort_key", "rank_candidates"]
