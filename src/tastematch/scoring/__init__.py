"""
Similarity scoring for preference vectors.
"""

from .scorer import SimilarityScorer, score, weigh_distance

__all__ = ["SimilarityScorer", "score", "weigh_distance"]
