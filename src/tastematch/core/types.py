"""
Core types and constants for tastematch.

This module provides:
- ScoringStrategy and RankingStrategy enums
- The fixed component layout of a preference vector
- Scoring policy constants shared by the Python scorer and the SQL builder

Both the in-process scorer and the push-down SQL read their constants from
here, so the two execution paths cannot drift apart.
"""

from enum import Enum


class ScoringStrategy(str, Enum):
    """How per-component distances are weighted before summation."""

    naive = "naive"
    weighted = "weighted"


class RankingStrategy(str, Enum):
    """Where candidate scoring is executed."""

    in_memory = "in_memory"
    push_down = "push_down"


# =============================================================================
# Preference vector layout
# =============================================================================
# Order is fixed and identical across all vectors. Names double as column
# names in the preference_vectors table.

COMPONENT_NAMES: tuple[str, ...] = ("apple", "banana", "orange", "strawberry", "peach")

MIN_COMPONENT_VALUE = 0
MAX_COMPONENT_VALUE = 5

# Unweighted upper bound of the summed distance, used as the normalizer for
# both strategies.
MAX_TOTAL_DISTANCE = len(COMPONENT_NAMES) * MAX_COMPONENT_VALUE

# =============================================================================
# Tiered weighting policy
# =============================================================================

WEIGHT_THRESHOLD = 2
SMALL_DISTANCE_WEIGHT = 0.5
LARGE_DISTANCE_WEIGHT = 1.5

# Supported decimal places for components and scores
SUPPORTED_PRECISIONS = (0, 1)
DEFAULT_COMPONENT_PRECISION = 1
DEFAULT_SCORE_PRECISION = 1

# Finest grid components are ever stored on
STORED_PRECISION = max(SUPPORTED_PRECISIONS)

# =============================================================================
# Table names
# =============================================================================

ENTITIES_TABLE = "entities"
VECTORS_TABLE = "preference_vectors"
META_TABLE = "meta"
