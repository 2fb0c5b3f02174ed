"""
Core module for tastematch.

This module provides the foundational components:
- Configuration management (config.py)
- Domain errors (errors.py)
- Data models (models.py)
- Strategy enums and scoring constants (types.py)

Usage:
    from tastematch.core import Settings, get_settings
    from tastematch.core import PreferenceVector, make_vector, Match
    from tastematch.core import ScoringStrategy, RankingStrategy
"""

# Configuration
from .config import Settings, get_settings

# Errors
from .errors import (
    InvalidArgumentError,
    MissingDataError,
    PreconditionViolationError,
    StorageTimeoutError,
    TasteMatchError,
)

# Types
from .types import (
    COMPONENT_NAMES,
    ENTITIES_TABLE,
    MAX_COMPONENT_VALUE,
    MIN_COMPONENT_VALUE,
    VECTORS_TABLE,
    RankingStrategy,
    ScoringStrategy,
)

# Models
from .models import (
    EntityModel,
    Match,
    PreferenceVector,
    PreferenceVectorModel,
    make_vector,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Errors
    "TasteMatchError",
    "InvalidArgumentError",
    "PreconditionViolationError",
    "MissingDataError",
    "StorageTimeoutError",
    # Types
    "COMPONENT_NAMES",
    "MIN_COMPONENT_VALUE",
    "MAX_COMPONENT_VALUE",
    "ENTITIES_TABLE",
    "VECTORS_TABLE",
    "RankingStrategy",
    "ScoringStrategy",
    # Models
    "EntityModel",
    "Match",
    "PreferenceVector",
    "PreferenceVectorModel",
    "make_vector",
]
