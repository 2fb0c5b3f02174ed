"""
Base repository protocol for preference vector storage.

Defines the storage collaborator the ranker depends on. Every read is an
explicit call; nothing is loaded lazily through associations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ..core.models import Match, PreferenceVector, make_vector
from ..core.types import DEFAULT_COMPONENT_PRECISION, DEFAULT_SCORE_PRECISION, ScoringStrategy


class VectorStore(ABC):
    """
    Abstract interface for entity and preference vector persistence.

    Each entity owns exactly one vector; deleting the entity deletes the vector.
    """

    # Decimal places used by push-down scoring and shared with in-process scoring
    component_precision: int = DEFAULT_COMPONENT_PRECISION
    score_precision: int = DEFAULT_SCORE_PRECISION
    validate_components: bool = True

    # =========================================================================
    # Reads used by the ranker
    # =========================================================================

    @abstractmethod
    def get_vector(self, entity_id: int) -> PreferenceVector | None:
        """
        Fetch one entity's vector.

        Args:
            entity_id: Entity ID

        Returns:
            PreferenceVector, or None if the entity has no vector
        """
        ...

    @abstractmethod
    def get_all_vectors(self) -> list[tuple[int, PreferenceVector]]:
        """
        Fetch every (entity_id, vector) pair in a single statement.

        Returns:
            Pairs ordered by entity_id
        """
        ...

    @abstractmethod
    def compute_ranked_scores(
        self,
        reference_id: int,
        n: int,
        scoring: ScoringStrategy = ScoringStrategy.weighted,
    ) -> list[Match]:
        """
        Score every other entity against the reference inside the database.

        Uses the same constants and rounding as scoring.score().

        Args:
            reference_id: Entity to rank against
            n: Maximum number of matches to return
            scoring: Scoring strategy

        Returns:
            Matches ordered by score descending, then entity_id ascending.
            Empty if the reference has no vector or there are no candidates.
        """
        ...

    def has_vector(self, entity_id: int) -> bool:
        """Whether the entity exists and owns a vector."""
        return self.get_vector(entity_id) is not None

    # =========================================================================
    # Writes
    # =========================================================================

    def prepare_vector(self, vector: PreferenceVector) -> PreferenceVector:
        """Quantize a vector to the store's component precision before writing."""
        return make_vector(
            vector, precision=self.component_precision, validate=self.validate_components
        )

    @abstractmethod
    def add_entity(self, email: str, vector: PreferenceVector) -> int:
        """
        Create an entity together with its vector.

        Args:
            email: Unique contact address
            vector: The entity's preference vector

        Returns:
            The new entity ID

        Raises:
            InvalidArgumentError: If the email is already registered
            PreconditionViolationError: If a component is out of range
        """
        ...

    @abstractmethod
    def add_entities(self, rows: Iterable[tuple[str, PreferenceVector]]) -> int:
        """
        Batch-create entities with their vectors in one transaction.

        Args:
            rows: (email, vector) pairs

        Returns:
            Number of entities created
        """
        ...

    @abstractmethod
    def update_vector(self, entity_id: int, vector: PreferenceVector) -> None:
        """
        Replace an entity's vector.

        Raises:
            MissingDataError: If the entity has no vector
        """
        ...

    @abstractmethod
    def delete_entity(self, entity_id: int) -> bool:
        """
        Delete an entity and, through the cascade, its vector.

        Returns:
            True if an entity was deleted
        """
        ...

    @abstractmethod
    def clear(self) -> None:
        """Delete every entity and vector."""
        ...

    @abstractmethod
    def count(self) -> int:
        """Number of entities owning a vector."""
        ...

    @abstractmethod
    def max_entity_id(self) -> int:
        """Highest existing entity id, or 0 when the store is empty."""
        ...
