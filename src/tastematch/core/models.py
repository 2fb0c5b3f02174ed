"""
Data models for entities, preference vectors and ranked matches.

PreferenceVector and Match are plain frozen dataclasses: they are created
in bulk on the ranking hot path. Pydantic models cover the records that
cross the API boundary.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel, Field

from .errors import InvalidArgumentError, PreconditionViolationError
from .types import (
    COMPONENT_NAMES,
    DEFAULT_COMPONENT_PRECISION,
    MAX_COMPONENT_VALUE,
    MIN_COMPONENT_VALUE,
)


# =============================================================================
# Rounding
# =============================================================================
# SQLite and PostgreSQL ROUND both round halves away from zero. Python code
# that has to agree with them goes through these helpers instead of round().


def to_decimal(value: Any) -> Decimal:
    """Exact decimal for a number, taken from its shortest float repr."""
    if isinstance(value, Decimal):
        return value
    return Decimal(repr(float(value)))


def round_half_up(value: Any, precision: int) -> float:
    """Round to ``precision`` decimal places, halves away from zero."""
    quantum = Decimal(1).scaleb(-precision)
    return float(to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


# =============================================================================
# Preference Vectors
# =============================================================================


@dataclass(frozen=True)
class PreferenceVector:
    """Five named taste components, each in [0, 5]."""

    apple: float
    banana: float
    orange: float
    strawberry: float
    peach: float

    @property
    def values(self) -> tuple[float, ...]:
        """Components in canonical order."""
        return (self.apple, self.banana, self.orange, self.strawberry, self.peach)

    def as_dict(self) -> dict[str, float]:
        return dict(zip(COMPONENT_NAMES, self.values))

    def __len__(self) -> int:
        return len(COMPONENT_NAMES)

    def __iter__(self):
        return iter(self.values)

    def __getitem__(self, index: int) -> float:
        return self.values[index]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "PreferenceVector":
        """Build a vector from a database row keyed by component name."""
        return cls(*(float(row[name]) for name in COMPONENT_NAMES))


def make_vector(
    values: Iterable[Any] | Mapping[str, Any],
    *,
    precision: int = DEFAULT_COMPONENT_PRECISION,
    validate: bool = True,
) -> PreferenceVector:
    """
    Build a PreferenceVector from raw input, quantizing each component.

    Args:
        values: Five numbers in canonical order, or a mapping keyed by component name
        precision: Decimal places kept on each component (0 or 1)
        validate: If True, reject components outside [0, 5]

    Returns:
        PreferenceVector with quantized components

    Raises:
        InvalidArgumentError: If the wrong number of components is given
        PreconditionViolationError: If a component is non-finite or out of range
    """
    if isinstance(values, Mapping):
        missing = [name for name in COMPONENT_NAMES if name not in values]
        if missing:
            raise InvalidArgumentError(f"Missing components: {', '.join(missing)}")
        raw = [values[name] for name in COMPONENT_NAMES]
    else:
        raw = list(values)

    if len(raw) != len(COMPONENT_NAMES):
        raise InvalidArgumentError(
            f"Expected {len(COMPONENT_NAMES)} components, got {len(raw)}"
        )

    quantized = []
    for name, value in zip(COMPONENT_NAMES, raw):
        number = float(value)
        if not math.isfinite(number):
            raise PreconditionViolationError(
                f"Component {name} is not a finite number", component=name, value=value
            )
        number = round_half_up(number, precision)
        if validate and not MIN_COMPONENT_VALUE <= number <= MAX_COMPONENT_VALUE:
            raise PreconditionViolationError(
                f"Component {name}={number} outside "
                f"[{MIN_COMPONENT_VALUE}, {MAX_COMPONENT_VALUE}]",
                component=name,
                value=value,
            )
        quantized.append(number)

    return PreferenceVector(*quantized)


# =============================================================================
# Ranking Results
# =============================================================================


@dataclass(frozen=True)
class Match:
    """A candidate entity and its similarity score against a reference."""

    entity_id: int
    score: float


# =============================================================================
# Entity Models
# =============================================================================


class EntityModel(BaseModel):
    """Entity master record."""

    id: int
    email: str
    created_at: Optional[datetime] = None


class PreferenceVectorModel(BaseModel):
    """Validated preference vector payload."""

    apple: float = Field(ge=MIN_COMPONENT_VALUE, le=MAX_COMPONENT_VALUE)
    banana: float = Field(ge=MIN_COMPONENT_VALUE, le=MAX_COMPONENT_VALUE)
    orange: float = Field(ge=MIN_COMPONENT_VALUE, le=MAX_COMPONENT_VALUE)
    strawberry: float = Field(ge=MIN_COMPONENT_VALUE, le=MAX_COMPONENT_VALUE)
    peach: float = Field(ge=MIN_COMPONENT_VALUE, le=MAX_COMPONENT_VALUE)

    def to_vector(self, precision: int = DEFAULT_COMPONENT_PRECISION) -> PreferenceVector:
        return make_vector(self.model_dump(), precision=precision)
