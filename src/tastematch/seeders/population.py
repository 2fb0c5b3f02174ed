"""
Synthetic population seeder.

Fills the store with entities whose components are drawn uniformly from
[0, 5] by a seeded numpy generator, so benchmark and equivalence runs are
reproducible.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from ..core.models import PreferenceVector
from ..core.types import COMPONENT_NAMES, MAX_COMPONENT_VALUE, SUPPORTED_PRECISIONS
from ..repositories.base import VectorStore

logger = logging.getLogger(__name__)

DEFAULT_POPULATION = 5000
DEFAULT_BATCH_SIZE = 500
EMAIL_TEMPLATE = "email-{index}@taste.com"


def generate_vectors(
    count: int,
    seed: Optional[int] = None,
    precision: int = 0,
) -> list[PreferenceVector]:
    """
    Draw ``count`` random preference vectors.

    Args:
        count: Number of vectors
        seed: RNG seed; None draws from OS entropy
        precision: 0 for integer components, 1 for one decimal

    Returns:
        List of PreferenceVector
    """
    if precision not in SUPPORTED_PRECISIONS:
        raise ValueError(f"precision must be one of {SUPPORTED_PRECISIONS}")

    rng = np.random.default_rng(seed)
    scale = 10**precision
    # Integers on the decimal grid, then scaled, so every value is exactly k / 10
    steps = rng.integers(
        0,
        MAX_COMPONENT_VALUE * scale,
        size=(count, len(COMPONENT_NAMES)),
        endpoint=True,
    )

    return [PreferenceVector(*(value / scale for value in row)) for row in steps.tolist()]


def seed_population(
    store: VectorStore,
    count: int = DEFAULT_POPULATION,
    seed: Optional[int] = None,
    precision: int = 0,
    batch_size: int = DEFAULT_BATCH_SIZE,
    replace: bool = True,
) -> int:
    """
    Seed the store with a synthetic population.

    Args:
        store: Target vector store
        count: Number of entities to create
        seed: RNG seed for reproducible populations
        precision: 0 for integer components, 1 for one decimal
        batch_size: Entities inserted per transaction
        replace: If True, delete the existing population first. Otherwise
            email numbering continues after the highest existing entity id.

    Returns:
        Number of entities created
    """
    if replace:
        logger.info("Clearing existing population...")
        store.clear()
        first_index = 0
    else:
        # A seeded email-<i> always has an id above i, so indexes from the
        # highest id on are unused.
        first_index = store.max_entity_id()

    vectors = generate_vectors(count, seed=seed, precision=precision)
    logger.info("Creating %d entities with preference vectors...", count)

    created = 0
    for start in range(0, count, batch_size):
        batch = [
            (EMAIL_TEMPLATE.format(index=index), vector)
            for index, vector in enumerate(
                vectors[start : start + batch_size], start=first_index + start
            )
        ]
        created += store.add_entities(batch)
        logger.info("%d entities created..", created)

    logger.info("Seeded %d entities", created)
    return created
