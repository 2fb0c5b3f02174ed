"""
Side-by-side timing of the two ranking strategies.

Runs the same ranking request through in_memory and push_down scoring,
records wall-clock time per run, and checks that both produced the same
ordered matches.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

import numpy as np

from .core.models import Match
from .core.types import RankingStrategy, ScoringStrategy
from .ranking.ranker import Ranker

logger = logging.getLogger(__name__)


@dataclass
class StrategyTiming:
    """Wall-clock timings for one strategy."""

    strategy: RankingStrategy
    runs: list[float] = field(default_factory=list)

    @property
    def best(self) -> float:
        return min(self.runs)

    @property
    def median(self) -> float:
        return float(np.median(self.runs))


@dataclass
class BenchmarkResult:
    """Outcome of benchmark_strategies()."""

    reference_id: int
    n: int
    scoring: ScoringStrategy
    population: int
    timings: dict[RankingStrategy, StrategyTiming]
    matches: dict[RankingStrategy, list[Match]]

    @property
    def identical(self) -> bool:
        """Whether every strategy returned the same ordered matches."""
        results = list(self.matches.values())
        return all(result == results[0] for result in results[1:])

    @property
    def speedup(self) -> float:
        """Best in_memory time divided by best push_down time."""
        push_down = self.timings[RankingStrategy.push_down].best
        if push_down == 0:
            return float("inf")
        return self.timings[RankingStrategy.in_memory].best / push_down


def benchmark_strategies(
    ranker: Ranker,
    reference_id: int,
    n: int = 10,
    repeat: int = 3,
    scoring: ScoringStrategy = ScoringStrategy.weighted,
) -> BenchmarkResult:
    """
    Time every ranking strategy on the same request.

    Args:
        ranker: Ranker bound to a populated store
        reference_id: Entity to rank against
        n: Number of matches per ranking
        repeat: Runs per strategy
        scoring: Scoring strategy used by both

    Returns:
        BenchmarkResult with per-strategy timings and matches from the last run
    """
    if repeat < 1:
        raise ValueError("repeat must be at least 1")

    timings: dict[RankingStrategy, StrategyTiming] = {}
    matches: dict[RankingStrategy, list[Match]] = {}

    for strategy in RankingStrategy:
        timing = StrategyTiming(strategy=strategy)
        for _ in range(repeat):
            started = time.perf_counter()
            matches[strategy] = ranker.top_matches(reference_id, n, strategy, scoring)
            timing.runs.append(time.perf_counter() - started)
        timings[strategy] = timing
        logger.info(
            "%s: best %.4fs, median %.4fs over %d runs",
            strategy.value,
            timing.best,
            timing.median,
            repeat,
        )

    return BenchmarkResult(
        reference_id=reference_id,
        n=n,
        scoring=scoring,
        population=ranker.store.count(),
        timings=timings,
        matches=matches,
    )
