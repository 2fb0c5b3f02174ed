"""
Tests for the ranking strategy benchmark.
"""

import pytest

from tastematch.benchmark import BenchmarkResult, StrategyTiming, benchmark_strategies
from tastematch.core.errors import MissingDataError
from tastematch.core.models import Match
from tastematch.core.types import RankingStrategy, ScoringStrategy
from tastematch.ranking import Ranker


class TestBenchmarkStrategies:
    """Test timing both strategies on a seeded store."""

    def test_runs_every_strategy(self, seeded_store):
        result = benchmark_strategies(Ranker(seeded_store), 10, n=5, repeat=2)

        assert set(result.timings) == set(RankingStrategy)
        assert all(len(timing.runs) == 2 for timing in result.timings.values())
        assert result.population == 300
        assert result.scoring is ScoringStrategy.weighted

    def test_results_identical(self, seeded_store):
        result = benchmark_strategies(
            Ranker(seeded_store), 10, n=5, repeat=1, scoring=ScoringStrategy.naive
        )

        assert result.identical
        assert len(result.matches[RankingStrategy.in_memory]) == 5

    def test_rejects_zero_repeat(self, seeded_store):
        with pytest.raises(ValueError):
            benchmark_strategies(Ranker(seeded_store), 10, repeat=0)

    def test_missing_reference(self, seeded_store):
        with pytest.raises(MissingDataError):
            benchmark_strategies(Ranker(seeded_store), 9999, repeat=1)


class TestBenchmarkResult:
    """Test derived benchmark figures."""

    def _result(self, in_memory_runs, push_down_runs, push_down_matches=None):
        matches = [Match(2, 90.0), Match(3, 80.0)]
        return BenchmarkResult(
            reference_id=1,
            n=2,
            scoring=ScoringStrategy.weighted,
            population=3,
            timings={
                RankingStrategy.in_memory: StrategyTiming(RankingStrategy.in_memory, in_memory_runs),
                RankingStrategy.push_down: StrategyTiming(RankingStrategy.push_down, push_down_runs),
            },
            matches={
                RankingStrategy.in_memory: matches,
                RankingStrategy.push_down: push_down_matches or list(matches),
            },
        )

    def test_timing_stats(self):
        timing = StrategyTiming(RankingStrategy.in_memory, [0.3, 0.1, 0.2])
        assert timing.best == 0.1
        assert timing.median == pytest.approx(0.2)

    def test_speedup(self):
        result = self._result([0.4, 0.8], [0.1, 0.2])
        assert result.speedup == pytest.approx(4.0)

    def test_speedup_with_instant_push_down(self):
        assert self._result([0.4], [0.0]).speedup == float("inf")

    def test_not_identical(self):
        result = self._result([0.1], [0.1], push_down_matches=[Match(3, 80.0), Match(2, 90.0)])
        assert not result.identical
