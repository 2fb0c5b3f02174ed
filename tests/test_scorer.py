"""
Tests for similarity scoring and preference vector construction.
"""

import math

import pytest
from pydantic import ValidationError

from tastematch.core.errors import InvalidArgumentError, PreconditionViolationError
from tastematch.core.models import (
    PreferenceVector,
    PreferenceVectorModel,
    make_vector,
    round_half_up,
)
from tastematch.core.types import ScoringStrategy
from tastematch.scoring import SimilarityScorer, score, weigh_distance
from tastematch.seeders import generate_vectors

PRECISIONS = [0, 1]


class TestScore:
    """Test the scoring rule on known vectors."""

    def test_whole_number_vectors(self):
        a = [3, 2, 1, 5, 4]
        b = [1, 4, 3, 4, 5]

        assert score(a, b, ScoringStrategy.naive) == 68.0
        assert score(a, b, ScoringStrategy.weighted) == 84.0

    def test_one_decimal_vectors(self):
        a = [3.1, 2.2, 1.0, 5.0, 4.3]
        b = [1.2, 4.3, 3.0, 4.4, 5.0]

        assert score(a, b, ScoringStrategy.naive) == 70.8
        # 0.95 + 3.15 + 1.0 + 0.3 + 0.35 = 5.75
        assert score(a, b, ScoringStrategy.weighted) == 77.0

    @pytest.mark.parametrize("strategy", list(ScoringStrategy))
    @pytest.mark.parametrize("precision", PRECISIONS)
    def test_identical_vectors_score_100(self, strategy, precision):
        for vector in generate_vectors(200, seed=31, precision=precision):
            assert score(vector, vector, strategy) == 100.0

    @pytest.mark.parametrize("strategy", list(ScoringStrategy))
    @pytest.mark.parametrize("precision", PRECISIONS)
    def test_symmetric(self, strategy, precision):
        vectors = generate_vectors(200, seed=32, precision=precision)
        for a, b in zip(vectors, reversed(vectors)):
            assert score(a, b, strategy) == score(b, a, strategy)

    def test_naive_bounds(self):
        assert score([0] * 5, [5] * 5, ScoringStrategy.naive) == 0.0
        assert 0.0 <= score([1, 2, 3, 4, 5], [5, 4, 3, 2, 1], ScoringStrategy.naive) <= 100.0

    def test_weighted_can_go_negative(self):
        """Weighted totals are normalized by the unweighted maximum."""
        # 5 * (5 * 1.5) = 37.5 against a normalizer of 25
        assert score([0] * 5, [5] * 5, ScoringStrategy.weighted) == -50.0

    def test_weighted_threshold_is_inclusive(self):
        origin = [0, 0, 0, 0, 0]
        assert score(origin, [2, 0, 0, 0, 0], ScoringStrategy.weighted) == 96.0
        assert score(origin, [2.1, 0, 0, 0, 0], ScoringStrategy.weighted) == 87.4

    def test_default_strategy_is_weighted(self):
        assert score([3, 2, 1, 5, 4], [1, 4, 3, 4, 5]) == 84.0

    def test_accepts_strategy_value(self):
        assert score([3, 2, 1, 5, 4], [1, 4, 3, 4, 5], "naive") == 68.0

    def test_accepts_preference_vectors(self):
        a = PreferenceVector(3, 2, 1, 5, 4)
        b = PreferenceVector(1, 4, 3, 4, 5)
        assert score(a, b, ScoringStrategy.naive) == 68.0

    def test_whole_number_precision(self):
        a = [3.4, 2, 1, 5, 4]
        b = [1.2, 2, 1, 5, 4]

        # distance 2.2 rounds to 2 before weighting
        result = score(
            a, b, ScoringStrategy.naive, component_precision=0, score_precision=0
        )
        assert result == 92.0

    def test_halfway_distance_rounds_away_from_zero(self):
        origin = [0, 0, 0, 0, 0]

        # 2.5 rounds to 3 at whole-number precision, landing in the 1.5 tier
        assert score(origin, [2.5, 0, 0, 0, 0], component_precision=0) == 82.0
        assert score(origin, [2.5, 0, 0, 0, 0], ScoringStrategy.naive, component_precision=0) == 88.0
        assert score(origin, [3.5, 0, 0, 0, 0], component_precision=0) == 76.0

    def test_halfway_distance_from_inexact_floats(self):
        # 0.7 - 0.2 evaluates to 0.49999999999999994 in floating point
        a = [0.7, 0, 0, 0, 0]
        b = [0.2, 0, 0, 0, 0]
        assert score(a, b, component_precision=0) == 98.0
        assert score(a, b, ScoringStrategy.naive, component_precision=0) == 96.0
        assert score(a, b, component_precision=1) == 99.0

    def test_dimension_mismatch(self):
        with pytest.raises(InvalidArgumentError, match="dimensionality"):
            score([1, 2, 3], [1, 2, 3, 4, 5])

    def test_empty_vectors(self):
        with pytest.raises(InvalidArgumentError):
            score([], [])


class TestWeighDistance:
    """Test per-component weighting."""

    def test_naive_is_identity(self):
        assert weigh_distance(3.0, ScoringStrategy.naive) == 3.0

    def test_small_distance_halved(self):
        assert weigh_distance(2.0, ScoringStrategy.weighted) == 1.0

    def test_large_distance_amplified(self):
        assert weigh_distance(4.0, ScoringStrategy.weighted) == 6.0


class TestSimilarityScorer:
    """Test the precision-bound scorer used by the ranker."""

    def test_score_candidates(self):
        scorer = SimilarityScorer()
        matches = scorer.score_candidates(
            [3, 2, 1, 5, 4],
            [(2, [1, 4, 3, 4, 5]), (9, [3, 2, 1, 5, 4])],
            ScoringStrategy.naive,
        )

        assert [(m.entity_id, m.score) for m in matches] == [(2, 68.0), (9, 100.0)]

    def test_score_candidates_empty(self):
        assert SimilarityScorer().score_candidates([1, 1, 1, 1, 1], []) == []


class TestMakeVector:
    """Test vector construction and validation."""

    def test_from_sequence(self):
        vector = make_vector([3, 2, 1, 5, 4])
        assert vector.values == (3.0, 2.0, 1.0, 5.0, 4.0)
        assert len(vector) == 5
        assert vector[3] == 5.0

    def test_from_mapping(self):
        vector = make_vector(
            {"apple": 1, "banana": 2, "orange": 3, "strawberry": 4, "peach": 5}
        )
        assert vector.as_dict() == {
            "apple": 1.0,
            "banana": 2.0,
            "orange": 3.0,
            "strawberry": 4.0,
            "peach": 5.0,
        }

    def test_quantizes_components(self):
        assert make_vector([3.14, 2, 1, 5, 4]).apple == 3.1
        assert make_vector([3.14, 2, 1, 5, 4], precision=0).apple == 3.0

    def test_wrong_component_count(self):
        with pytest.raises(InvalidArgumentError):
            make_vector([1, 2, 3, 4])

    def test_missing_component_name(self):
        with pytest.raises(InvalidArgumentError, match="peach"):
            make_vector({"apple": 1, "banana": 2, "orange": 3, "strawberry": 4})

    def test_out_of_range(self):
        with pytest.raises(PreconditionViolationError) as exc_info:
            make_vector([1, 2, 3, 4, 5.5])
        assert exc_info.value.component == "peach"

    def test_negative_component(self):
        with pytest.raises(PreconditionViolationError):
            make_vector([-0.5, 2, 3, 4, 5])

    def test_non_finite(self):
        with pytest.raises(PreconditionViolationError):
            make_vector([math.nan, 2, 3, 4, 5])

    def test_validation_can_be_skipped(self):
        assert make_vector([9, 2, 3, 4, 5], validate=False).apple == 9.0


class TestPreferenceVectorModel:
    """Test the API-facing vector payload."""

    def test_to_vector(self):
        model = PreferenceVectorModel(apple=1.24, banana=2, orange=3, strawberry=4, peach=5)
        assert model.to_vector().apple == 1.2

    def test_rejects_out_of_range(self):
        with pytest.raises(ValidationError):
            PreferenceVectorModel(apple=6, banana=2, orange=3, strawberry=4, peach=5)


class TestRoundHalfUp:
    """Test rounding shared with the SQL ROUND semantics."""

    @pytest.mark.parametrize(
        "value,precision,expected",
        [
            (2.5, 0, 3.0),
            (3.5, 0, 4.0),
            (2.4, 0, 2.0),
            (0.25, 1, 0.3),
            (1.25, 1, 1.3),
            (-2.5, 0, -3.0),
            (-50.0, 1, -50.0),
            (83.99999999999999, 1, 84.0),
        ],
    )
    def test_round_half_up(self, value, precision, expected):
        assert round_half_up(value, precision) == expected

    def test_make_vector_rounds_halves_up(self):
        assert make_vector([2.5, 0.5, 1, 1, 1], precision=0).values == (3.0, 1.0, 1.0, 1.0, 1.0)
        assert make_vector([1.25, 1, 1, 1, 1]).apple == 1.3
