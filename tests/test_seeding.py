"""
Tests for synthetic population seeding.
"""

import logging

import pytest

from tastematch.core.models import PreferenceVector
from tastematch.seeders import generate_vectors, seed_population


class TestGenerateVectors:
    """Test numpy-backed vector generation."""

    def test_count(self):
        vectors = generate_vectors(50, seed=1)
        assert len(vectors) == 50
        assert all(isinstance(v, PreferenceVector) for v in vectors)

    def test_reproducible(self):
        assert generate_vectors(20, seed=3) == generate_vectors(20, seed=3)

    def test_seeds_differ(self):
        assert generate_vectors(20, seed=3) != generate_vectors(20, seed=4)

    def test_whole_numbers_in_range(self):
        for vector in generate_vectors(200, seed=5, precision=0):
            for value in vector:
                assert value == int(value)
                assert 0 <= value <= 5

    def test_one_decimal_in_range(self):
        values = [value for v in generate_vectors(200, seed=5, precision=1) for value in v]

        assert all(0 <= value <= 5 for value in values)
        assert all(round(value, 1) == value for value in values)
        assert any(value != int(value) for value in values)

    def test_zero_count(self):
        assert generate_vectors(0, seed=1) == []


class TestSeedPopulation:
    """Test seeding into a store."""

    def test_seeds_count(self, store):
        assert seed_population(store, count=120, seed=9, batch_size=50) == 120
        assert store.count() == 120

    def test_replace_clears_existing(self, small_store):
        seed_population(small_store, count=30, seed=9)
        assert small_store.count() == 30

    def test_append(self, store):
        seed_population(store, count=30, seed=9)
        seed_population(store, count=20, seed=10, replace=False)

        assert store.count() == 50

    @pytest.mark.parametrize("deleted", [2, 5])
    def test_append_after_delete(self, store, deleted):
        seed_population(store, count=5, seed=9)
        store.delete_entity(deleted)

        assert seed_population(store, count=2, seed=10, replace=False) == 2
        assert store.count() == 6
        emails = [row["email"] for row in store.db.fetchall("SELECT email FROM entities")]
        assert len(set(emails)) == 6

    def test_same_seed_same_population(self, store):
        seed_population(store, count=40, seed=21)
        first = store.get_all_vectors()

        seed_population(store, count=40, seed=21)
        assert store.get_all_vectors() == first

    def test_logs_progress(self, store, caplog):
        with caplog.at_level(logging.INFO, logger="tastematch.seeders.population"):
            seed_population(store, count=25, seed=1, batch_size=10)

        assert "25 entities created.." in caplog.text
        assert "Seeded 25 entities" in caplog.text

    @pytest.mark.parametrize("precision", [0, 1])
    def test_vectors_match_generator(self, store, precision):
        seed_population(store, count=15, seed=8, precision=precision)

        stored = [vector for _, vector in store.get_all_vectors()]
        assert stored == generate_vectors(15, seed=8, precision=precision)
