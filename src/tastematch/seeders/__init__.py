"""
Population seeders for local development, benchmarks and tests.
"""

from .population import generate_vectors, seed_population

__all__ = ["generate_vectors", "seed_population"]
