"""Seeded synthetic vectors for benchmarks and smoke tests."""

from __future__ import annotations

import numpy as np

from sieve.vector import Vector


def random_vectors(
    count: int,
    dimension: int,
    *,
    seed: int | None = None,
    scale: float = 1.0,
) -> list[Vector]:
    """Draw ``count`` standard-normal vectors of ``dimension`` coordinates."""
    if count < 0 or dimension < 1:
        raise ValueError(f"count must be >= 0 and dimension >= 1; got {count}, {dimension}")
    rng = np.random.default_rng(seed)
    matrix = rng.standard_normal((count, dimension)).astype(np.float32) * np.float32(scale)
    return [Vector(row) for row in matrix]
