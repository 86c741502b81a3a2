"""Random-projection forest construction."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from sieve.errors import InvalidConfigurationError
from sieve.index.hyperplane import HyperPlane
from sieve.index.tree import BranchNode, LeafNode, TreeNode
from sieve.vector import Vector

logger = logging.getLogger(__name__)

MAX_SPLIT_ATTEMPTS = 8

SeedLike = int | np.random.SeedSequence | None


def split_indices(
    indices: np.ndarray,
    matrix: np.ndarray,
    rng: np.random.Generator,
) -> tuple[HyperPlane, np.ndarray, np.ndarray] | None:
    """Partition ``indices`` with a plane bisecting two randomly sampled points.

    Returns ``(plane, below, above)`` or None when every sampled plane left
    one side empty, which only happens for points that differ by less than
    float32 rounding.
    """
    points = matrix[indices]
    for _ in range(MAX_SPLIT_ATTEMPTS):
        a, b = rng.choice(indices, size=2, replace=False)
        plane = HyperPlane.bisecting(Vector(matrix[a]), Vector(matrix[b]))
        mask = plane.points_above(points)
        above = indices[mask]
        below = indices[~mask]
        if above.size and below.size:
            return plane, below, above
    return None


def build_tree(
    indices: np.ndarray,
    matrix: np.ndarray,
    max_leaf_size: int,
    rng: np.random.Generator,
) -> TreeNode:
    """Recursively split ``indices`` until every subset fits in a leaf."""
    if len(indices) <= max_leaf_size:
        return LeafNode(indices=tuple(int(index) for index in indices))
    if len(indices) < 2:
        raise InvalidConfigurationError(
            f"max_leaf_size={max_leaf_size} cannot be reached by splitting {len(indices)} vector(s)"
        )

    split = split_indices(indices, matrix, rng)
    if split is None:
        logger.warning(
            "Could not separate %d near-identical vectors after %d attempts; keeping them in one leaf",
            len(indices),
            MAX_SPLIT_ATTEMPTS,
        )
        return LeafNode(indices=tuple(int(index) for index in indices))

    plane, below, above = split
    return BranchNode(
        hyperplane=plane,
        left=build_tree(below, matrix, max_leaf_size, rng),
        right=build_tree(above, matrix, max_leaf_size, rng),
    )


def spawn_generators(seed: SeedLike, count: int) -> list[np.random.Generator]:
    """Derive ``count`` independent generators from a single seed."""
    sequence = seed if isinstance(seed, np.random.SeedSequence) else np.random.SeedSequence(seed)
    return [np.random.default_rng(child) for child in sequence.spawn(count)]


def build_forest(
    matrix: np.ndarray,
    num_trees: int,
    max_leaf_size: int,
    *,
    seed: SeedLike = None,
    max_workers: int | None = None,
) -> list[TreeNode]:
    """Build ``num_trees`` independent trees over every row of ``matrix``.

    Each tree gets its own generator spawned from ``seed``, so a fixed seed
    yields the same forest however the worker threads are scheduled.
    """
    all_indices = np.arange(matrix.shape[0], dtype=np.intp)
    generators = spawn_generators(seed, num_trees)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(build_tree, all_indices, matrix, max_leaf_size, rng)
            for rng in generators
        ]
        return [future.result() for future in futures]
