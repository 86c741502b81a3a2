"""Forest traversal, candidate merging and exact ranking."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from sieve.index.tree import LeafNode, TreeNode
from sieve.vector import Vector


def query_tree(query: Vector, n: int, node: TreeNode, candidates: list[int]) -> int:
    """Collect up to ``n`` candidate ids from ``node`` into ``candidates``.

    The walk descends into the child on the query's side of each plane and
    only falls back to the sibling when that side cannot supply ``n`` ids.
    Returns the number of ids contributed.
    """
    if isinstance(node, LeafNode):
        taken = node.indices[: min(n, len(node.indices))]
        candidates.extend(taken)
        return len(taken)

    if node.hyperplane.is_point_above(query):
        main, backup = node.right, node.left
    else:
        main, backup = node.left, node.right

    found = query_tree(query, n, main, candidates)
    if found < n:
        found += query_tree(query, n - found, backup, candidates)
    return found


def _query_tree_local(query: Vector, n: int, tree: TreeNode) -> list[int]:
    candidates: list[int] = []
    query_tree(query, n, tree, candidates)
    return candidates


def collect_candidates(
    trees: Sequence[TreeNode],
    query: Vector,
    top_k: int,
    *,
    max_workers: int | None = None,
) -> set[int]:
    """Walk every tree in parallel and merge their candidates once all finish."""
    if not trees or top_k <= 0:
        return set()

    merged: set[int] = set()
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(_query_tree_local, query, top_k, tree) for tree in trees]
        for future in futures:
            merged.update(future.result())
    return merged


def rank_candidates(
    candidates: Iterable[int],
    matrix: np.ndarray,
    query: Vector,
    top_k: int,
) -> list[tuple[int, float]]:
    """Return ``(internal_id, squared_distance)`` pairs, nearest first.

    Equal distances are ordered by internal id.
    """
    ids = np.fromiter(candidates, dtype=np.intp)
    if ids.size == 0 or top_k <= 0:
        return []

    differences = matrix[ids] - query.values
    distances = np.einsum("ij,ij->i", differences, differences)
    order = np.lexsort((ids, distances))[:top_k]
    return [(int(ids[position]), float(distances[position])) for position in order]


def exact_search(matrix: np.ndarray, query: Vector, top_k: int) -> list[tuple[int, float]]:
    """Brute-force nearest neighbours over every row of ``matrix``."""
    return rank_candidates(range(matrix.shape[0]), matrix, query, top_k)
