"""Tests for tree node helpers."""

from sieve.index.hyperplane import HyperPlane
from sieve.index.tree import BranchNode, LeafNode, iter_leaves, tree_depth, tree_stats
from sieve.vector import Vector


def _plane() -> HyperPlane:
    return HyperPlane(Vector([1.0]), 0.0)


def test_single_leaf_stats() -> None:
    leaf = LeafNode(indices=(0, 1, 2))
    assert list(iter_leaves(leaf)) == [leaf]
    assert tree_depth(leaf) == 0
    stats = tree_stats(leaf)
    assert (stats.depth, stats.leaf_count, stats.largest_leaf, stats.indexed) == (0, 1, 3, 3)


def test_iter_leaves_left_to_right() -> None:
    left = LeafNode(indices=(0,))
    middle = LeafNode(indices=(1, 2))
    right = LeafNode(indices=(3, 4, 5))
    tree = BranchNode(
        hyperplane=_plane(),
        left=left,
        right=BranchNode(hyperplane=_plane(), left=middle, right=right),
    )

    assert list(iter_leaves(tree)) == [left, middle, right]
    assert tree_depth(tree) == 2
    stats = tree_stats(tree)
    assert stats.leaf_count == 3
    assert stats.largest_leaf == 3
    assert stats.indexed == 6


def test_empty_leaf() -> None:
    stats = tree_stats(LeafNode(indices=()))
    assert stats.largest_leaf == 0
    assert stats.indexed == 0
