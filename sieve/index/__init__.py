"""Approximate nearest neighbour indexing."""

from sieve.index.ann import ApproximateNearestNeighborsIndex, SearchResult
from sieve.index.hyperplane import HyperPlane
from sieve.index.tree import BranchNode, LeafNode, TreeNode, TreeStats, tree_stats

__all__ = [
    "ApproximateNearestNeighborsIndex",
    "SearchResult",
    "HyperPlane",
    "BranchNode",
    "LeafNode",
    "TreeNode",
    "TreeStats",
    "tree_stats",
]
