"""Partition tree nodes and introspection helpers."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from sieve.index.hyperplane import HyperPlane


@dataclass(frozen=True, slots=True)
class LeafNode:
    """Terminal node holding internal ids of the vector store."""

    indices: tuple[int, ...]

    def __len__(self) -> int:
        return len(self.indices)


@dataclass(frozen=True, slots=True)
class BranchNode:
    """Inner node; ``left`` holds points below the plane, ``right`` those above."""

    hyperplane: HyperPlane
    left: TreeNode
    right: TreeNode


TreeNode = LeafNode | BranchNode


@dataclass(frozen=True, slots=True)
class TreeStats:
    """Shape summary of a single partition tree."""

    depth: int
    leaf_count: int
    largest_leaf: int
    indexed: int


def iter_leaves(node: TreeNode) -> Iterator[LeafNode]:
    """Yield leaves left to right."""
    stack: list[TreeNode] = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, LeafNode):
            yield current
        else:
            stack.append(current.right)
            stack.append(current.left)


def tree_depth(node: TreeNode) -> int:
    """Number of branch levels above the deepest leaf (a lone leaf has depth 0)."""
    deepest = 0
    stack: list[tuple[TreeNode, int]] = [(node, 0)]
    while stack:
        current, depth = stack.pop()
        if isinstance(current, LeafNode):
            deepest = max(deepest, depth)
        else:
            stack.append((current.left, depth + 1))
            stack.append((current.right, depth + 1))
    return deepest


def tree_stats(node: TreeNode) -> TreeStats:
    leaves = list(iter_leaves(node))
    return TreeStats(
        depth=tree_depth(node),
        leaf_count=len(leaves),
        largest_leaf=max((len(leaf) for leaf in leaves), default=0),
        indexed=sum(len(leaf) for leaf in leaves),
    )
