"""Recall of approximate results against exact neighbours."""

from __future__ import annotations

from collections.abc import Iterable


def recall_at_k(approximate: Iterable[int], exact: Iterable[int]) -> float:
    """Fraction of the exact neighbour ids that the approximate search found.

    Returns 1.0 when there are no exact neighbours to find.
    """
    truth = set(exact)
    if not truth:
        return 1.0
    return len(truth.intersection(approximate)) / len(truth)
