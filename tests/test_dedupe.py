"""Tests for exact-duplicate removal."""

import pytest

from sieve.index.dedupe import deduplicate
from sieve.vector import Vector


def test_keeps_first_occurrence_in_order() -> None:
    vectors = [
        Vector([1.0, 2.0]),
        Vector([3.0, 4.0]),
        Vector([1.0, 2.0]),
        Vector([5.0, 6.0]),
        Vector([3.0, 4.0]),
    ]
    result = deduplicate(vectors, [10, 11, 12, 13, 14])

    assert len(result) == 3
    assert [vector.tolist() for vector in result.vectors] == [[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]]
    assert result.ids == (10, 11, 13)


def test_signed_zero_is_not_a_duplicate() -> None:
    result = deduplicate([Vector([0.0]), Vector([-0.0])], [1, 2])
    assert result.ids == (1, 2)


def test_empty_input() -> None:
    result = deduplicate([], [])
    assert len(result) == 0
    assert result.ids == ()


def test_length_mismatch_raises() -> None:
    with pytest.raises(ValueError):
        deduplicate([Vector([1.0])], [1, 2])
