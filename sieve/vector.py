"""Fixed-dimensionality float32 vectors."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any, NewType

import numpy as np

from sieve.errors import DimensionMismatchError, InvalidInputError

HashKey = NewType("HashKey", bytes)


class Vector:
    """Immutable vector of float32 coordinates.

    Equality and hashing compare the raw bit pattern of every coordinate, so
    ``+0.0`` and ``-0.0`` differ and a NaN equals a NaN with the same payload.
    Use :meth:`squared_euclidian_distance` for numeric comparisons.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Sequence[float] | np.ndarray) -> None:
        try:
            array = np.array(values, dtype=np.float32)
        except (TypeError, ValueError) as exc:
            raise InvalidInputError(f"Cannot interpret {values!r} as a vector") from exc
        if array.ndim != 1:
            raise InvalidInputError(f"Vectors must be 1-D; received shape {array.shape}")
        array.flags.writeable = False
        self._values = array

    @property
    def values(self) -> np.ndarray:
        """Read-only view of the coordinates."""
        return self._values

    @property
    def dimension(self) -> int:
        return int(self._values.shape[0])

    def tolist(self) -> list[float]:
        return [float(value) for value in self._values]

    def dot(self, other: Vector) -> float:
        self._check_dimension(other)
        return float(np.dot(self._values, other._values))

    def avg(self, other: Vector) -> Vector:
        self._check_dimension(other)
        return Vector((self._values + other._values) / np.float32(2.0))

    def sub(self, other: Vector) -> Vector:
        self._check_dimension(other)
        return Vector(self._values - other._values)

    def add(self, other: Vector) -> Vector:
        self._check_dimension(other)
        return Vector(self._values + other._values)

    def squared_euclidian_distance(self, other: Vector) -> float:
        self._check_dimension(other)
        difference = self._values - other._values
        return float(np.dot(difference, difference))

    def hashkey(self) -> HashKey:
        """Return a key identifying the exact bit pattern of the coordinates."""
        return HashKey(self._values.view(np.uint32).tobytes())

    def _check_dimension(self, other: Vector) -> None:
        if other.dimension != self.dimension:
            raise DimensionMismatchError(self.dimension, other.dimension)

    def __len__(self) -> int:
        return self.dimension

    def __iter__(self) -> Iterator[float]:
        return iter(self.tolist())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return self.hashkey() == other.hashkey()

    def __hash__(self) -> int:
        return hash(self.hashkey())

    def __repr__(self) -> str:
        return f"Vector({self.tolist()!r})"


def as_vector(value: Any, *, dimension: int | None = None) -> Vector:
    """Coerce ``value`` to a :class:`Vector`, optionally checking its dimension."""
    vector = value if isinstance(value, Vector) else Vector(value)
    if dimension is not None and vector.dimension != dimension:
        raise DimensionMismatchError(dimension, vector.dimension)
    return vector
