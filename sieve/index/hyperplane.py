"""Affine splitting planes."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from sieve.vector import Vector


@dataclass(frozen=True, slots=True)
class HyperPlane:
    """Plane of points ``x`` where ``coefficients . x + constant == 0``."""

    coefficients: Vector
    constant: float

    @classmethod
    def bisecting(cls, a: Vector, b: Vector) -> HyperPlane:
        """Plane through the midpoint of ``a`` and ``b``, normal to ``b - a``."""
        coefficients = b.sub(a)
        constant = -coefficients.dot(a.avg(b))
        return cls(coefficients=coefficients, constant=constant)

    @property
    def dimension(self) -> int:
        return self.coefficients.dimension

    def is_point_above(self, point: Vector) -> bool:
        """Return True when ``point`` lies in the closed upper half-space."""
        return bool(self.points_above(point.values[np.newaxis, :])[0])

    def points_above(self, points: np.ndarray) -> np.ndarray:
        """Side test for every row of ``points``.

        Products of float32 coordinates are exact in float64 and are summed
        column by column starting from the constant, so a row gets the same
        answer whatever matrix it is part of. Tree construction and query
        routing both go through here.
        """
        products = np.asarray(points, dtype=np.float64) * self.coefficients.values.astype(np.float64)
        totals = np.full(products.shape[0], float(self.constant), dtype=np.float64)
        for column in products.T:
            totals += column
        return totals >= 0.0
