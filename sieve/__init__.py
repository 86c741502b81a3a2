"""Sieve - approximate nearest neighbour search with random-projection forests.

Builds a forest of randomized binary space-partitioning trees over
fixed-dimensionality float32 vectors and answers approximate top-k queries
ranked by squared Euclidean distance.
"""

__version__ = "0.1.0"
__author__ = "Sieve Contributors"

from sieve.config import Settings, get_settings
from sieve.errors import (
    DimensionMismatchError,
    InvalidConfigurationError,
    InvalidInputError,
    SieveError,
)
from sieve.index import ApproximateNearestNeighborsIndex, SearchResult
from sieve.vector import Vector

__all__ = [
    "ApproximateNearestNeighborsIndex",
    "SearchResult",
    "Vector",
    "Settings",
    "get_settings",
    "SieveError",
    "InvalidInputError",
    "InvalidConfigurationError",
    "DimensionMismatchError",
    "__version__",
]
