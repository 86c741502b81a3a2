"""Approximate nearest neighbour index over a random-projection forest."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

from sieve.config import Settings, get_settings
from sieve.errors import InvalidConfigurationError, InvalidInputError
from sieve.index.build import SeedLike, build_forest
from sieve.index.dedupe import deduplicate
from sieve.index.search import collect_candidates, rank_candidates
from sieve.index.tree import TreeNode
from sieve.vector import Vector, as_vector

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SearchResult:
    """Single nearest-neighbour hit."""

    vector_id: int
    distance: float
    vector: Vector


def stack_vectors(vectors: Sequence[Vector], dimension: int | None) -> np.ndarray:
    """Read-only ``(len(vectors), dimension)`` float32 matrix of ``vectors``."""
    if vectors:
        matrix = np.vstack([vector.values for vector in vectors])
    else:
        matrix = np.empty((0, dimension or 0), dtype=np.float32)
    matrix.flags.writeable = False
    return matrix


class ApproximateNearestNeighborsIndex:
    """Immutable forest of partition trees over a deduplicated vector store.

    Internal ids are positions in the deduplicated store; ``vector_id`` on a
    :class:`SearchResult` is the caller's external id for that position.
    Instances are read-only after :meth:`build`, so :meth:`search` may be
    called from several threads at once.
    """

    def __init__(
        self,
        *,
        vectors: tuple[Vector, ...],
        ids: tuple[int, ...],
        trees: Sequence[TreeNode],
        max_leaf_size: int,
        dimension: int | None,
        max_workers: int | None = None,
        matrix: np.ndarray | None = None,
    ) -> None:
        self._vectors = vectors
        self._ids = ids
        self._trees = tuple(trees)
        self._max_leaf_size = max_leaf_size
        self._dimension = dimension
        self._max_workers = max_workers
        self._matrix = matrix if matrix is not None else stack_vectors(vectors, dimension)

    @classmethod
    def build(
        cls,
        num_trees: int,
        max_leaf_size: int,
        vectors: Sequence[Vector | Sequence[float]],
        external_ids: Sequence[int],
        *,
        dimension: int | None = None,
        seed: SeedLike = None,
        max_workers: int | None = None,
    ) -> ApproximateNearestNeighborsIndex:
        """Deduplicate ``vectors`` and grow ``num_trees`` trees over them.

        Args:
            num_trees: Number of independent trees in the forest
            max_leaf_size: Largest subset kept in a leaf without splitting
            vectors: Input vectors (``Vector`` or plain float sequences)
            external_ids: Caller ids paired positionally with ``vectors``
            dimension: Expected dimensionality; inferred from the first vector
                when omitted
            seed: Seed for hyperplane sampling
            max_workers: Thread count for building and searching

        Returns:
            A ready-to-query index; empty input gives an empty index

        Raises:
            InvalidInputError: If lengths differ or a vector is malformed
            DimensionMismatchError: If vectors disagree on dimensionality
            InvalidConfigurationError: If a numeric parameter is out of range
        """
        if num_trees < 1:
            raise InvalidConfigurationError(f"num_trees must be at least 1; got {num_trees}")
        if max_workers is not None and max_workers < 1:
            raise InvalidConfigurationError(f"max_workers must be at least 1; got {max_workers}")

        raw_vectors = list(vectors)
        ids = list(external_ids)
        if len(raw_vectors) != len(ids):
            raise InvalidInputError(
                f"Got {len(raw_vectors)} vectors but {len(ids)} ids; lengths must match"
            )

        start = time.perf_counter()
        coerced: list[Vector] = []
        for raw in raw_vectors:
            vector = as_vector(raw, dimension=dimension)
            if dimension is None:
                dimension = vector.dimension
            coerced.append(vector)

        deduped = deduplicate(coerced, ids)
        if max_leaf_size < 2 and len(deduped) > max_leaf_size:
            raise InvalidConfigurationError(
                f"max_leaf_size must be at least 2 to index {len(deduped)} vectors; "
                f"got {max_leaf_size}"
            )

        matrix = stack_vectors(deduped.vectors, dimension)
        trees = build_forest(
            matrix,
            num_trees,
            max_leaf_size,
            seed=seed,
            max_workers=max_workers,
        )
        index = cls(
            vectors=deduped.vectors,
            ids=deduped.ids,
            trees=trees,
            max_leaf_size=max_leaf_size,
            dimension=dimension,
            max_workers=max_workers,
            matrix=matrix,
        )

        logger.info(
            "Built %d trees over %d unique vectors (%d supplied) in %.1f ms",
            num_trees,
            len(deduped),
            len(coerced),
            (time.perf_counter() - start) * 1000.0,
        )
        return index

    @classmethod
    def build_from_settings(
        cls,
        vectors: Sequence[Vector | Sequence[float]],
        external_ids: Sequence[int],
        *,
        settings: Settings | None = None,
        **overrides: Any,
    ) -> ApproximateNearestNeighborsIndex:
        """Build with parameters taken from ``settings`` (global settings by default)."""
        settings = settings or get_settings()
        params: dict[str, Any] = {
            "num_trees": settings.num_trees,
            "max_leaf_size": settings.max_leaf_size,
            "seed": settings.seed,
            "max_workers": settings.max_workers,
        }
        params.update({key: value for key, value in overrides.items() if value is not None})
        return cls.build(
            params.pop("num_trees"),
            params.pop("max_leaf_size"),
            vectors,
            external_ids,
            **params,
        )

    @property
    def dimension(self) -> int | None:
        return self._dimension

    @property
    def num_trees(self) -> int:
        return len(self._trees)

    @property
    def max_leaf_size(self) -> int:
        return self._max_leaf_size

    @property
    def trees(self) -> tuple[TreeNode, ...]:
        return self._trees

    @property
    def ids(self) -> tuple[int, ...]:
        """External ids in internal-id order."""
        return self._ids

    def __len__(self) -> int:
        return len(self._vectors)

    def all_vectors(self) -> list[Vector]:
        """Return the deduplicated vectors in internal-id order."""
        return list(self._vectors)

    def search(self, query: Vector | Sequence[float], top_k: int) -> list[SearchResult]:
        """Return up to ``top_k`` approximate nearest neighbours of ``query``.

        Results are sorted by squared Euclidean distance, nearest first.
        Fewer than ``top_k`` results come back when the forest surfaces fewer
        distinct candidates.

        The query must match :attr:`dimension`. An index built from no
        vectors and no ``dimension`` argument has no dimension to check
        against; it accepts any 1-D query and returns no results.
        """
        if top_k < 0:
            raise InvalidConfigurationError(f"top_k must be non-negative; got {top_k}")
        query_vector = as_vector(query, dimension=self._dimension)
        if top_k == 0 or not self._vectors:
            return []

        start = time.perf_counter()
        candidates = collect_candidates(
            self._trees, query_vector, top_k, max_workers=self._max_workers
        )
        ranked = rank_candidates(candidates, self._matrix, query_vector, top_k)
        logger.debug(
            "Ranked %d candidates for top_k=%d in %.1f ms",
            len(candidates),
            top_k,
            (time.perf_counter() - start) * 1000.0,
        )
        return [
            SearchResult(
                vector_id=self._ids[internal_id],
                distance=distance,
                vector=self._vectors[internal_id],
            )
            for internal_id, distance in ranked
        ]

    def __repr__(self) -> str:
        return (
            f"ApproximateNearestNeighborsIndex(vectors={len(self)}, "
            f"dimension={self._dimension}, trees={self.num_trees})"
        )
