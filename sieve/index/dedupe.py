"""Exact-duplicate removal ahead of forest construction."""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Sequence
from dataclasses import dataclass

from sieve.vector import HashKey, Vector

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DedupedVectors:
    """Unique vectors in first-seen order with their external ids."""

    vectors: tuple[Vector, ...]
    ids: tuple[int, ...]

    def __len__(self) -> int:
        return len(self.vectors)


def deduplicate(vectors: Sequence[Vector], ids: Sequence[int]) -> DedupedVectors:
    """Keep the first occurrence of each bit-identical vector.

    ``vectors`` and ``ids`` are positionally paired; callers validate that
    they have the same length.
    """
    unique: OrderedDict[HashKey, tuple[Vector, int]] = OrderedDict()

    for vector, vector_id in zip(vectors, ids, strict=True):
        key = vector.hashkey()
        if key in unique:
            logger.debug(
                "Dropping duplicate vector id=%s (first seen as id=%s)", vector_id, unique[key][1]
            )
            continue
        unique[key] = (vector, vector_id)

    return DedupedVectors(
        vectors=tuple(vector for vector, _ in unique.values()),
        ids=tuple(vector_id for _, vector_id in unique.values()),
    )
