"""JSONL reading and writing of vector records."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from sieve.errors import InvalidInputError
from sieve.vector import Vector


@dataclass(frozen=True, slots=True)
class VectorRecord:
    """One ``{"id": ..., "vector": [...]}`` line."""

    vector_id: int
    vector: Vector

    def to_json(self) -> str:
        payload = {"id": self.vector_id, "vector": self.vector.tolist()}
        return json.dumps(payload, separators=(",", ":"))


def _parse_line(line: str, position: int, path: Path) -> VectorRecord:
    try:
        payload = json.loads(line)
    except json.JSONDecodeError as exc:
        raise InvalidInputError(f"{path}:{position + 1}: invalid JSON ({exc.msg})") from exc

    if isinstance(payload, list):
        payload = {"vector": payload}
    if not isinstance(payload, dict) or "vector" not in payload:
        raise InvalidInputError(f"{path}:{position + 1}: expected an object with a 'vector' field")

    raw_id = payload.get("id", position)
    if isinstance(raw_id, bool) or not isinstance(raw_id, int):
        raise InvalidInputError(f"{path}:{position + 1}: 'id' must be an integer; got {raw_id!r}")

    try:
        vector = Vector(payload["vector"])
    except InvalidInputError as exc:
        raise InvalidInputError(f"{path}:{position + 1}: {exc}") from exc
    return VectorRecord(vector_id=raw_id, vector=vector)


def iter_vector_records(path: Path) -> Iterator[VectorRecord]:
    """Yield records from ``path``, skipping blank lines.

    A line may also be a bare JSON array, in which case its id is its
    zero-based position among non-blank lines.
    """
    position = 0
    with Path(path).open("r", encoding="utf-8") as handle:
        for line in handle:
            if not line.strip():
                continue
            yield _parse_line(line, position, Path(path))
            position += 1


def read_vector_records(path: Path) -> tuple[list[Vector], list[int]]:
    """Load ``path`` into parallel vector and id lists."""
    vectors: list[Vector] = []
    ids: list[int] = []
    for record in iter_vector_records(path):
        vectors.append(record.vector)
        ids.append(record.vector_id)
    return vectors, ids


def write_vector_records(path: Path, records: Iterable[VectorRecord]) -> int:
    """Write ``records`` to ``path`` via a sibling temp file; returns the count."""
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    tmp = destination.with_suffix(destination.suffix + ".tmp")

    count = 0
    with tmp.open("w", encoding="utf-8") as handle:
        for record in records:
            handle.write(record.to_json() + "\n")
            count += 1
    tmp.replace(destination)
    return count
