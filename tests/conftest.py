"""Pytest configuration and fixtures."""

from collections.abc import Generator

import numpy as np
import pytest

from sieve.config import Settings
from sieve.vector import Vector


@pytest.fixture
def sample_vectors() -> list[Vector]:
    """Seeded standard-normal vectors for index tests."""
    rng = np.random.default_rng(42)
    return [Vector(row) for row in rng.standard_normal((300, 8)).astype(np.float32)]


@pytest.fixture
def sample_ids(sample_vectors: list[Vector]) -> list[int]:
    """External ids offset from positions so the two are never confused."""
    return [1000 + position for position in range(len(sample_vectors))]


@pytest.fixture
def override_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[Settings, None, None]:
    """Provide isolated sieve settings scoped to tests."""

    import sieve.config as config_module

    for name in ("NUM_TREES", "MAX_LEAF_SIZE", "MAX_WORKERS", "SEED", "DEFAULT_TOP_K", "LOG_LEVEL"):
        monkeypatch.delenv(f"SIEVE_{name}", raising=False)

    original_settings = getattr(config_module, "_settings", None)

    settings = config_module.Settings(
        _env_file=None,
        num_trees=4,
        max_leaf_size=8,
        seed=1234,
        default_top_k=3,
    )

    config_module._settings = settings

    try:
        yield settings
    finally:
        config_module._settings = original_settings
