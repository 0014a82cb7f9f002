from __future__ import annotations

from typing import List, Tuple

import numpy as np
from numpy.random import Generator, default_rng

Array = np.ndarray


def _ensure_rng(rng: Generator | None) -> Generator:
    return rng or default_rng()


def gaussian_points(
    rng: Generator | None,
    count: int,
    dimension: int,
    *,
    dtype: np.dtype | type[np.floating] = np.float64,
) -> Array:
    """Sample `count` Gaussian points with the requested dimensionality."""

    generator = _ensure_rng(rng)
    if count <= 0 or dimension <= 0:
        return np.zeros((max(count, 0), max(dimension, 0)), dtype=dtype)
    samples = generator.normal(loc=0.0, scale=1.0, size=(count, dimension))
    return np.asarray(samples, dtype=dtype)


def integer_points(
    rng: Generator | None,
    count: int,
    dimension: int,
    *,
    high: int = 10,
) -> List[Tuple[int, ...]]:
    """Sample integer tuples in ``[0, high)``; small ranges force shared coordinates."""

    generator = _ensure_rng(rng)
    samples = generator.integers(0, high, size=(max(count, 0), dimension))
    return [tuple(int(v) for v in row) for row in samples]


def grid_points(width: int, height: int, *, start: int = 1) -> List[Tuple[int, int]]:
    """Every integer point of the ``width`` x ``height`` grid, row by row."""

    return [
        (x, y)
        for y in range(start, start + height)
        for x in range(start, start + width)
    ]
