from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

import numpy as np

from kdtreex.exceptions import PreconditionError

_SUPPORTED_METRICS = ("squared_euclidean", "euclidean", "manhattan", "chebyshev")


def _distances(points: np.ndarray, query: np.ndarray, metric: str) -> np.ndarray:
    diff = points - query[None, :]
    if metric == "squared_euclidean":
        return np.sum(diff * diff, axis=1)
    if metric == "euclidean":
        return np.sqrt(np.sum(diff * diff, axis=1))
    if metric == "manhattan":
        return np.sum(np.abs(diff), axis=1)
    return np.max(np.abs(diff), axis=1)


@dataclass(frozen=True)
class BaselineLinearScan:
    """Brute-force reference answering the same queries as the tree by scanning."""

    points: np.ndarray
    metric: str = "squared_euclidean"

    @classmethod
    def from_points(cls, points: Any, *, metric: str = "squared_euclidean") -> "BaselineLinearScan":
        arr = np.asarray(points, dtype=np.float64)
        if arr.ndim != 2:
            raise PreconditionError(
                f"Baseline expects a 2-D array of points, got shape {arr.shape}."
            )
        if metric not in _SUPPORTED_METRICS:
            raise PreconditionError(
                f"Unsupported metric '{metric}'. Expected one of {_SUPPORTED_METRICS}."
            )
        return cls(points=arr, metric=metric)

    @property
    def num_points(self) -> int:
        return int(self.points.shape[0])

    def _single_query(self, query: np.ndarray, k: int) -> Tuple[np.ndarray, np.ndarray]:
        dists = _distances(self.points, query, self.metric)
        order = np.argsort(dists, kind="stable")[:k]
        return order.astype(np.int64), dists[order]

    def knn(
        self,
        query_points: Any,
        *,
        k: int,
        return_distances: bool = False,
    ) -> Tuple[np.ndarray, np.ndarray] | np.ndarray:
        """k nearest rows for one query (1-D) or a batch (2-D); ties prefer lower indices."""

        if k <= 0:
            raise PreconditionError("k must be positive.")
        k = min(int(k), self.num_points)
        queries = np.asarray(query_points, dtype=np.float64)
        single = queries.ndim == 1
        if single:
            queries = queries[None, :]
        if queries.shape[1] != self.points.shape[1]:
            raise PreconditionError(
                f"Query dimension {queries.shape[1]} does not match {self.points.shape[1]}."
            )

        indices = np.empty((queries.shape[0], k), dtype=np.int64)
        distances = np.empty((queries.shape[0], k), dtype=np.float64)
        for row, query in enumerate(queries):
            indices[row], distances[row] = self._single_query(query, k)

        if single:
            indices, distances = indices[0], distances[0]
        if return_distances:
            return indices, distances
        return indices

    def region_mask(self, lower: Any = None, upper: Any = None) -> np.ndarray:
        """Boolean mask of rows inside the closed box ``lower <= p <= upper``.

        ``None`` bounds, or NaN entries within a bound, leave that side open.
        """

        mask = np.ones(self.num_points, dtype=bool)
        if lower is not None:
            lo = np.asarray(lower, dtype=np.float64)
            mask &= np.all(np.isnan(lo) | (self.points >= lo), axis=1)
        if upper is not None:
            hi = np.asarray(upper, dtype=np.float64)
            mask &= np.all(np.isnan(hi) | (self.points <= hi), axis=1)
        return mask


__all__ = ["BaselineLinearScan"]
