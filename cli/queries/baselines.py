from __future__ import annotations

import time
from dataclasses import dataclass

import numpy as np

from kdtreex.baseline import BaselineLinearScan


@dataclass(frozen=True)
class BaselineComparison:
    name: str
    build_seconds: float
    elapsed_seconds: float
    latency_ms: float
    queries_per_second: float
    distances: np.ndarray


def run_linear_scan_baseline(
    points: np.ndarray,
    queries: np.ndarray,
    *,
    k: int,
    metric: str = "squared_euclidean",
) -> BaselineComparison:
    start_build = time.perf_counter()
    scan = BaselineLinearScan.from_points(points, metric=metric)
    build_seconds = time.perf_counter() - start_build
    start = time.perf_counter()
    _, distances = scan.knn(queries, k=k, return_distances=True)
    elapsed = time.perf_counter() - start
    qps = queries.shape[0] / elapsed if elapsed > 0 else float("inf")
    latency = (elapsed / queries.shape[0]) * 1e3 if queries.shape[0] else 0.0
    return BaselineComparison(
        name="linear_scan",
        build_seconds=build_seconds,
        elapsed_seconds=elapsed,
        latency_ms=latency,
        queries_per_second=qps,
        distances=np.asarray(distances, dtype=np.float64),
    )
