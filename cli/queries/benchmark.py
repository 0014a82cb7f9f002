from __future__ import annotations

import time
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
from numpy.random import default_rng

from kdtreex import KDTree
from tests.utils.datasets import gaussian_points


@dataclass(frozen=True)
class QueryBenchmarkResult:
    elapsed_seconds: float
    queries: int
    k: int
    latency_ms: float
    queries_per_second: float
    build_seconds: float | None = None


def _build_tree(
    *,
    dimension: int,
    tree_points: int,
    seed: int,
    prebuilt_points: np.ndarray | None = None,
) -> Tuple[KDTree, np.ndarray, float]:
    if prebuilt_points is not None:
        points_np = np.asarray(prebuilt_points, dtype=np.float64)
    else:
        points_np = gaussian_points(default_rng(seed), tree_points, dimension, dtype=np.float64)
    start = time.perf_counter()
    tree = KDTree.from_array(points_np)
    build_seconds = time.perf_counter() - start
    return tree, points_np, build_seconds


def benchmark_knn_latency(
    *,
    dimension: int,
    tree_points: int,
    query_count: int,
    k: int,
    seed: int,
    metric: str = "squared_euclidean",
    prebuilt_points: np.ndarray | None = None,
    prebuilt_queries: np.ndarray | None = None,
) -> Tuple[KDTree, QueryBenchmarkResult, np.ndarray]:
    """Build a tree and time ``k``-NN queries; returns per-query neighbour distances."""

    tree, _, build_seconds = _build_tree(
        dimension=dimension,
        tree_points=tree_points,
        seed=seed,
        prebuilt_points=prebuilt_points,
    )
    if prebuilt_queries is not None:
        queries = np.asarray(prebuilt_queries, dtype=np.float64)
    else:
        queries = gaussian_points(default_rng(seed + 1), query_count, dimension, dtype=np.float64)

    distances: List[List[float]] = []
    start = time.perf_counter()
    for query in queries.tolist():
        found = tree.find_nearest(tuple(query), k, metric, return_distances=True)
        distances.append([float(distance) for _, distance in found])
    elapsed = time.perf_counter() - start

    count = int(queries.shape[0])
    qps = count / elapsed if elapsed > 0 else float("inf")
    latency = (elapsed / count) * 1e3 if count else 0.0
    result = QueryBenchmarkResult(
        elapsed_seconds=elapsed,
        queries=count,
        k=k,
        latency_ms=latency,
        queries_per_second=qps,
        build_seconds=build_seconds,
    )
    return tree, result, np.asarray(distances, dtype=np.float64)
