from __future__ import annotations

from .app import QueryCLIOptions, main, run_queries
from .baselines import BaselineComparison, run_linear_scan_baseline
from .benchmark import QueryBenchmarkResult, benchmark_knn_latency

__all__ = [
    "BaselineComparison",
    "QueryBenchmarkResult",
    "benchmark_knn_latency",
    "run_linear_scan_baseline",
    "QueryCLIOptions",
    "run_queries",
    "main",
]
