from __future__ import annotations

import os
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, Optional

import click
import numpy as np
from numpy.random import default_rng
import typer
from typing_extensions import Annotated

from kdtreex import config as kx_config
from tests.utils.datasets import gaussian_points

from .baselines import run_linear_scan_baseline
from .benchmark import benchmark_knn_latency


@dataclass
class QueryCLIOptions:
    dimension: int = 3
    tree_points: int = 4_096
    queries: int = 256
    k: int = 8
    seed: int = 0
    metric: str = "squared_euclidean"
    baseline: bool = True
    diagnostics: bool | None = None
    log_level: str | None = None


app = typer.Typer(
    add_completion=False,
    pretty_exceptions_enable=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
    help="Benchmark k-nearest-neighbour queries on the immutable k-d tree.",
)

_SHAPE_PANEL = "Benchmark shape"
_RUNTIME_PANEL = "Runtime controls"
_METRICS = ("squared_euclidean", "euclidean", "manhattan", "chebyshev")


@app.callback(invoke_without_command=True)
def cli(
    ctx: typer.Context,
    dimension: Annotated[
        int,
        typer.Option(
            "--dimension",
            help="Dimensionality of tree/query points.",
            rich_help_panel=_SHAPE_PANEL,
        ),
    ] = 3,
    tree_points: Annotated[
        int,
        typer.Option(
            "--tree-points",
            help="Number of points the tree is built from.",
            rich_help_panel=_SHAPE_PANEL,
        ),
    ] = 4_096,
    queries: Annotated[
        int,
        typer.Option(
            "--queries",
            help="Number of query points per run.",
            rich_help_panel=_SHAPE_PANEL,
        ),
    ] = 256,
    k: Annotated[
        int,
        typer.Option(
            "--k",
            help="Number of neighbours requested per query.",
            rich_help_panel=_SHAPE_PANEL,
        ),
    ] = 8,
    seed: Annotated[
        int,
        typer.Option(
            "--seed",
            help="Base random seed for point/query generation.",
            rich_help_panel=_SHAPE_PANEL,
        ),
    ] = 0,
    metric: Annotated[
        str,
        typer.Option(
            "--metric",
            click_type=click.Choice(_METRICS, case_sensitive=False),
            help="Distance metric to benchmark.",
            rich_help_panel=_RUNTIME_PANEL,
        ),
    ] = "squared_euclidean",
    baseline: Annotated[
        bool,
        typer.Option(
            "--baseline/--no-baseline",
            help="Also time a brute-force linear scan and check it agrees.",
            rich_help_panel=_RUNTIME_PANEL,
        ),
    ] = True,
    diagnostics: Annotated[
        Optional[bool],
        typer.Option(
            "--enable-diagnostics/--disable-diagnostics",
            help="Control CPU/RSS polling in operation logs.",
            rich_help_panel=_RUNTIME_PANEL,
        ),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option(
            "--log-level",
            help="Override runtime log level.",
            rich_help_panel=_RUNTIME_PANEL,
        ),
    ] = None,
) -> None:
    if ctx.invoked_subcommand is not None:
        return
    options = QueryCLIOptions(
        dimension=dimension,
        tree_points=tree_points,
        queries=queries,
        k=k,
        seed=seed,
        metric=metric.lower(),
        baseline=baseline,
        diagnostics=diagnostics,
        log_level=log_level,
    )
    run_queries(options)


@contextmanager
def _runtime_overrides(options: QueryCLIOptions) -> Iterator[None]:
    overrides: Dict[str, str] = {}
    if options.diagnostics is not None:
        overrides["KDTREEX_ENABLE_DIAGNOSTICS"] = "1" if options.diagnostics else "0"
    if options.log_level is not None:
        overrides["KDTREEX_LOG_LEVEL"] = options.log_level
    previous = {name: os.environ.get(name) for name in overrides}
    os.environ.update(overrides)
    kx_config.reset_runtime_config_cache()
    try:
        kx_config.runtime_config()
        yield
    finally:
        for name, value in previous.items():
            if value is None:
                os.environ.pop(name, None)
            else:
                os.environ[name] = value
        kx_config.reset_runtime_config_cache()


def run_queries(options: QueryCLIOptions) -> None:
    args = options
    if args.k <= 0:
        raise typer.BadParameter("--k must be positive.")
    if args.dimension <= 0 or args.tree_points <= 0:
        raise typer.BadParameter("--dimension and --tree-points must be positive.")

    with _runtime_overrides(args):
        points_np = gaussian_points(
            default_rng(args.seed), args.tree_points, args.dimension, dtype=np.float64
        )
        queries_np = gaussian_points(
            default_rng(args.seed + 1), args.queries, args.dimension, dtype=np.float64
        )

        tree, result, tree_distances = benchmark_knn_latency(
            dimension=args.dimension,
            tree_points=args.tree_points,
            query_count=args.queries,
            k=args.k,
            seed=args.seed,
            metric=args.metric,
            prebuilt_points=points_np,
            prebuilt_queries=queries_np,
        )

        print(
            f"kdtree | build={result.build_seconds:.4f}s "
            f"height={tree.height} "
            f"queries={result.queries} k={result.k} "
            f"time={result.elapsed_seconds:.4f}s "
            f"latency={result.latency_ms:.4f}ms "
            f"throughput={result.queries_per_second:,.1f} q/s"
        )

        if not args.baseline or result.queries == 0:
            return

        comparison = run_linear_scan_baseline(
            points_np, queries_np, k=args.k, metric=args.metric
        )
        slowdown = (
            comparison.latency_ms / result.latency_ms if result.latency_ms else float("inf")
        )
        agrees = tree_distances.shape == comparison.distances.shape and bool(
            np.allclose(tree_distances, comparison.distances)
        )
        print(
            f"baseline[{comparison.name}] | build={comparison.build_seconds:.4f}s "
            f"time={comparison.elapsed_seconds:.4f}s "
            f"latency={comparison.latency_ms:.4f}ms "
            f"throughput={comparison.queries_per_second:,.1f} q/s "
            f"slowdown={slowdown:.3f}x "
            f"agreement={'ok' if agrees else 'MISMATCH'}"
        )
        if not agrees:
            raise typer.Exit(code=1)


def main() -> None:
    app()


__all__ = ["main"]
