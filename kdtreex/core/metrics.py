from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Protocol, Sequence, Tuple, TypeVar

from kdtreex import config as kx_config

A = TypeVar("A")
R = TypeVar("R")


class DistanceKernel(Protocol):
    def __call__(self, x: Any, y: Any) -> Any:
        ...


class PlanarKernel(Protocol):
    def __call__(self, dimension: int, x: Any, y: Any) -> Any:
        ...


class Metric(ABC, Generic[A, R]):
    """How distances between points of type ``A`` are measured.

    ``planar_distance(d, x, y)`` is the distance from ``x`` to the hyperplane
    through ``y`` perpendicular to axis ``d``. It must never exceed
    ``distance(x, p)`` for any ``p`` sharing ``y``'s projection on ``d``;
    nearest-neighbour pruning relies on that bound.
    """

    name: str

    @abstractmethod
    def distance(self, x: A, y: A) -> R:
        """Distance between two points."""

    @abstractmethod
    def planar_distance(self, dimension: int, x: A, y: A) -> R:
        """Distance from ``x`` to the hyperplane through ``y`` on ``dimension``."""


@dataclass(frozen=True)
class FunctionMetric(Metric[Any, Any]):
    """Metric assembled from a pair of plain callables."""

    name: str
    distance_kernel: DistanceKernel
    planar_kernel: PlanarKernel

    def distance(self, x: Any, y: Any) -> Any:
        return self.distance_kernel(x, y)

    def planar_distance(self, dimension: int, x: Any, y: Any) -> Any:
        return self.planar_kernel(dimension, x, y)


def _squared_euclidean(x: Sequence[Any], y: Sequence[Any]) -> Any:
    total = 0
    for lhs, rhs in zip(x, y):
        diff = lhs - rhs
        total = total + diff * diff
    return total


def _squared_planar(dimension: int, x: Sequence[Any], y: Sequence[Any]) -> Any:
    diff = x[dimension] - y[dimension]
    return diff * diff


def _euclidean(x: Sequence[Any], y: Sequence[Any]) -> float:
    return math.sqrt(_squared_euclidean(x, y))


def _absolute_planar(dimension: int, x: Sequence[Any], y: Sequence[Any]) -> Any:
    return abs(x[dimension] - y[dimension])


def _manhattan(x: Sequence[Any], y: Sequence[Any]) -> Any:
    total = 0
    for lhs, rhs in zip(x, y):
        total = total + abs(lhs - rhs)
    return total


def _chebyshev(x: Sequence[Any], y: Sequence[Any]) -> Any:
    best = 0
    for lhs, rhs in zip(x, y):
        diff = abs(lhs - rhs)
        if diff > best:
            best = diff
    return best


SQUARED_EUCLIDEAN = FunctionMetric("squared_euclidean", _squared_euclidean, _squared_planar)
EUCLIDEAN = FunctionMetric("euclidean", _euclidean, _absolute_planar)
MANHATTAN = FunctionMetric("manhattan", _manhattan, _absolute_planar)
CHEBYSHEV = FunctionMetric("chebyshev", _chebyshev, _absolute_planar)


class KeyedMetric(Metric[Any, Any]):
    """Measure records through a key accessor, mirroring ``KeyedOrdering``."""

    def __init__(self, metric: Metric[A, R], key: Callable[[Any], A]) -> None:
        self._metric = metric
        self._key = key
        self.name = metric.name

    def distance(self, x: Any, y: Any) -> Any:
        return self._metric.distance(self._key(x), self._key(y))

    def planar_distance(self, dimension: int, x: Any, y: Any) -> Any:
        return self._metric.planar_distance(dimension, self._key(x), self._key(y))


class MetricRegistry:
    """Minimal registry for runtime-selectable metrics."""

    def __init__(self) -> None:
        self._metrics: Dict[str, Metric[Any, Any]] = {}

    def register(self, metric: Metric[Any, Any], *, overwrite: bool = False) -> None:
        name = metric.name.lower()
        if not overwrite and name in self._metrics:
            raise ValueError(f"Metric '{metric.name}' already registered.")
        self._metrics[name] = metric

    def get(self, name: str) -> Metric[Any, Any]:
        key = name.lower()
        if key not in self._metrics:
            raise KeyError(f"Metric '{name}' not registered.")
        return self._metrics[key]

    def names(self) -> Tuple[str, ...]:
        return tuple(sorted(self._metrics.keys()))


def _load_builtin_registry() -> MetricRegistry:
    registry = MetricRegistry()
    for metric in (SQUARED_EUCLIDEAN, EUCLIDEAN, MANHATTAN, CHEBYSHEV):
        registry.register(metric)
    return registry


_REGISTRY = _load_builtin_registry()


def get_metric(name: str | None = None) -> Metric[Any, Any]:
    """Return a registered metric, defaulting to the runtime-selected metric."""

    if name is None:
        name = kx_config.runtime_config().metric
    return _REGISTRY.get(name)


def register_metric(metric: Metric[Any, Any], *, overwrite: bool = False) -> None:
    _REGISTRY.register(metric, overwrite=overwrite)


def available_metrics() -> Tuple[str, ...]:
    return _REGISTRY.names()


__all__ = [
    "CHEBYSHEV",
    "EUCLIDEAN",
    "MANHATTAN",
    "SQUARED_EUCLIDEAN",
    "FunctionMetric",
    "KeyedMetric",
    "Metric",
    "MetricRegistry",
    "available_metrics",
    "get_metric",
    "register_metric",
]
