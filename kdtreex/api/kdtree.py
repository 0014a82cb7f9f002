from __future__ import annotations

from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Iterable,
    Iterator,
    List,
    Mapping,
    Sequence,
    Tuple,
    TypeVar,
    Union,
)

import numpy as np

from kdtreex import config as kx_config
from kdtreex.algo.build import build_tree
from kdtreex.core.metrics import Metric, get_metric
from kdtreex.core.ordering import DimensionalOrdering, sequence_ordering_for
from kdtreex.core.persistence import rebuild_with_updates
from kdtreex.core.tree import EMPTY, TreeNode
from kdtreex.exceptions import PreconditionError
from kdtreex.queries.knn import find_nearest as _find_nearest
from kdtreex.queries.lookup import MISSING, lookup
from kdtreex.queries.region import Region, region_query as _region_query

A = TypeVar("A")
V = TypeVar("V")

MetricLike = Union[Metric[Any, Any], str, None]


def _resolve_metric(metric: MetricLike) -> Metric[Any, Any]:
    if metric is None or isinstance(metric, str):
        try:
            return get_metric(metric)
        except KeyError as exc:
            raise PreconditionError(str(exc)) from exc
    if not callable(getattr(metric, "distance", None)) or not callable(
        getattr(metric, "planar_distance", None)
    ):
        raise PreconditionError(
            f"{metric!r} does not provide distance() and planar_distance()."
        )
    return metric


def _resolve_n(n: int | None) -> int:
    if n is None:
        return kx_config.runtime_config().default_k
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
        raise PreconditionError(f"Neighbour count must be an integer, got {n!r}.")
    return int(n)


def _infer_ordering(key: Any) -> DimensionalOrdering[Any]:
    runtime = kx_config.runtime_config()
    return sequence_ordering_for(key, validate=runtime.validate_points)


def _array_keys(points: Any) -> List[Tuple[Any, ...]]:
    arr = np.asarray(points)
    if arr.ndim != 2:
        raise PreconditionError(
            f"Expected a 2-D array of points, got an array with shape {arr.shape}."
        )
    return [tuple(row) for row in arr.tolist()]


class KDTreeMap(Generic[A, V]):
    """Immutable map from multidimensional keys to values.

    Supports exact lookup, k-nearest-neighbour and region queries. Every
    "update" returns a new map rebuilt from the full item set.
    """

    __slots__ = ("_root", "_ordering")

    def __init__(
        self,
        root: TreeNode = EMPTY,
        ordering: DimensionalOrdering[A] | None = None,
    ) -> None:
        self._root = root
        self._ordering = ordering

    @classmethod
    def build(
        cls,
        items: Iterable[Tuple[A, V]] | Mapping[A, V] = (),
        ordering: DimensionalOrdering[A] | None = None,
    ) -> "KDTreeMap[A, V]":
        if isinstance(items, Mapping):
            items = items.items()
        pairs = list(items)
        if ordering is None:
            if not pairs:
                return cls(EMPTY, None)
            ordering = _infer_ordering(pairs[0][0])
        return cls(build_tree(pairs, ordering), ordering)

    @classmethod
    def from_array(
        cls,
        points: Any,
        values: Sequence[V] | None = None,
        ordering: DimensionalOrdering[Any] | None = None,
    ) -> "KDTreeMap[Tuple[Any, ...], Any]":
        """Build from a 2-D array; rows become tuple keys, values default to row indices."""

        keys = _array_keys(points)
        if values is None:
            payload: List[Any] = list(range(len(keys)))
        else:
            payload = list(values)
            if len(payload) != len(keys):
                raise PreconditionError(
                    f"Got {len(payload)} values for {len(keys)} points."
                )
        return cls.build(list(zip(keys, payload)), ordering)  # type: ignore[return-value]

    @property
    def root(self) -> TreeNode:
        return self._root

    @property
    def ordering(self) -> DimensionalOrdering[A] | None:
        return self._ordering

    @property
    def size(self) -> int:
        return self._root.size

    @property
    def height(self) -> int:
        return self._root.height

    def __len__(self) -> int:
        return self._root.size

    def _check_query(self, query: Any) -> None:
        if self._ordering is not None:
            self._ordering.validate_point(query)

    def get(self, key: A, default: Any = None) -> V | Any:
        self._check_query(key)
        value = lookup(self._root, key)
        return default if value is MISSING else value

    def __getitem__(self, key: A) -> V:
        self._check_query(key)
        value = lookup(self._root, key)
        if value is MISSING:
            raise KeyError(key)
        return value

    def __contains__(self, key: object) -> bool:
        try:
            self._check_query(key)
        except PreconditionError:
            return False
        return lookup(self._root, key) is not MISSING

    def find_nearest(
        self,
        query: A,
        n: int | None = None,
        metric: MetricLike = None,
        *,
        return_distances: bool = False,
    ) -> List[Tuple[Any, ...]]:
        """Return the ``n`` items nearest to ``query`` in ascending distance.

        Items are ``(key, value)`` pairs, or ``(key, value, distance)`` when
        ``return_distances`` is set. ``n`` defaults to the runtime
        ``default_k``; ``metric`` may be a registered name or a
        :class:`Metric` and defaults to the runtime metric.
        """

        count = _resolve_n(n)
        resolved = _resolve_metric(metric)
        self._check_query(query)
        candidates = _find_nearest(self._root, query, count, resolved)
        if return_distances:
            return list(candidates)
        return [(key, value) for key, value, _ in candidates]

    def nearest(self, query: A, metric: MetricLike = None) -> Tuple[A, V] | None:
        found = self.find_nearest(query, 1, metric)
        return found[0] if found else None  # type: ignore[return-value]

    def region_query(self, region: Region) -> List[Tuple[A, V]]:
        return _region_query(self._root, region, self._ordering)

    def items(self) -> List[Tuple[A, V]]:
        return list(self._root.iter_items())

    def keys(self) -> List[A]:
        return [key for key, _ in self._root.iter_items()]

    def values(self) -> List[V]:
        return [value for _, value in self._root.iter_items()]

    def __iter__(self) -> Iterator[A]:
        for key, _ in self._root.iter_items():
            yield key

    def filter(self, predicate: Callable[[A, V], bool]) -> "KDTreeMap[A, V]":
        kept = [(key, value) for key, value in self._root.iter_items() if predicate(key, value)]
        return type(self).build(kept, self._ordering)

    def map_values(self, fn: Callable[[V], Any]) -> "KDTreeMap[A, Any]":
        mapped = [(key, fn(value)) for key, value in self._root.iter_items()]
        return type(self).build(mapped, self._ordering)

    def with_item(self, key: A, value: V) -> "KDTreeMap[A, V]":
        ordering = self._ordering if self._ordering is not None else _infer_ordering(key)
        root = rebuild_with_updates(self._root, ordering, additions=[(key, value)])
        return type(self)(root, ordering)

    def without_key(self, key: A) -> "KDTreeMap[A, V]":
        if self._ordering is None:
            return self
        self._check_query(key)
        root = rebuild_with_updates(self._root, self._ordering, removals=[key])
        return type(self)(root, self._ordering)

    def __add__(self, item: Tuple[A, V]) -> "KDTreeMap[A, V]":
        key, value = item
        return self.with_item(key, value)

    def __sub__(self, key: A) -> "KDTreeMap[A, V]":
        return self.without_key(key)

    def to_dict(self) -> Dict[A, V]:
        return dict(self._root.iter_items())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={self.size}, ordering={self._ordering!r})"

    def __str__(self) -> str:
        return "\n".join(self._root.to_string_lines())


class KDTree(Generic[A]):
    """Immutable set of multidimensional points."""

    __slots__ = ("_map",)

    def __init__(self, backing: KDTreeMap[A, A] | None = None) -> None:
        self._map: KDTreeMap[A, A] = backing if backing is not None else KDTreeMap()

    @classmethod
    def build(
        cls,
        points: Iterable[A] = (),
        ordering: DimensionalOrdering[A] | None = None,
    ) -> "KDTree[A]":
        return cls(KDTreeMap.build([(point, point) for point in points], ordering))

    @classmethod
    def from_array(
        cls, points: Any, ordering: DimensionalOrdering[Any] | None = None
    ) -> "KDTree[Tuple[Any, ...]]":
        return cls.build(_array_keys(points), ordering)  # type: ignore[return-value]

    @property
    def ordering(self) -> DimensionalOrdering[A] | None:
        return self._map.ordering

    @property
    def root(self) -> TreeNode:
        return self._map.root

    @property
    def size(self) -> int:
        return self._map.size

    @property
    def height(self) -> int:
        return self._map.height

    def __len__(self) -> int:
        return self._map.size

    def __contains__(self, point: object) -> bool:
        return point in self._map

    def __iter__(self) -> Iterator[A]:
        return iter(self._map)

    def find_nearest(
        self,
        query: A,
        n: int | None = None,
        metric: MetricLike = None,
        *,
        return_distances: bool = False,
    ) -> List[Any]:
        found = self._map.find_nearest(query, n, metric, return_distances=True)
        if return_distances:
            return [(point, distance) for point, _, distance in found]
        return [point for point, _, _ in found]

    def nearest(self, query: A, metric: MetricLike = None) -> A | None:
        found = self.find_nearest(query, 1, metric)
        return found[0] if found else None

    def region_query(self, region: Region) -> List[A]:
        return [point for point, _ in self._map.region_query(region)]

    def points(self) -> List[A]:
        return self._map.keys()

    def filter(self, predicate: Callable[[A], bool]) -> "KDTree[A]":
        return type(self)(self._map.filter(lambda point, _: predicate(point)))

    def with_point(self, point: A) -> "KDTree[A]":
        return type(self)(self._map.with_item(point, point))

    def without_point(self, point: A) -> "KDTree[A]":
        return type(self)(self._map.without_key(point))

    def __add__(self, point: A) -> "KDTree[A]":
        return self.with_point(point)

    def __sub__(self, point: A) -> "KDTree[A]":
        return self.without_point(point)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={self.size}, ordering={self.ordering!r})"

    def __str__(self) -> str:
        return str(self._map)


__all__ = ["KDTree", "KDTreeMap"]
