from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Tuple

from kdtreex.core.ordering import DimensionalOrdering
from kdtreex.core.tree import KDTreeInnerNode, TreeNode
from kdtreex.diagnostics import log_operation
from kdtreex.exceptions import PreconditionError
from kdtreex.logging import get_logger

LOGGER = get_logger("queries.region")


class Region(ABC):
    """A set of points described by half-spaces and their intersections.

    Regions never enumerate points; they answer membership (``contains``) and
    whether two regions could share a point (``overlaps_with``). Both take
    the :class:`DimensionalOrdering` used to project points on an axis.
    """

    @abstractmethod
    def contains(self, point: Any, ordering: DimensionalOrdering[Any]) -> bool:
        """Whether ``point`` lies in the region."""

    @abstractmethod
    def overlaps_with(self, other: "Region", ordering: DimensionalOrdering[Any]) -> bool:
        """Whether the two regions could share a point; may over-approximate."""

    def validate(self, ordering: DimensionalOrdering[Any]) -> None:
        """Raise :class:`PreconditionError` if the region is malformed for ``ordering``."""

    @staticmethod
    def from_(boundary: Any, axis: int) -> "RegionBuilder":
        return RegionBuilder().from_(boundary, axis)

    @staticmethod
    def to(boundary: Any, axis: int) -> "RegionBuilder":
        return RegionBuilder().to(boundary, axis)


@dataclass(frozen=True)
class EntireSpace(Region):
    def contains(self, point: Any, ordering: DimensionalOrdering[Any]) -> bool:
        return True

    def overlaps_with(self, other: Region, ordering: DimensionalOrdering[Any]) -> bool:
        return True


@dataclass(frozen=True)
class _HalfSpace(Region):
    boundary: Any
    axis: int

    def validate(self, ordering: DimensionalOrdering[Any]) -> None:
        ordering.check_axis(self.axis)

    def overlaps_with(self, other: Region, ordering: DimensionalOrdering[Any]) -> bool:
        if isinstance(other, _HalfSpace):
            if other.axis != self.axis or type(other) is type(self):
                return True
            return self._meets(other, ordering)
        return other.overlaps_with(self, ordering)

    @abstractmethod
    def _meets(self, opposite: "_HalfSpace", ordering: DimensionalOrdering[Any]) -> bool:
        """Same-axis overlap with a half-space facing the other way."""


@dataclass(frozen=True)
class AboveHyperplane(_HalfSpace):
    """Points whose projection on ``axis`` is at least ``boundary``'s."""

    def contains(self, point: Any, ordering: DimensionalOrdering[Any]) -> bool:
        return ordering.compare_projection(self.axis, point, self.boundary) >= 0

    def _meets(self, opposite: _HalfSpace, ordering: DimensionalOrdering[Any]) -> bool:
        # [self, inf) meets (-inf, opposite]
        return ordering.compare_projection(self.axis, self.boundary, opposite.boundary) <= 0


@dataclass(frozen=True)
class BelowHyperplane(_HalfSpace):
    """Points whose projection on ``axis`` is at most ``boundary``'s."""

    def contains(self, point: Any, ordering: DimensionalOrdering[Any]) -> bool:
        return ordering.compare_projection(self.axis, point, self.boundary) <= 0

    def _meets(self, opposite: _HalfSpace, ordering: DimensionalOrdering[Any]) -> bool:
        return ordering.compare_projection(self.axis, opposite.boundary, self.boundary) <= 0


@dataclass(frozen=True)
class RegionIntersection(Region):
    components: Tuple[Region, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "components", tuple(self.components))

    def contains(self, point: Any, ordering: DimensionalOrdering[Any]) -> bool:
        return all(component.contains(point, ordering) for component in self.components)

    def overlaps_with(self, other: Region, ordering: DimensionalOrdering[Any]) -> bool:
        return all(component.overlaps_with(other, ordering) for component in self.components)

    def validate(self, ordering: DimensionalOrdering[Any]) -> None:
        for component in self.components:
            if not isinstance(component, Region):
                raise PreconditionError(f"{component!r} is not a Region.")
            component.validate(ordering)


class RegionBuilder:
    """Fluent accumulation of half-space constraints.

    ``RegionBuilder().from_((35, 0), 0).to((43, 0), 0).build()`` describes the
    slab ``35 <= x <= 43``.
    """

    def __init__(self, constraints: Iterable[Region] = ()) -> None:
        self._constraints: List[Region] = list(constraints)

    def from_(self, boundary: Any, axis: int) -> "RegionBuilder":
        self._constraints.append(AboveHyperplane(boundary, axis))
        return self

    def to(self, boundary: Any, axis: int) -> "RegionBuilder":
        self._constraints.append(BelowHyperplane(boundary, axis))
        return self

    def add(self, region: Region) -> "RegionBuilder":
        self._constraints.append(region)
        return self

    def build(self) -> Region:
        if not self._constraints:
            return EntireSpace()
        if len(self._constraints) == 1:
            return self._constraints[0]
        return RegionIntersection(tuple(self._constraints))


def _collect(
    node: TreeNode,
    region: Region,
    ordering: DimensionalOrdering[Any],
    matches: List[Tuple[Any, Any]],
) -> int:
    if not isinstance(node, KDTreeInnerNode):
        return 0
    visited = 1
    if region.overlaps_with(BelowHyperplane(node.key, node.axis), ordering):
        visited += _collect(node.below, region, ordering, matches)
    if region.contains(node.key, ordering):
        matches.append((node.key, node.value))
    if region.overlaps_with(AboveHyperplane(node.key, node.axis), ordering):
        visited += _collect(node.above, region, ordering, matches)
    return visited


def region_query(
    root: TreeNode,
    region: Region,
    ordering: DimensionalOrdering[Any] | None,
) -> List[Tuple[Any, Any]]:
    """Return every ``(key, value)`` whose key lies in ``region``.

    Subtrees on the far side of a node's splitting hyperplane are skipped when
    the region cannot reach them. Results follow in-order traversal but should
    be treated as an unordered collection.
    """

    if not isinstance(region, Region):
        raise PreconditionError(f"{region!r} is not a Region.")
    if not isinstance(root, KDTreeInnerNode) or ordering is None:
        return []
    region.validate(ordering)
    matches: List[Tuple[Any, Any]] = []
    with log_operation(LOGGER, "region_query") as op_log:
        visited = _collect(root, region, ordering, matches)
        op_log.add_metadata(matched=len(matches), visited=visited)
    return matches


__all__ = [
    "AboveHyperplane",
    "BelowHyperplane",
    "EntireSpace",
    "Region",
    "RegionBuilder",
    "RegionIntersection",
    "region_query",
]
