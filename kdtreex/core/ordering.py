from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Callable, Generic, Sequence, TypeVar

from kdtreex.exceptions import PreconditionError

A = TypeVar("A")
B = TypeVar("B")


def _sign(lhs: Any, rhs: Any) -> int:
    if lhs < rhs:
        return -1
    if lhs > rhs:
        return 1
    return 0


class DimensionalOrdering(ABC, Generic[A]):
    """Strategy for ordering a multidimensional type by its projection on an axis."""

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Number of axes points of type ``A`` have."""

    @abstractmethod
    def compare_projection(self, dimension: int, x: A, y: A) -> int:
        """Compare the projections of ``x`` and ``y`` on ``dimension``.

        The result is negative when ``x`` projects below ``y``, positive when
        above, and zero when the projections are equal.
        """

    def ordering_by(self, dimension: int) -> "AxisOrdering[A]":
        """Total ordering with ``dimension`` as the primary key.

        Points sharing a projection on ``dimension`` are compared on the
        lowest axis where they differ.
        """

        if not 0 <= dimension < self.dimensions:
            raise PreconditionError(
                f"Axis {dimension} is outside [0, {self.dimensions})."
            )
        return AxisOrdering(self, dimension)

    def check_axis(self, axis: int) -> int:
        if isinstance(axis, bool) or not isinstance(axis, int):
            raise PreconditionError(f"Axis must be an integer, got {axis!r}.")
        if not 0 <= axis < self.dimensions:
            raise PreconditionError(f"Axis {axis} is outside [0, {self.dimensions}).")
        return axis

    def validate_point(self, point: A) -> None:
        """Hook for orderings that can cheaply reject malformed points."""


@dataclass(frozen=True, eq=False)
class AxisOrdering(Generic[A]):
    """``DimensionalOrdering.ordering_by(axis)`` captured for one split axis."""

    source: DimensionalOrdering[A]
    axis: int

    def compare(self, x: A, y: A) -> int:
        primary = self.source.compare_projection(self.axis, x, y)
        if primary != 0:
            return primary
        for dimension in range(self.source.dimensions):
            result = self.source.compare_projection(dimension, x, y)
            if result != 0:
                return result
        return 0

    def lt(self, x: A, y: A) -> bool:
        return self.compare(x, y) < 0

    def gt(self, x: A, y: A) -> bool:
        return self.compare(x, y) > 0

    def equiv(self, x: A, y: A) -> bool:
        return self.compare(x, y) == 0

    def sort_key(self, accessor: Callable[[Any], A] | None = None) -> Callable[[Any], Any]:
        """Return a ``key=`` callable for :func:`sorted`."""

        wrapped = cmp_to_key(self.compare)
        if accessor is None:
            return wrapped
        return lambda item: wrapped(accessor(item))


class SequenceOrdering(DimensionalOrdering[Sequence[Any]]):
    """Ordering for indexable points (tuples, lists, numpy rows)."""

    def __init__(self, dimensions: int, *, validate: bool = False) -> None:
        if isinstance(dimensions, bool) or not isinstance(dimensions, int):
            raise PreconditionError(f"dimensions must be an integer, got {dimensions!r}.")
        self._dimensions = dimensions
        self._validate = validate

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def compare_projection(self, dimension: int, x: Sequence[Any], y: Sequence[Any]) -> int:
        return _sign(x[dimension], y[dimension])

    def validate_point(self, point: Sequence[Any]) -> None:
        if not self._validate:
            return
        try:
            length = len(point)
        except TypeError as exc:
            raise PreconditionError(f"Point {point!r} is not a sequence.") from exc
        if length != self._dimensions:
            raise PreconditionError(
                f"Point {point!r} has {length} coordinates; expected {self._dimensions}."
            )

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, SequenceOrdering)
            and other._dimensions == self._dimensions
        )

    def __hash__(self) -> int:
        return hash((SequenceOrdering, self._dimensions))

    def __repr__(self) -> str:
        return f"SequenceOrdering(dimensions={self._dimensions})"


class KeyedOrdering(DimensionalOrdering[B]):
    """Lift an ordering over ``A`` to records exposing an ``A`` through ``key``."""

    def __init__(self, ordering: DimensionalOrdering[A], key: Callable[[B], A]) -> None:
        self._ordering = ordering
        self._key = key

    @property
    def dimensions(self) -> int:
        return self._ordering.dimensions

    def compare_projection(self, dimension: int, x: B, y: B) -> int:
        return self._ordering.compare_projection(dimension, self._key(x), self._key(y))

    def validate_point(self, point: B) -> None:
        self._ordering.validate_point(self._key(point))


def tuple_ordering(dimensions: int) -> SequenceOrdering:
    """Ordering for fixed-size tuples of 2 to 5 comparable coordinates."""

    if dimensions not in (2, 3, 4, 5):
        raise PreconditionError(
            f"Tuple orderings are provided for 2 to 5 dimensions, got {dimensions}."
        )
    return SequenceOrdering(dimensions)


def sequence_ordering_for(point: Sequence[Any], *, validate: bool = False) -> SequenceOrdering:
    """Infer a :class:`SequenceOrdering` from the length of ``point``."""

    try:
        length = len(point)
    except TypeError as exc:
        raise PreconditionError(
            f"Cannot infer an ordering from {point!r}; pass one explicitly."
        ) from exc
    return SequenceOrdering(length, validate=validate)


__all__ = [
    "AxisOrdering",
    "DimensionalOrdering",
    "KeyedOrdering",
    "SequenceOrdering",
    "sequence_ordering_for",
    "tuple_ordering",
]
