from __future__ import annotations

from typing import Any, Iterable, List, Sequence, Tuple

from kdtreex.core.ordering import DimensionalOrdering
from kdtreex.core.tree import EMPTY, KDTreeInnerNode, TreeNode
from kdtreex.diagnostics import log_operation
from kdtreex.exceptions import PreconditionError
from kdtreex.logging import get_logger

LOGGER = get_logger("algo.build")

Item = Tuple[Any, Any]


def _find_split(
    items: Sequence[Item], ordering: DimensionalOrdering[Any], axis: int
) -> Tuple[Item, List[Item], List[Item], Any]:
    axis_ordering = ordering.ordering_by(axis)
    ordered = sorted(items, key=axis_ordering.sort_key(lambda item: item[0]))
    median_index = len(ordered) // 2
    return (
        ordered[median_index],
        ordered[:median_index],
        ordered[median_index + 1 :],
        axis_ordering,
    )


def _deduplicate(items: Sequence[Item], ordering: DimensionalOrdering[Any]) -> List[Item]:
    """Collapse pairs whose keys are equivalent on every axis; the last one wins."""

    if len(items) < 2:
        return list(items)
    axis_ordering = ordering.ordering_by(0)
    ordered = sorted(items, key=axis_ordering.sort_key(lambda item: item[0]))
    unique: List[Item] = []
    for item in ordered:
        if unique and axis_ordering.equiv(unique[-1][0], item[0]):
            unique[-1] = item
        else:
            unique.append(item)
    return unique


def build_tree_node(
    items: Sequence[Item],
    ordering: DimensionalOrdering[Any],
    depth: int = 0,
) -> TreeNode:
    """Recursively split ``items`` at the median of the depth's axis.

    For an even count the upper median is chosen, so ``below`` receives the
    extra element.
    """

    if not items:
        return EMPTY
    axis = depth % ordering.dimensions
    (key, value), below, above, axis_ordering = _find_split(items, ordering, axis)
    return KDTreeInnerNode(
        axis=axis,
        key=key,
        value=value,
        below=build_tree_node(below, ordering, depth + 1),
        above=build_tree_node(above, ordering, depth + 1),
        ordering=axis_ordering,
    )


def build_tree(
    items: Iterable[Item],
    ordering: DimensionalOrdering[Any],
) -> TreeNode:
    """Build an immutable tree from ``(key, value)`` pairs."""

    if ordering.dimensions < 1:
        raise PreconditionError(
            f"Ordering must have at least one dimension, got {ordering.dimensions}."
        )
    materialised = [(key, value) for key, value in items]
    for key, _ in materialised:
        ordering.validate_point(key)
    with log_operation(LOGGER, "build_tree") as op_log:
        root = build_tree_node(_deduplicate(materialised, ordering), ordering)
        op_log.add_metadata(
            points=root.size,
            dimensions=ordering.dimensions,
            height=root.height,
        )
    return root


__all__ = ["build_tree", "build_tree_node"]
