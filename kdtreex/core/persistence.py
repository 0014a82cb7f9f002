from __future__ import annotations

from typing import Any, Iterable, List, Tuple

from kdtreex.algo.build import build_tree, build_tree_node
from kdtreex.core.ordering import DimensionalOrdering
from kdtreex.core.tree import TreeNode
from kdtreex.queries.lookup import contains_key


def _removal_index(removals: Iterable[Any], ordering: DimensionalOrdering[Any]) -> TreeNode:
    return build_tree_node([(key, None) for key in removals], ordering)


def rebuild_with_updates(
    root: TreeNode,
    ordering: DimensionalOrdering[Any],
    *,
    additions: Iterable[Tuple[Any, Any]] = (),
    removals: Iterable[Any] = (),
) -> TreeNode:
    """Produce a new tree from ``root``'s items with updates applied.

    ``root`` is left untouched. Removals are matched with the tree ordering,
    additions replace any existing item with an equivalent key, and the whole
    point set is rebuilt from scratch.
    """

    removal_list = list(removals)
    items: List[Tuple[Any, Any]] = list(root.iter_items())
    if removal_list:
        index = _removal_index(removal_list, ordering)
        items = [item for item in items if not contains_key(index, item[0])]
    items.extend(additions)
    return build_tree(items, ordering)


__all__ = ["rebuild_with_updates"]
