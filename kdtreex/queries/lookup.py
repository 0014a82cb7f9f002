from __future__ import annotations

from typing import Any

from kdtreex.core.tree import KDTreeInnerNode, TreeNode


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def lookup(root: TreeNode, key: Any) -> Any:
    """Return the value stored under ``key`` or :data:`MISSING`.

    Equality is decided by each node's captured ordering, so ``key`` matches
    when it compares equal on every axis, even if ``==`` would disagree.
    """

    node = root
    while isinstance(node, KDTreeInnerNode):
        comparison = node.ordering.compare(key, node.key)
        if comparison == 0:
            return node.value
        node = node.above if comparison > 0 else node.below
    return MISSING


def contains_key(root: TreeNode, key: Any) -> bool:
    return lookup(root, key) is not MISSING


__all__ = ["MISSING", "contains_key", "lookup"]
