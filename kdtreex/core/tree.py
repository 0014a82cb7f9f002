from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Iterator, List, Tuple, TypeVar, Union

from kdtreex.core.ordering import AxisOrdering

A = TypeVar("A")
V = TypeVar("V")


@dataclass(frozen=True)
class KDTreeEmpty:
    """Leaf sentinel; a tree built from no points is a single empty node."""

    @property
    def size(self) -> int:
        return 0

    def is_empty(self) -> bool:
        return True

    @property
    def height(self) -> int:
        return 0

    def iter_items(self) -> Iterator[Tuple[Any, Any]]:
        return iter(())

    def to_string_lines(self, indent: int = 0) -> List[str]:
        return ["  " * indent + "[Empty]"]


EMPTY = KDTreeEmpty()


@dataclass(frozen=True, eq=False)
class KDTreeInnerNode(Generic[A, V]):
    """Inner node splitting its subtree on ``axis`` at ``key``.

    Every key in ``below`` orders strictly before ``key`` under ``ordering``
    (the ``ordering_by(axis)`` captured at build time) and every key in
    ``above`` strictly after it.
    """

    axis: int
    key: A
    value: V
    below: "TreeNode"
    above: "TreeNode"
    ordering: AxisOrdering[A] = field(repr=False)
    size: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "size", self.below.size + self.above.size + 1)

    def is_empty(self) -> bool:
        return False

    def is_below(self, x: A) -> bool:
        return self.ordering.lt(x, self.key)

    def is_above(self, x: A) -> bool:
        return self.ordering.gt(x, self.key)

    @property
    def height(self) -> int:
        return 1 + max(self.below.height, self.above.height)

    def iter_items(self) -> Iterator[Tuple[A, V]]:
        """Yield ``(key, value)`` pairs in order: below, this node, above."""

        stack: List[KDTreeInnerNode[A, V]] = []
        node: TreeNode = self
        while stack or isinstance(node, KDTreeInnerNode):
            if isinstance(node, KDTreeInnerNode):
                stack.append(node)
                node = node.below
                continue
            current = stack.pop()
            yield current.key, current.value
            node = current.above

    def to_string_lines(self, indent: int = 0) -> List[str]:
        pad = "  " * indent
        lines = [f"{pad}size={self.size} dim={self.axis} point={self.key!r}", f"{pad}Below:"]
        lines.extend(self.below.to_string_lines(indent + 1))
        lines.append(f"{pad}Above:")
        lines.extend(self.above.to_string_lines(indent + 1))
        return lines

    def __str__(self) -> str:
        return "\n".join(self.to_string_lines())


TreeNode = Union[KDTreeEmpty, KDTreeInnerNode[Any, Any]]


__all__ = [
    "EMPTY",
    "KDTreeEmpty",
    "KDTreeInnerNode",
    "TreeNode",
]
