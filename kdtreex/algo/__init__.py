"""Tree construction."""

from .build import build_tree, build_tree_node

__all__ = [
    "build_tree",
    "build_tree_node",
]
