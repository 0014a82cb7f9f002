"""Public ergonomic façade for kdtreex."""

from .kdtree import KDTree, KDTreeMap

__all__ = [
    "KDTree",
    "KDTreeMap",
]
