"""Read-only queries over built trees."""

from .knn import find_minimal_parent, find_nearest
from .lookup import MISSING, contains_key, lookup
from .region import (
    AboveHyperplane,
    BelowHyperplane,
    EntireSpace,
    Region,
    RegionBuilder,
    RegionIntersection,
    region_query,
)

__all__ = [
    "find_minimal_parent",
    "find_nearest",
    "MISSING",
    "contains_key",
    "lookup",
    "AboveHyperplane",
    "BelowHyperplane",
    "EntireSpace",
    "Region",
    "RegionBuilder",
    "RegionIntersection",
    "region_query",
]
