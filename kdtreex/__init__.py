"""kdtreex: immutable k-d trees for exact, nearest-neighbour and region queries.

Quick Start
-----------
>>> from kdtreex import KDTreeMap
>>>
>>> cities = KDTreeMap.build({(3, 5): "a", (9, 4): "b", (17, 6): "c"})
>>> cities.get((9, 4))
'b'
>>> cities.find_nearest((8, 4), 2)
[((9, 4), 'b'), ((3, 5), 'a')]

Region Queries
--------------
>>> from kdtreex import Region
>>>
>>> box = Region.from_((0, 0), 0).to((10, 0), 0).build()
>>> sorted(cities.region_query(box))
[((3, 5), 'a'), ((9, 4), 'b')]

Classes
-------
KDTreeMap : Map from multidimensional keys to values.
KDTree : Set of multidimensional points.
DimensionalOrdering : Per-axis comparison capability for a point type.
Metric : Distance capability used by nearest-neighbour search.
"""

from importlib.metadata import version as _pkg_version

try:
    __version__ = _pkg_version("kdtreex")
except Exception:  # pragma: no cover - best effort during local development
    __version__ = "0.1.0"

# Primary user-facing API
from .api import KDTree, KDTreeMap
from .queries.region import (
    AboveHyperplane,
    BelowHyperplane,
    EntireSpace,
    Region,
    RegionBuilder,
    RegionIntersection,
)

# Capabilities and engine-level API
from .core import (
    CHEBYSHEV,
    EUCLIDEAN,
    MANHATTAN,
    SQUARED_EUCLIDEAN,
    DimensionalOrdering,
    FunctionMetric,
    KeyedMetric,
    KeyedOrdering,
    Metric,
    SequenceOrdering,
    available_metrics,
    get_metric,
    register_metric,
    sequence_ordering_for,
    tuple_ordering,
)
from .algo import build_tree
from .queries import find_nearest, lookup, region_query
from .baseline import BaselineLinearScan
from .exceptions import InvariantViolationError, KDTreeError, PreconditionError

__all__ = [
    # Primary API
    "__version__",
    "KDTree",
    "KDTreeMap",
    "Region",
    "RegionBuilder",
    "EntireSpace",
    "AboveHyperplane",
    "BelowHyperplane",
    "RegionIntersection",
    # Capabilities
    "DimensionalOrdering",
    "KeyedOrdering",
    "SequenceOrdering",
    "sequence_ordering_for",
    "tuple_ordering",
    "Metric",
    "FunctionMetric",
    "KeyedMetric",
    "SQUARED_EUCLIDEAN",
    "EUCLIDEAN",
    "MANHATTAN",
    "CHEBYSHEV",
    "available_metrics",
    "get_metric",
    "register_metric",
    # Engine-level API
    "build_tree",
    "find_nearest",
    "lookup",
    "region_query",
    "BaselineLinearScan",
    # Errors
    "KDTreeError",
    "PreconditionError",
    "InvariantViolationError",
]
