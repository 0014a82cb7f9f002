#!/usr/bin/env python
"""Quick-start guide for kdtreex library usage.

Run with: python -m kdtreex

This module intentionally avoids importing kdtreex internals to provide
a fast, clean startup for displaying help text.
"""

from __future__ import annotations

QUICKSTART = """\
================================================================================
                                KDTREEX
     Immutable k-d trees: exact lookup, k-NN and half-space region queries
================================================================================

INSTALLATION
------------
    pip install kdtreex

BASIC USAGE (map of points to values)
-------------------------------------
    from kdtreex import KDTreeMap

    tree = KDTreeMap.build([((3, 5), "a"), ((9, 4), "b"), ((17, 6), "c")])

    tree.get((9, 4))                # -> "b"
    tree.get((1, 1))                # -> None
    tree.find_nearest((6, 6), 2)    # -> [((3, 5), "a"), ((9, 4), "b")]

    # With distances (squared Euclidean unless told otherwise)
    tree.find_nearest((6, 6), 2, return_distances=True)

POINT SETS AND NUMPY INPUT
--------------------------
    import numpy as np
    from kdtreex import KDTree

    points = np.random.randn(10000, 3)
    tree = KDTree.from_array(points)
    tree.find_nearest((0.0, 0.0, 0.0), 10, metric="euclidean")

REGION QUERIES
--------------
    from kdtreex import Region

    box = Region.from_((35, 0), 0).to((43, 0), 0).from_((0, 81), 1).to((0, 84), 1).build()
    tree.region_query(box)

CUSTOM POINT TYPES
------------------
    from kdtreex import DimensionalOrdering, FunctionMetric, KDTreeMap

    class CityOrdering(DimensionalOrdering):
        dimensions = 2

        def compare_projection(self, dimension, x, y):
            a, b = (x.lat, y.lat) if dimension == 0 else (x.lon, y.lon)
            return (a > b) - (a < b)

    tree = KDTreeMap.build(pairs, ordering=CityOrdering())
    tree.find_nearest(query_city, 5, metric=FunctionMetric("geo", distance, planar))

UPDATES
-------
Trees are immutable; updates rebuild a new tree:

    bigger = tree + ((20, 20), "d")
    smaller = tree - (3, 5)

CONFIGURATION (environment)
---------------------------
    KDTREEX_LOG_LEVEL           INFO
    KDTREEX_ENABLE_DIAGNOSTICS  1
    KDTREEX_METRIC              squared_euclidean
    KDTREEX_DEFAULT_K           1
    KDTREEX_VALIDATE_POINTS     1

BENCHMARKING CLI
----------------
    python -m cli.queries --dimension 3 --tree-points 8192 --k 10 --baseline

================================================================================
"""


def main() -> None:
    """Print quick-start guide."""
    print(QUICKSTART)


if __name__ == "__main__":
    main()
