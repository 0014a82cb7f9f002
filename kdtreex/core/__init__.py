"""Core data structures: orderings, metrics and tree nodes."""

from .ordering import (
    AxisOrdering,
    DimensionalOrdering,
    KeyedOrdering,
    SequenceOrdering,
    sequence_ordering_for,
    tuple_ordering,
)
from .metrics import (
    CHEBYSHEV,
    EUCLIDEAN,
    MANHATTAN,
    SQUARED_EUCLIDEAN,
    FunctionMetric,
    KeyedMetric,
    Metric,
    MetricRegistry,
    available_metrics,
    get_metric,
    register_metric,
)
from .tree import EMPTY, KDTreeEmpty, KDTreeInnerNode, TreeNode

__all__ = [
    "AxisOrdering",
    "DimensionalOrdering",
    "KeyedOrdering",
    "SequenceOrdering",
    "sequence_ordering_for",
    "tuple_ordering",
    "CHEBYSHEV",
    "EUCLIDEAN",
    "MANHATTAN",
    "SQUARED_EUCLIDEAN",
    "FunctionMetric",
    "KeyedMetric",
    "Metric",
    "MetricRegistry",
    "available_metrics",
    "get_metric",
    "register_metric",
    "EMPTY",
    "KDTreeEmpty",
    "KDTreeInnerNode",
    "TreeNode",
]
