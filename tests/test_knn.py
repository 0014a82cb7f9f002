import logging

import numpy as np
import pytest
from numpy.random import default_rng

from kdtreex.algo import build_tree
from kdtreex.baseline import BaselineLinearScan
from kdtreex.core.metrics import CHEBYSHEV, EUCLIDEAN, MANHATTAN, SQUARED_EUCLIDEAN
from kdtreex.core.ordering import SequenceOrdering, tuple_ordering
from kdtreex.core.tree import EMPTY, KDTreeInnerNode
from kdtreex.exceptions import InvariantViolationError
from kdtreex.queries import find_minimal_parent, find_nearest
from tests.utils.datasets import gaussian_points, grid_points, integer_points

_POINTS = [(3, 5), (9, 4), (17, 6), (18, 7)]


def _tree(points, dimensions=2):
    return build_tree([(p, p) for p in points], SequenceOrdering(dimensions))


def _keys(result):
    return [key for key, _, _ in result]


def test_knn_small_scenario() -> None:
    root = _tree(_POINTS)

    assert _keys(find_nearest(root, (3, 5), 1, SQUARED_EUCLIDEAN)) == [(3, 5)]
    assert _keys(find_nearest(root, (9, 4), 2, SQUARED_EUCLIDEAN)) == [(9, 4), (3, 5)]
    assert _keys(find_nearest(root, (6, 6), 3, SQUARED_EUCLIDEAN)) == [
        (3, 5),
        (9, 4),
        (17, 6),
    ]


def test_knn_reports_distances_in_ascending_order() -> None:
    root = _tree(_POINTS)

    result = find_nearest(root, (10, 5), 4, SQUARED_EUCLIDEAN)

    assert [distance for _, _, distance in result] == [2, 49, 50, 68]
    assert [value for _, value, _ in result][0] == (9, 4)


def test_knn_empty_tree_and_non_positive_n() -> None:
    root = _tree(_POINTS)

    assert find_nearest(EMPTY, (0, 0), 3, SQUARED_EUCLIDEAN) == []
    assert find_nearest(root, (0, 0), 0, SQUARED_EUCLIDEAN) == []
    assert find_nearest(root, (0, 0), -2, SQUARED_EUCLIDEAN) == []


def test_knn_n_larger_than_size_returns_everything_sorted() -> None:
    root = _tree(_POINTS)

    result = find_nearest(root, (0, 0), 10, SQUARED_EUCLIDEAN)

    assert sorted(_keys(result)) == sorted(_POINTS)
    distances = [distance for _, _, distance in result]
    assert distances == sorted(distances)


def test_knn_single_point() -> None:
    root = _tree([(4, 4)])

    assert _keys(find_nearest(root, (100, -3), 1, SQUARED_EUCLIDEAN)) == [(4, 4)]
    assert _keys(find_nearest(root, (100, -3), 5, SQUARED_EUCLIDEAN)) == [(4, 4)]


def test_find_minimal_parent_stops_before_small_subtrees() -> None:
    root = _tree(grid_points(10, 10))
    assert isinstance(root, KDTreeInnerNode)

    seed = find_minimal_parent(root, (5, 5), 9)

    assert seed.size >= 9
    if seed.key != (5, 5):
        child = seed.below if seed.is_below((5, 5)) else seed.above
        assert child.size < 9


def test_find_minimal_parent_returns_root_for_large_n() -> None:
    root = _tree(_POINTS)
    assert isinstance(root, KDTreeInnerNode)

    assert find_minimal_parent(root, (0, 0), 100) is root


def test_knn_grid_neighbourhoods() -> None:
    points = grid_points(100, 100)
    root = _tree(points)

    for x, y in [(2, 2), (50, 50), (99, 99), (37, 81), (98, 3)]:
        found = set(_keys(find_nearest(root, (x, y), 9, SQUARED_EUCLIDEAN)))
        expected = {(x + dx, y + dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1)}
        assert found == expected


def test_knn_grid_query_off_grid() -> None:
    root = _tree(grid_points(100, 100))

    found = set(_keys(find_nearest(root, (27, 0), 4, SQUARED_EUCLIDEAN)))

    assert found == {(27, 1), (26, 1), (28, 1), (27, 2)}


@pytest.mark.parametrize("dimension", [2, 3, 5])
def test_knn_matches_linear_scan_on_gaussian_points(dimension: int) -> None:
    rng = default_rng(1234 + dimension)
    points = gaussian_points(rng, 400, dimension)
    queries = gaussian_points(rng, 40, dimension)
    root = build_tree(
        [(tuple(row), index) for index, row in enumerate(points.tolist())],
        SequenceOrdering(dimension),
    )
    scan = BaselineLinearScan.from_points(points)

    for query in queries:
        result = find_nearest(root, tuple(query.tolist()), 7, SQUARED_EUCLIDEAN)
        indices, distances = scan.knn(query, k=7, return_distances=True)
        assert [value for _, value, _ in result] == indices.tolist()
        np.testing.assert_allclose([d for _, _, d in result], distances)


def test_knn_matches_linear_scan_with_shared_coordinates() -> None:
    rng = default_rng(7)
    points = sorted(set(integer_points(rng, 200, 3, high=6)))
    root = _tree(points, dimensions=3)
    scan = BaselineLinearScan.from_points(np.asarray(points, dtype=np.float64))

    for query in integer_points(rng, 30, 3, high=6):
        result = find_nearest(root, query, 5, SQUARED_EUCLIDEAN)
        _, expected = scan.knn(np.asarray(query), k=5, return_distances=True)
        assert [distance for _, _, distance in result] == expected.astype(int).tolist()


@pytest.mark.parametrize(
    "metric, name",
    [(EUCLIDEAN, "euclidean"), (MANHATTAN, "manhattan"), (CHEBYSHEV, "chebyshev")],
)
def test_knn_other_metrics_match_linear_scan(metric, name: str) -> None:
    rng = default_rng(99)
    points = gaussian_points(rng, 300, 3)
    queries = gaussian_points(rng, 25, 3)
    root = build_tree(
        [(tuple(row), index) for index, row in enumerate(points.tolist())],
        SequenceOrdering(3),
    )
    scan = BaselineLinearScan.from_points(points, metric=name)

    for query in queries:
        result = find_nearest(root, tuple(query.tolist()), 5, metric)
        _, distances = scan.knn(query, k=5, return_distances=True)
        np.testing.assert_allclose([d for _, _, d in result], distances)


def test_misplaced_node_raises_invariant_violation(caplog: pytest.LogCaptureFixture) -> None:
    ordering = tuple_ordering(2)
    seed = KDTreeInnerNode(
        axis=1,
        key=(1, 1),
        value="seed",
        below=EMPTY,
        above=EMPTY,
        ordering=ordering.ordering_by(1),
    )
    misplaced = KDTreeInnerNode(
        axis=1,
        key=(3, 3),
        value="misplaced",
        below=EMPTY,
        above=EMPTY,
        ordering=ordering.ordering_by(1),
    )
    root = KDTreeInnerNode(
        axis=0,
        key=(5, 5),
        value="root",
        below=seed,
        above=misplaced,
        ordering=ordering.ordering_by(0),
    )
    caplog.set_level(logging.ERROR, logger="kdtreex.queries.knn")

    with pytest.raises(InvariantViolationError):
        find_nearest(root, (3, 3), 1, SQUARED_EUCLIDEAN)

    assert any("ties with key" in record.getMessage() for record in caplog.records)
