import numpy as np
import pytest

from kdtreex.baseline import BaselineLinearScan
from kdtreex.exceptions import PreconditionError


def test_linear_scan_single_query_prefers_lower_indices_on_ties():
    points = np.asarray([[1.0, 0.0], [0.0, 1.0], [3.0, 3.0], [-1.0, 0.0]])
    scan = BaselineLinearScan.from_points(points)

    indices, distances = scan.knn([0.0, 0.0], k=3, return_distances=True)

    assert indices.tolist() == [0, 1, 3]
    assert distances.tolist() == [1.0, 1.0, 1.0]


def test_linear_scan_batch_and_k_clamp():
    points = np.asarray([[0.0], [5.0], [9.0]])
    scan = BaselineLinearScan.from_points(points, metric="euclidean")

    indices = scan.knn([[4.0], [10.0]], k=5)

    assert indices.shape == (2, 3)
    assert indices[0].tolist() == [1, 0, 2]
    assert indices[1].tolist() == [2, 1, 0]


def test_linear_scan_rejects_bad_inputs():
    with pytest.raises(PreconditionError):
        BaselineLinearScan.from_points(np.zeros(4))
    with pytest.raises(PreconditionError):
        BaselineLinearScan.from_points(np.zeros((2, 2)), metric="cosine")
    scan = BaselineLinearScan.from_points(np.zeros((2, 2)))
    with pytest.raises(PreconditionError):
        scan.knn([0.0, 0.0], k=0)
    with pytest.raises(PreconditionError):
        scan.knn([0.0, 0.0, 0.0], k=1)


def test_region_mask_with_open_sides():
    points = np.asarray([[0.0, 0.0], [2.0, 5.0], [4.0, 1.0], [6.0, 6.0]])
    scan = BaselineLinearScan.from_points(points)

    assert scan.region_mask(lower=[1.0, 1.0], upper=[5.0, 5.0]).tolist() == [
        False,
        True,
        True,
        False,
    ]
    assert scan.region_mask(lower=[np.nan, 2.0]).tolist() == [False, True, False, True]
    assert scan.region_mask().all()
