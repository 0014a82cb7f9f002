import math

import pytest

from kdtreex.core.metrics import (
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
)
from kdtreex import config as kx_config


@pytest.fixture(autouse=True)
def reset_cache(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("KDTREEX_METRIC", raising=False)
    kx_config.reset_runtime_config_cache()
    yield
    kx_config.reset_runtime_config_cache()


def test_builtin_distances():
    x, y = (1, 2, 3), (4, 6, 3)

    assert SQUARED_EUCLIDEAN.distance(x, y) == 25
    assert EUCLIDEAN.distance(x, y) == 5.0
    assert MANHATTAN.distance(x, y) == 7
    assert CHEBYSHEV.distance(x, y) == 4


@pytest.mark.parametrize("metric", [SQUARED_EUCLIDEAN, EUCLIDEAN, MANHATTAN, CHEBYSHEV])
def test_planar_distance_never_exceeds_distance(metric):
    x = (0.5, -2.0, 3.0)
    y = (1.5, 4.0, -1.0)
    for dimension in range(3):
        on_plane = list(x)
        on_plane[dimension] = y[dimension]
        assert metric.planar_distance(dimension, x, y) <= metric.distance(x, tuple(on_plane)) + 1e-12
        assert metric.planar_distance(dimension, x, y) <= metric.distance(x, y) + 1e-12


def test_squared_planar_distance_is_squared_axis_gap():
    assert SQUARED_EUCLIDEAN.planar_distance(1, (0, 3), (10, 7)) == 16
    assert math.isclose(EUCLIDEAN.planar_distance(1, (0, 3), (10, 7)), 4.0)


def test_registry_lookup_and_defaults(monkeypatch: pytest.MonkeyPatch):
    assert set(available_metrics()) >= {"squared_euclidean", "euclidean", "manhattan", "chebyshev"}
    assert get_metric() is SQUARED_EUCLIDEAN
    assert get_metric("EUCLIDEAN") is EUCLIDEAN

    monkeypatch.setenv("KDTREEX_METRIC", "chebyshev")
    kx_config.reset_runtime_config_cache()
    assert get_metric() is CHEBYSHEV


def test_registry_rejects_duplicates_and_missing_names():
    registry = MetricRegistry()
    metric = FunctionMetric("demo", lambda x, y: 0, lambda d, x, y: 0)
    registry.register(metric)

    with pytest.raises(ValueError):
        registry.register(metric)
    registry.register(metric, overwrite=True)
    assert registry.names() == ("demo",)
    with pytest.raises(KeyError):
        registry.get("missing")


def test_keyed_metric_measures_through_accessor():
    metric = KeyedMetric(MANHATTAN, lambda record: record["pos"])

    assert metric.name == "manhattan"
    assert metric.distance({"pos": (0, 0)}, {"pos": (2, 3)}) == 5
    assert metric.planar_distance(1, {"pos": (0, 0)}, {"pos": (2, 3)}) == 3


def test_function_metric_takes_name_and_kernels_positionally():
    metric = FunctionMetric("gap", lambda x, y: abs(x - y), lambda d, x, y: abs(x - y))

    assert metric.name == "gap"
    assert metric.distance(2, 7) == 5
    assert metric.planar_distance(0, 7, 2) == 5


def test_metric_base_is_abstract():
    with pytest.raises(TypeError):
        Metric()  # type: ignore[abstract]

    class HalfDone(Metric):
        name = "half"

        def distance(self, x, y):
            return 0

    with pytest.raises(TypeError):
        HalfDone()  # type: ignore[abstract]
