"""
Unit tests for the online anomaly detector.

Includes property-based tests for the statistical invariants.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from feedwatch.core.models import RawDatum, Severity
from feedwatch.detectors import AnomalyDetector, MetricSample, RunningStats, price_extractor
from feedwatch.store.memory_store import MemoryStore


def _datum(value, source="binance") -> RawDatum:
    return RawDatum(
        source=source,
        timestamp="2025-11-17T08:30:00.000Z",
        payload={"symbol": "BTC", "price": value},
    )


def _feed(detector, values, source="binance"):
    return [detector.ingest(_datum(v, source), price_extractor) for v in values]


@pytest.fixture
def detector(store) -> AnomalyDetector:
    return AnomalyDetector(store)


class TestRunningStats:
    def test_welford_mean_and_variance(self, detector):
        _feed(detector, [10, 20, 30])
        stats = detector.stats_for("binance", "price")

        assert stats.n == 3
        assert stats.mean == pytest.approx(20.0)
        assert stats.variance == pytest.approx(100.0)

    def test_seed_state(self):
        stats = RunningStats.seed(5.0)
        assert (stats.mean, stats.m2, stats.n, stats.ewma) == (5.0, 0.0, 1, 5.0)
        assert stats.variance == 0.0
        assert stats.z_score(100.0) == 0.0

    def test_ewma_update(self):
        stats = RunningStats.seed(10.0)
        stats.update(20.0, alpha=0.3)
        assert stats.ewma == pytest.approx(13.0)


class TestDetection:
    def test_first_sample_never_fires(self, detector, store):
        assert detector.ingest(_datum(1e9), price_extractor) is None
        assert store.anomaly_count() == 0

    def test_extractor_returning_none_is_noop(self, detector, store):
        detector.ingest(_datum(1.0), lambda d: None)
        assert detector.stats_for("binance", "price") is None

    def test_non_finite_value_is_noop(self, detector):
        detector.ingest(_datum(1.0), lambda d: MetricSample("price", float("nan")))
        assert detector.stats_for("binance", "price") is None

    def test_ewma_jump_fires_medium(self, detector, store):
        results = _feed(detector, [100, 100, 100, 150])
        anomaly = results[-1]

        assert anomaly is not None
        assert anomaly.severity is Severity.MEDIUM
        assert anomaly.reason.startswith("ewma jump ")
        assert anomaly.reason.endswith("%")
        assert anomaly.metric == "price"
        assert anomaly.value == 150.0
        assert anomaly.id.startswith("anom-")
        assert store.get_source_score("binance").anomaly_count == 1
        assert store.get_anomalies() == [anomaly]

    def test_z_score_spike_fires_high_with_both_reasons(self, store):
        detector = AnomalyDetector(store, z_threshold=3)
        base = [100.0, 101.0] * 20
        _feed(detector, base)
        anomaly = detector.ingest(_datum(200.0), price_extractor)

        assert anomaly.severity is Severity.HIGH
        reasons = anomaly.reason.split("; ")
        assert reasons[0].startswith("z-score=")
        assert reasons[0].endswith("> 3")
        assert reasons[1].startswith("ewma jump ")

    def test_small_moves_do_not_fire(self, detector, store):
        _feed(detector, [100, 101, 99, 100, 102, 98, 100])
        assert store.anomaly_count() == 0

    def test_keys_are_independent(self, detector, store):
        _feed(detector, [100], source="a")
        assert detector.ingest(_datum(500, source="b"), price_extractor) is None
        assert store.anomaly_count() == 0

    def test_forget_source(self, detector):
        _feed(detector, [1, 2], source="a")
        _feed(detector, [1], source="b")

        assert detector.forget_source("a") == 1
        assert detector.stats_for("a", "price") is None
        assert detector.stats_for("b", "price") is not None

    def test_invalid_alpha_rejected(self, store):
        with pytest.raises(ValueError, match="alpha"):
            AnomalyDetector(store, alpha=0)


@settings(max_examples=50)
@given(
    value=st.floats(min_value=-1e6, max_value=1e6, allow_nan=False),
    count=st.integers(min_value=1, max_value=200),
)
def test_property_constant_series_never_fires(value, count):
    """Property test: a constant series keeps std at 0 and raises nothing"""
    store = MemoryStore()
    detector = AnomalyDetector(store)
    for _ in range(count):
        detector.ingest(_datum(value), price_extractor)

    assert detector.stats_for("binance", "price").std == 0.0
    assert store.anomaly_count() == 0


@given(value=st.floats(allow_nan=False, allow_infinity=False))
def test_property_bootstrap_exemption(value):
    """Property test: the first sample of a key never produces an anomaly"""
    store = MemoryStore()
    assert AnomalyDetector(store).ingest(_datum(value), price_extractor) is None
    assert store.anomaly_count() == 0
