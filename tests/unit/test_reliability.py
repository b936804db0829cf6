"""
Unit tests for reliability scoring.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from feedwatch.detectors import CompletenessMonitor
from feedwatch.observability.metrics import REGISTRY
from feedwatch.scoring import ReliabilityScorer, compute_score


class TestComputeScore:
    def test_stale_and_anomaly_penalties(self):
        assert compute_score(stale_count=2, anomaly_count=1, completeness_score=100) == 93

    def test_clean_source_scores_100(self):
        assert compute_score(0, 0, 100.0) == 100

    def test_completeness_penalty_below_floor_only(self):
        assert compute_score(0, 0, 50.0) == 100
        assert compute_score(0, 0, 40.0) == 99
        assert compute_score(0, 0, 0.0) == 95

    def test_rounds_half_up(self):
        # 100 - 0.5
        assert compute_score(0, 0, 45.0) == 100

    def test_clamped_at_zero(self):
        assert compute_score(stale_count=10, anomaly_count=50, completeness_score=0) == 0


@given(
    stale=st.integers(min_value=0, max_value=10_000),
    anomalies=st.integers(min_value=0, max_value=10_000),
    completeness=st.floats(min_value=0, max_value=100),
)
def test_property_score_is_bounded(stale, anomalies, completeness):
    """Property test: scores always land in 0..100"""
    assert 0 <= compute_score(stale, anomalies, completeness) <= 100


class TestReliabilityScorer:
    def test_recompute_overwrites_scores(self, store):
        store.inc_stale_count("binance")
        store.inc_stale_count("binance")
        store.inc_anomaly_count("binance")
        store.touch_source("kraken")

        updated = ReliabilityScorer(store).recompute_all()

        assert {s.source: s.score for s in updated} == {"binance": 93, "kraken": 100}
        assert store.get_source_score("binance").score == 93

    def test_recompute_is_idempotent(self, store):
        store.inc_anomaly_count("binance")
        scorer = ReliabilityScorer(store)
        scorer.recompute_all()
        scorer.recompute_all()
        assert store.get_source_score("binance").score == 97

    def test_score_recovers_when_counters_do_not_grow(self, store):
        store.update_source_score("binance", 10)
        ReliabilityScorer(store).recompute_all()
        assert store.get_source_score("binance").score == 100

    def test_completeness_refreshed_from_monitor(self, store, clock, make_price_datum):
        completeness = CompletenessMonitor(expected_interval_seconds=30, clock=clock)
        store.touch_source("binance")
        completeness.mark(make_price_datum(), "BTC")
        clock.advance(minutes=5)

        ReliabilityScorer(store, completeness=completeness).recompute_all()

        record = store.get_source_score("binance")
        assert record.completeness_score == 0.0
        assert record.score == 95

    def test_publishes_score_gauge(self, store):
        store.inc_anomaly_count("gauge-src")
        ReliabilityScorer(store).recompute_all()
        assert REGISTRY.get_sample_value(
            "feedwatch_source_score", {"source": "gauge-src"}
        ) == pytest.approx(97)

    def test_no_sources_is_noop(self, store):
        assert ReliabilityScorer(store).recompute_all() == []
