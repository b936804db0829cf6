"""
Unit tests for the correction engine.

Covers price coercion, imputation from the last known value and
timestamp sanitization.
"""

import pytest

from feedwatch.core.correction import CorrectionEngine
from feedwatch.core.models import RawDatum
from feedwatch.observability.lineage import LineageTracker


@pytest.fixture
def engine(store, clock) -> CorrectionEngine:
    return CorrectionEngine(store, clock=clock)


class TestPriceCorrection:
    """Tests for price type coercion and imputation"""

    def test_numeric_string_is_cast(self, engine, make_price_datum):
        corrected, action = engine.attempt_correction(make_price_datum(price="99.5"))

        assert action == "type_cast_price"
        assert corrected.payload["price"] == 99.5
        assert engine.get_last("binance", "price") == 99.5

    def test_number_is_reported_as_cast(self, engine, make_price_datum):
        corrected, action = engine.attempt_correction(make_price_datum(price=42))
        assert action == "type_cast_price"
        assert corrected.payload["price"] == 42.0

    def test_unparseable_price_without_history(self, engine, make_price_datum):
        corrected, action = engine.attempt_correction(make_price_datum(price="abc"))

        assert action == "could_not_impute_price"
        assert corrected.payload["price"] == "abc"

    def test_unparseable_price_imputed_from_last(self, engine, make_price_datum):
        engine.attempt_correction(make_price_datum(price=42))
        corrected, action = engine.attempt_correction(make_price_datum(price="abc"))

        assert action == "imputed_price_from_last"
        assert corrected.payload["price"] == 42

    def test_last_known_value_is_per_source(self, engine, make_price_datum):
        engine.attempt_correction(make_price_datum(price=42, source="a"))
        _, action = engine.attempt_correction(make_price_datum(price=None, source="b"))
        assert action == "could_not_impute_price"

    def test_input_datum_not_mutated(self, engine, make_price_datum):
        datum = make_price_datum(price="7")
        engine.attempt_correction(datum)
        assert datum.payload["price"] == "7"

    def test_payload_without_price_passes_through(self, engine, orderbook_datum):
        corrected, action = engine.attempt_correction(orderbook_datum)
        assert action is None
        assert corrected.payload == orderbook_datum.payload


class TestTimestampCorrection:
    """Tests for timestamp sanitization"""

    def test_unparseable_timestamp_replaced(self, engine, clock, make_price_datum):
        corrected, action = engine.attempt_correction(make_price_datum(timestamp="not a time"))

        assert action == "type_cast_price; fixed_timestamp"
        assert corrected.timestamp == clock.iso()

    def test_far_future_timestamp_replaced(self, engine, clock, orderbook_datum):
        future = orderbook_datum.evolve(timestamp="2025-11-17T08:36:00.000Z")
        corrected, action = engine.attempt_correction(future)

        assert action == "fixed_timestamp"
        assert corrected.timestamp == clock.iso()

    def test_slightly_future_timestamp_kept(self, engine, orderbook_datum):
        near = orderbook_datum.evolve(timestamp="2025-11-17T08:34:00.000Z")
        corrected, action = engine.attempt_correction(near)

        assert action is None
        assert corrected.timestamp == "2025-11-17T08:34:00.000Z"

    def test_price_and_timestamp_actions_combined(self, engine, make_price_datum):
        engine.attempt_correction(make_price_datum(price=10))
        _, action = engine.attempt_correction(make_price_datum(price="", timestamp=""))
        assert action == "imputed_price_from_last; fixed_timestamp"


class TestStoreSideEffects:
    """Tests for the single push to the store"""

    def test_each_call_pushes_once(self, engine, store, make_price_datum):
        engine.attempt_correction(make_price_datum(price="1"))
        engine.attempt_correction(make_price_datum(price="abc"))

        stored = store.get_recent_data()
        assert len(stored) == 2
        assert stored[0].payload["price"] == 1.0
        assert stored[0].received_at is not None

    def test_action_recorded_in_lineage(self, store, clock, make_price_datum):
        lineage = LineageTracker(clock=clock)
        engine = CorrectionEngine(store, lineage=lineage, clock=clock)
        datum = lineage.attach(make_price_datum(price="abc"), "ingested")

        corrected, _ = engine.attempt_correction(datum)

        assert corrected.lineage.transformations == ["ingested", "correction:could_not_impute_price"]
        assert store.get_recent_data()[0].lineage.transformations == corrected.lineage.transformations
