"""
Unit tests for Pydantic data models.

Tests payload classification, datum copying and model constraints.
"""

import pytest
from pydantic import ValidationError

from feedwatch.core.models import (
    Anomaly,
    PayloadKind,
    RawDatum,
    Severity,
    SourceScore,
    ValidationResult,
    classify_payload,
)


class TestClassifyPayload:
    """Tests for payload kind classification"""

    def test_price_feed(self):
        assert classify_payload({"symbol": "BTCUSDT", "price": 1}) is PayloadKind.PRICE_FEED

    def test_price_wins_over_orderbook_fields(self):
        payload = {"price": 1, "bids": [], "asks": []}
        assert classify_payload(payload) is PayloadKind.PRICE_FEED

    def test_order_book(self):
        assert classify_payload({"bids": [], "asks": []}) is PayloadKind.ORDER_BOOK

    def test_order_book_needs_both_sides(self):
        assert classify_payload({"bids": []}) is PayloadKind.UNKNOWN

    @pytest.mark.parametrize("payload", [None, "text", 42, ["price"], {"volume": 3}])
    def test_unknown_shapes(self, payload):
        assert classify_payload(payload) is PayloadKind.UNKNOWN


class TestRawDatum:
    """Tests for RawDatum model"""

    def test_null_source_and_timestamp_become_empty(self):
        datum = RawDatum.model_validate({"source": None, "timestamp": None, "payload": {}})
        assert datum.source == ""
        assert datum.timestamp == ""

    def test_evolve_does_not_touch_original(self):
        datum = RawDatum(source="s", timestamp="t", payload={"price": "1"})
        copy = datum.evolve(timestamp="t2")
        copy.payload["price"] = 1.0

        assert datum.timestamp == "t"
        assert datum.payload == {"price": "1"}
        assert copy.timestamp == "t2"


class TestValidationResult:
    """Tests for ValidationResult model"""

    def test_from_errors_empty(self):
        result = ValidationResult.from_errors([])
        assert result.ok is True
        assert result.errors is None

    def test_from_errors_keeps_order(self):
        result = ValidationResult.from_errors(["b", "a"])
        assert result.ok is False
        assert result.errors == ["b", "a"]

    def test_ok_with_errors_rejected(self):
        with pytest.raises(ValidationError):
            ValidationResult(ok=True, errors=["missing source"])


class TestSourceScore:
    """Tests for SourceScore model"""

    def test_defaults(self):
        score = SourceScore(source="s", last_seen="2025-11-17T08:30:00.000Z")
        assert score.score == 100
        assert score.stale_count == 0
        assert score.anomaly_count == 0
        assert score.completeness_score == 100.0

    def test_score_bounds_enforced_on_assignment(self):
        score = SourceScore(source="s", last_seen="x")
        with pytest.raises(ValidationError):
            score.score = 101


class TestAnomaly:
    """Tests for Anomaly model"""

    def test_anomaly_is_frozen(self):
        anomaly = Anomaly(
            id="a", source="s", timestamp="t", metric="price",
            value=1.0, reason="r", severity=Severity.HIGH,
        )
        with pytest.raises(ValidationError):
            anomaly.value = 2.0

    def test_severity_serializes_as_string(self):
        anomaly = Anomaly(
            id="a", source="s", timestamp="t", metric="price",
            value=1, reason="r", severity="medium",
        )
        assert anomaly.model_dump(mode="json")["severity"] == "medium"
        assert anomaly.value == 1.0
