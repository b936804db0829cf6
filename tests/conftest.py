"""
Pytest configuration and fixtures for feedwatch tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
from datetime import datetime, timedelta, timezone

import pytest

from feedwatch.core.models import RawDatum
from feedwatch.store.memory_store import MemoryStore
from feedwatch.utils.timeutils import to_iso


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Tests wiring several components together"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests through the CLI"
    )


# =======================
# CLOCK FIXTURES
# =======================

class ManualClock:
    """Deterministic clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now

    def iso(self) -> str:
        return to_iso(self.now)


@pytest.fixture
def clock() -> ManualClock:
    """Clock fixed at 2025-11-17T08:30:00Z"""
    return ManualClock(datetime(2025, 11, 17, 8, 30, tzinfo=timezone.utc))


# =======================
# STORE FIXTURES
# =======================

@pytest.fixture
def store(clock) -> MemoryStore:
    """Fresh store per test, sharing the manual clock"""
    return MemoryStore(clock=clock)


# =======================
# DATUM FIXTURES
# =======================

@pytest.fixture
def make_price_datum(clock):
    """Factory for price feed datums stamped with the current clock time"""

    def _make(price=100.0, source="binance", symbol="BTCUSDT", timestamp=None, datum_id=None):
        return RawDatum(
            id=datum_id,
            source=source,
            timestamp=timestamp if timestamp is not None else clock.iso(),
            payload={"symbol": symbol, "price": price},
        )

    return _make


@pytest.fixture
def orderbook_datum(clock) -> RawDatum:
    return RawDatum(
        id="book-1",
        source="kraken",
        timestamp=clock.iso(),
        payload={
            "symbol": "ETHUSD",
            "bids": [[3000.5, 1.2], [3000.0, 4.0]],
            "asks": [[3001.5, 0.7], [3002.0, 2.5]],
        },
    )
