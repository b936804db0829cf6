"""
Metric extractors map a datum to an optional (metric, value) sample.

Detectors receive an extractor from their caller; returning None skips
the datum.
"""

from typing import Callable, NamedTuple

from feedwatch.core.models import PayloadKind, RawDatum, classify_payload
from feedwatch.utils.timeutils import safe_number


class MetricSample(NamedTuple):
    metric: str
    value: float


MetricExtractor = Callable[[RawDatum], "MetricSample | None"]


def price_extractor(datum: RawDatum) -> MetricSample | None:
    """``price`` of a price feed, when numeric."""
    if classify_payload(datum.payload) is not PayloadKind.PRICE_FEED:
        return None
    value = safe_number(datum.payload.get("price"))
    return MetricSample("price", value) if value is not None else None


def _best_level(levels, pick) -> float | None:
    prices = []
    for level in levels:
        try:
            price = safe_number(level[0])
        except (TypeError, IndexError, KeyError):
            continue
        if price is not None:
            prices.append(price)
    return pick(prices) if prices else None


def spread_extractor(datum: RawDatum) -> MetricSample | None:
    """Best ask minus best bid of an order book snapshot."""
    if classify_payload(datum.payload) is not PayloadKind.ORDER_BOOK:
        return None
    bids = datum.payload.get("bids")
    asks = datum.payload.get("asks")
    if not isinstance(bids, (list, tuple)) or not isinstance(asks, (list, tuple)):
        return None

    best_bid = _best_level(bids, max)
    best_ask = _best_level(asks, min)
    if best_bid is None or best_ask is None:
        return None
    return MetricSample("spread", best_ask - best_bid)


def default_metric_extractor(datum: RawDatum) -> MetricSample | None:
    """Dispatch on payload kind: price for price feeds, spread for order books."""
    return price_extractor(datum) or spread_extractor(datum)
