"""
Payload shape classification.

A payload's kind is decided once at ingress and then drives both
validation and correction. Unknown shapes are accepted as-is.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any


class PayloadKind(str, Enum):
    PRICE_FEED = "price_feed"
    ORDER_BOOK = "order_book"
    UNKNOWN = "unknown"


def classify_payload(payload: Any) -> PayloadKind:
    """
    Classify a payload by its fields.

    A mapping with ``price`` is a price feed; otherwise a mapping with both
    ``bids`` and ``asks`` is an order book; anything else is unknown.
    """
    if not isinstance(payload, Mapping):
        return PayloadKind.UNKNOWN
    if "price" in payload:
        return PayloadKind.PRICE_FEED
    if "bids" in payload and "asks" in payload:
        return PayloadKind.ORDER_BOOK
    return PayloadKind.UNKNOWN
