"""
OrderBookValidator - structural check for order book snapshots.
"""

from collections.abc import Mapping
from typing import Any

from .base_validator import BaseValidator


class OrderBookValidator(BaseValidator):
    """
    Requires both ``bids`` and ``asks`` to be sequences.

    Levels are not inspected; ``[[price, size], ...]`` is the expected
    shape but element types are left to consumers.
    """

    def __init__(self, field_name: str = "bids/asks", parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

    def validate(self, value: Any, record: Mapping[str, Any]) -> None:
        bids = record.get("bids")
        asks = record.get("asks")
        if not isinstance(bids, (list, tuple)) or not isinstance(asks, (list, tuple)):
            self.fail("orderbook bids/asks must be arrays")

    @property
    def rule_type(self) -> str:
        return "structure"
