"""
Validators for price feed payloads: ``{symbol: str, price: number}``.
"""

from collections.abc import Mapping
from typing import Any

from .base_validator import BaseValidator


class PriceFieldValidator(BaseValidator):
    """
    Requires the price to be an actual number (no numeric strings, no booleans).
    """

    def __init__(self, field_name: str = "price", parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

    def validate(self, value: Any, record: Mapping[str, Any]) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            self.fail(f"{self.field_name} must be number")

    @property
    def rule_type(self) -> str:
        return "type_check"


class SymbolFieldValidator(BaseValidator):
    """
    Requires a non-empty string symbol on a price feed.
    """

    def __init__(self, field_name: str = "symbol", parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

    def validate(self, value: Any, record: Mapping[str, Any]) -> None:
        if not value or not isinstance(value, str):
            self.fail("price feed missing symbol")

    @property
    def rule_type(self) -> str:
        return "required_field"
