"""
Schema validation for inbound datums.

Provides field validators for the datum envelope and the known payload
shapes, and the SchemaValidator that runs them.
"""

from .base_validator import BaseValidator, ValidationError
from .orderbook_validator import OrderBookValidator
from .price_feed_validator import PriceFieldValidator, SymbolFieldValidator
from .required_field_validator import RequiredFieldValidator
from .schema_validator import SchemaValidator

__all__ = [
    "BaseValidator",
    "ValidationError",
    "RequiredFieldValidator",
    "PriceFieldValidator",
    "SymbolFieldValidator",
    "OrderBookValidator",
    "SchemaValidator",
]
