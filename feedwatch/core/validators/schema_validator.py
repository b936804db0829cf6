"""
Schema validator for inbound datums.

Runs every applicable check and collects all failures; validation never
raises on bad data.
"""

from collections.abc import Mapping
from typing import Any

from feedwatch.core.models import PayloadKind, RawDatum, ValidationResult, classify_payload
from feedwatch.observability.logger import get_logger

from .base_validator import BaseValidator, ValidationError
from .orderbook_validator import OrderBookValidator
from .price_feed_validator import PriceFieldValidator, SymbolFieldValidator
from .required_field_validator import RequiredFieldValidator

logger = get_logger(__name__)


class SchemaValidator:
    """
    Structural and type checks on a datum before further processing.

    Envelope checks (source, timestamp, payload) always run. Payload checks
    are chosen by ``PayloadKind``: price feeds need a numeric price and a
    string symbol, order books need sequence bids and asks, and any other
    shape passes.
    """

    ENVELOPE_FIELDS = ("source", "timestamp", "payload")

    def __init__(self):
        self.envelope_validators: list[BaseValidator] = [
            RequiredFieldValidator(field_name) for field_name in self.ENVELOPE_FIELDS
        ]
        self.payload_validators: dict[PayloadKind, list[BaseValidator]] = {
            PayloadKind.PRICE_FEED: [PriceFieldValidator(), SymbolFieldValidator()],
            PayloadKind.ORDER_BOOK: [OrderBookValidator()],
            PayloadKind.UNKNOWN: [],
        }

    def validate(self, datum: RawDatum, kind: PayloadKind | None = None) -> ValidationResult:
        """
        Validate a datum.

        Args:
            datum: The datum to check
            kind: Payload kind if already classified at ingress

        Returns:
            ValidationResult with errors in detection order
        """
        errors: list[str] = []
        envelope = {
            "source": datum.source,
            "timestamp": datum.timestamp,
            "payload": datum.payload,
        }
        self._run(self.envelope_validators, envelope, errors)

        if kind is None:
            kind = classify_payload(datum.payload)
        if isinstance(datum.payload, Mapping):
            self._run(self.payload_validators[kind], datum.payload, errors)

        if errors:
            logger.debug(
                f"Datum from '{datum.source}' failed validation: {'; '.join(errors)}",
                extra={"source": datum.source, "payload_kind": kind.value},
            )

        return ValidationResult.from_errors(errors)

    @staticmethod
    def _run(validators: list[BaseValidator], record: Mapping[str, Any], errors: list[str]) -> None:
        for validator in validators:
            try:
                validator.validate(record.get(validator.field_name), record)
            except ValidationError as e:
                errors.append(e.message)
