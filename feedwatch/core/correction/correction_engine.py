"""
Automated best-effort correction of malformed datums.

Applies only low-risk repairs: price type coercion, imputation of a
missing price from the last known value, and timestamp sanitization.
Unresolvable cases are reported through the action string, never raised.
"""

import threading
from datetime import timedelta
from typing import Any, NamedTuple

from feedwatch.core.models import PayloadKind, RawDatum, classify_payload
from feedwatch.observability.lineage import LineageTracker
from feedwatch.observability.logger import get_logger
from feedwatch.store.memory_store import MemoryStore
from feedwatch.utils.timeutils import Clock, parse_timestamp, safe_number, to_iso, utc_now

logger = get_logger(__name__)

IMPUTED_PRICE = "imputed_price_from_last"
COULD_NOT_IMPUTE_PRICE = "could_not_impute_price"
TYPE_CAST_PRICE = "type_cast_price"
FIXED_TIMESTAMP = "fixed_timestamp"

ACTION_SEPARATOR = "; "


class CorrectionOutcome(NamedTuple):
    corrected: RawDatum
    action: str | None


class CorrectionEngine:
    """
    Repairs datums and records the corrected copy in the store.

    Every call pushes exactly one datum to the store; callers must not
    push the returned datum again.
    """

    def __init__(
        self,
        store: MemoryStore,
        lineage: LineageTracker | None = None,
        clock: Clock = utc_now,
        max_future_skew: timedelta = timedelta(minutes=5),
    ):
        """
        Initialize correction engine.

        Args:
            store: Store receiving corrected datums
            lineage: When given, each action is appended to the datum's lineage
            clock: Time source for the timestamp check and replacement
            max_future_skew: How far ahead of now a timestamp may be
        """
        self.store = store
        self.lineage = lineage
        self.clock = clock
        self.max_future_skew = max_future_skew
        self._last_values: dict[str, Any] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(source: str, metric: str) -> str:
        return f"{source}::{metric}"

    def register_last(self, source: str, metric: str, value: Any) -> None:
        with self._lock:
            self._last_values[self._key(source, metric)] = value

    def get_last(self, source: str, metric: str) -> Any:
        with self._lock:
            return self._last_values.get(self._key(source, metric))

    def attempt_correction(self, datum: RawDatum, kind: PayloadKind | None = None) -> CorrectionOutcome:
        """
        Correct a datum and push the result to the store.

        Args:
            datum: Datum to correct (left untouched)
            kind: Payload kind if already classified at ingress

        Returns:
            CorrectionOutcome of the stored corrected datum and the action taken
            (actions joined with "; "), or None when nothing was changed
        """
        if kind is None:
            kind = classify_payload(datum.payload)

        actions: list[str] = []
        changes: dict[str, Any] = {}

        if kind is PayloadKind.PRICE_FEED:
            payload = dict(datum.payload)
            actions.append(self._correct_price(datum.source, payload))
            changes["payload"] = payload

        now = self.clock()
        timestamp = parse_timestamp(datum.timestamp)
        if timestamp is None or timestamp - now > self.max_future_skew:
            changes["timestamp"] = to_iso(now)
            actions.append(FIXED_TIMESTAMP)

        corrected = datum.evolve(**changes)
        action = ACTION_SEPARATOR.join(actions) if actions else None

        if action and self.lineage is not None:
            corrected = self.lineage.add_transform(corrected, f"correction:{action}")

        if action and action != TYPE_CAST_PRICE:
            logger.info(
                f"Corrected datum from '{datum.source}': {action}",
                extra={"source": datum.source, "action": action, "datum_id": datum.id},
            )

        stored = self.store.push_datum(corrected)
        return CorrectionOutcome(stored, action)

    def _correct_price(self, source: str, payload: dict[str, Any]) -> str:
        number = safe_number(payload.get("price"))
        if number is None:
            last = self.get_last(source, "price")
            if last is not None:
                payload["price"] = last
                return IMPUTED_PRICE
            return COULD_NOT_IMPUTE_PRICE

        payload["price"] = number
        self.register_last(source, "price", number)
        return TYPE_CAST_PRICE
