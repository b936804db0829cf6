"""
Freshness monitoring.

Tracks the last timestamp seen per source and, on every check, raises a
stale event for each source whose last datum is older than the threshold.
By default a source that stays stale is flagged again on every check; a
cool-down can be configured to suppress repeats.
"""

import threading
from datetime import datetime, timedelta

from feedwatch.core.models import Anomaly, RawDatum, Severity
from feedwatch.observability.logger import get_logger
from feedwatch.store.memory_store import MemoryStore
from feedwatch.utils.timeutils import Clock, gen_id, parse_timestamp, to_iso, utc_now

logger = get_logger(__name__)


class FreshnessMonitor:
    def __init__(
        self,
        store: MemoryStore,
        threshold_minutes: int = 15,
        cooldown_minutes: int = 0,
        clock: Clock = utc_now,
    ):
        """
        Initialize freshness monitor.

        Args:
            store: Store receiving stale counts and stale anomalies
            threshold_minutes: Allowed age of the last datum
            cooldown_minutes: Minimum time between two stale events for a
                source (0 re-raises on every check)
            clock: Time source
        """
        self.store = store
        self.threshold_minutes = threshold_minutes
        self.cooldown = timedelta(minutes=cooldown_minutes)
        self.clock = clock
        self._last_seen: dict[str, str] = {}
        self._last_flagged: dict[str, datetime] = {}
        self._lock = threading.Lock()

    def mark_received(self, datum: RawDatum) -> None:
        """Record the datum's own timestamp as its source's last-seen value."""
        with self._lock:
            self._last_seen[datum.source] = datum.timestamp
            self._last_flagged.pop(datum.source, None)

    def get_last_seen(self, source: str) -> str | None:
        with self._lock:
            return self._last_seen.get(source)

    def forget(self, source: str) -> bool:
        with self._lock:
            self._last_flagged.pop(source, None)
            return self._last_seen.pop(source, None) is not None

    def check_freshness(self) -> list[Anomaly]:
        """
        Flag every source whose last datum is older than the threshold.

        Returns:
            The stale anomalies raised by this check
        """
        now = self.clock()
        now_text = to_iso(now)
        with self._lock:
            snapshot = list(self._last_seen.items())

        raised = []
        for source, last_text in snapshot:
            last = parse_timestamp(last_text)
            if last is None:
                logger.warning(
                    f"Cannot parse last-seen timestamp '{last_text}' for '{source}', skipping",
                    extra={"source": source},
                )
                continue

            elapsed = int((now - last).total_seconds() / 60)
            if elapsed <= self.threshold_minutes:
                continue
            if self._in_cooldown(source, now):
                continue

            self.store.inc_stale_count(source)
            anomaly = Anomaly(
                id=gen_id(f"stale-{source}-"),
                source=source,
                timestamp=now_text,
                metric="freshness",
                value=elapsed,
                reason=f"stale by {elapsed} minutes (> {self.threshold_minutes}m)",
                severity=Severity.HIGH,
            )
            self.store.push_anomaly(anomaly)
            raised.append(anomaly)

            logger.warning(
                f"Source '{source}' is stale by {elapsed} minutes",
                extra={"source": source, "elapsed_minutes": elapsed},
            )

        return raised

    def _in_cooldown(self, source: str, now: datetime) -> bool:
        if not self.cooldown:
            return False
        with self._lock:
            flagged = self._last_flagged.get(source)
            if flagged is not None and now - flagged < self.cooldown:
                return True
            self._last_flagged[source] = now
            return False
