"""
Completeness / gap detection.

For feeds expected at a cadence (e.g. price ticks per symbol), tracks the
last timestamp per (source, key) and reports a gap once more than twice
the expected interval has elapsed. Queries are pull-based: callers decide
when to check.
"""

import threading

from feedwatch.core.models import CompletenessGap, RawDatum
from feedwatch.utils.timeutils import Clock, parse_timestamp, utc_now


class CompletenessMonitor:
    def __init__(self, expected_interval_seconds: int = 30, clock: Clock = utc_now):
        self.expected_interval_seconds = expected_interval_seconds
        self.clock = clock
        self._last_per_key: dict[tuple[str, str], str] = {}
        self._lock = threading.Lock()

    def mark(self, datum: RawDatum, key: str) -> None:
        with self._lock:
            self._last_per_key[(datum.source, key)] = datum.timestamp

    def detect_gap(self, source: str, key: str) -> CompletenessGap | None:
        """
        Check one (source, key) pair for a gap.

        Returns:
            The gap descriptor, or None when the pair is unknown or on time
        """
        with self._lock:
            last = self._last_per_key.get((source, key))
        if last is None:
            return None
        return self._gap(source, key, last)

    def detect_all_gaps(self) -> list[CompletenessGap]:
        with self._lock:
            snapshot = list(self._last_per_key.items())
        gaps = (self._gap(source, key, last) for (source, key), last in snapshot)
        return [gap for gap in gaps if gap is not None]

    def keys_for(self, source: str) -> list[str]:
        with self._lock:
            return [key for (src, key) in self._last_per_key if src == source]

    def completeness_score(self, source: str) -> float:
        """
        Percentage of the source's tracked keys currently without a gap.

        Returns:
            100.0 when the source has no tracked keys
        """
        keys = self.keys_for(source)
        if not keys:
            return 100.0
        on_time = sum(1 for key in keys if self.detect_gap(source, key) is None)
        return round(on_time * 100.0 / len(keys), 2)

    def forget_source(self, source: str) -> int:
        with self._lock:
            pairs = [pair for pair in self._last_per_key if pair[0] == source]
            for pair in pairs:
                del self._last_per_key[pair]
        return len(pairs)

    def _gap(self, source: str, key: str, last: str) -> CompletenessGap | None:
        moment = parse_timestamp(last)
        if moment is None:
            return None
        elapsed = int((self.clock() - moment).total_seconds())
        if elapsed > self.expected_interval_seconds * 2:
            return CompletenessGap(source=source, key=key, last=last, gap_sec=elapsed)
        return None
