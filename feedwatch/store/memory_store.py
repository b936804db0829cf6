"""
In-memory system of record for the monitor.

Holds the append-only datum log, the anomaly log and the per-source score
table. Every change to a SourceScore goes through ``mutate_source``, which
serializes access per source.
"""

import threading
from collections import defaultdict
from typing import Callable

from feedwatch.core.models import Anomaly, RawDatum, SourceScore
from feedwatch.observability.logger import get_logger
from feedwatch.utils.timeutils import Clock, now_iso, utc_now

logger = get_logger(__name__)

AnomalyListener = Callable[[Anomaly], None]


class MemoryStore:
    """
    Thread-safe in-memory store.

    Usage:
        store = MemoryStore()
        store.push_datum(datum)
        store.inc_anomaly_count("binance")
        scores = store.get_source_scores()
    """

    def __init__(self, clock: Clock = utc_now):
        """
        Initialize an empty store.

        Args:
            clock: Time source used for receive and last-seen stamps
        """
        self.clock = clock
        self._data: list[RawDatum] = []
        self._anomalies: list[Anomaly] = []
        self._sources: dict[str, SourceScore] = {}
        self._log_lock = threading.Lock()
        self._registry_lock = threading.Lock()
        self._source_locks: defaultdict[str, threading.Lock] = defaultdict(threading.Lock)
        self._anomaly_listeners: list[AnomalyListener] = []

    # =======================
    # DATUM LOG
    # =======================

    def push_datum(self, datum: RawDatum) -> RawDatum:
        """
        Append a datum, stamped with its receive time, and touch its source.

        Returns:
            The stored copy
        """
        stored = datum.evolve(received_at=now_iso(self.clock))
        with self._log_lock:
            self._data.append(stored)
        self.touch_source(stored.source)
        return stored

    def get_recent_data(self, source: str | None = None, limit: int = 100) -> list[RawDatum]:
        """Newest ``limit`` datums, optionally for one source, oldest first."""
        with self._log_lock:
            items = [d for d in self._data if source is None or d.source == source]
        return items[-limit:] if limit > 0 else []

    def datum_count(self) -> int:
        with self._log_lock:
            return len(self._data)

    # =======================
    # ANOMALY LOG
    # =======================

    def add_anomaly_listener(self, listener: AnomalyListener) -> None:
        """Register a callable invoked with every anomaly after it is stored."""
        self._anomaly_listeners.append(listener)

    def push_anomaly(self, anomaly: Anomaly) -> None:
        with self._log_lock:
            self._anomalies.append(anomaly)

        for listener in self._anomaly_listeners:
            try:
                listener(anomaly)
            except Exception:
                logger.exception(
                    f"Anomaly listener {listener!r} failed for {anomaly.id}",
                    extra={"anomaly_id": anomaly.id, "source": anomaly.source},
                )

    def get_anomalies(self, source: str | None = None, limit: int = 100) -> list[Anomaly]:
        """Newest ``limit`` anomalies, optionally for one source, oldest first."""
        with self._log_lock:
            items = [a for a in self._anomalies if source is None or a.source == source]
        return items[-limit:] if limit > 0 else []

    def anomaly_count(self) -> int:
        with self._log_lock:
            return len(self._anomalies)

    # =======================
    # SOURCE SCORES
    # =======================

    def _lock_for(self, source: str) -> threading.Lock:
        with self._registry_lock:
            return self._source_locks[source]

    def mutate_source(self, source: str, mutation: Callable[[SourceScore], None]) -> SourceScore:
        """
        Atomically read-modify-write one source's score record.

        The record is created with defaults on first touch. ``mutation``
        runs while the source's lock is held and must not call back into
        the store for the same source.

        Args:
            source: Source name
            mutation: Function applied to the live record

        Returns:
            A copy of the record after the mutation
        """
        with self._lock_for(source):
            record = self._sources.get(source)
            if record is None:
                record = SourceScore(source=source, last_seen=now_iso(self.clock))
                with self._registry_lock:
                    self._sources[source] = record
            mutation(record)
            return record.model_copy()

    def touch_source(self, source: str) -> SourceScore:
        seen = now_iso(self.clock)

        def _touch(record: SourceScore) -> None:
            record.last_seen = seen

        return self.mutate_source(source, _touch)

    def inc_anomaly_count(self, source: str) -> SourceScore:
        def _inc(record: SourceScore) -> None:
            record.anomaly_count += 1

        return self.mutate_source(source, _inc)

    def inc_stale_count(self, source: str) -> SourceScore:
        def _inc(record: SourceScore) -> None:
            record.stale_count += 1

        return self.mutate_source(source, _inc)

    def update_source_score(self, source: str, score: int) -> SourceScore:
        def _set(record: SourceScore) -> None:
            record.score = score

        return self.mutate_source(source, _set)

    def set_completeness_score(self, source: str, completeness: float) -> SourceScore:
        def _set(record: SourceScore) -> None:
            record.completeness_score = completeness

        return self.mutate_source(source, _set)

    def get_source_scores(self) -> list[SourceScore]:
        """Copies of every source record in first-touch order."""
        with self._registry_lock:
            names = list(self._sources)
        scores = []
        for name in names:
            with self._lock_for(name):
                scores.append(self._sources[name].model_copy())
        return scores

    def get_source_score(self, source: str) -> SourceScore | None:
        with self._lock_for(source):
            record = self._sources.get(source)
            return record.model_copy() if record is not None else None

    def source_names(self) -> list[str]:
        with self._registry_lock:
            return list(self._sources)
