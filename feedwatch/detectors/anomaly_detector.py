"""
Real-time anomaly detector over per-(source, metric) running statistics.

Keeps Welford mean/variance and an EWMA for every key. A sample fires when
its z-score exceeds the threshold (severity high) and/or when it jumps more
than 20% away from the EWMA (severity medium unless the z-score also fired).
The first sample of a key only seeds the statistics.
"""

import math
import threading
from dataclasses import dataclass

from feedwatch.core.models import Anomaly, RawDatum, Severity
from feedwatch.observability.logger import get_logger
from feedwatch.store.memory_store import MemoryStore
from feedwatch.utils.timeutils import gen_id, safe_number

from .extractors import MetricExtractor

logger = get_logger(__name__)

EWMA_JUMP_RATIO = 0.2
EPSILON = 1e-9


@dataclass
class RunningStats:
    """Welford running statistics plus an EWMA for one key."""

    mean: float
    m2: float
    n: int
    ewma: float

    @classmethod
    def seed(cls, value: float) -> "RunningStats":
        return cls(mean=value, m2=0.0, n=1, ewma=value)

    def update(self, value: float, alpha: float) -> None:
        self.n += 1
        delta = value - self.mean
        self.mean += delta / self.n
        self.m2 += delta * (value - self.mean)
        self.ewma = self.ewma * (1 - alpha) + value * alpha

    @property
    def variance(self) -> float:
        """Sample variance; 0 until there are two samples."""
        return self.m2 / (self.n - 1) if self.n > 1 else 0.0

    @property
    def std(self) -> float:
        return math.sqrt(self.variance)

    def z_score(self, value: float) -> float:
        std = self.std
        return 0.0 if std == 0 else abs((value - self.mean) / std)


class AnomalyDetector:
    """
    Online z-score and EWMA drift detection.

    Anomalies are appended to the store and counted against their source.
    """

    def __init__(self, store: MemoryStore, alpha: float = 0.3, z_threshold: float = 4.0):
        """
        Initialize anomaly detector.

        Args:
            store: Store receiving anomalies and anomaly counts
            alpha: EWMA smoothing factor
            z_threshold: z-score above which a sample is a spike
        """
        if not 0 < alpha <= 1:
            raise ValueError(f"alpha must be in (0, 1], got {alpha}")
        self.store = store
        self.alpha = alpha
        self.z_threshold = z_threshold
        self._stats: dict[str, RunningStats] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(source: str, metric: str) -> str:
        return f"{source}::{metric}"

    def stats_for(self, source: str, metric: str) -> RunningStats | None:
        """Copy of the running statistics for a key, if any."""
        with self._lock:
            stats = self._stats.get(self._key(source, metric))
            return RunningStats(**vars(stats)) if stats is not None else None

    def forget_source(self, source: str) -> int:
        """
        Drop the statistics of every metric of a source.

        Returns:
            Number of keys removed
        """
        prefix = f"{source}::"
        with self._lock:
            keys = [k for k in self._stats if k.startswith(prefix)]
            for key in keys:
                del self._stats[key]
        return len(keys)

    def ingest(self, datum: RawDatum, extractor: MetricExtractor) -> Anomaly | None:
        """
        Update statistics with a datum's sample and record an anomaly if one fires.

        Args:
            datum: Datum to sample
            extractor: Maps the datum to an optional (metric, value)

        Returns:
            The recorded anomaly, or None
        """
        sample = extractor(datum)
        if sample is None:
            return None
        value = safe_number(sample.value)
        if value is None:
            return None

        key = self._key(datum.source, sample.metric)
        with self._lock:
            stats = self._stats.get(key)
            if stats is None:
                self._stats[key] = RunningStats.seed(value)
                return None

            stats.update(value, self.alpha)
            z = stats.z_score(value)
            ewma = stats.ewma

        reasons = []
        z_fired = z > self.z_threshold
        if z_fired:
            reasons.append(f"z-score={z:.2f} > {self.z_threshold:g}")

        jump = abs(value - ewma) / (abs(ewma) + EPSILON)
        if jump > EWMA_JUMP_RATIO:
            reasons.append(f"ewma jump {jump * 100:.1f}%")

        if not reasons:
            return None

        anomaly = Anomaly(
            id=gen_id("anom-"),
            source=datum.source,
            timestamp=datum.timestamp,
            metric=sample.metric,
            value=value,
            reason="; ".join(reasons),
            severity=Severity.HIGH if z_fired else Severity.MEDIUM,
        )
        self.store.push_anomaly(anomaly)
        self.store.inc_anomaly_count(datum.source)

        logger.info(
            f"Anomaly on {key}: {anomaly.reason}",
            extra={"source": datum.source, "metric": sample.metric, "severity": anomaly.severity.value},
        )
        return anomaly
