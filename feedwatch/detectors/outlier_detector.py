"""
Statistical outlier detector using rolling quantiles (IQR method).

Keeps a sliding buffer per (source, metric) and flags values outside
``[Q1 - k*IQR, Q3 + k*IQR]``. This is a pure predicate: nothing is written
to the anomaly log, callers decide what to do with a positive result.
"""

import threading
from collections import deque

from feedwatch.core.models import RawDatum
from feedwatch.utils.timeutils import safe_number

from .extractors import MetricExtractor


class OutlierDetector:
    def __init__(self, max_buffer: int = 1000, multiplier: float = 1.5, min_samples: int = 10):
        """
        Initialize outlier detector.

        Args:
            max_buffer: Values kept per key (oldest evicted first)
            multiplier: IQR multiplier k
            min_samples: Buffer length below which nothing is flagged
        """
        if max_buffer < min_samples:
            raise ValueError(f"max_buffer ({max_buffer}) must be >= min_samples ({min_samples})")
        self.max_buffer = max_buffer
        self.multiplier = multiplier
        self.min_samples = min_samples
        self._buffers: dict[str, deque[float]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(source: str, metric: str) -> str:
        return f"{source}::{metric}"

    def buffer_for(self, source: str, metric: str) -> list[float]:
        with self._lock:
            return list(self._buffers.get(self._key(source, metric), ()))

    def forget_source(self, source: str) -> int:
        prefix = f"{source}::"
        with self._lock:
            keys = [k for k in self._buffers if k.startswith(prefix)]
            for key in keys:
                del self._buffers[key]
        return len(keys)

    def ingest_numeric(self, source: str, metric: str, value: float) -> bool:
        """
        Add a value to its key's buffer and test it against the IQR bounds.

        Returns:
            True if the value lies strictly outside the bounds
        """
        key = self._key(source, metric)
        with self._lock:
            buffer = self._buffers.get(key)
            if buffer is None:
                buffer = self._buffers[key] = deque(maxlen=self.max_buffer)
            buffer.append(value)
            if len(buffer) < self.min_samples:
                return False
            ordered = sorted(buffer)

        q1 = ordered[int(len(ordered) * 0.25)]
        q3 = ordered[int(len(ordered) * 0.75)]
        iqr = q3 - q1
        lower = q1 - self.multiplier * iqr
        upper = q3 + self.multiplier * iqr
        return value < lower or value > upper

    def ingest(self, datum: RawDatum, extractor: MetricExtractor) -> bool:
        sample = extractor(datum)
        if sample is None:
            return False
        value = safe_number(sample.value)
        if value is None:
            return False
        return self.ingest_numeric(datum.source, sample.metric, value)
