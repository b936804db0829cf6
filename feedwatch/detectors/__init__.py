"""
Streaming detectors: anomalies, outliers, freshness and completeness.
"""

from .anomaly_detector import AnomalyDetector, RunningStats
from .completeness_monitor import CompletenessMonitor
from .extractors import (
    MetricExtractor,
    MetricSample,
    default_metric_extractor,
    price_extractor,
    spread_extractor,
)
from .freshness_monitor import FreshnessMonitor
from .outlier_detector import OutlierDetector

__all__ = [
    "AnomalyDetector",
    "RunningStats",
    "OutlierDetector",
    "FreshnessMonitor",
    "CompletenessMonitor",
    "MetricExtractor",
    "MetricSample",
    "price_extractor",
    "spread_extractor",
    "default_metric_extractor",
]
