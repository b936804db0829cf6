"""
Alert forwarding for anomalies.

Sinks are registered as anomaly listeners on the store; delivery is best
effort and never affects whether an anomaly is recorded.
"""

import logging

from feedwatch.core.models import Anomaly, Severity
from feedwatch.observability.logger import get_logger
from feedwatch.observability.metrics import MetricsCollector

alerts_logger = get_logger(__name__)

SEVERITY_LEVELS = {
    Severity.LOW: logging.INFO,
    Severity.MEDIUM: logging.INFO,
    Severity.HIGH: logging.WARNING,
}


class LoggingAlertSink:
    """
    Forwards anomalies to the structured log and the anomaly counters.

    Usage:
        store.add_anomaly_listener(LoggingAlertSink())
    """

    def __init__(self, logger: logging.Logger | None = None, metrics: MetricsCollector | None = None):
        self.logger = logger or alerts_logger
        self.metrics = metrics or MetricsCollector()

    def __call__(self, anomaly: Anomaly) -> None:
        self.metrics.record_anomaly(anomaly.source, anomaly.metric, anomaly.severity.value)
        self.logger.log(
            SEVERITY_LEVELS[anomaly.severity],
            f"ALERT [{anomaly.severity.value}] {anomaly.source}/{anomaly.metric}: {anomaly.reason}",
            extra={
                "anomaly_id": anomaly.id,
                "source": anomaly.source,
                "metric": anomaly.metric,
                "value": anomaly.value,
                "severity": anomaly.severity.value,
            },
        )
