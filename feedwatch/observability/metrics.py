"""
Prometheus metrics collection for feedwatch

This module provides metrics instrumentation for monitoring ingestion
throughput, data quality signals and scheduler health.
"""
import os
from typing import Optional

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)


# Global registry for metrics
REGISTRY = CollectorRegistry()


# =======================
# INGESTION METRICS
# =======================

records_ingested_total = Counter(
    name="feedwatch_records_ingested_total",
    documentation="Total number of records offered to the ingestion pipeline",
    labelnames=["source", "status"],  # status: accepted, rejected, dropped
    registry=REGISTRY,
)

ingest_latency_seconds = Histogram(
    name="feedwatch_ingest_latency_seconds",
    documentation="Time spent ingesting a single record",
    labelnames=["source"],
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5],
    registry=REGISTRY,
)

# =======================
# DATA QUALITY METRICS
# =======================

validation_failures_total = Counter(
    name="feedwatch_validation_failures_total",
    documentation="Total number of schema validation errors",
    labelnames=["source", "payload_kind"],
    registry=REGISTRY,
)

corrections_total = Counter(
    name="feedwatch_corrections_total",
    documentation="Total number of correction actions applied",
    labelnames=["source", "action"],
    registry=REGISTRY,
)

anomalies_total = Counter(
    name="feedwatch_anomalies_total",
    documentation="Total number of anomalies recorded",
    labelnames=["source", "metric", "severity"],
    registry=REGISTRY,
)

outliers_total = Counter(
    name="feedwatch_outliers_total",
    documentation="Total number of IQR outliers observed (not recorded as anomalies)",
    labelnames=["source", "metric"],
    registry=REGISTRY,
)

stale_events_total = Counter(
    name="feedwatch_stale_events_total",
    documentation="Total number of freshness violations",
    labelnames=["source"],
    registry=REGISTRY,
)

source_score = Gauge(
    name="feedwatch_source_score",
    documentation="Latest reliability score per source (0-100)",
    labelnames=["source"],
    registry=REGISTRY,
)

# =======================
# SCHEDULER METRICS
# =======================

scheduler_task_duration_seconds = Histogram(
    name="feedwatch_scheduler_task_duration_seconds",
    documentation="Time spent running a periodic task",
    labelnames=["task"],
    buckets=[0.001, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 30.0],
    registry=REGISTRY,
)

scheduler_task_failures_total = Counter(
    name="feedwatch_scheduler_task_failures_total",
    documentation="Total number of periodic task runs that raised",
    labelnames=["task"],
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def start_metrics_server(port: Optional[int] = None) -> int:
    """
    Start HTTP server for Prometheus metrics

    Args:
        port: Port to listen on (defaults to env var METRICS_PORT or 8000)

    Returns:
        The port the server listens on
    """
    # Lazy import: the HTTP server is only needed when the endpoint is enabled
    from prometheus_client import start_http_server

    metrics_port = port or int(os.getenv("METRICS_PORT", "8000"))
    start_http_server(metrics_port, registry=REGISTRY)
    return metrics_port


class track_duration:
    """
    Context manager for tracking operation duration

    Usage:
        with track_duration(scheduler_task_duration_seconds, task="report_generation"):
            # do work
            pass
    """

    def __init__(self, histogram: Histogram, **labels):
        self.histogram = histogram
        self.labels = labels
        self.timer = None

    def __enter__(self):
        self.timer = self.histogram.labels(**self.labels).time()
        self.timer.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.timer.__exit__(exc_type, exc_val, exc_tb)
        return False


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    """
    Increment a counter metric

    Args:
        counter: Prometheus Counter metric
        value: Amount to increment (default: 1.0)
        **labels: Label values for the metric
    """
    counter.labels(**labels).inc(value)


def set_gauge(gauge: Gauge, value: float, **labels) -> None:
    """Set a gauge metric value"""
    gauge.labels(**labels).set(value)


def observe_histogram(histogram: Histogram, value: float, **labels) -> None:
    """Observe a value in a histogram metric"""
    histogram.labels(**labels).observe(value)


# =======================
# METRICS COLLECTOR CLASS
# =======================

class MetricsCollector:
    """
    Metrics collector for monitoring components.

    Gives the pipeline, scheduler and alert sinks one interface over the
    module-level collectors.
    """

    def record_ingest(self, source: str, status: str, duration_seconds: float = 0.0) -> None:
        """
        Record one record passing through ingestion.

        Args:
            source: Source name
            status: "accepted", "rejected" or "dropped"
            duration_seconds: Time spent ingesting the record
        """
        increment_counter(records_ingested_total, 1, source=source, status=status)
        if duration_seconds > 0:
            observe_histogram(ingest_latency_seconds, duration_seconds, source=source)

    def record_validation_failures(self, source: str, payload_kind: str, error_count: int) -> None:
        if error_count > 0:
            increment_counter(
                validation_failures_total, error_count, source=source, payload_kind=payload_kind
            )

    def record_correction(self, source: str, action: str | None) -> None:
        if not action:
            return
        for part in action.split("; "):
            increment_counter(corrections_total, 1, source=source, action=part)

    def record_anomaly(self, source: str, metric: str, severity: str) -> None:
        increment_counter(anomalies_total, 1, source=source, metric=metric, severity=severity)
        if metric == "freshness":
            increment_counter(stale_events_total, 1, source=source)

    def record_outlier(self, source: str, metric: str) -> None:
        increment_counter(outliers_total, 1, source=source, metric=metric)

    def record_source_score(self, source: str, score: float) -> None:
        set_gauge(source_score, score, source=source)

    def track_task(self, task: str) -> track_duration:
        """Duration tracker for one periodic task run."""
        return track_duration(scheduler_task_duration_seconds, task=task)

    def record_task_failure(self, task: str) -> None:
        increment_counter(scheduler_task_failures_total, 1, task=task)
