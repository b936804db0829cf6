"""
Wiring of the monitoring components into one instance.

Every component owns its own state, so several monitors can coexist (for
example one per test).
"""

from dataclasses import dataclass
from datetime import timedelta

from feedwatch.config.settings import MonitorSettings
from feedwatch.core.correction.correction_engine import CorrectionEngine
from feedwatch.core.validators.schema_validator import SchemaValidator
from feedwatch.detectors.anomaly_detector import AnomalyDetector
from feedwatch.detectors.completeness_monitor import CompletenessMonitor
from feedwatch.detectors.extractors import MetricExtractor, default_metric_extractor
from feedwatch.detectors.freshness_monitor import FreshnessMonitor
from feedwatch.detectors.outlier_detector import OutlierDetector
from feedwatch.observability.alerting import LoggingAlertSink
from feedwatch.observability.lineage import LineageTracker
from feedwatch.observability.metrics import MetricsCollector
from feedwatch.query.dashboard import DashboardQueries
from feedwatch.reports.report_service import ReportService
from feedwatch.scheduling.scheduler import QualityScheduler
from feedwatch.scoring.reliability import ReliabilityScorer
from feedwatch.store.memory_store import MemoryStore
from feedwatch.streaming.pipeline import IngestionPipeline
from feedwatch.utils.timeutils import Clock, utc_now


@dataclass
class Monitor:
    settings: MonitorSettings
    store: MemoryStore
    pipeline: IngestionPipeline
    anomaly_detector: AnomalyDetector
    outlier_detector: OutlierDetector
    freshness: FreshnessMonitor
    completeness: CompletenessMonitor
    reliability: ReliabilityScorer
    reports: ReportService
    scheduler: QualityScheduler
    queries: DashboardQueries


def create_monitor(
    settings: MonitorSettings | None = None,
    clock: Clock = utc_now,
    extractor: MetricExtractor = default_metric_extractor,
    alerts: bool = True,
) -> Monitor:
    """
    Factory function to build a fully wired Monitor.

    Args:
        settings: Monitor configuration (defaults everywhere if None)
        clock: Time source shared by every component
        extractor: Metric extractor for the anomaly and outlier detectors
        alerts: Register the logging alert sink on the store

    Returns:
        Monitor with a stopped scheduler

    Example:
        >>> monitor = create_monitor(load_settings("config/monitor.yaml"))
        >>> monitor.pipeline.ingest(datum)
        >>> monitor.scheduler.start()
    """
    settings = settings or MonitorSettings()
    metrics = MetricsCollector()

    store = MemoryStore(clock=clock)
    if alerts:
        store.add_anomaly_listener(LoggingAlertSink(metrics=metrics))

    lineage = LineageTracker(clock=clock)
    corrector = CorrectionEngine(
        store,
        lineage=lineage,
        clock=clock,
        max_future_skew=timedelta(minutes=settings.correction.max_future_skew_minutes),
    )
    anomaly_detector = AnomalyDetector(
        store, alpha=settings.anomaly.alpha, z_threshold=settings.anomaly.z_threshold
    )
    outlier_detector = OutlierDetector(
        max_buffer=settings.outlier.max_buffer,
        multiplier=settings.outlier.multiplier,
        min_samples=settings.outlier.min_samples,
    )
    freshness = FreshnessMonitor(
        store,
        threshold_minutes=settings.freshness.threshold_minutes,
        cooldown_minutes=settings.freshness.cooldown_minutes,
        clock=clock,
    )
    completeness = CompletenessMonitor(
        expected_interval_seconds=settings.completeness.expected_interval_seconds, clock=clock
    )
    reliability = ReliabilityScorer(store, completeness=completeness, metrics=metrics)
    reports = ReportService(store, clock=clock)

    pipeline = IngestionPipeline(
        validator=SchemaValidator(),
        lineage=lineage,
        corrector=corrector,
        anomaly_detector=anomaly_detector,
        outlier_detector=outlier_detector,
        freshness=freshness,
        completeness=completeness,
        extractor=extractor,
        reject_invalid=settings.pipeline.reject_invalid,
        metrics=metrics,
    )
    scheduler = QualityScheduler(freshness, reliability, reports, settings.scheduler, metrics)

    return Monitor(
        settings=settings,
        store=store,
        pipeline=pipeline,
        anomaly_detector=anomaly_detector,
        outlier_detector=outlier_detector,
        freshness=freshness,
        completeness=completeness,
        reliability=reliability,
        reports=reports,
        scheduler=scheduler,
        queries=DashboardQueries(store, reports, freshness),
    )
