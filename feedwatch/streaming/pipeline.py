"""
Ingestion pipeline orchestration for inbound datums.

Coordinates the flow: classify → validate → lineage → correction (store)
→ detectors (anomaly, outlier, freshness, completeness).
"""

import time
from dataclasses import dataclass
from typing import Callable, Iterable

from feedwatch.core.correction.correction_engine import CorrectionEngine
from feedwatch.core.models import Anomaly, PayloadKind, RawDatum, ValidationResult, classify_payload
from feedwatch.core.validators.schema_validator import SchemaValidator
from feedwatch.detectors.anomaly_detector import AnomalyDetector
from feedwatch.detectors.completeness_monitor import CompletenessMonitor
from feedwatch.detectors.extractors import MetricExtractor, default_metric_extractor
from feedwatch.detectors.freshness_monitor import FreshnessMonitor
from feedwatch.detectors.outlier_detector import OutlierDetector
from feedwatch.observability.lineage import LineageTracker
from feedwatch.observability.logger import get_logger
from feedwatch.observability.metrics import MetricsCollector

logger = get_logger(__name__)

KeyFunction = Callable[[RawDatum], "str | None"]


def symbol_key(datum: RawDatum) -> str | None:
    """Completeness key: the payload's symbol, when it has one."""
    if isinstance(datum.payload, dict):
        symbol = datum.payload.get("symbol")
        if isinstance(symbol, str) and symbol:
            return symbol
    return None


@dataclass
class IngestResult:
    """
    Outcome of ingesting one datum.

    Attributes:
        accepted: Whether the datum reached the store
        kind: Payload kind decided at ingress
        validation: Schema validation result
        datum: Corrected datum as pushed to the store, None when not accepted
        action: Correction action string, if any
        anomaly: Anomaly recorded by the anomaly detector, if any
        is_outlier: Whether the outlier detector flagged the sample
    """

    accepted: bool
    kind: PayloadKind
    validation: ValidationResult
    datum: RawDatum | None = None
    action: str | None = None
    anomaly: Anomaly | None = None
    is_outlier: bool = False


class IngestionPipeline:
    """
    Main ingestion orchestrator.

    Handles the complete per-datum flow:
    1. Classify the payload and validate the datum
    2. Drop datums without a source (and invalid ones if reject_invalid)
    3. Attach lineage and correct; the corrector stores the datum once
    4. Feed the detectors with the corrected datum
    """

    def __init__(
        self,
        validator: SchemaValidator,
        lineage: LineageTracker,
        corrector: CorrectionEngine,
        anomaly_detector: AnomalyDetector,
        outlier_detector: OutlierDetector,
        freshness: FreshnessMonitor,
        completeness: CompletenessMonitor,
        extractor: MetricExtractor = default_metric_extractor,
        completeness_key: KeyFunction = symbol_key,
        reject_invalid: bool = False,
        metrics: MetricsCollector | None = None,
    ):
        self.validator = validator
        self.lineage = lineage
        self.corrector = corrector
        self.anomaly_detector = anomaly_detector
        self.outlier_detector = outlier_detector
        self.freshness = freshness
        self.completeness = completeness
        self.extractor = extractor
        self.completeness_key = completeness_key
        self.reject_invalid = reject_invalid
        self.metrics = metrics or MetricsCollector()

    def ingest(self, datum: RawDatum) -> IngestResult:
        """
        Run one datum through the pipeline.

        Args:
            datum: Inbound datum

        Returns:
            IngestResult describing what happened
        """
        started = time.perf_counter()
        kind = classify_payload(datum.payload)
        validation = self.validator.validate(datum, kind)
        source = datum.source or "<missing>"

        if not validation.ok:
            self.metrics.record_validation_failures(source, kind.value, len(validation.errors))

        if not datum.source:
            logger.warning(
                "Dropping datum without a source",
                extra={"datum_id": datum.id, "errors": validation.errors},
            )
            self.metrics.record_ingest(source, "dropped")
            return IngestResult(accepted=False, kind=kind, validation=validation)

        if not validation.ok and self.reject_invalid:
            logger.info(
                f"Rejecting invalid datum from '{datum.source}': {'; '.join(validation.errors)}",
                extra={"source": datum.source, "datum_id": datum.id},
            )
            self.metrics.record_ingest(source, "rejected")
            return IngestResult(accepted=False, kind=kind, validation=validation)

        tracked = self.lineage.attach(datum, "ingested")
        if not validation.ok:
            tracked = self.lineage.add_transform(
                tracked, f"validation_failed:{'; '.join(validation.errors)}"
            )

        corrected, action = self.corrector.attempt_correction(tracked, kind)
        self.metrics.record_correction(datum.source, action)

        anomaly = self.anomaly_detector.ingest(corrected, self.extractor)

        is_outlier = self.outlier_detector.ingest(corrected, self.extractor)
        if is_outlier:
            sample = self.extractor(corrected)
            metric = sample.metric if sample else "unknown"
            self.metrics.record_outlier(datum.source, metric)
            logger.info(
                f"Outlier on {datum.source}::{metric}",
                extra={"source": datum.source, "metric": metric, "datum_id": datum.id},
            )

        self.freshness.mark_received(corrected)
        key = self.completeness_key(corrected)
        if key:
            self.completeness.mark(corrected, key)

        self.metrics.record_ingest(source, "accepted", time.perf_counter() - started)
        return IngestResult(
            accepted=True,
            kind=kind,
            validation=validation,
            datum=corrected,
            action=action,
            anomaly=anomaly,
            is_outlier=is_outlier,
        )

    def ingest_many(self, datums: Iterable[RawDatum]) -> list[IngestResult]:
        return [self.ingest(datum) for datum in datums]
