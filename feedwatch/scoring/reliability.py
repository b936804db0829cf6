"""
Reliability scoring per source.

Starts from 100 and subtracts points for stale events, anomalies and
completeness shortfall, clamped to 0..100. Every cycle fully overwrites
the previous score.
"""

import math

from feedwatch.core.models import SourceScore
from feedwatch.detectors.completeness_monitor import CompletenessMonitor
from feedwatch.observability.logger import get_logger
from feedwatch.observability.metrics import MetricsCollector
from feedwatch.store.memory_store import MemoryStore

logger = get_logger(__name__)

STALE_PENALTY = 2
ANOMALY_PENALTY = 3
COMPLETENESS_FLOOR = 50
COMPLETENESS_PENALTY = 0.1


def compute_score(stale_count: int, anomaly_count: int, completeness_score: float) -> int:
    """
    Reliability score for the given counters.

    Rounds half up, so 92.5 scores 93.
    """
    reduction = (
        stale_count * STALE_PENALTY
        + anomaly_count * ANOMALY_PENALTY
        + max(0, COMPLETENESS_FLOOR - completeness_score) * COMPLETENESS_PENALTY
    )
    return int(max(0, min(100, math.floor(100 - reduction + 0.5))))


class ReliabilityScorer:
    def __init__(
        self,
        store: MemoryStore,
        completeness: CompletenessMonitor | None = None,
        metrics: MetricsCollector | None = None,
    ):
        """
        Initialize reliability scorer.

        Args:
            store: Store holding the source score table
            completeness: When given, each source's completeness score is
                refreshed from it before scoring
            metrics: Collector receiving the score gauges
        """
        self.store = store
        self.completeness = completeness
        self.metrics = metrics or MetricsCollector()

    def recompute_all(self) -> list[SourceScore]:
        """
        Recompute and store the score of every known source.

        Each source is updated in one atomic read-modify-write, so increments
        racing with the recompute are never lost.

        Returns:
            The updated score records
        """
        updated = []
        for source in self.store.source_names():
            completeness = (
                self.completeness.completeness_score(source) if self.completeness else None
            )

            def _rescore(record: SourceScore) -> None:
                if completeness is not None:
                    record.completeness_score = completeness
                record.score = compute_score(
                    record.stale_count, record.anomaly_count, record.completeness_score
                )

            record = self.store.mutate_source(source, _rescore)
            self.metrics.record_source_score(source, record.score)
            updated.append(record)

        logger.debug(f"Recomputed reliability for {len(updated)} sources")
        return updated
