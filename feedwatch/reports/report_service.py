"""
Automated data quality reports.

A report is a read-only snapshot of the store: anomaly totals, the most
recent anomalies, the best scoring sources and an average score.
"""

import math

from feedwatch.core.models import QualityReport, ReportSummary
from feedwatch.store.memory_store import MemoryStore
from feedwatch.utils.timeutils import Clock, now_iso, utc_now

RECENT_ANOMALIES = 50
TOP_SOURCES = 10


class ReportService:
    def __init__(self, store: MemoryStore, clock: Clock = utc_now):
        self.store = store
        self.clock = clock

    def generate_report(self) -> QualityReport:
        sources = self.store.get_source_scores()
        top = sorted(sources, key=lambda s: s.score, reverse=True)[:TOP_SOURCES]

        # An empty system reports 100 rather than total failure
        if sources:
            avg_score = math.floor(sum(s.score for s in sources) / len(sources) + 0.5)
        else:
            avg_score = 100

        return QualityReport(
            generated_at=now_iso(self.clock),
            total_anomalies=self.store.anomaly_count(),
            anomalies_recent=self.store.get_anomalies(limit=RECENT_ANOMALIES),
            top_sources=top,
            summary=ReportSummary(total_sources=len(sources), avg_score=avg_score),
        )
