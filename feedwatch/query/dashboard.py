"""
Read-only query surface over the monitor state.

Each method returns JSON-ready data and has no side effects; a transport
(HTTP, CLI) can expose them directly.
"""

from typing import Any

from feedwatch.detectors.freshness_monitor import FreshnessMonitor
from feedwatch.reports.report_service import ReportService
from feedwatch.store.memory_store import MemoryStore


class DashboardQueries:
    """
    Projections backing ``anomalies``, ``sources``, ``report`` and ``freshness/{source}``.
    """

    def __init__(self, store: MemoryStore, reports: ReportService, freshness: FreshnessMonitor):
        self.store = store
        self.reports = reports
        self.freshness = freshness

    def health(self) -> dict[str, Any]:
        return {"ok": True}

    def anomalies(self, source: str | None = None, limit: int = 1000) -> list[dict[str, Any]]:
        """Recent anomalies, optionally for one source, oldest first."""
        return [a.model_dump(mode="json") for a in self.store.get_anomalies(source, limit)]

    def sources(self) -> list[dict[str, Any]]:
        return [s.model_dump(mode="json") for s in self.store.get_source_scores()]

    def report(self) -> dict[str, Any]:
        return self.reports.generate_report().model_dump(mode="json")

    def freshness_for(self, source: str) -> dict[str, Any]:
        return {"source": source, "last": self.freshness.get_last_seen(source)}
