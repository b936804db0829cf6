"""
Periodic coordination of freshness checks, reliability recomputes and reports.

All tasks run from a single APScheduler loop. Different tasks may overlap
in time; a task never overlaps itself (a tick that arrives while the
previous run is still going is skipped).
"""

from dataclasses import dataclass
from typing import Any, Callable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from feedwatch.config.settings import SchedulerSettings
from feedwatch.core.models import QualityReport
from feedwatch.detectors.freshness_monitor import FreshnessMonitor
from feedwatch.observability.logger import get_logger, log_operation
from feedwatch.observability.metrics import MetricsCollector
from feedwatch.reports.report_service import ReportService
from feedwatch.scoring.reliability import ReliabilityScorer

logger = get_logger(__name__)

FRESHNESS_CHECK = "freshness_check"
RELIABILITY_RECOMPUTE = "reliability_recompute"
REPORT_GENERATION = "report_generation"

ReportSink = Callable[[QualityReport], Any]


@dataclass(frozen=True)
class PeriodicTask:
    name: str
    func: Callable[[], Any]
    interval_seconds: float


class QualityScheduler:
    """
    Timer-driven coordinator with an explicit start/stop lifecycle.

    Usage:
        scheduler = QualityScheduler(freshness, reliability, reports)
        scheduler.start()
        ...
        scheduler.stop()
    """

    def __init__(
        self,
        freshness: FreshnessMonitor,
        reliability: ReliabilityScorer,
        reports: ReportService,
        settings: SchedulerSettings | None = None,
        metrics: MetricsCollector | None = None,
    ):
        """
        Initialize scheduler.

        Args:
            freshness: Monitor whose check runs every freshness interval
            reliability: Scorer recomputed every reliability interval
            reports: Service generating a report every report interval
            settings: Intervals and jitter (defaults: 60s, 300s, 900s, no jitter)
            metrics: Collector for task durations and failures
        """
        self.freshness = freshness
        self.reliability = reliability
        self.reports = reports
        self.settings = settings or SchedulerSettings()
        self.metrics = metrics or MetricsCollector()
        self.report_sinks: list[ReportSink] = []
        self.last_report: QualityReport | None = None
        self._scheduler: BackgroundScheduler | None = None

        self.tasks: dict[str, PeriodicTask] = {
            task.name: task
            for task in (
                PeriodicTask(
                    FRESHNESS_CHECK,
                    self.freshness.check_freshness,
                    self.settings.freshness_interval_seconds,
                ),
                PeriodicTask(
                    RELIABILITY_RECOMPUTE,
                    self.reliability.recompute_all,
                    self.settings.reliability_interval_seconds,
                ),
                PeriodicTask(
                    REPORT_GENERATION,
                    self.generate_report,
                    self.settings.report_interval_seconds,
                ),
            )
        }

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def add_report_sink(self, sink: ReportSink) -> None:
        """Register a callable receiving every scheduled report."""
        self.report_sinks.append(sink)

    def generate_report(self) -> QualityReport:
        report = self.reports.generate_report()
        self.last_report = report
        logger.info(
            f"[DQ Report] {report.generated_at} anomalies={report.total_anomalies}",
            extra={
                "total_anomalies": report.total_anomalies,
                "total_sources": report.summary.total_sources,
                "avg_score": report.summary.avg_score,
            },
        )

        for sink in self.report_sinks:
            try:
                sink(report)
            except Exception as e:
                logger.exception(f"Report sink {sink!r} failed: {e}")

        return report

    def run_task(self, name: str) -> Any:
        """
        Run one task synchronously.

        Raises:
            ValueError: If the task name is unknown
        """
        task = self.tasks.get(name)
        if task is None:
            raise ValueError(f"Unknown task: {name}. Known: {sorted(self.tasks)}")

        with log_operation(name, logger=logger, task=name), self.metrics.track_task(name):
            return task.func()

    def _run_scheduled(self, name: str) -> None:
        try:
            self.run_task(name)
        except Exception:
            # Already logged by log_operation; the task stays scheduled
            self.metrics.record_task_failure(name)

    def start(self) -> None:
        """
        Start the scheduling loop.

        Raises:
            RuntimeError: If the scheduler is already running
        """
        if self.running:
            raise RuntimeError("Scheduler is already running; stop it before starting again")

        scheduler = BackgroundScheduler(timezone="UTC")
        for task in self.tasks.values():
            scheduler.add_job(
                self._run_scheduled,
                IntervalTrigger(seconds=task.interval_seconds, jitter=self.settings.jitter_seconds),
                args=[task.name],
                id=task.name,
                name=task.name,
                max_instances=1,
                coalesce=True,
                replace_existing=True,
            )
        scheduler.start()
        self._scheduler = scheduler

        logger.info(
            "Scheduler started",
            extra={name: task.interval_seconds for name, task in self.tasks.items()},
        )

    def stop(self, wait: bool = False) -> None:
        """
        Cancel every scheduled task. A no-op when not running.

        Args:
            wait: Block until running tasks finish
        """
        if not self.running:
            logger.info("Scheduler is not running")
            return

        self._scheduler.shutdown(wait=wait)
        self._scheduler = None
        logger.info("Scheduler stopped")

    def get_status(self) -> dict[str, Any]:
        if not self.running:
            return {"status": "stopped", "tasks": sorted(self.tasks)}

        jobs = []
        for job in self._scheduler.get_jobs():
            jobs.append({
                "task": job.id,
                "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None,
            })
        return {"status": "running", "jobs": jobs}
