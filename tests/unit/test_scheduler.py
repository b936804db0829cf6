"""
Unit tests for the periodic quality scheduler.
"""

import pytest

from feedwatch.config import SchedulerSettings
from feedwatch.detectors import FreshnessMonitor
from feedwatch.observability.metrics import REGISTRY
from feedwatch.reports import ReportService
from feedwatch.scheduling import (
    FRESHNESS_CHECK,
    RELIABILITY_RECOMPUTE,
    REPORT_GENERATION,
    PeriodicTask,
    QualityScheduler,
)
from feedwatch.scoring import ReliabilityScorer


@pytest.fixture
def freshness(store, clock) -> FreshnessMonitor:
    return FreshnessMonitor(store, threshold_minutes=15, clock=clock)


@pytest.fixture
def scheduler(store, clock, freshness):
    sched = QualityScheduler(
        freshness,
        ReliabilityScorer(store),
        ReportService(store, clock=clock),
        settings=SchedulerSettings(
            freshness_interval_seconds=3600,
            reliability_interval_seconds=3600,
            report_interval_seconds=3600,
        ),
    )
    yield sched
    sched.stop()


class TestRunTask:
    def test_known_tasks(self, scheduler):
        assert set(scheduler.tasks) == {FRESHNESS_CHECK, RELIABILITY_RECOMPUTE, REPORT_GENERATION}

    def test_freshness_task(self, scheduler, freshness, store, clock, make_price_datum):
        freshness.mark_received(make_price_datum())
        clock.advance(minutes=20)

        raised = scheduler.run_task(FRESHNESS_CHECK)

        assert len(raised) == 1
        assert store.get_source_score("binance").stale_count == 1

    def test_reliability_task(self, scheduler, store):
        store.inc_anomaly_count("binance")
        scheduler.run_task(RELIABILITY_RECOMPUTE)
        assert store.get_source_score("binance").score == 97

    def test_report_task_feeds_sinks(self, scheduler):
        received = []
        scheduler.add_report_sink(received.append)

        report = scheduler.run_task(REPORT_GENERATION)

        assert received == [report]
        assert scheduler.last_report is report

    def test_failing_sink_does_not_stop_others(self, scheduler):
        received = []

        def broken(report):
            raise OSError("disk full")

        scheduler.add_report_sink(broken)
        scheduler.add_report_sink(received.append)
        scheduler.run_task(REPORT_GENERATION)

        assert len(received) == 1

    def test_unknown_task(self, scheduler):
        with pytest.raises(ValueError, match="Unknown task"):
            scheduler.run_task("vacuum")

    def test_scheduled_failure_is_counted_not_raised(self, scheduler, monkeypatch):
        def boom():
            raise RuntimeError("boom")

        monkeypatch.setitem(
            scheduler.tasks,
            FRESHNESS_CHECK,
            PeriodicTask(FRESHNESS_CHECK, boom, 60),
        )
        before = REGISTRY.get_sample_value(
            "feedwatch_scheduler_task_failures_total", {"task": FRESHNESS_CHECK}
        ) or 0

        scheduler._run_scheduled(FRESHNESS_CHECK)

        after = REGISTRY.get_sample_value(
            "feedwatch_scheduler_task_failures_total", {"task": FRESHNESS_CHECK}
        )
        assert after == before + 1


class TestLifecycle:
    def test_start_and_stop(self, scheduler):
        assert scheduler.get_status()["status"] == "stopped"

        scheduler.start()
        status = scheduler.get_status()

        assert scheduler.running
        assert status["status"] == "running"
        assert {job["task"] for job in status["jobs"]} == set(scheduler.tasks)

        scheduler.stop()
        assert not scheduler.running

    def test_double_start_rejected(self, scheduler):
        scheduler.start()
        with pytest.raises(RuntimeError, match="already running"):
            scheduler.start()

    def test_stop_when_not_running_is_noop(self, scheduler):
        scheduler.stop()
        scheduler.stop()
        assert not scheduler.running

    def test_restart_after_stop(self, scheduler):
        scheduler.start()
        scheduler.stop()
        scheduler.start()
        assert scheduler.running
