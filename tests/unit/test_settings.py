"""
Unit tests for monitor configuration loading.
"""

import pytest
from pydantic import ValidationError

from feedwatch.config import MonitorSettings, load_settings


@pytest.fixture
def config_file(tmp_path):
    def _write(text: str):
        path = tmp_path / "monitor.yaml"
        path.write_text(text)
        return path

    return _write


class TestDefaults:
    def test_defaults_without_file(self):
        settings = load_settings(environ={})

        assert settings.log_level == "INFO"
        assert settings.metrics_port is None
        assert settings.anomaly.alpha == 0.3
        assert settings.anomaly.z_threshold == 4.0
        assert settings.outlier.max_buffer == 1000
        assert settings.freshness.threshold_minutes == 15
        assert settings.freshness.cooldown_minutes == 0
        assert settings.completeness.expected_interval_seconds == 30
        assert settings.scheduler.freshness_interval_seconds == 60
        assert settings.scheduler.reliability_interval_seconds == 300
        assert settings.scheduler.report_interval_seconds == 900
        assert settings.pipeline.reject_invalid is False


class TestYamlLoading:
    def test_monitor_section(self, config_file):
        path = config_file(
            """
monitor:
  log_level: DEBUG
  anomaly:
    z_threshold: 3
  scheduler:
    freshness_interval_seconds: 5
"""
        )
        settings = load_settings(path, environ={})

        assert settings.log_level == "DEBUG"
        assert settings.anomaly.z_threshold == 3
        assert settings.anomaly.alpha == 0.3
        assert settings.scheduler.freshness_interval_seconds == 5

    def test_top_level_document_without_section(self, config_file):
        settings = load_settings(config_file("freshness:\n  threshold_minutes: 5\n"), environ={})
        assert settings.freshness.threshold_minutes == 5

    def test_empty_file(self, config_file):
        assert load_settings(config_file(""), environ={}) == MonitorSettings()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "nope.yaml", environ={})

    def test_non_mapping_document(self, config_file):
        with pytest.raises(ValueError, match="mapping"):
            load_settings(config_file("- a\n- b\n"), environ={})

    def test_invalid_value_rejected(self, config_file):
        with pytest.raises(ValidationError):
            load_settings(config_file("monitor:\n  anomaly:\n    alpha: 2\n"), environ={})


class TestEnvOverrides:
    def test_env_wins_over_file(self, config_file):
        path = config_file("monitor:\n  anomaly:\n    z_threshold: 3\n")
        settings = load_settings(
            path,
            environ={
                "FEEDWATCH_Z_THRESHOLD": "5.5",
                "FEEDWATCH_REJECT_INVALID": "true",
                "METRICS_PORT": "9108",
                "FEEDWATCH_SCHEDULER_JITTER_SECONDS": "2",
            },
        )

        assert settings.anomaly.z_threshold == 5.5
        assert settings.pipeline.reject_invalid is True
        assert settings.metrics_port == 9108
        assert settings.scheduler.jitter_seconds == 2

    def test_empty_env_value_ignored(self):
        settings = load_settings(environ={"FEEDWATCH_EWMA_ALPHA": ""})
        assert settings.anomaly.alpha == 0.3
