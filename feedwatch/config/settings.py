"""
Monitor configuration management.

Loads detector thresholds and scheduler intervals from YAML files and
environment variables.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class AnomalySettings(BaseModel):
    alpha: float = Field(0.3, gt=0, le=1)
    z_threshold: float = Field(4.0, gt=0)


class OutlierSettings(BaseModel):
    max_buffer: int = Field(1000, ge=10)
    multiplier: float = Field(1.5, gt=0)
    min_samples: int = Field(10, ge=1)


class FreshnessSettings(BaseModel):
    threshold_minutes: int = Field(15, ge=0)
    cooldown_minutes: int = Field(0, ge=0)


class CompletenessSettings(BaseModel):
    expected_interval_seconds: int = Field(30, gt=0)


class CorrectionSettings(BaseModel):
    max_future_skew_minutes: float = Field(5, ge=0)


class SchedulerSettings(BaseModel):
    freshness_interval_seconds: float = Field(60, gt=0)
    reliability_interval_seconds: float = Field(300, gt=0)
    report_interval_seconds: float = Field(900, gt=0)
    jitter_seconds: float | None = Field(None, ge=0)


class PipelineSettings(BaseModel):
    reject_invalid: bool = False


class MonitorSettings(BaseModel):
    """
    Complete monitor configuration. Every field has a working default.

    Expected YAML format:
    ```yaml
    monitor:
      log_level: INFO
      metrics_port: 9108
      anomaly:
        alpha: 0.3
        z_threshold: 4
      freshness:
        threshold_minutes: 15
      scheduler:
        freshness_interval_seconds: 60
        jitter_seconds: 2
    ```
    """

    log_level: str = "INFO"
    metrics_port: int | None = None
    anomaly: AnomalySettings = Field(default_factory=AnomalySettings)
    outlier: OutlierSettings = Field(default_factory=OutlierSettings)
    freshness: FreshnessSettings = Field(default_factory=FreshnessSettings)
    completeness: CompletenessSettings = Field(default_factory=CompletenessSettings)
    correction: CorrectionSettings = Field(default_factory=CorrectionSettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)


# Environment variable -> (section, field); section None means top level
ENV_OVERRIDES: dict[str, tuple[str | None, str]] = {
    "LOG_LEVEL": (None, "log_level"),
    "METRICS_PORT": (None, "metrics_port"),
    "FEEDWATCH_Z_THRESHOLD": ("anomaly", "z_threshold"),
    "FEEDWATCH_EWMA_ALPHA": ("anomaly", "alpha"),
    "FEEDWATCH_FRESHNESS_THRESHOLD_MINUTES": ("freshness", "threshold_minutes"),
    "FEEDWATCH_FRESHNESS_COOLDOWN_MINUTES": ("freshness", "cooldown_minutes"),
    "FEEDWATCH_EXPECTED_INTERVAL_SECONDS": ("completeness", "expected_interval_seconds"),
    "FEEDWATCH_SCHEDULER_JITTER_SECONDS": ("scheduler", "jitter_seconds"),
    "FEEDWATCH_REJECT_INVALID": ("pipeline", "reject_invalid"),
}


def _apply_env_overrides(config: dict[str, Any], environ: dict[str, str]) -> dict[str, Any]:
    for env_name, (section, field_name) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value is None or value == "":
            continue
        target = config if section is None else config.setdefault(section, {})
        target[field_name] = value
    return config


def load_settings(
    config_path: str | Path | None = None,
    environ: dict[str, str] | None = None,
) -> MonitorSettings:
    """
    Load monitor settings from an optional YAML file plus environment overrides.

    Args:
        config_path: Path to the YAML configuration file
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Validated MonitorSettings

    Raises:
        FileNotFoundError: If config_path does not exist
        ValueError: If the YAML document is not a mapping
    """
    config: dict[str, Any] = {}

    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Monitor configuration file not found: {config_path}")

        with open(path) as f:
            document = yaml.safe_load(f) or {}

        if not isinstance(document, dict):
            raise ValueError("Configuration file must contain a mapping")

        config = document.get("monitor", document)
        if not isinstance(config, dict):
            raise ValueError("'monitor' section must be a mapping")

    config = _apply_env_overrides(dict(config), dict(os.environ if environ is None else environ))
    return MonitorSettings.model_validate(config)
