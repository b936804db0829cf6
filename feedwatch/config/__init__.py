"""
Monitor configuration.
"""

from .settings import (
    AnomalySettings,
    CompletenessSettings,
    CorrectionSettings,
    FreshnessSettings,
    MonitorSettings,
    OutlierSettings,
    PipelineSettings,
    SchedulerSettings,
    load_settings,
)

__all__ = [
    "MonitorSettings",
    "AnomalySettings",
    "OutlierSettings",
    "FreshnessSettings",
    "CompletenessSettings",
    "CorrectionSettings",
    "SchedulerSettings",
    "PipelineSettings",
    "load_settings",
]
