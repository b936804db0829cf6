"""
Periodic task scheduling.
"""

from .scheduler import (
    FRESHNESS_CHECK,
    RELIABILITY_RECOMPUTE,
    REPORT_GENERATION,
    PeriodicTask,
    QualityScheduler,
)

__all__ = [
    "QualityScheduler",
    "PeriodicTask",
    "FRESHNESS_CHECK",
    "RELIABILITY_RECOMPUTE",
    "REPORT_GENERATION",
]
