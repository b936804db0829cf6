"""
Anomaly model representing one data quality event.
"""

from enum import Enum

from pydantic import BaseModel


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Anomaly(BaseModel):
    """
    A data quality event raised by a detector. Never mutated once stored.

    Attributes:
        id: Unique identifier
        source: Source the event concerns
        timestamp: Event time (ISO-8601)
        metric: Metric name ("freshness" for staleness events)
        value: Observed value (elapsed minutes for staleness events)
        reason: Rules that fired, joined with "; "
        severity: low, medium or high
    """

    id: str
    source: str
    timestamp: str
    metric: str
    value: float
    reason: str
    severity: Severity

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "id": "anom-6f1c1f0e-8a8c-4a5e-9b55-3f1a3e0f7c11",
                "source": "binance",
                "timestamp": "2025-11-17T08:30:00.000Z",
                "metric": "price",
                "value": 71230.0,
                "reason": "z-score=4.35 > 4; ewma jump 23.4%",
                "severity": "high"
            }
        }
