"""
SourceScore model representing the reliability state of one source.
"""

from pydantic import BaseModel, Field


class SourceScore(BaseModel):
    """
    Reliability state of a source, created lazily on first touch.

    All mutation goes through ``MemoryStore.mutate_source``.

    Attributes:
        source: Source name
        score: Reliability score 0-100
        last_seen: When the source was last touched (ISO-8601)
        stale_count: Number of freshness violations
        anomaly_count: Number of anomalies raised by the anomaly detector
        completeness_score: Percentage of tracked keys without a gap
    """

    source: str
    score: int = Field(100, ge=0, le=100)
    last_seen: str
    stale_count: int = Field(0, ge=0)
    anomaly_count: int = Field(0, ge=0)
    completeness_score: float = 100.0

    class Config:
        validate_assignment = True
        json_schema_extra = {
            "example": {
                "source": "binance",
                "score": 93,
                "last_seen": "2025-11-17T08:30:00.125Z",
                "stale_count": 2,
                "anomaly_count": 1,
                "completeness_score": 100.0
            }
        }
