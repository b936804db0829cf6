"""
QualityReport model produced by the report service.
"""

from pydantic import BaseModel, Field

from .anomaly import Anomaly
from .source_score import SourceScore


class ReportSummary(BaseModel):
    total_sources: int
    avg_score: int


class QualityReport(BaseModel):
    """
    Point-in-time data quality snapshot.

    Attributes:
        generated_at: When the report was generated (ISO-8601)
        total_anomalies: Number of anomalies held by the store
        anomalies_recent: The most recent anomalies (at most 50)
        top_sources: Highest scoring sources (at most 10)
        summary: Source count and average score
    """

    generated_at: str
    total_anomalies: int
    anomalies_recent: list[Anomaly] = Field(default_factory=list)
    top_sources: list[SourceScore] = Field(default_factory=list)
    summary: ReportSummary
