"""
Core data models for the feed quality monitor.

All models use Pydantic for runtime validation and type safety.
"""

from .anomaly import Anomaly, Severity
from .gap import CompletenessGap
from .payload import PayloadKind, classify_payload
from .raw_datum import DataLineage, RawDatum
from .report import QualityReport, ReportSummary
from .source_score import SourceScore
from .validation_result import ValidationResult

__all__ = [
    "RawDatum",
    "DataLineage",
    "ValidationResult",
    "Anomaly",
    "Severity",
    "SourceScore",
    "CompletenessGap",
    "QualityReport",
    "ReportSummary",
    "PayloadKind",
    "classify_payload",
]
