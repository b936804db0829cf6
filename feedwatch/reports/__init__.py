"""
Data quality report generation and sinks.
"""

from .report_service import ReportService
from .report_writer import JsonReportWriter

__all__ = [
    "ReportService",
    "JsonReportWriter",
]
