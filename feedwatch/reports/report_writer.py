"""
Report sinks: destinations for periodically generated reports.
"""

import json
from pathlib import Path

from feedwatch.core.models import QualityReport
from feedwatch.observability.logger import get_logger

logger = get_logger(__name__)


class JsonReportWriter:
    """
    Writes each report to ``<directory>/report-<generated_at>.json``.

    Usage:
        writer = JsonReportWriter("/var/lib/feedwatch/reports")
        scheduler.add_report_sink(writer)
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def __call__(self, report: QualityReport) -> Path:
        return self.write(report)

    def write(self, report: QualityReport) -> Path:
        stamp = report.generated_at.replace(":", "").replace(".", "")
        path = self.directory / f"report-{stamp}.json"
        path.write_text(json.dumps(report.model_dump(mode="json"), indent=2))
        logger.info(f"Wrote data quality report to {path}", extra={"path": str(path)})
        return path
