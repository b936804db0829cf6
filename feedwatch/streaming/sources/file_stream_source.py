"""
File stream source for newline-delimited JSON datums.

Reads one datum per line from a file, or from every ``*.jsonl`` /
``*.ndjson`` file in a directory (oldest first).
"""

import json
from pathlib import Path
from typing import Iterator

from pydantic import ValidationError

from feedwatch.core.models import RawDatum
from feedwatch.observability.logger import get_logger

logger = get_logger(__name__)

SUPPORTED_SUFFIXES = (".jsonl", ".ndjson", ".json")


class FileStreamSource:
    """
    Ingress source yielding RawDatum objects from NDJSON files.

    Malformed lines are logged and skipped so one bad record does not stop
    the feed.
    """

    def __init__(self, path: str | Path, default_source: str | None = None):
        """
        Initialize file stream source.

        Args:
            path: File or directory to read
            default_source: Source name for lines that do not carry one

        Raises:
            FileNotFoundError: If path does not exist
        """
        self.path = Path(path)
        self.default_source = default_source
        self.skipped = 0

        if not self.path.exists():
            raise FileNotFoundError(f"Input path does not exist: {self.path}")

        logger.info(f"Initialized FileStreamSource reading {self.path}")

    def files(self) -> list[Path]:
        if self.path.is_file():
            return [self.path]
        candidates = [p for p in self.path.iterdir() if p.suffix in SUPPORTED_SUFFIXES]
        return sorted(candidates, key=lambda p: (p.stat().st_mtime, p.name))

    def read(self) -> Iterator[RawDatum]:
        for file_path in self.files():
            yield from self._read_file(file_path)

    def __iter__(self) -> Iterator[RawDatum]:
        return self.read()

    def _read_file(self, file_path: Path) -> Iterator[RawDatum]:
        with open(file_path, "rb") as f:
            for line_number, raw in enumerate(f, start=1):
                if not raw.strip():
                    continue
                datum = self._parse_line(raw, file_path, line_number)
                if datum is not None:
                    yield datum

    def _parse_line(self, raw: bytes, file_path: Path, line_number: int) -> RawDatum | None:
        try:
            record = json.loads(raw.decode("utf-8"))
            if not isinstance(record, dict):
                raise ValueError("line is not a JSON object")
            if self.default_source and not record.get("source"):
                record["source"] = self.default_source
            return RawDatum.model_validate(record)
        except (ValueError, ValidationError) as e:
            self.skipped += 1
            logger.warning(
                f"Skipping malformed line {file_path}:{line_number}: {e}",
                extra={"file": str(file_path), "line": line_number},
            )
            return None
