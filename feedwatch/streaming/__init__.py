"""
Datum ingestion: pipeline orchestration and ingress sources.
"""

from .pipeline import IngestionPipeline, IngestResult, symbol_key
from .sources.file_stream_source import FileStreamSource

__all__ = [
    "IngestionPipeline",
    "IngestResult",
    "FileStreamSource",
    "symbol_key",
]
