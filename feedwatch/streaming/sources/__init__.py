"""
Ingress sources for datums.
"""

from .file_stream_source import FileStreamSource

__all__ = [
    "FileStreamSource",
]
