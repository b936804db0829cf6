"""
In-memory storage for datums, anomalies and source scores.
"""

from .memory_store import MemoryStore

__all__ = [
    "MemoryStore",
]
