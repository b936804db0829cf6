"""
Best-effort correction of malformed datums.
"""

from .correction_engine import CorrectionEngine, CorrectionOutcome

__all__ = [
    "CorrectionEngine",
    "CorrectionOutcome",
]
