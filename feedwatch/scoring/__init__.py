"""
Reliability scoring.
"""

from .reliability import ReliabilityScorer, compute_score

__all__ = [
    "ReliabilityScorer",
    "compute_score",
]
