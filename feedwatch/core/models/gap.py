"""
CompletenessGap model describing a missing window in a regular feed.
"""

from pydantic import BaseModel


class CompletenessGap(BaseModel):
    """
    A (source, key) pair that has not been seen for too long.

    Attributes:
        source: Source name
        key: Feed key within the source (e.g. a symbol)
        last: Last observed timestamp for the pair
        gap_sec: Whole seconds elapsed since ``last``
    """

    source: str
    key: str
    last: str
    gap_sec: int
