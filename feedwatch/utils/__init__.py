"""
Shared helpers for time handling and numeric coercion.
"""

from .timeutils import gen_id, now_iso, parse_timestamp, safe_number, to_iso, utc_now

__all__ = [
    "utc_now",
    "to_iso",
    "now_iso",
    "parse_timestamp",
    "gen_id",
    "safe_number",
]
