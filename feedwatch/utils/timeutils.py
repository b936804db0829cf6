"""
Time and number helpers shared by the monitoring components.

Timestamps travel through the system as ISO-8601 strings rendered in UTC
with millisecond precision and a ``Z`` suffix.
"""

import math
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Callable

# Fractional seconds of any length; normalised to microseconds before parsing
_FRACTION = re.compile(r"\.(\d+)")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_iso(moment: datetime) -> str:
    """
    Render a datetime as an ISO-8601 UTC string.

    Args:
        moment: Aware or naive datetime (naive values are read as UTC)

    Returns:
        String such as ``2025-11-17T08:30:00.000Z``
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def now_iso(clock: Clock = utc_now) -> str:
    """Current time from ``clock`` as an ISO-8601 string."""
    return to_iso(clock())


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Args:
        value: Timestamp string (``Z`` or offset suffix, naive read as UTC)

    Returns:
        Parsed datetime, or None if the value cannot be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def gen_id(prefix: str = "") -> str:
    """Generate a unique identifier with an optional prefix."""
    return f"{prefix}{uuid.uuid4()}"


def safe_number(value: Any) -> float | None:
    """
    Coerce a value to a finite float.

    Numbers and numeric strings are accepted. None, booleans, empty
    strings, NaN and infinities are rejected.

    Args:
        value: Candidate value

    Returns:
        The finite float, or None if the value is not numeric
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    return number if math.isfinite(number) else None
