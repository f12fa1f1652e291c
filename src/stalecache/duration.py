"""Duration parsing and the default clock."""

import re
import time
from datetime import timedelta

from stalecache.types import Duration

_DURATION_PATTERN = re.compile(r"^(-?\d+)(ms|s|m|h|d)$")
_UNITS: dict[str, int] = {
    "ms": 1,
    "s": 1000,
    "m": 60_000,
    "h": 3_600_000,
    "d": 86_400_000,
}


def parse_duration(duration: Duration) -> int:
    """Convert a duration to whole milliseconds.

    Integers pass through untouched (negative values included, the config
    resolver decides what to do with them). ``timedelta`` values are
    truncated to milliseconds. Strings use a single unit suffix:
    ``"500ms"``, ``"30s"``, ``"5m"``, ``"2h"``, ``"1d"``.
    """
    if isinstance(duration, bool):
        raise TypeError(f"Invalid duration: {duration!r}")
    if isinstance(duration, int):
        return duration
    if isinstance(duration, timedelta):
        return int(duration.total_seconds() * 1000)
    if not isinstance(duration, str):
        raise TypeError(
            f"Invalid duration: {duration!r} (expected str, int or timedelta)"
        )

    match = _DURATION_PATTERN.match(duration.strip())
    if not match:
        raise ValueError(f"Invalid duration: {duration!r}")

    value, unit = match.groups()
    return int(value) * _UNITS[unit]


def now_ms() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)
