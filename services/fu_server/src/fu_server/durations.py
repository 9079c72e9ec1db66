"""Go-style duration strings ("1h30m", "90s", "1.5h") to and from timedelta."""
from __future__ import annotations

import datetime as dt
import re

_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")

# largest value a Go time.Duration holds
MAX_SECONDS = (2**63 - 1) / 1e9


def parse_duration(value: str) -> dt.timedelta:
    """Parse a duration like ``2h45m`` or ``-1.5h``. Raises ValueError."""
    s = (value or "").strip()
    if not s:
        raise ValueError("empty duration")

    sign = 1
    if s[0] in "+-":
        sign = -1 if s[0] == "-" else 1
        s = s[1:]
    if s == "0":
        return dt.timedelta(0)

    seconds = 0.0
    pos = 0
    while pos < len(s):
        m = _PART_RE.match(s, pos)
        if not m:
            raise ValueError(f"invalid duration: {value!r}")
        seconds += float(m.group(1)) * _UNITS[m.group(2)]
        pos = m.end()
    if pos == 0:
        raise ValueError(f"invalid duration: {value!r}")
    if seconds > MAX_SECONDS:
        raise ValueError(f"duration out of range: {value!r}")
    return dt.timedelta(seconds=sign * seconds)


def _fraction(whole: int, rest: int, width: int) -> str:
    if not rest:
        return str(whole)
    return f"{whole}.{rest:0{width}d}".rstrip("0")


def format_duration(value: dt.timedelta) -> str:
    """Inverse of parse_duration down to microseconds: ``1h0m0s``, ``1.5s``, ``500ms``."""
    total = value // dt.timedelta(microseconds=1)
    if total == 0:
        return "0s"
    sign = "-" if total < 0 else ""
    total = abs(total)
    if total < 1000:
        return f"{sign}{total}us"
    if total < 1_000_000:
        return f"{sign}{_fraction(*divmod(total, 1000), 3)}ms"

    whole, micros = divmod(total, 1_000_000)
    hours, rest = divmod(whole, 3600)
    minutes, seconds = divmod(rest, 60)
    secs = _fraction(seconds, micros, 6)
    if hours:
        return f"{sign}{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{sign}{minutes}m{secs}s"
    return f"{sign}{secs}s"
