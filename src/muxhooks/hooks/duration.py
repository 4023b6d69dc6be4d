"""Duration text parsing for hook timeouts ("30s", "5m30s", "250ms")."""

from __future__ import annotations

import re

_UNITS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(text: str) -> float:
    """Parse duration text into seconds.

    Accepts a sequence of decimal numbers with units (``ns``, ``us``,
    ``ms``, ``s``, ``m``, ``h``) and an optional leading sign. ``"0"`` is
    the only unit-less value accepted.
    """
    raw = text.strip()
    if not raw:
        raise ValueError("invalid duration: empty string")

    sign = 1.0
    body = raw
    if body[0] in "+-":
        if body[0] == "-":
            sign = -1.0
        body = body[1:]

    if body == "0":
        return 0.0

    total = 0.0
    pos = 0
    while pos < len(body):
        m = _COMPONENT.match(body, pos)
        if m is None:
            raise ValueError(f"invalid duration: {text!r}")
        total += float(m.group(1)) * _UNITS[m.group(2)]
        pos = m.end()

    if pos == 0:
        raise ValueError(f"invalid duration: {text!r}")
    return sign * total


def format_duration(seconds: float) -> str:
    """Render seconds as compact duration text, e.g. ``5m30s`` or ``250ms``."""
    if seconds < 0:
        return "-" + format_duration(-seconds)
    if seconds == 0:
        return "0s"
    if seconds < 1:
        return f"{seconds * 1000:g}ms"

    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    parts = []
    if hours:
        parts.append(f"{int(hours)}h")
    if minutes:
        parts.append(f"{int(minutes)}m")
    if secs or not parts:
        parts.append(f"{secs:g}s")
    return "".join(parts)
