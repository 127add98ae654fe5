"""Go-style duration strings.

Operators configure delays and timeouts the same way they would for any other
container in the cluster (``STARTUP_DELAY=1m30s``), and the admin endpoints
echo the delay back in that notation.
"""

from __future__ import annotations

import re

_NANOS_PER_UNIT: dict[str, int] = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_BARE_NUMBER = re.compile(r"[-+]?(\d+(?:\.\d*)?|\.\d+)")


def parse_duration(text: str) -> float:
    """Parse ``"1m30s"``, ``"250ms"`` or a bare number of seconds.

    Returns the duration in seconds. Raises ``ValueError`` on anything else.
    """
    raw = text.strip()
    if not raw:
        raise ValueError("empty duration")

    if _BARE_NUMBER.fullmatch(raw):
        return float(raw)

    sign = 1
    body = raw
    if body[0] in "+-":
        sign = -1 if body[0] == "-" else 1
        body = body[1:]
    if body == "0":
        return 0.0

    pos = 0
    total_ns = 0.0
    while pos < len(body):
        match = _COMPONENT.match(body, pos)
        if match is None:
            raise ValueError(f"invalid duration {text!r}")
        value, unit = match.groups()
        total_ns += float(value) * _NANOS_PER_UNIT[unit]
        pos = match.end()

    if pos == 0:
        raise ValueError(f"invalid duration {text!r}")
    return sign * total_ns / 1_000_000_000


def format_duration(seconds: float) -> str:
    """Render seconds the way Go's ``time.Duration.String`` does."""
    ns = round(seconds * 1_000_000_000)
    if ns == 0:
        return "0s"

    sign = "-" if ns < 0 else ""
    ns = abs(ns)

    if ns < 1_000:
        return f"{sign}{ns}ns"
    if ns < 1_000_000:
        return f"{sign}{_with_fraction(ns, 1_000)}µs"
    if ns < 1_000_000_000:
        return f"{sign}{_with_fraction(ns, 1_000_000)}ms"

    hours, rest = divmod(ns, _NANOS_PER_UNIT["h"])
    minutes, rest = divmod(rest, _NANOS_PER_UNIT["m"])
    secs = _with_fraction(rest, _NANOS_PER_UNIT["s"]) + "s"
    if hours:
        return f"{sign}{hours}h{minutes}m{secs}"
    if minutes:
        return f"{sign}{minutes}m{secs}"
    return sign + secs


def _with_fraction(value: int, unit: int) -> str:
    whole, frac = divmod(value, unit)
    if not frac:
        return str(whole)
    width = len(str(unit)) - 1
    return f"{whole}.{frac:0{width}d}".rstrip("0")
