"""Millisecond timestamps and the human-readable duration format."""

from __future__ import annotations

import json
import math
import re
import time as _time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal

MINIMUM_TICK = timedelta(milliseconds=1)
_SECOND = 1000
_NANOS_PER_TICK = 1_000_000
_DOT_PRECISION = 3
_MAX_INT64 = (1 << 63) - 1
_MIN_INT64 = -(1 << 63)
_MAX_INT32 = (1 << 31) - 1
_MIN_INT32 = -(1 << 31)
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_INT_RE = re.compile(r"[+-]?[0-9]+")

_DURATION_RE = re.compile(
    r"^(([0-9]+)y)?(([0-9]+)w)?(([0-9]+)d)?(([0-9]+)h)?(([0-9]+)m)?(([0-9]+)s)?(([0-9]+)ms)?\Z"
)
_UNITS_MS = (
    ("y", 1000 * 60 * 60 * 24 * 365),
    ("w", 1000 * 60 * 60 * 24 * 7),
    ("d", 1000 * 60 * 60 * 24),
    ("h", 1000 * 60 * 60),
    ("m", 1000 * 60),
    ("s", 1000),
    ("ms", 1),
)


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _total_microseconds(delta: timedelta) -> int:
    return (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds


def _total_ms(delta: timedelta) -> int:
    return _trunc_div(_total_microseconds(delta), 1000)


def _parse_int(text: str, low: int, high: int) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid syntax: {json.dumps(text)}")
    value = int(text)
    if not low <= value <= high:
        raise ValueError(f"value out of range: {json.dumps(text)}")
    return value


def format_float(value: float) -> str:
    """Format a float in plain decimal notation with the fewest digits."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


class Time(int):
    """Milliseconds since the Unix epoch, excluding leap seconds."""

    def __new__(cls, value: int = 0) -> "Time":
        return super().__new__(cls, int(value))

    @classmethod
    def now(cls) -> "Time":
        """Return the current time."""
        return cls.from_unix_nano(_time.time_ns())

    @classmethod
    def from_unix(cls, seconds: int) -> "Time":
        """Return the time for a Unix timestamp in seconds."""
        return cls(int(seconds) * _SECOND)

    @classmethod
    def from_unix_nano(cls, nanos: int) -> "Time":
        """Return the time for a Unix timestamp in nanoseconds."""
        return cls(_trunc_div(int(nanos), _NANOS_PER_TICK))

    def equal(self, other: int) -> bool:
        """Return True if both times are the same instant."""
        return int(self) == int(other)

    def before(self, other: int) -> bool:
        """Return True if this time is before other."""
        return int(self) < int(other)

    def after(self, other: int) -> bool:
        """Return True if this time is after other."""
        return int(self) > int(other)

    def add(self, duration: timedelta) -> "Time":
        """Return this time moved by duration, truncated to milliseconds."""
        return Time(int(self) + _total_ms(duration))

    def sub(self, other: int) -> timedelta:
        """Return the duration from other to this time."""
        return timedelta(milliseconds=int(self) - int(other))

    def to_datetime(self) -> datetime:
        """Return the time as an aware UTC datetime."""
        return _EPOCH + timedelta(milliseconds=int(self))

    def unix(self) -> int:
        """Return the time in whole seconds since the epoch."""
        return _trunc_div(int(self), _SECOND)

    def unix_nano(self) -> int:
        """Return the time in nanoseconds since the epoch."""
        return int(self) * _NANOS_PER_TICK

    def __str__(self) -> str:
        return format_float(int(self) / _SECOND)

    def __repr__(self) -> str:
        return f"Time({int(self)})"

    def to_json(self) -> str:
        """Encode the time as seconds with a fractional part."""
        return str(self)

    @classmethod
    def from_json(cls, text: str | bytes) -> "Time":
        """Decode a time written in seconds, with up to millisecond precision."""
        if isinstance(text, bytes):
            text = text.decode("utf-8")
        parts = text.split(".")
        if len(parts) == 1:
            return cls(_parse_int(parts[0], _MIN_INT64, _MAX_INT64) * _SECOND)
        if len(parts) == 2:
            whole, fraction = parts
            seconds = _parse_int(whole, _MIN_INT64, _MAX_INT64) * _SECOND
            missing = _DOT_PRECISION - len(fraction)
            if missing < 0:
                fraction = fraction[:_DOT_PRECISION]
            elif missing > 0:
                fraction += "0" * missing
            millis = _parse_int(fraction, _MIN_INT32, _MAX_INT32)
            total = seconds + millis
            # A leading "-0" loses its sign in the integer part.
            if whole.startswith("-") and total > 0:
                return cls(-total)
            return cls(total)
        raise ValueError(f"invalid time {json.dumps(text)}")


EARLIEST = Time(_MIN_INT64)
"""The earliest representable time."""

LATEST = Time(_MAX_INT64)
"""The latest representable time."""


@dataclass(frozen=True)
class Interval:
    """The span between two timestamps."""

    start: Time
    end: Time


class Duration(timedelta):
    """A duration written as e.g. ``1y2w3d4h5m6s7ms``."""

    def __str__(self) -> str:
        ms = _total_ms(self)
        if ms == 0:
            return "0s"
        result = []
        for index, (unit, mult) in enumerate(_UNITS_MS):
            # Years and weeks only when they divide evenly: 90d reads better than 12w6d.
            exact = index < 2
            if exact and ms % mult != 0:
                continue
            count = _trunc_div(ms, mult)
            if count > 0:
                result.append(f"{count}{unit}")
                ms -= count * mult
        return "".join(result)

    def __repr__(self) -> str:
        return f"Duration({str(self)!r})"

    def to_json(self) -> str:
        """Encode the duration as a JSON string."""
        return json.dumps(str(self))

    @classmethod
    def from_json(cls, text: str | bytes) -> "Duration":
        """Decode a duration from a JSON string."""
        value = json.loads(text)
        if not isinstance(value, str):
            raise ValueError(f"duration must be a JSON string, not {json.dumps(value)}")
        return parse_duration(value)

    @classmethod
    def from_text(cls, text: str | bytes) -> "Duration":
        """Parse a duration from its text form."""
        if isinstance(text, bytes):
            text = text.decode("utf-8")
        return parse_duration(text)

    def to_text(self) -> str:
        """Return the text form of the duration."""
        return str(self)


def parse_duration(text: str) -> Duration:
    """Parse a duration, taking a year as 365d, a week as 7d and a day as 24h."""
    if text == "0":
        return Duration(0)
    if text == "":
        raise ValueError("empty duration string")
    match = _DURATION_RE.match(text)
    if match is None:
        raise ValueError(f"not a valid duration string: {json.dumps(text, ensure_ascii=False)}")
    total_ns = 0
    out_of_range = False
    for (_unit, mult), group in zip(_UNITS_MS, range(2, 15, 2)):
        digits = match.group(group)
        if not digits:
            continue
        count = int(digits)
        if count > _MAX_INT64 // mult // _NANOS_PER_TICK:
            out_of_range = True
        total_ns += count * _NANOS_PER_TICK * mult
        if total_ns > _MAX_INT64:
            out_of_range = True
    if out_of_range:
        raise ValueError("duration out of range")
    return Duration(milliseconds=total_ns // _NANOS_PER_TICK)