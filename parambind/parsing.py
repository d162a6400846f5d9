"""Strict text-to-value conversions used when binding request parameters."""

from __future__ import annotations

import math
import re
import struct
from datetime import datetime, timedelta, timezone

RFC3339 = "%Y-%m-%dT%H:%M:%S%z"
RFC3339_NANO = "%Y-%m-%dT%H:%M:%S.%f%z"

_INVALID_SYNTAX = "invalid syntax"
_OUT_OF_RANGE = "value out of range"
_BIT_SIZES = (0, 8, 16, 32, 64)

_INT_RE = re.compile(r"[+-]?[0-9]+", re.ASCII)
_UINT_RE = re.compile(r"[0-9]+", re.ASCII)
_DECIMAL_FLOAT_RE = re.compile(
    r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?", re.ASCII
)
_HEX_FLOAT_RE = re.compile(
    r"[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+",
    re.ASCII,
)
_SPECIAL_FLOAT_RE = re.compile(r"[+-]?inf(?:inity)?|nan", re.IGNORECASE | re.ASCII)

_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_DURATION_SEGMENT_RE = re.compile(r"([0-9]*)(?:\.([0-9]*))?([^0-9.]*)")
_DURATION_UNITS = {
    "ns": 1,
    "us": 1_000,
    "\u00b5s": 1_000,
    "\u03bcs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60_000_000_000,
    "h": 3_600_000_000_000,
}

_RFC3339_RE = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})T([0-9]{2}):([0-9]{2}):([0-9]{2})"
    r"(?:\.([0-9]+))?(Z|[+-][0-9]{2}:[0-9]{2})"
)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


class ParseError(ValueError):
    """A value that could not be converted; its text names the parser and the cause."""

    def __init__(self, func: str, value: str, reason: str) -> None:
        super().__init__(func, value, reason)
        self.func = func
        self.value = value
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.func}: parsing {_quote(self.value)}: {self.reason}"


def _bits(bit_size: int) -> int:
    if bit_size not in _BIT_SIZES:
        raise ValueError(f"invalid bit size {bit_size}")
    return bit_size or 64


def parse_int(value: str, bit_size: int = 64) -> int:
    """Parse a signed base-10 integer that must fit in ``bit_size`` bits (0 means 64)."""
    bits = _bits(bit_size)
    if not _INT_RE.fullmatch(value):
        raise ParseError("parse_int", value, _INVALID_SYNTAX)
    number = int(value)
    limit = 1 << (bits - 1)
    if not -limit <= number < limit:
        raise ParseError("parse_int", value, _OUT_OF_RANGE)
    return number


def parse_uint(value: str, bit_size: int = 64) -> int:
    """Parse an unsigned base-10 integer that must fit in ``bit_size`` bits (0 means 64)."""
    bits = _bits(bit_size)
    if not _UINT_RE.fullmatch(value):
        raise ParseError("parse_uint", value, _INVALID_SYNTAX)
    number = int(value)
    if number >= 1 << bits:
        raise ParseError("parse_uint", value, _OUT_OF_RANGE)
    return number


def parse_bool(value: str) -> bool:
    """Accept 1, t, T, TRUE, true, True and 0, f, F, FALSE, false, False."""
    if value in _TRUE_WORDS:
        return True
    if value in _FALSE_WORDS:
        return False
    raise ParseError("parse_bool", value, _INVALID_SYNTAX)


def parse_float(value: str, bit_size: int = 64) -> float:
    """Parse a decimal, hexadecimal or special (inf, nan) float.

    With ``bit_size`` 32 the result is rounded to single precision.
    """
    if _SPECIAL_FLOAT_RE.fullmatch(value):
        return float(value)
    if _DECIMAL_FLOAT_RE.fullmatch(value):
        number = float(value)
    elif _HEX_FLOAT_RE.fullmatch(value):
        try:
            number = float.fromhex(value)
        except OverflowError:
            raise ParseError("parse_float", value, _OUT_OF_RANGE) from None
    else:
        raise ParseError("parse_float", value, _INVALID_SYNTAX)
    if math.isinf(number):
        raise ParseError("parse_float", value, _OUT_OF_RANGE)
    if bit_size == 32:
        try:
            (number,) = struct.unpack("f", struct.pack("f", number))
        except OverflowError:
            raise ParseError("parse_float", value, _OUT_OF_RANGE) from None
    return number


def parse_duration(value: str) -> timedelta:
    """Parse a duration such as ``300ms``, ``-1.5h`` or ``2h45m``.

    Units are ns, us (or µs), ms, s, m and h. The result has microsecond resolution;
    smaller parts are truncated.
    """
    text = value
    negative = False
    if text[:1] in ("-", "+"):
        negative = text[0] == "-"
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise ParseError("parse_duration", value, "invalid duration")

    total = 0
    position = 0
    while position < len(text):
        match = _DURATION_SEGMENT_RE.match(text, position)
        whole, fraction, unit = match.group(1), match.group(2), match.group(3)
        if not whole and not fraction:
            raise ParseError("parse_duration", value, "invalid duration")
        if not unit:
            raise ParseError("parse_duration", value, "missing unit in duration")
        scale = _DURATION_UNITS.get(unit)
        if scale is None:
            raise ParseError("parse_duration", value, f"unknown unit {_quote(unit)} in duration")
        total += int(whole or "0") * scale
        if fraction:
            total += int(fraction) * scale // 10 ** len(fraction)
        if total > 1 << 63:
            raise ParseError("parse_duration", value, "invalid duration")
        position = match.end()

    if total > (1 << 63) - (0 if negative else 1):
        raise ParseError("parse_duration", value, "invalid duration")
    microseconds = total // 1000
    return timedelta(microseconds=-microseconds if negative else microseconds)


def _parse_rfc3339(value: str, layout: str) -> datetime:
    match = _RFC3339_RE.fullmatch(value)
    if match is None:
        raise ParseError("parse_time", value, f"cannot parse as {_quote(layout)}")
    year, month, day, hour, minute, second, fraction, offset = match.groups()
    try:
        if offset == "Z":
            zone = timezone.utc
        else:
            sign = -1 if offset[0] == "-" else 1
            delta = timedelta(hours=int(offset[1:3]), minutes=int(offset[4:6]))
            zone = timezone(sign * delta)
        microsecond = int((fraction or "0")[:6].ljust(6, "0"))
        return datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second), microsecond,
            tzinfo=zone,
        )
    except ValueError as exc:
        raise ParseError("parse_time", value, str(exc)) from None


def parse_time(value: str, layout: str = RFC3339) -> datetime:
    """Parse a timestamp with a ``strptime`` layout; the result is always time-zone aware.

    The RFC3339 layouts accept an optional fraction of a second and a ``Z`` or
    ``+hh:mm`` offset. Layouts without a zone give times in UTC.
    """
    if layout in (RFC3339, RFC3339_NANO):
        return _parse_rfc3339(value, layout)
    try:
        moment = datetime.strptime(value, layout)
    except ValueError:
        raise ParseError("parse_time", value, f"cannot parse as {_quote(layout)}") from None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def unix_time(seconds: int) -> datetime:
    """The UTC time that is ``seconds`` after the Unix epoch."""
    return _EPOCH + timedelta(seconds=seconds)


def unix_time_nano(nanoseconds: int) -> datetime:
    """The UTC time that is ``nanoseconds`` after the Unix epoch, to the microsecond."""
    return _EPOCH + timedelta(microseconds=nanoseconds // 1000)