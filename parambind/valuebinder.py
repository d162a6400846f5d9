"""Typed binding of single request parameters with collected binding errors."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Callable, Iterable, NamedTuple, Sequence

from .errors import BindingError
from .parsing import (
    RFC3339,
    parse_bool,
    parse_duration,
    parse_float,
    parse_int,
    parse_time,
    parse_uint,
    unix_time,
    unix_time_nano,
)

ValueFunc = Callable[[str], str]
ValuesFunc = Callable[[str], "Sequence[str] | None"]
ErrorFunc = Callable[[str, list, Any, Any], Exception]

_REQUIRED = "required field value is empty"


class _Conversion(NamedTuple):
    convert: Callable[[str], Any]
    name: str


def _int_conversion(bits: int) -> _Conversion:
    return _Conversion(lambda v: parse_int(v, bits), f"int{bits}" if bits else "int")


def _uint_conversion(bits: int) -> _Conversion:
    return _Conversion(lambda v: parse_uint(v, bits), f"uint{bits}" if bits else "uint")


def _float_conversion(bits: int) -> _Conversion:
    return _Conversion(lambda v: parse_float(v, bits), f"float{bits}")


def _time_conversion(layout: str) -> _Conversion:
    return _Conversion(lambda v: parse_time(v, layout), "Time")


_BOOL = _Conversion(parse_bool, "bool")
_DURATION = _Conversion(parse_duration, "Duration")
_UNIX = _Conversion(lambda v: unix_time(parse_int(v, 64)), "Time")
_UNIX_NANO = _Conversion(lambda v: unix_time_nano(parse_int(v, 64)), "Time")

_DELIMITED_KINDS: dict[str, _Conversion] = {
    "bool": _BOOL,
    "int64": _int_conversion(64),
    "int32": _int_conversion(32),
    "int16": _int_conversion(16),
    "int8": _int_conversion(8),
    "int": _int_conversion(0),
    "uint64": _uint_conversion(64),
    "uint32": _uint_conversion(32),
    "uint16": _uint_conversion(16),
    "uint8": _uint_conversion(8),
    "byte": _uint_conversion(8),
    "uint": _uint_conversion(0),
    "float64": _float_conversion(64),
    "float32": _float_conversion(32),
    "duration": _DURATION,
}

_KIND_ALIASES: dict[Any, str] = {
    str: "string",
    bool: "bool",
    int: "int",
    float: "float64",
    timedelta: "duration",
}


class ValueBinder:
    """Binds named request parameters to Python values.

    Each binding method returns the converted value, or ``default`` when the
    parameter is missing, cannot be converted, or binding was stopped by an
    earlier error (fail-fast mode, the default). Failures are collected and
    handed out by :meth:`bind_error` and :meth:`bind_errors`.
    """

    def __init__(
        self,
        value_func: ValueFunc,
        values_func: ValuesFunc,
        error_func: ErrorFunc = BindingError,
    ) -> None:
        self.value_func = value_func
        self.values_func = values_func
        self.error_func = error_func
        self._fail_fast = True
        self._errors: list[Exception] = []

    # -- error handling -------------------------------------------------

    def fail_fast(self, value: bool) -> "ValueBinder":
        """Choose whether binding stops after the first error; returns the binder."""
        self._fail_fast = bool(value)
        return self

    def add_error(self, error: Exception) -> "ValueBinder":
        """Record an error as if a binding had failed; returns the binder."""
        self._errors.append(error)
        return self

    def bind_error(self) -> Exception | None:
        """The first recorded error, or None; clears all recorded errors."""
        if not self._errors:
            return None
        first = self._errors[0]
        self._errors = []
        return first

    def bind_errors(self) -> list[Exception]:
        """All recorded errors in order; clears them."""
        errors, self._errors = self._errors, []
        return errors

    def _blocked(self) -> bool:
        return self._fail_fast and bool(self._errors)

    def _required(self, source_param: str, values: Iterable[str]) -> None:
        self.add_error(self.error_func(source_param, list(values), _REQUIRED, None))

    def _convert(self, source_param: str, value: str, conv: _Conversion, default: Any) -> Any:
        try:
            return conv.convert(value)
        except ValueError as exc:
            message = f"failed to bind field value to {conv.name}"
            self.add_error(self.error_func(source_param, [value], message, exc))
            return default

    def _convert_all(
        self, source_param: str, values: Iterable[str], conv: _Conversion, default: Any
    ) -> Any:
        result = []
        for value in values:
            try:
                result.append(conv.convert(value))
            except ValueError as exc:
                message = f"failed to bind field value to {conv.name}"
                self.add_error(self.error_func(source_param, [value], message, exc))
                if self._fail_fast:
                    return default
        return default if self._errors else result

    def _single(
        self,
        source_param: str,
        default: Any,
        must: bool,
        conv: _Conversion,
        empty_values: Sequence[str] = (),
    ) -> Any:
        if self._blocked():
            return default
        value = self.value_func(source_param)
        if not value:
            if must:
                self._required(source_param, empty_values)
            return default
        return self._convert(source_param, value, conv, default)

    def _multi(self, source_param: str, default: Any, must: bool, conv: _Conversion) -> Any:
        if self._blocked():
            return default
        values = self.values_func(source_param)
        if not values:
            if must:
                self._required(source_param, [])
            return default
        return self._convert_all(source_param, values, conv, default)

    # -- custom and unmarshaler ----------------------------------------

    def _custom(self, source_param: str, func: Callable, must: bool) -> "ValueBinder":
        if self._blocked():
            return self
        values = self.values_func(source_param)
        if not values:
            if must:
                self._required(source_param, [])
            return self
        errors = func(list(values))
        if errors is not None:
            self._errors.extend(errors)
        return self

    def custom_func(self, source_param: str, func: Callable) -> "ValueBinder":
        """Call ``func(values)`` when the parameter has values; it returns errors or None."""
        return self._custom(source_param, func, False)

    def must_custom_func(self, source_param: str, func: Callable) -> "ValueBinder":
        """Like :meth:`custom_func`, but a missing parameter is an error."""
        return self._custom(source_param, func, True)

    def _unmarshal(self, source_param: str, dest: Any, must: bool) -> "ValueBinder":
        if self._blocked():
            return self
        value = self.value_func(source_param)
        if not value:
            if must:
                self._required(source_param, [""])
            return self
        try:
            dest.unmarshal_param(value)
        except Exception as exc:  # the destination decides what failure looks like
            message = "failed to bind field value to BindUnmarshaler interface"
            self.add_error(self.error_func(source_param, [value], message, exc))
        return self

    def bind_unmarshaler(self, source_param: str, dest: Any) -> "ValueBinder":
        """Pass the value to ``dest.unmarshal_param`` when present; returns the binder."""
        return self._unmarshal(source_param, dest, False)

    def must_bind_unmarshaler(self, source_param: str, dest: Any) -> "ValueBinder":
        """Like :meth:`bind_unmarshaler`, but a missing parameter is an error."""
        return self._unmarshal(source_param, dest, True)

    # -- strings --------------------------------------------------------

    def string(self, source_param: str, default: Any = None) -> Any:
        if self._blocked():
            return default
        value = self.value_func(source_param)
        return value if value else default

    def must_string(self, source_param: str, default: Any = None) -> Any:
        if self._blocked():
            return default
        value = self.value_func(source_param)
        if not value:
            self._required(source_param, [""])
            return default
        return value

    def strings(self, source_param: str, default: Any = None) -> Any:
        if self._blocked():
            return default
        values = self.values_func(source_param)
        return default if values is None else list(values)

    def must_strings(self, source_param: str, default: Any = None) -> Any:
        if self._blocked():
            return default
        values = self.values_func(source_param)
        if values is None:
            self._required(source_param, [])
            return default
        return list(values)

    # -- delimited ------------------------------------------------------

    def _delimited(
        self, source_param: str, kind: Any, delimiter: str, default: Any, must: bool
    ) -> Any:
        if self._blocked():
            return default
        values = self.values_func(source_param)
        if not values:
            if must:
                self._required(source_param, [])
            return default
        parts = [part for value in values for part in value.split(delimiter)]
        kind = _KIND_ALIASES.get(kind, kind)
        if kind == "string":
            return parts
        conv = _DELIMITED_KINDS.get(kind) if isinstance(kind, str) else None
        if conv is None:
            self.add_error(self.error_func(source_param, [], "unsupported bind type", None))
            return default
        return self._convert_all(source_param, parts, conv, default)

    def bind_with_delimiter(
        self, source_param: str, kind: Any, delimiter: str = ",", default: Any = None
    ) -> Any:
        """Split every value by ``delimiter`` and convert the parts to a list of ``kind``.

        ``kind`` is one of string, bool, int, int8..int64, uint, uint8..uint64, byte,
        float32, float64, duration, or one of the types str, bool, int, float, timedelta.
        """
        return self._delimited(source_param, kind, delimiter, default, False)

    def must_bind_with_delimiter(
        self, source_param: str, kind: Any, delimiter: str = ",", default: Any = None
    ) -> Any:
        return self._delimited(source_param, kind, delimiter, default, True)

    # -- signed integers ------------------------------------------------

    def int64(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, False, _int_conversion(64))

    def must_int64(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, True, _int_conversion(64))

    def int32(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, False, _int_conversion(32))

    def must_int32(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, True, _int_conversion(32))

    def int16(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, False, _int_conversion(16))

    def must_int16(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, True, _int_conversion(16))

    def int8(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, False, _int_conversion(8))

    def must_int8(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, True, _int_conversion(8))

    def int_(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, False, _int_conversion(0))

    def must_int(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, True, _int_conversion(0))

    def int64s(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, False, _int_conversion(64))

    def must_int64s(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, True, _int_conversion(64))

    def int32s(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, False, _int_conversion(32))

    def must_int32s(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, True, _int_conversion(32))

    def int16s(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, False, _int_conversion(16))

    def must_int16s(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, True, _int_conversion(16))

    def int8s(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, False, _int_conversion(8))

    def must_int8s(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, True, _int_conversion(8))

    def ints(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, False, _int_conversion(0))

    def must_ints(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, True, _int_conversion(0))

    # -- unsigned integers ----------------------------------------------

    def uint64(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, False, _uint_conversion(64))

    def must_uint64(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, True, _uint_conversion(64))

    def uint32(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, False, _uint_conversion(32))

    def must_uint32(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, True, _uint_conversion(32))

    def uint16(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, False, _uint_conversion(16))

    def must_uint16(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, True, _uint_conversion(16))

    def uint8(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, False, _uint_conversion(8))

    def must_uint8(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, True, _uint_conversion(8))

    def byte(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, False, _uint_conversion(8))

    def must_byte(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, True, _uint_conversion(8))

    def uint(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, False, _uint_conversion(0))

    def must_uint(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, True, _uint_conversion(0))

    def uint64s(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, False, _uint_conversion(64))

    def must_uint64s(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, True, _uint_conversion(64))

    def uint32s(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, False, _uint_conversion(32))

    def must_uint32s(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, True, _uint_conversion(32))

    def uint16s(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, False, _uint_conversion(16))

    def must_uint16s(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, True, _uint_conversion(16))

    def uint8s(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, False, _uint_conversion(8))

    def must_uint8s(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, True, _uint_conversion(8))

    def uints(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, False, _uint_conversion(0))

    def must_uints(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, True, _uint_conversion(0))

    # -- booleans and floats ---------------------------------------------

    def bool_(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, False, _BOOL)

    def must_bool(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, True, _BOOL)

    def bools(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, False, _BOOL)

    def must_bools(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, True, _BOOL)

    def float64(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, False, _float_conversion(64))

    def must_float64(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, True, _float_conversion(64))

    def float32(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, False, _float_conversion(32))

    def must_float32(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, True, _float_conversion(32))

    def float64s(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, False, _float_conversion(64))

    def must_float64s(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, True, _float_conversion(64))

    def float32s(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, False, _float_conversion(32))

    def must_float32s(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, True, _float_conversion(32))

    # -- times and durations ---------------------------------------------

    def time_(self, source_param: str, layout: str = RFC3339, default: Any = None) -> Any:
        return self._single(source_param, default, False, _time_conversion(layout), [""])

    def must_time(self, source_param: str, layout: str = RFC3339, default: Any = None) -> Any:
        return self._single(source_param, default, True, _time_conversion(layout), [""])

    def times(self, source_param: str, layout: str = RFC3339, default: Any = None) -> Any:
        return self._multi(source_param, default, False, _time_conversion(layout))

    def must_times(self, source_param: str, layout: str = RFC3339, default: Any = None) -> Any:
        return self._multi(source_param, default, True, _time_conversion(layout))

    def duration(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, False, _DURATION, [""])

    def must_duration(self, source_param: str, default: Any = None) -> Any:
        return self._single(source_param, default, True, _DURATION, [""])

    def durations(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, False, _DURATION)

    def must_durations(self, source_param: str, default: Any = None) -> Any:
        return self._multi(source_param, default, True, _DURATION)

    def unix_time(self, source_param: str, default: Any = None) -> datetime | Any:
        """Bind an integer count of seconds since the Unix epoch as a UTC datetime."""
        return self._single(source_param, default, False, _UNIX, [""])

    def must_unix_time(self, source_param: str, default: Any = None) -> datetime | Any:
        return self._single(source_param, default, True, _UNIX, [""])

    def unix_time_nano(self, source_param: str, default: Any = None) -> datetime | Any:
        """Bind an integer count of nanoseconds since the Unix epoch as a UTC datetime."""
        return self._single(source_param, default, False, _UNIX_NANO, [""])

    def must_unix_time_nano(self, source_param: str, default: Any = None) -> datetime | Any:
        return self._single(source_param, default, True, _UNIX_NANO, [""])