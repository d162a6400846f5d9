import math
from datetime import datetime, timedelta, timezone

import pytest

from parambind.parsing import (
    RFC3339,
    RFC3339_NANO,
    ParseError,
    parse_bool,
    parse_duration,
    parse_float,
    parse_int,
    parse_time,
    parse_uint,
    unix_time,
    unix_time_nano,
)

UTC = timezone.utc


def test_parse_error_message_and_fields():
    error = ParseError("parse_int", "nope", "invalid syntax")
    assert str(error) == 'parse_int: parsing "nope": invalid syntax'
    assert (error.func, error.value, error.reason) == ("parse_int", "nope", "invalid syntax")
    assert isinstance(error, ValueError)


@pytest.mark.parametrize(
    "value, bits, expected",
    [("1", 64, 1), ("-64", 64, -64), ("+5", 0, 5), ("127", 8, 127), ("-128", 8, -128), ("32", 32, 32)],
)
def test_parse_int_values(value, bits, expected):
    assert parse_int(value, bits) == expected


@pytest.mark.parametrize("value", ["nope", "", "1.5", " 1", "1_000", "--1"])
def test_parse_int_invalid_syntax(value):
    with pytest.raises(ParseError) as info:
        parse_int(value, 64)
    assert info.value.reason == "invalid syntax"


def test_parse_int_nope_message():
    with pytest.raises(ParseError) as info:
        parse_int("nope", 64)
    assert str(info.value) == 'parse_int: parsing "nope": invalid syntax'


@pytest.mark.parametrize("value, bits", [("128", 8), ("-129", 8), ("2147483648", 32), ("9223372036854775808", 0)])
def test_parse_int_out_of_range(value, bits):
    with pytest.raises(ParseError) as info:
        parse_int(value, bits)
    assert info.value.reason == "value out of range"


def test_parse_int_rejects_bad_bit_size():
    with pytest.raises(ValueError):
        parse_int("1", 12)


@pytest.mark.parametrize("value, bits, expected", [("0", 0, 0), ("255", 8, 255), ("64", 64, 64), ("18446744073709551615", 64, 2**64 - 1)])
def test_parse_uint_values(value, bits, expected):
    assert parse_uint(value, bits) == expected


@pytest.mark.parametrize("value", ["-1", "+1", "nope", ""])
def test_parse_uint_invalid_syntax(value):
    with pytest.raises(ParseError) as info:
        parse_uint(value, 64)
    assert info.value.reason == "invalid syntax"
    assert info.value.func == "parse_uint"


def test_parse_uint_out_of_range():
    with pytest.raises(ParseError) as info:
        parse_uint("256", 8)
    assert info.value.reason == "value out of range"


@pytest.mark.parametrize("value", ["1", "t", "T", "TRUE", "true", "True"])
def test_parse_bool_true(value):
    assert parse_bool(value) is True


@pytest.mark.parametrize("value", ["0", "f", "F", "FALSE", "false", "False"])
def test_parse_bool_false(value):
    assert parse_bool(value) is False


@pytest.mark.parametrize("value", ["nope", "yes", "", "tRUE", "100"])
def test_parse_bool_invalid(value):
    with pytest.raises(ParseError) as info:
        parse_bool(value)
    assert str(info.value) == f'parse_bool: parsing "{value}": invalid syntax'


@pytest.mark.parametrize("value, expected", [("4.3", 4.3), ("0", 0.0), ("64.5", 64.5), ("1e3", 1000.0), (".5", 0.5), ("-2.", -2.0), ("0x1.8p1", 3.0)])
def test_parse_float_64(value, expected):
    assert parse_float(value, 64) == expected


def test_parse_float_32_rounds_to_single_precision():
    assert parse_float("32.5", 32) == 32.5
    assert parse_float("15.5", 32) == 15.5
    rounded = parse_float("4.3", 32)
    assert rounded != 4.3
    assert abs(rounded - 4.3) < 1e-6


def test_parse_float_special_values():
    assert parse_float("inf") == math.inf
    assert parse_float("-Infinity") == -math.inf
    assert math.isnan(parse_float("NaN"))


@pytest.mark.parametrize("value", ["nope", "", "1.2.3", "+nan", "1e", "0x1.8"])
def test_parse_float_invalid(value):
    with pytest.raises(ParseError) as info:
        parse_float(value, 64)
    assert info.value.reason == "invalid syntax"


def test_parse_float_nope_message():
    with pytest.raises(ParseError) as info:
        parse_float("nope", 64)
    assert str(info.value) == 'parse_float: parsing "nope": invalid syntax'


@pytest.mark.parametrize(
    "value, expected",
    [
        ("42s", timedelta(seconds=42)),
        ("1ms", timedelta(milliseconds=1)),
        ("1s", timedelta(seconds=1)),
        ("0", timedelta(0)),
        ("-0", timedelta(0)),
        ("2h45m", timedelta(hours=2, minutes=45)),
        ("-1.5h", timedelta(hours=-1.5)),
        ("1.s", timedelta(seconds=1)),
        (".5s", timedelta(milliseconds=500)),
        ("300us", timedelta(microseconds=300)),
        ("300\u00b5s", timedelta(microseconds=300)),
        ("1500ns", timedelta(microseconds=1)),
    ],
)
def test_parse_duration_values(value, expected):
    assert parse_duration(value) == expected


@pytest.mark.parametrize(
    "value, reason",
    [
        ("", "invalid duration"),
        ("-", "invalid duration"),
        ("nope", "invalid duration"),
        (".s", "invalid duration"),
        ("1", "missing unit in duration"),
        ("1s2", "missing unit in duration"),
        ("1x", 'unknown unit "x" in duration'),
        ("10000000000000000000s", "invalid duration"),
    ],
)
def test_parse_duration_errors(value, reason):
    with pytest.raises(ParseError) as info:
        parse_duration(value)
    assert info.value.reason == reason


def test_parse_time_rfc3339_with_offset():
    parsed = parse_time("2020-12-23T09:45:31+02:00", RFC3339)
    assert parsed == datetime(2020, 12, 23, 7, 45, 31, tzinfo=UTC)
    assert parsed.utcoffset() == timedelta(hours=2)


def test_parse_time_rfc3339_utc_and_fraction():
    assert parse_time("2016-12-06T19:09:05Z") == datetime(2016, 12, 6, 19, 9, 5, tzinfo=UTC)
    parsed = parse_time("2020-12-28T18:36:43.123456789+00:00", RFC3339_NANO)
    assert parsed == datetime(2020, 12, 28, 18, 36, 43, 123456, tzinfo=UTC)


@pytest.mark.parametrize("value", ["nope", "2020-12-23 09:45:31+02:00", "2020-13-23T09:45:31Z", "1"])
def test_parse_time_rfc3339_invalid(value):
    with pytest.raises(ParseError) as info:
        parse_time(value, RFC3339)
    assert info.value.func == "parse_time"
    assert info.value.value == value


def test_parse_time_custom_layout_defaults_to_utc():
    assert parse_time("2021-01-02", "%Y-%m-%d") == datetime(2021, 1, 2, tzinfo=UTC)
    with pytest.raises(ParseError):
        parse_time("01/02/2021", "%Y-%m-%d")


def test_unix_time_seconds():
    assert unix_time(1609180603) == datetime(2020, 12, 28, 18, 36, 43, tzinfo=UTC)
    assert unix_time(2147483648) == datetime(2038, 1, 19, 3, 14, 8, tzinfo=UTC)
    assert unix_time(0) == datetime(1970, 1, 1, tzinfo=UTC)


def test_unix_time_nano():
    assert unix_time_nano(1609180603000000000) == datetime(2020, 12, 28, 18, 36, 43, tzinfo=UTC)
    assert unix_time_nano(1609180603123456789) == datetime(2020, 12, 28, 18, 36, 43, 123456, tzinfo=UTC)
    assert unix_time_nano(999999999) == datetime(1970, 1, 1, 0, 0, 0, 999999, tzinfo=UTC)
    assert unix_time_nano(1000000000) == datetime(1970, 1, 1, 0, 0, 1, tzinfo=UTC)