# parambind

Bind values from an HTTP request (query string, route parameters and form
fields) to typed Python values, one parameter at a time. Failures are
collected as errors that carry an HTTP status code and the name of the
failing field.

## Installation

```
pip install parambind
```

Run the test suite with:

```
pip install -e ".[test]"
pytest
```

## Requests

`parambind.request.Request` is a small dataclass describing an incoming
request: method, path, query, headers, body and route parameters.

```python
from parambind.request import Request

req = Request.from_url(
    "GET",
    "/api/users/7?ids=1,2,3&lang=en",
    body=b"",
    headers={"Accept": "application/json"},
    path_params={"id": "7"},
)
req.query_param("lang")   # "en"
req.param("id")           # "7"
req.header("accept")      # "application/json" (header names match without regard to case)
```

`form_params()` returns form values from the URL query and, for URL-encoded
bodies of POST, PUT and PATCH requests, from the body (body values first).
Multipart bodies are read too; a multipart request without a boundary raises
`ValueError`. `form_value(name)` gives the first form value, or `""`.

## Binding values one by one

`query_params_binder`, `path_params_binder` and `form_field_binder` from
`parambind.binders` each return a `parambind.valuebinder.ValueBinder`. Its
methods return the bound value, or the default you pass when the parameter
is missing or cannot be converted. The `must_*` variants also record an
error when the parameter is missing.

```python
from parambind.binders import query_params_binder

b = query_params_binder(req)
lang = b.string("lang", "de")                          # "en"
ids = b.bind_with_delimiter("ids", "int64", ",", [])   # [1, 2, 3]
limit = b.must_int64("limit", 10)                      # 10, and an error is recorded

error = b.bind_error()    # first recorded error, or None; clears the list
```

By default the binder stops binding after the first error: later calls just
return their default. Call `fail_fast(False)` to keep going and collect every
error, then read them with `bind_errors()`.

Supported kinds:

- signed integers: `int64`, `int32`, `int16`, `int8`, `int_` and the list
  forms `int64s` ... `ints`; values must fit the bit size
- unsigned integers: `uint64`, `uint32`, `uint16`, `uint8`, `byte`, `uint`
  and the list forms `uint64s` ... `uints`
- `bool_` / `bools` (accepting `1 t T TRUE true True` and
  `0 f F FALSE false False`)
- `float64` / `float32` and their list forms
- `string` / `strings`
- `time_` / `times` with a layout (RFC 3339 by default)
- `duration` / `durations` for texts such as `300ms` or `2h45m`, giving
  `timedelta`s
- `unix_time` and `unix_time_nano`, giving UTC `datetime`s
- `bind_unmarshaler(name, obj)` for objects with an `unmarshal_param` method
- `custom_func(name, func)`, where `func(values)` returns a list of errors or
  `None`

`bind_with_delimiter` splits each value by the delimiter first; its kind is
a name such as `"int64"`, `"bool"`, `"duration"` or `"string"`, or one of the
types `str`, `bool`, `int`, `float`, `timedelta`. Any other kind records an
"unsupported bind type" error.

## Parsing helpers

`parambind.parsing` holds the strict conversions used above:
`parse_int`, `parse_uint`, `parse_bool`, `parse_float`, `parse_duration`,
`parse_time`, `unix_time` and `unix_time_nano`. Invalid input raises
`ParseError` (a `ValueError`) with text such as
`parse_int: parsing "nope": invalid syntax`.

## Errors

`parambind.errors.HTTPError` carries `code`, `message` and `internal`; its
text is `code=..., message=..., internal=...`. `BindingError` is an
`HTTPError` with code 400 plus `field` and `values`:

```
code=400, message=failed to bind field value to int64, internal=parse_int: parsing "x": invalid syntax, field=limit
```

`to_dict()` gives the part that is safe to show a client, for example
`{"field": "id", "message": "bind failed"}`. `unsupported_media_type()`
returns the 415 error.

## What this package does not do

It binds named parameters one at a time. It does not fill whole objects
from a request, and it does not decode JSON or XML request bodies; read
those yourself and use the binders for query, route and form values.