"""A minimal HTTP request model holding the sources that values are bound from."""

from __future__ import annotations

import email.policy
from dataclasses import dataclass, field
from email.parser import BytesParser
from typing import Iterable, Mapping
from urllib.parse import parse_qsl, urlsplit

_FORM_URLENCODED = "application/x-www-form-urlencoded"
_MULTIPART_FORM = "multipart/form-data"
_BODY_FORM_METHODS = frozenset({"POST", "PUT", "PATCH"})


def _canonical_header(name: str) -> str:
    return "-".join(word[:1].upper() + word[1:].lower() for word in name.split("-"))


def _parse_query(text: str) -> dict[str, list[str]]:
    values: dict[str, list[str]] = {}
    for key, value in parse_qsl(text, keep_blank_values=True):
        values.setdefault(key, []).append(value)
    return values


def _extend(target: dict[str, list[str]], source: Mapping[str, list[str]]) -> None:
    for key, values in source.items():
        target.setdefault(key, []).extend(values)


def _normalise_headers(headers: Mapping[str, object] | None) -> dict[str, list[str]]:
    result: dict[str, list[str]] = {}
    for name, value in (headers or {}).items():
        values = [value] if isinstance(value, str) else [str(v) for v in value]
        result.setdefault(_canonical_header(name), []).extend(values)
    return result


@dataclass
class Request:
    """An incoming request: method, path, query, headers, body and route parameters."""

    method: str = "GET"
    path: str = "/"
    query: dict[str, list[str]] = field(default_factory=dict)
    headers: dict[str, list[str]] = field(default_factory=dict)
    body: bytes = b""
    path_params: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.method = self.method.upper()
        self.headers = _normalise_headers(self.headers)
        if isinstance(self.body, str):
            self.body = self.body.encode("utf-8")
        self.path_params = dict(self.path_params)

    @classmethod
    def from_url(
        cls,
        method: str,
        url: str,
        body: bytes | str | None = None,
        headers: Mapping[str, object] | None = None,
        path_params: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
    ) -> "Request":
        """Build a request from a method and a URL such as ``/search?id=1``."""
        parts = urlsplit(url)
        return cls(
            method=method,
            path=parts.path or "/",
            query=_parse_query(parts.query),
            headers=dict(headers or {}),
            body=body if body is not None else b"",
            path_params=dict(path_params or {}),
        )

    def query_param(self, name: str) -> str:
        """First value of a query parameter, or an empty string."""
        values = self.query.get(name)
        return values[0] if values else ""

    def query_params(self) -> dict[str, list[str]]:
        """All query parameters with all their values."""
        return {key: list(values) for key, values in self.query.items()}

    def param(self, name: str) -> str:
        """Value of a route parameter, or an empty string."""
        return self.path_params.get(name, "")

    def param_names(self) -> list[str]:
        return list(self.path_params)

    def param_values(self) -> list[str]:
        return list(self.path_params.values())

    def header(self, name: str) -> str:
        """First value of a header, matched without regard to case."""
        values = self.headers.get(_canonical_header(name))
        return values[0] if values else ""

    def header_values(self) -> dict[str, list[str]]:
        """All headers, keyed by their canonical names."""
        return {key: list(values) for key, values in self.headers.items()}

    def content_type(self) -> str:
        return self.header("Content-Type")

    def _media_type(self) -> str:
        return self.content_type().split(";", 1)[0].strip().lower()

    def _multipart_values(self) -> dict[str, list[str]]:
        content_type = self.content_type()
        message = BytesParser(policy=email.policy.HTTP).parsebytes(
            b"Content-Type: " + content_type.encode("latin-1") + b"\r\n\r\n" + self.body
        )
        if not message.get_param("boundary"):
            raise ValueError("no multipart boundary param in Content-Type")
        if not message.is_multipart():
            raise ValueError("malformed multipart body")
        values: dict[str, list[str]] = {}
        for part in message.iter_parts():
            name = part.get_param("name", header="content-disposition")
            if name is None or part.get_filename() is not None:
                continue
            payload = part.get_payload(decode=True) or b""
            values.setdefault(str(name), []).append(payload.decode("utf-8", "replace"))
        return values

    def form_params(self) -> dict[str, list[str]]:
        """Form values taken from the body and the URL query.

        For URL-encoded bodies of POST, PUT and PATCH requests the body values come
        first; multipart values follow the query values. Raises ValueError for a
        multipart request without a usable boundary.
        """
        form: dict[str, list[str]] = {}
        if self._media_type() == _MULTIPART_FORM:
            _extend(form, self.query)
            _extend(form, self._multipart_values())
            return form
        if self.method in _BODY_FORM_METHODS and self._media_type() == _FORM_URLENCODED:
            _extend(form, _parse_query(self.body.decode("utf-8", "replace")))
        _extend(form, self.query)
        return form

    def form_value(self, name: str) -> str:
        """First form value for a name, or an empty string; parse errors are ignored."""
        try:
            values = self.form_params().get(name)
        except ValueError:
            values = self.query.get(name)
        return values[0] if values else ""