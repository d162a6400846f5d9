"""Error types raised while binding request data."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Iterable


def _status_text(code: int) -> str:
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return ""


class HTTPError(Exception):
    """An error that carries an HTTP status code and a client-facing message."""

    def __init__(self, code: int, message: Any = None, internal: Any = None) -> None:
        code = int(code)
        if message is None:
            message = _status_text(code)
        super().__init__(code, message)
        self.code = code
        self.message = message
        self.internal = internal

    def with_internal(self, internal: Any) -> "HTTPError":
        """Attach the underlying cause and return this error."""
        self.internal = internal
        return self

    def __str__(self) -> str:
        text = f"code={self.code}, message={self.message}"
        if self.internal is not None:
            text += f", internal={self.internal}"
        return text

    def to_dict(self) -> dict[str, Any]:
        """The part of the error that is safe to show to a client."""
        return {"message": self.message}


class BindingError(HTTPError):
    """A failure to bind the value of one request parameter."""

    def __init__(
        self,
        field: str,
        values: Iterable[str] | None,
        message: Any,
        internal: Any = None,
    ) -> None:
        super().__init__(HTTPStatus.BAD_REQUEST, message, internal)
        self.field = field
        self.values = list(values) if values is not None else []

    def __str__(self) -> str:
        return f"{super().__str__()}, field={self.field}"

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, **super().to_dict()}


def unsupported_media_type() -> HTTPError:
    """The error returned when a request body has a content type that cannot be bound."""
    return HTTPError(HTTPStatus.UNSUPPORTED_MEDIA_TYPE)