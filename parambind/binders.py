"""Value binders reading from the query string, the route parameters or the form."""

from __future__ import annotations

from .request import Request
from .valuebinder import ValueBinder


def query_params_binder(request: Request) -> ValueBinder:
    """A binder reading URL query parameters."""

    def values(name: str) -> list[str] | None:
        found = request.query_params().get(name)
        return found if found is not None else None

    return ValueBinder(request.query_param, values)


def path_params_binder(request: Request) -> ValueBinder:
    """A binder reading route parameters; each parameter has at most one value."""

    def values(name: str) -> list[str] | None:
        value = request.param(name)
        return [value] if value else None

    return ValueBinder(request.param, values)


def form_field_binder(request: Request) -> ValueBinder:
    """A binder reading form fields from the body and the URL query.

    For URL-encoded POST, PUT and PATCH bodies the body values come before the
    query values. Form parse errors are ignored and the query is used instead.
    """

    def values(name: str) -> list[str] | None:
        try:
            form = request.form_params()
        except ValueError:
            form = request.query_params()
        return form.get(name)

    return ValueBinder(request.form_value, values)