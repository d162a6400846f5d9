"""Bind HTTP request query, route and form parameters to typed values."""

__version__ = "0.1.0"

__all__ = ["binders", "errors", "parsing", "request", "valuebinder"]