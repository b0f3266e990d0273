"""
Query string builder.

Kept alongside FluentUriBuilder for callers that only append parameters.
"""

from typing import Any

import httpx

from .fluent import coerce_param, render_query
from ..exceptions import InvalidArgumentError


class QueryStringBuilder:
    """Immutable builder for ``path?name=value`` strings."""

    __slots__ = ("_path", "_parameters")

    def __init__(self, path: str, parameters: tuple[tuple[str, str], ...] = ()):
        if path is None:
            raise InvalidArgumentError("path must not be None")
        self._path = path
        self._parameters = parameters

    @classmethod
    def for_path(cls, path: str) -> "QueryStringBuilder":
        return cls(path)

    def add_param(self, name: str, value: Any, encode: bool = True) -> "QueryStringBuilder":
        rendered = coerce_param(name, value, encode)
        if rendered is None:
            return self
        return QueryStringBuilder(self._path, self._parameters + ((name, rendered),))

    def __str__(self) -> str:
        if not self._parameters:
            return self._path
        return f"{self._path}?{render_query(self._parameters)}"

    def __repr__(self) -> str:
        return f"QueryStringBuilder({str(self)!r})"

    def to_uri(self) -> httpx.URL:
        return httpx.URL(str(self))
