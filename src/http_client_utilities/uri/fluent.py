"""
Fluent, immutable URI builder.
"""

from dataclasses import dataclass, replace
from typing import Any
from urllib.parse import quote_plus

import httpx

from ..exceptions import InvalidArgumentError


def encode_component(value: str) -> str:
    """
    Form-URL encode a value.

    Space becomes ``+``. Letters, digits and ``-_.!*()`` are kept; everything
    else, ``/`` and ``~`` included, is percent-encoded.
    """
    return quote_plus(value, safe="!*()").replace("~", "%7E")


def render_query(parameters: tuple[tuple[str, str], ...]) -> str:
    """
    Render ``name=value`` pairs joined by ``&``.

    Values of a repeated name are grouped at the position where the name first
    appeared. Names compare case-insensitively and keep their first spelling.
    """
    grouped: dict[str, tuple[str, list[str]]] = {}
    for name, value in parameters:
        grouped.setdefault(name.casefold(), (name, []))[1].append(value)
    return "&".join(f"{name}={value}" for name, values in grouped.values() for value in values)


def coerce_param(name: str | None, value: Any, encode: bool) -> str | None:
    """
    Validate a query parameter and return its rendered value.

    Returns None when the value should be skipped.
    """
    if not name:
        raise InvalidArgumentError("Query parameter name must not be empty")
    if value is None:
        return None
    value = str(value)
    if not value:
        return None
    return encode_component(value) if encode else value


@dataclass(frozen=True)
class FluentUriBuilder:
    """
    Build relative URIs for HTTP clients.

    Every ``with_*`` call returns a new builder; instances are never mutated.

    Example:
        FluentUriBuilder.for_path("api").with_segment("users")
            .with_param("username", "John Doe").with_fragment("anchor-point")
        renders ``api/users?username=John+Doe#anchor-point``
    """

    path: str
    parameters: tuple[tuple[str, str], ...] = ()
    fragment: str | None = None

    @classmethod
    def for_path(cls, path: str) -> "FluentUriBuilder":
        """Create a builder using ``path`` as the base path."""
        if path is None:
            raise InvalidArgumentError("path must not be None")
        return cls(path=path)

    def with_segment(self, segment: Any, encode: bool = True) -> "FluentUriBuilder":
        """Append a path segment; None or empty segments are ignored."""
        if segment is None:
            return self
        segment = str(segment)
        if not segment:
            return self
        if encode:
            segment = encode_component(segment)
        return replace(self, path=f"{self.path.rstrip('/')}/{segment.lstrip('/')}")

    def with_segments(self, *segments: Any) -> "FluentUriBuilder":
        result = self
        for segment in segments:
            result = result.with_segment(segment)
        return result

    def with_segment_if(self, segment: Any, condition: bool, encode: bool = True) -> "FluentUriBuilder":
        return self.with_segment(segment, encode) if condition else self

    def with_param(self, name: str, value: Any, encode: bool = True) -> "FluentUriBuilder":
        """Add a query parameter; None or empty values are ignored, names may repeat."""
        rendered = coerce_param(name, value, encode)
        if rendered is None:
            return self
        return replace(self, parameters=self.parameters + ((name, rendered),))

    def with_param_if(self, name: str, value: Any, condition: bool, encode: bool = True) -> "FluentUriBuilder":
        return self.with_param(name, value, encode) if condition else self

    def with_fragment(self, fragment: str | None) -> "FluentUriBuilder":
        return replace(self, fragment=fragment)

    def with_fragment_if(self, fragment: str | None, condition: bool) -> "FluentUriBuilder":
        return self.with_fragment(fragment) if condition else self

    def __str__(self) -> str:
        result = self.path
        if self.parameters:
            result += "?" + render_query(self.parameters)
        if self.fragment:
            result += f"#{self.fragment}"
        return result

    def to_uri(self, base: httpx.URL | str | None = None) -> httpx.URL:
        """Return the URI, joined onto ``base`` when given."""
        if base is None:
            return httpx.URL(str(self))
        return httpx.URL(base).join(str(self))
