"""
HttpClient Utilities - Exception Hierarchy.

Custom exceptions for HTTP client operations with retry-awareness.
"""

from .base import (
    HttpUtilitiesError,
    InvalidArgumentError,
    HttpResponseError,
    TransientHttpError,
    CircuitOpenError,
)

__all__ = [
    "HttpUtilitiesError",
    "InvalidArgumentError",
    "HttpResponseError",
    "TransientHttpError",
    "CircuitOpenError",
]
