"""
HttpClient Utilities - Client Construction.

Options binding, resilience policies and tracing for httpx clients.
"""

from .options import HttpOptions, parse_duration
from .policies import ResilientTransport, CircuitBreakerLoggingListener
from .tracing import TracingTransport, TRACE, logger_category, headers_as_string
from .factory import build_transport, create_client
from .base import BaseHttpClient

__all__ = [
    "HttpOptions",
    "parse_duration",
    "ResilientTransport",
    "CircuitBreakerLoggingListener",
    "TracingTransport",
    "TRACE",
    "logger_category",
    "headers_as_string",
    "build_transport",
    "create_client",
    "BaseHttpClient",
]
