"""
HttpClient Utilities - Extensions for httpx clients.

Fluent URI building, options-driven resilience policies with decorrelated
jitter retries, and request/response tracing.
"""

from .clients import (
    BaseHttpClient,
    HttpOptions,
    ResilientTransport,
    TracingTransport,
    create_client,
)
from .exceptions import (
    HttpUtilitiesError,
    InvalidArgumentError,
    HttpResponseError,
    TransientHttpError,
    CircuitOpenError,
)
from .retry import RetryConfig, decorrelated_jitter, with_retry, async_with_retry
from .uri import FluentUriBuilder, QueryStringBuilder

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Clients
    "BaseHttpClient",
    "HttpOptions",
    "ResilientTransport",
    "TracingTransport",
    "create_client",
    # Exceptions
    "HttpUtilitiesError",
    "InvalidArgumentError",
    "HttpResponseError",
    "TransientHttpError",
    "CircuitOpenError",
    # Retry
    "RetryConfig",
    "decorrelated_jitter",
    "with_retry",
    "async_with_retry",
    # URI
    "FluentUriBuilder",
    "QueryStringBuilder",
]
