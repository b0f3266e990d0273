"""
Base exception classes for HTTP client utilities.

Each exception includes a `retryable` flag indicating whether the operation
can be safely retried with the same parameters.
"""

import httpx


class HttpUtilitiesError(Exception):
    """Base exception for all HTTP client utility errors."""

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        status_code: int | None = None,
        client_name: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.retryable = retryable
        self.status_code = status_code
        self.client_name = client_name

    def __str__(self) -> str:
        parts = [self.message]
        if self.client_name:
            parts.insert(0, f"[{self.client_name}]")
        if self.status_code:
            parts.append(f"(status: {self.status_code})")
        return " ".join(parts)


class InvalidArgumentError(HttpUtilitiesError, ValueError):
    """Raised when a caller passes an invalid argument or configuration. Not retryable."""

    def __init__(self, message: str = "Invalid argument", **kwargs):
        super().__init__(message, retryable=False, **kwargs)


class HttpResponseError(HttpUtilitiesError):
    """Raised when a server answers with a non-success status."""

    def __init__(
        self,
        message: str = "Unexpected response",
        *,
        response: httpx.Response | None = None,
        retryable: bool = False,
        **kwargs,
    ):
        if response is not None:
            kwargs.setdefault("status_code", response.status_code)
        super().__init__(message, retryable=retryable, **kwargs)
        self.response = response


class TransientHttpError(HttpResponseError):
    """Raised when a response is classified as a transient failure. Always retryable."""

    def __init__(self, response: httpx.Response, message: str = "Transient HTTP failure", **kwargs):
        super().__init__(message, response=response, retryable=True, **kwargs)


class CircuitOpenError(HttpUtilitiesError):
    """Raised when the circuit breaker rejects a call. Retryable once the break elapses."""

    def __init__(self, message: str = "Circuit breaker is open", **kwargs):
        super().__init__(message, retryable=True, **kwargs)
