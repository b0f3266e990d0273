"""
Construction of configured httpx clients.
"""

import logging
from typing import Callable

import httpx

from .options import HttpOptions
from .policies import ResilientTransport
from .tracing import TracingTransport

logger = logging.getLogger(__name__)


def build_transport(
    options: HttpOptions,
    *,
    name: str = "default",
    transport: httpx.AsyncBaseTransport | None = None,
    tracing: bool = True,
    is_response_successful: Callable[[httpx.Response], bool] | None = None,
) -> ResilientTransport:
    """
    Wrap a transport with tracing and the policies described by ``options``.

    Tracing sits inside the policies so that every attempt is traced.
    """
    inner = transport or httpx.AsyncHTTPTransport()
    if tracing:
        inner = TracingTransport(inner, name=name, is_response_successful=is_response_successful)

    return ResilientTransport(
        inner,
        retry_config=options.retry_config(),
        breaker=options.circuit_breaker(name),
        max_parallelization=options.max_parallelization,
        name=name,
    )


def create_client(
    options: HttpOptions | None = None,
    *,
    name: str = "default",
    transport: httpx.AsyncBaseTransport | None = None,
    tracing: bool = True,
    is_response_successful: Callable[[httpx.Response], bool] | None = None,
    configure: Callable[[httpx.AsyncClient, HttpOptions], None] | None = None,
) -> httpx.AsyncClient:
    """
    Create an ``httpx.AsyncClient`` configured from options.

    Args:
        options: Client options (default: HttpOptions())
        name: Client name for logging and the circuit breaker
        transport: Inner transport (default: httpx.AsyncHTTPTransport())
        tracing: Whether to trace requests and responses
        is_response_successful: Predicate used by tracing
        configure: Optional callback(client, options) applied last

    Returns:
        A configured client; the caller owns it and must close it
    """
    options = options or HttpOptions()
    client = httpx.AsyncClient(
        transport=build_transport(
            options,
            name=name,
            transport=transport,
            tracing=tracing,
            is_response_successful=is_response_successful,
        )
    )
    options.apply(client)
    if configure:
        configure(client, options)

    logger.debug(
        f"Created HTTP client '{name}' (base: {options.base_address}, "
        f"retries: {options.number_of_retries}, "
        f"breaker: {options.errors_allowed_before_breaking}, "
        f"max parallel: {options.max_parallelization})"
    )
    return client
