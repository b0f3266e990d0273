"""
Request/response tracing for httpx clients.

Successful exchanges are logged at TRACE level and only read when that level
is enabled. Unsuccessful exchanges and transport errors are always logged at
WARNING with the full request and response text.
"""

import logging
from typing import Callable

import httpx

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOG_CATEGORY_PREFIX = "httpx.client"
LOG_CATEGORY_SUFFIX = "TraceHandler"

REQUEST_SUCCESSFUL = (200, "RequestSuccessful")
REQUEST_ERROR = (201, "RequestError")
RESPONSE_SUCCESSFUL = (210, "ResponseSuccessful")
RESPONSE_ERROR = (211, "ResponseError")

_DEFAULT_HTTP_VERSION = "HTTP/1.1"


def logger_category(name: str) -> str:
    """Return the logger name used to trace the named client."""
    return f"{LOG_CATEGORY_PREFIX}.{name}.{LOG_CATEGORY_SUFFIX}"


def headers_as_string(headers: httpx.Headers) -> str:
    """Render headers as ``Key: value`` lines, one line per header name."""
    grouped: dict[str, list[str]] = {}
    for key, value in headers.raw:
        name = key.decode(headers.encoding)
        grouped.setdefault(name, []).append(value.decode(headers.encoding))
    return "\n".join(f"{name}: {' '.join(values)}" for name, values in grouped.items())


def _log(
    logger: logging.Logger,
    level: int,
    event: tuple[int, str],
    message: str,
    exc: BaseException | None = None,
) -> None:
    event_id, event_name = event
    logger.log(
        level,
        message,
        exc_info=exc,
        extra={"event_id": event_id, "event_name": event_name},
    )


async def _request_text(request: httpx.Request, http_version: str) -> str:
    body = await request.aread()
    return (
        f"\n{request.method} {request.url} {http_version}"
        f"\n{headers_as_string(request.headers)}"
        f"\n{body.decode('utf-8', errors='replace')}"
    )


async def _response_text(response: httpx.Response) -> str:
    await response.aread()
    return (
        f"\n{response.http_version} {response.status_code} {response.reason_phrase}"
        f"\n{headers_as_string(response.headers)}"
        f"\n{response.text}"
    )


async def log_request_successful(logger: logging.Logger, request: httpx.Request, http_version: str) -> None:
    _log(logger, TRACE, REQUEST_SUCCESSFUL, await _request_text(request, http_version))


async def log_request_error(
    logger: logging.Logger,
    request: httpx.Request,
    http_version: str = _DEFAULT_HTTP_VERSION,
    exc: BaseException | None = None,
) -> None:
    _log(logger, logging.WARNING, REQUEST_ERROR, await _request_text(request, http_version), exc)


async def log_response_successful(logger: logging.Logger, response: httpx.Response) -> None:
    _log(logger, TRACE, RESPONSE_SUCCESSFUL, await _response_text(response))


async def log_response_error(logger: logging.Logger, response: httpx.Response) -> None:
    _log(logger, logging.WARNING, RESPONSE_ERROR, await _response_text(response))


class TracingTransport(httpx.AsyncBaseTransport):
    """Transport logging every request/response pair passing through it."""

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport,
        logger: logging.Logger | None = None,
        name: str = "default",
        is_response_successful: Callable[[httpx.Response], bool] | None = None,
    ):
        """
        Initialize the tracing transport.

        Args:
            transport: Inner transport
            logger: Logger to write to (default: logger for ``logger_category(name)``)
            name: Client name used to derive the default logger category
            is_response_successful: Predicate classifying responses
                (default: 2xx responses are successful)
        """
        self.transport = transport
        self.logger = logger or logging.getLogger(logger_category(name))
        self.is_response_successful = is_response_successful or (lambda response: response.is_success)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        try:
            response = await self.transport.handle_async_request(request)
        except Exception as e:
            await log_request_error(self.logger, request, exc=e)
            raise

        if self.is_response_successful(response):
            if self.logger.isEnabledFor(TRACE):
                await log_request_successful(self.logger, request, response.http_version)
                await log_response_successful(self.logger, response)
        else:
            await log_request_error(self.logger, request, response.http_version)
            await log_response_error(self.logger, response)

        return response

    async def aclose(self) -> None:
        await self.transport.aclose()
