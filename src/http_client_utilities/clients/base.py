"""
Base class for typed HTTP API clients.

Subclasses describe one remote API; transport, policies and tracing come
from the options the client is built with.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from .factory import create_client
from .options import HttpOptions
from ..exceptions import HttpResponseError, HttpUtilitiesError
from ..uri import FluentUriBuilder

logger = logging.getLogger(__name__)


class BaseHttpClient(ABC):
    """
    Abstract base class for typed API clients.

    All API clients built on these utilities implement this interface.
    """

    def __init__(
        self,
        options: HttpOptions | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            options: Client options (base address, timeout, headers, policies)
            transport: Inner transport, mainly for tests
        """
        self.options = options or HttpOptions()
        self.retry_config = self.options.retry_config()
        self._client = create_client(self.options, name=self.client_name, transport=transport)

    @property
    @abstractmethod
    def client_name(self) -> str:
        """Return the client name for logging."""
        ...

    def uri(self, path: str) -> FluentUriBuilder:
        """Start a relative URI for this API."""
        return FluentUriBuilder.for_path(path)

    def _handle_error(self, response: httpx.Response) -> None:
        """Convert an unsuccessful response to a domain exception."""
        raise HttpResponseError(
            f"{response.request.method} {response.request.url} failed: {response.text}",
            response=response,
            retryable=self.retry_config.should_retry(response.status_code),
            client_name=self.client_name,
        )

    async def _send(self, method: str, uri: FluentUriBuilder | str, **kwargs: Any) -> httpx.Response:
        """
        Send a request and return the successful response.

        Raises:
            HttpResponseError: If the final response is not successful
            CircuitOpenError: If the circuit breaker rejects the call
        """
        response = await self._client.request(method, str(uri), **kwargs)
        if not response.is_success:
            self._handle_error(response)
        return response

    async def get_json(self, uri: FluentUriBuilder | str) -> Any:
        """GET a resource and decode its JSON body."""
        response = await self._send("GET", uri)
        return response.json()

    async def health_check(self, path: str = "") -> bool:
        """
        Check if the service is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            await self._send("GET", path)
            return True
        except (httpx.HTTPError, HttpUtilitiesError) as e:
            logger.debug(f"[{self.client_name}] Health check failed: {e}")
            return False

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "BaseHttpClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
