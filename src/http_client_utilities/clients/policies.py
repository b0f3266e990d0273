"""
Resilience policies composed around an httpx transport.

Order of evaluation for each request:

    bulkhead -> circuit breaker -> retry -> inner transport

The circuit breaker sees one outcome per logical request, after retries. A
transient outcome counts as a breaker failure even when the final transient
response is handed back to the caller, including on the call that opens the
circuit. Only later calls are rejected without I/O.
"""

import asyncio
import logging

import aiobreaker
import httpx

from ..exceptions import CircuitOpenError, TransientHttpError
from ..retry import RetryConfig

logger = logging.getLogger(__name__)


class CircuitBreakerLoggingListener(aiobreaker.CircuitBreakerListener):
    """Log circuit breaker state transitions and failures."""

    def state_change(self, breaker, old, new) -> None:
        logger.warning(
            f"Circuit breaker '{breaker.name}' changed state: {old} -> {new}",
            extra={
                "circuit_breaker": breaker.name,
                "old_state": str(old),
                "new_state": str(new),
                "failure_count": breaker.fail_counter,
            },
        )

    def failure(self, breaker, exception) -> None:
        logger.debug(
            f"Circuit breaker '{breaker.name}' recorded failure: {exception}",
            extra={
                "circuit_breaker": breaker.name,
                "failure_count": breaker.fail_counter,
                "exception_type": type(exception).__name__,
            },
        )


class ResilientTransport(httpx.AsyncBaseTransport):
    """
    Transport applying bulkhead, circuit breaker and retry policies.

    Features:
    - Decorrelated jitter delays between retries
    - Fail-fast rejection while the circuit is open
    - Optional cap on concurrent in-flight requests
    """

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport,
        retry_config: RetryConfig | None = None,
        breaker: aiobreaker.CircuitBreaker | None = None,
        max_parallelization: int = 0,
        name: str = "default",
    ):
        """
        Initialize the transport.

        Args:
            transport: Inner transport performing the actual I/O
            retry_config: Retry configuration (default: no retry)
            breaker: Optional circuit breaker shared by all requests of this client
            max_parallelization: Maximum in-flight requests, 0 for unlimited
            name: Client name for logging
        """
        self.transport = transport
        self.retry_config = retry_config or RetryConfig.no_retry()
        self.breaker = breaker
        self.name = name
        self._bulkhead = asyncio.Semaphore(max_parallelization) if max_parallelization > 0 else None

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if self._bulkhead is None:
            return await self._handle_with_breaker(request)
        async with self._bulkhead:
            return await self._handle_with_breaker(request)

    async def _handle_with_breaker(self, request: httpx.Request) -> httpx.Response:
        try:
            if self.breaker is None:
                return await self._send_with_retries(request)
            return await self.breaker.call_async(self._send_with_retries, request)
        except TransientHttpError as e:
            return e.response
        except aiobreaker.CircuitBreakerError as e:
            tripped_by = e.__cause__ or e.__context__
            if isinstance(tripped_by, TransientHttpError):
                # The call that opened the circuit still hands back its response.
                return tripped_by.response
            logger.warning(f"[{self.name}] Circuit open, rejecting {request.method} {request.url}")
            raise CircuitOpenError(
                f"Circuit breaker open for {request.method} {request.url}",
                client_name=self.name,
            ) from e

    async def _send_with_retries(self, request: httpx.Request) -> httpx.Response:
        delays = self.retry_config.delays()
        max_retries = self.retry_config.max_retries

        for attempt in range(max_retries + 1):
            try:
                response = await self.transport.handle_async_request(request)
            except httpx.TransportError as e:
                if attempt >= max_retries:
                    if max_retries:
                        logger.error(f"[{self.name}] All {max_retries} retries exhausted: {e}")
                    raise
                delay = next(delays)
                logger.warning(
                    f"[{self.name}] {type(e).__name__} on {request.method} {request.url}, "
                    f"retrying in {delay:.2f}s ({attempt + 1}/{max_retries})"
                )
                await asyncio.sleep(delay)
                continue

            if not self.retry_config.should_retry(response.status_code):
                return response

            if attempt >= max_retries:
                if max_retries:
                    logger.error(
                        f"[{self.name}] All {max_retries} retries exhausted "
                        f"(status {response.status_code})"
                    )
                raise TransientHttpError(response, client_name=self.name)

            delay = next(delays)
            logger.warning(
                f"[{self.name}] Transient status {response.status_code} on {request.method} "
                f"{request.url}, retrying in {delay:.2f}s ({attempt + 1}/{max_retries})"
            )
            await response.aclose()
            await asyncio.sleep(delay)

        raise RuntimeError("Retry loop exited unexpectedly")

    async def aclose(self) -> None:
        await self.transport.aclose()
