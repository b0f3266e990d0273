"""
Retry decorators driven by decorrelated jitter delays.
"""

import asyncio
import functools
import logging
import time
from typing import Callable, TypeVar, ParamSpec, Awaitable

import httpx

from .config import RetryConfig
from ..exceptions import HttpUtilitiesError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


def is_transient(exc: BaseException, config: RetryConfig) -> bool:
    """
    Classify an exception as a transient failure.

    Args:
        exc: Exception raised by the wrapped call
        config: Retry configuration providing retryable status codes

    Returns:
        True if the call may succeed when retried
    """
    if isinstance(exc, HttpUtilitiesError):
        return exc.retryable
    if isinstance(exc, httpx.HTTPStatusError):
        return config.should_retry(exc.response.status_code)
    return isinstance(exc, httpx.TransportError)


def with_retry(
    config: RetryConfig | None = None,
    on_retry: Callable[[int, Exception, float], None] | None = None,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Decorator for synchronous functions with retry logic.

    Args:
        config: Retry configuration (default: RetryConfig())
        on_retry: Optional callback(attempt, exception, delay) called before each retry

    Returns:
        Decorated function with retry behavior
    """
    if config is None:
        config = RetryConfig()

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            delays = config.delays()

            for attempt in range(config.max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    if not is_transient(e, config) or attempt >= config.max_retries:
                        raise
                    delay = next(delays)
                    if on_retry:
                        on_retry(attempt, e, delay)
                    else:
                        logger.warning(
                            f"Retry {attempt + 1}/{config.max_retries}: {e}, "
                            f"waiting {delay:.2f}s"
                        )
                    time.sleep(delay)

            raise RuntimeError("Retry loop exited unexpectedly")

        return wrapper

    return decorator


def async_with_retry(
    config: RetryConfig | None = None,
    on_retry: Callable[[int, Exception, float], None] | None = None,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """
    Decorator for async functions with retry logic.

    Args:
        config: Retry configuration (default: RetryConfig())
        on_retry: Optional callback(attempt, exception, delay) called before each retry

    Returns:
        Decorated async function with retry behavior
    """
    if config is None:
        config = RetryConfig()

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            delays = config.delays()

            for attempt in range(config.max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if not is_transient(e, config) or attempt >= config.max_retries:
                        raise
                    delay = next(delays)
                    if on_retry:
                        on_retry(attempt, e, delay)
                    else:
                        logger.warning(
                            f"Retry {attempt + 1}/{config.max_retries}: {e}, "
                            f"waiting {delay:.2f}s"
                        )
                    await asyncio.sleep(delay)

            raise RuntimeError("Retry loop exited unexpectedly")

        return wrapper

    return decorator
