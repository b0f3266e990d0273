"""
HTTP client options.

Maps one flat configuration section onto the client settings and on the
retry, circuit-breaker and bulkhead policies wrapped around its transport.
"""

import logging
import re
from dataclasses import dataclass, field, fields
from datetime import timedelta
from typing import Any, Mapping

import aiobreaker
import httpx

from ..exceptions import InvalidArgumentError
from .policies import CircuitBreakerLoggingListener
from ..retry import RetryConfig

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_NUMBER_OF_RETRIES = 3
DEFAULT_RETRIES_SLEEP_DURATION = 0.3
DEFAULT_RETRIES_MAXIMUM_SLEEP_DURATION = 3.0
DEFAULT_ERRORS_ALLOWED_BEFORE_BREAKING = 10
DEFAULT_BREAK_DURATION = 60.0
DEFAULT_MAX_PARALLELIZATION = 0

DEFAULT_APPLICATION_NAME = "http-client-utilities"

# [d.]hh:mm:ss[.fffffff]
_TIMESPAN = re.compile(r"^(?:(\d+)\.)?(\d{1,2}):(\d{2}):(\d{2})(?:\.(\d{1,7}))?$")

_DURATION_FIELDS = {
    "timeout",
    "retries_sleep_duration",
    "retries_maximum_sleep_duration",
    "break_duration",
}
_INT_FIELDS = {
    "number_of_retries",
    "errors_allowed_before_breaking",
    "max_parallelization",
}


def parse_duration(value: Any) -> float:
    """
    Convert a configured duration to seconds.

    Accepts numbers (seconds), ``timedelta`` and TimeSpan strings such as
    ``"00:00:30"`` or ``"1.00:00:00.5"``. A bare numeric string like ``"30"``
    is rejected: TimeSpan reads it as days, while a number here means seconds.
    """
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        match = _TIMESPAN.match(text)
        if match:
            days, hours, minutes, seconds, fraction = match.groups()
            total = timedelta(
                days=int(days or 0),
                hours=int(hours),
                minutes=int(minutes),
                seconds=int(seconds),
            ).total_seconds()
            if fraction:
                total += float(f"0.{fraction}")
            return total
    raise InvalidArgumentError(f"Invalid duration: {value!r}")


def _snake_case(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


@dataclass
class HttpOptions:
    """
    Options for a configured HTTP client.

    Attributes:
        base_address: Base URL for relative requests
        timeout: Request timeout in seconds
        headers: Default request headers
        number_of_retries: Retries on transient failures (0 disables retry)
        retries_sleep_duration: Seed delay between retries in seconds
        retries_maximum_sleep_duration: Jitter ceiling in seconds (0 disables jitter)
        errors_allowed_before_breaking: Failures before the circuit opens (0 disables the breaker)
        break_duration: Seconds the circuit stays open
        max_parallelization: Maximum in-flight requests (0 means unlimited)
        application_name: Product name for the User-Agent header
        application_version: Product version for the User-Agent header
        environment: Optional environment name appended to the User-Agent
    """

    base_address: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    headers: dict[str, str] = field(default_factory=dict)
    number_of_retries: int = DEFAULT_NUMBER_OF_RETRIES
    retries_sleep_duration: float = DEFAULT_RETRIES_SLEEP_DURATION
    retries_maximum_sleep_duration: float = DEFAULT_RETRIES_MAXIMUM_SLEEP_DURATION
    errors_allowed_before_breaking: int = DEFAULT_ERRORS_ALLOWED_BEFORE_BREAKING
    break_duration: float = DEFAULT_BREAK_DURATION
    max_parallelization: int = DEFAULT_MAX_PARALLELIZATION
    application_name: str | None = None
    application_version: str | None = None
    environment: str | None = None

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "HttpOptions":
        """
        Bind options from a configuration section.

        Keys may be snake_case or PascalCase (``NumberOfRetries``). Unknown
        keys are ignored.

        Raises:
            InvalidArgumentError: If a value cannot be converted
        """
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}

        for key, value in config.items():
            name = key if key in known else _snake_case(key)
            if name not in known:
                logger.debug(f"Ignoring unknown HTTP option: {key}")
                continue
            if value is None:
                continue
            if name in _DURATION_FIELDS:
                value = parse_duration(value)
            elif name in _INT_FIELDS:
                try:
                    value = int(value)
                except (TypeError, ValueError) as e:
                    raise InvalidArgumentError(f"Invalid integer for {key}: {value!r}") from e
            elif name == "headers":
                if not isinstance(value, Mapping):
                    raise InvalidArgumentError(f"headers must be a mapping, got {type(value).__name__}")
                value = {str(k): str(v) for k, v in value.items()}
            else:
                value = str(value)
            values[name] = value

        return cls(**values)

    def retry_config(self) -> RetryConfig:
        """Build the retry policy configuration."""
        return RetryConfig(
            max_retries=self.number_of_retries,
            base_delay=self.retries_sleep_duration,
            max_delay=self.retries_maximum_sleep_duration,
        )

    def circuit_breaker(self, name: str) -> aiobreaker.CircuitBreaker | None:
        """
        Build a circuit breaker for the named client.

        Returns:
            None when ``errors_allowed_before_breaking`` disables breaking
        """
        if self.errors_allowed_before_breaking <= 0:
            return None
        return aiobreaker.CircuitBreaker(
            fail_max=self.errors_allowed_before_breaking,
            timeout_duration=timedelta(seconds=self.break_duration),
            listeners=[CircuitBreakerLoggingListener()],
            name=name,
        )

    def user_agent(self) -> str:
        """Return the User-Agent product token."""
        from .. import __version__

        name = self.application_name or DEFAULT_APPLICATION_NAME
        version = self.application_version or __version__
        if self.environment:
            return f"{name}/{version} ({self.environment})"
        return f"{name}/{version}"

    def apply(self, client: httpx.AsyncClient) -> None:
        """Apply base address, timeout and default headers to a client."""
        if self.base_address:
            client.base_url = self.base_address
        client.timeout = httpx.Timeout(self.timeout)
        for key, value in self.headers.items():
            client.headers[key] = value

        if not any(key.lower() == "user-agent" for key in self.headers):
            client.headers["User-Agent"] = self.user_agent()
