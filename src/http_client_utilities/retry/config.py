"""
Retry configuration.
"""

from dataclasses import dataclass, field
from typing import Iterator, Set

from .jitter import RandomSource, decorrelated_jitter
from ..exceptions import InvalidArgumentError


@dataclass
class RetryConfig:
    """
    Configuration for retry behavior.

    Attributes:
        max_retries: Number of retries after the first attempt (default: 3)
        base_delay: Seed delay in seconds (default: 0.3)
        max_delay: Jitter ceiling in seconds, 0 disables jitter (default: 3.0)
        jitter: Whether to apply decorrelated jitter (default: True)
        retryable_status_codes: HTTP status codes that trigger retry; any
            other 5xx status is retried as well
    """

    max_retries: int = 3
    base_delay: float = 0.3
    max_delay: float = 3.0
    jitter: bool = True
    retryable_status_codes: Set[int] = field(
        default_factory=lambda: {408, 429, 500, 502, 503, 504}
    )

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise InvalidArgumentError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.base_delay < 0 or self.max_delay < 0:
            raise InvalidArgumentError("Retry delays must be non-negative")
        if self.max_delay and self.max_delay < self.base_delay:
            raise InvalidArgumentError(
                f"max_delay ({self.max_delay}) must be 0 or >= base_delay ({self.base_delay})"
            )

    @property
    def jitter_enabled(self) -> bool:
        return self.jitter and self.max_delay > self.base_delay

    def should_retry(self, status_code: int) -> bool:
        """Check if the given status code should trigger a retry."""
        return status_code in self.retryable_status_codes or status_code >= 500

    def delays(self, rng: RandomSource | None = None) -> Iterator[float]:
        """
        Create the delay sequence for one retried operation.

        With jitter disabled the ceiling collapses onto the seed delay, which
        makes the same generator produce a constant sequence.
        """
        if self.max_retries == 0:
            return iter(())
        ceiling = self.max_delay if self.jitter_enabled else self.base_delay
        return decorrelated_jitter(self.max_retries, self.base_delay, ceiling, rng=rng)

    @classmethod
    def aggressive(cls) -> "RetryConfig":
        """Preset for aggressive retry (more attempts, longer delays)."""
        return cls(
            max_retries=10,
            base_delay=1.0,
            max_delay=30.0,
        )

    @classmethod
    def conservative(cls) -> "RetryConfig":
        """Preset for conservative retry (fewer attempts, shorter delays)."""
        return cls(
            max_retries=2,
            base_delay=0.1,
            max_delay=1.0,
        )

    @classmethod
    def no_retry(cls) -> "RetryConfig":
        """Preset for no retry (single attempt only)."""
        return cls(max_retries=0)

    @classmethod
    def no_jitter(cls, max_retries: int = 3, delay: float = 0.3) -> "RetryConfig":
        """Preset for a constant delay between retries."""
        return cls(max_retries=max_retries, base_delay=delay, max_delay=delay, jitter=False)
