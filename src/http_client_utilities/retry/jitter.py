"""
Decorrelated jitter delay sequences.

Each delay is randomized relative to the previous one rather than to a fixed
base, so independent callers retrying at the same time drift apart while the
sequence still trends upwards until it reaches the ceiling.
"""

import math
import random
from typing import Iterator, Protocol

from ..exceptions import InvalidArgumentError


class RandomSource(Protocol):
    """Anything exposing ``random() -> float`` in ``[0, 1)``."""

    def random(self) -> float: ...


def _is_valid_duration(value: float) -> bool:
    return isinstance(value, (int, float)) and not math.isnan(value) and value >= 0


def decorrelated_jitter(
    max_attempts: int,
    seed_delay: float,
    max_delay: float,
    rng: RandomSource | None = None,
) -> Iterator[float]:
    """
    Create a bounded sequence of retry delays using decorrelated jitter.

    For each attempt: ``current = min(max_delay, max(seed_delay, current * 3 * r))``
    with ``r`` uniform in ``[0, 1)`` and ``current`` starting at ``seed_delay``.

    Arguments are validated when this function is called, so a bad
    configuration fails before any delay is produced. The returned iterator
    is lazy, single-use and must not be shared between retrying operations.

    Args:
        max_attempts: Number of delays to produce (>= 1)
        seed_delay: Minimum and initial delay in seconds (>= 0)
        max_delay: Ceiling in seconds (>= seed_delay); equal to seed_delay
            yields a constant sequence
        rng: Optional random source; defaults to the process-wide generator
            of the ``random`` module

    Returns:
        Iterator yielding exactly ``max_attempts`` delays in seconds

    Raises:
        InvalidArgumentError: If any argument is out of range
    """
    if isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts < 1:
        raise InvalidArgumentError(f"max_attempts must be a positive integer, got {max_attempts!r}")
    if not _is_valid_duration(seed_delay):
        raise InvalidArgumentError(f"seed_delay must be a non-negative duration, got {seed_delay!r}")
    if not _is_valid_duration(max_delay):
        raise InvalidArgumentError(f"max_delay must be a non-negative duration, got {max_delay!r}")
    if max_delay < seed_delay:
        raise InvalidArgumentError(
            f"max_delay ({max_delay}) must not be lower than seed_delay ({seed_delay})"
        )

    draw = rng.random if rng is not None else random.random
    return _generate(max_attempts, float(seed_delay), float(max_delay), draw)


def _generate(max_attempts, seed_delay, max_delay, draw) -> Iterator[float]:
    current = seed_delay
    for _ in range(max_attempts):
        current = min(max_delay, max(seed_delay, current * 3 * draw()))
        yield current
