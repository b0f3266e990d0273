"""
HttpClient Utilities - Retry Logic.

Decorrelated jitter delay sequences and the retry executors consuming them.
"""

from .jitter import decorrelated_jitter
from .config import RetryConfig
from .backoff import is_transient, with_retry, async_with_retry

__all__ = [
    "decorrelated_jitter",
    "RetryConfig",
    "is_transient",
    "with_retry",
    "async_with_retry",
]
