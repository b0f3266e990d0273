"""
HttpClient Utilities - URI Building.
"""

from .fluent import FluentUriBuilder
from .query_string import QueryStringBuilder

__all__ = [
    "FluentUriBuilder",
    "QueryStringBuilder",
]
