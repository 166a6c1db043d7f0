"""Retry with deterministic exponential backoff.

Example:
    >>> from fulfillment_mcp.runtime.retry import RetryOptions, RetryPolicy
    >>> policy = RetryPolicy()
    >>> await policy.execute(fetch_orders, RetryOptions(max_retries=2, initial_delay_ms=500))
"""

from .backoff import ExponentialBackoff
from .policy import (
    DEFAULT_OPTIONS,
    NO_RETRY,
    ResolvedRetry,
    RetryOptions,
    RetryPolicy,
    RetryPredicate,
    Sleep,
    is_retryable_default,
)

__all__ = [
    "ExponentialBackoff",
    "RetryOptions",
    "ResolvedRetry",
    "RetryPolicy",
    "RetryPredicate",
    "Sleep",
    "DEFAULT_OPTIONS",
    "NO_RETRY",
    "is_retryable_default",
]
