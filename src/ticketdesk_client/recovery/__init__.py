"""
Error recovery components for the TicketDesk client.

Provides the bounded exponential-backoff retry used by one-shot fetches.
"""

from .retry import RetryOptions, RetryAttempt, RetryPolicy, ExponentialBackoff, with_retry

__all__ = [
    "RetryOptions",
    "RetryAttempt",
    "RetryPolicy",
    "ExponentialBackoff",
    "with_retry"
]
