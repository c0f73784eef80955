"""
Retry policies for one-shot remote calls.

Provides a bounded exponential-backoff retry wrapper. After the last attempt
the original exception is re-raised unchanged, so the error classifier sees
the failure exactly as the transport produced it.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class RetryOptions:
    """
    Retry configuration.

    Defaults match the console's history fetchers: one call plus three
    retries, starting at one second and growing by half each time.
    """
    max_attempts: int = 4
    base_delay: float = 1.0
    backoff_factor: float = 1.5

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.base_delay < 0:
            raise ValueError(f"base_delay must be >= 0, got {self.base_delay}")
        if self.backoff_factor < 1:
            raise ValueError(f"backoff_factor must be >= 1, got {self.backoff_factor}")


@dataclass
class RetryAttempt:
    """Information about a retry attempt."""
    attempt: int
    delay: float
    exception: Optional[BaseException] = None
    start_time: float = 0.0
    end_time: float = 0.0

    @property
    def duration(self) -> float:
        """Get attempt duration in seconds."""
        if self.end_time > self.start_time:
            return self.end_time - self.start_time
        return 0.0


class RetryPolicy(ABC):
    """
    Abstract base class for retry policies.

    Subclasses supply the delay schedule; the execution loop, statistics and
    the re-raise rule live here.
    """

    def __init__(self, max_attempts: int = 4, base_delay: float = 1.0,
                 sleep: Optional[SleepFunc] = None):
        """
        Initialize retry policy.

        Args:
            max_attempts: Maximum number of attempts, including the first
            base_delay: Delay before the first retry, in seconds
            sleep: Awaitable sleep function (defaults to asyncio.sleep)
        """
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self._sleep = sleep or asyncio.sleep

        # Statistics
        self.total_attempts = 0
        self.total_retries = 0
        self.total_successes = 0
        self.total_failures = 0
        self.last_attempts: list[RetryAttempt] = []

    @abstractmethod
    def calculate_delay(self, attempt: int) -> float:
        """
        Calculate delay after the given failed attempt.

        Args:
            attempt: Attempt number that just failed (1-based)

        Returns:
            Delay in seconds
        """

    def should_retry(self, attempt: int, exception: BaseException) -> bool:
        """
        Determine if operation should be retried.

        Args:
            attempt: Current attempt number
            exception: Exception that occurred

        Returns:
            True if should retry, False otherwise
        """
        if attempt >= self.max_attempts:
            return False
        return isinstance(exception, Exception)

    async def execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Execute a zero-argument coroutine function with this policy.

        Args:
            operation: Callable returning an awaitable

        Returns:
            Operation result

        Raises:
            The last exception raised by the operation, unchanged
        """
        attempts: list[RetryAttempt] = []
        self.last_attempts = attempts
        attempt = 0

        while True:
            attempt += 1
            self.total_attempts += 1

            retry_attempt = RetryAttempt(attempt=attempt, delay=0.0, start_time=time.monotonic())
            attempts.append(retry_attempt)

            try:
                result = await operation()
            except Exception as e:
                retry_attempt.end_time = time.monotonic()
                retry_attempt.exception = e

                if not self.should_retry(attempt, e):
                    self.total_failures += 1
                    logger.debug(f"Giving up after {attempt} attempt(s): {e}")
                    raise

                delay = self.calculate_delay(attempt)
                retry_attempt.delay = delay
                self.total_retries += 1

                logger.warning(
                    f"Attempt {attempt} failed: {e}. "
                    f"Retrying in {delay:.2f}s..."
                )
                await self._sleep(delay)
                continue

            retry_attempt.end_time = time.monotonic()
            self.total_successes += 1
            if attempt > 1:
                logger.info(f"Operation succeeded on attempt {attempt}")
            return result

    def get_stats(self) -> dict:
        """Get retry policy statistics."""
        return {
            "total_attempts": self.total_attempts,
            "total_retries": self.total_retries,
            "total_successes": self.total_successes,
            "total_failures": self.total_failures,
            "success_rate": self.total_successes / max(self.total_attempts, 1),
            "retry_rate": self.total_retries / max(self.total_attempts, 1)
        }


class ExponentialBackoff(RetryPolicy):
    """
    Exponential backoff retry policy.

    Delay after failed attempt n is base_delay * (factor ^ (n - 1)).
    """

    def __init__(self, max_attempts: int = 4, base_delay: float = 1.0,
                 factor: float = 1.5, sleep: Optional[SleepFunc] = None):
        """
        Initialize exponential backoff policy.

        Args:
            max_attempts: Maximum attempts
            base_delay: Base delay in seconds
            factor: Exponential factor
            sleep: Awaitable sleep function
        """
        super().__init__(max_attempts, base_delay, sleep)
        self.factor = factor

    @classmethod
    def from_options(cls, options: RetryOptions,
                     sleep: Optional[SleepFunc] = None) -> "ExponentialBackoff":
        """Build a policy from RetryOptions."""
        return cls(
            max_attempts=options.max_attempts,
            base_delay=options.base_delay,
            factor=options.backoff_factor,
            sleep=sleep,
        )

    def calculate_delay(self, attempt: int) -> float:
        """Calculate exponential backoff delay."""
        return self.base_delay * (self.factor ** (attempt - 1))


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    options: Optional[RetryOptions] = None,
    sleep: Optional[SleepFunc] = None,
) -> T:
    """
    Run an async operation with bounded exponential-backoff retries.

    Args:
        operation: Zero-argument callable returning an awaitable
        options: Retry configuration (library defaults if None)
        sleep: Awaitable sleep function, for tests

    Returns:
        The operation's result

    Raises:
        The operation's last exception, unchanged, once attempts run out
    """
    policy = ExponentialBackoff.from_options(options or RetryOptions(), sleep=sleep)
    return await policy.execute(operation)


__all__ = [
    "RetryOptions",
    "RetryAttempt",
    "RetryPolicy",
    "ExponentialBackoff",
    "with_retry",
]
