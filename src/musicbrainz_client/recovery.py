"""
Opt-in retry policy.

Nothing in the library retries on its own. Callers who want retries wrap a
call explicitly:

    ```python
    policy = RetryPolicy(max_attempts=4)
    artist = policy.call(query.lookup_artist, mbid)
    ```
"""

from __future__ import annotations
import asyncio
import logging
import random
import time
from typing import Any, Awaitable, Callable, Optional, TypeVar

from .runtime.errors import RemoteError, TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def transport_failures_only(exception: BaseException) -> bool:
    """Default retry condition: the request never produced a response."""
    return isinstance(exception, TransportError)


def transport_or_unavailable(exception: BaseException) -> bool:
    """Also retry 503 replies, which the service uses for rate limiting."""
    return transport_failures_only(exception) or (isinstance(exception, RemoteError) and exception.status == 503)


class RetryPolicy:
    """
    Exponential backoff with optional jitter.

    Delay before retry *n* (1-based) is ``base_delay * factor ** (n - 1)``,
    capped at ``max_delay``. When attempts run out the last error is raised
    unchanged.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        factor: float = 2.0,
        jitter: bool = True,
        jitter_factor: float = 0.1,
        retryable: Optional[Callable[[BaseException], bool]] = None,
    ):
        """
        Initialize retry policy.

        Args:
            max_attempts: Total attempts, including the first
            base_delay: Delay before the first retry in seconds
            max_delay: Upper bound for any single delay
            factor: Exponential growth factor
            jitter: Whether to randomise delays slightly
            jitter_factor: Jitter amplitude relative to the delay
            retryable: Predicate deciding which errors are retried
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.factor = factor
        self.jitter = jitter
        self.jitter_factor = jitter_factor
        self.retryable = retryable or transport_failures_only

        self.total_attempts = 0
        self.total_retries = 0

    def calculate_delay(self, attempt: int) -> float:
        delay = min(self.base_delay * (self.factor ** (attempt - 1)), self.max_delay)
        if self.jitter:
            delay += delay * self.jitter_factor * (random.random() - 0.5)
        return max(0.0, delay)

    def should_retry(self, attempt: int, exception: BaseException) -> bool:
        return attempt < self.max_attempts and self.retryable(exception)

    def call(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Call ``func`` until it succeeds or a non-retryable error occurs."""
        attempt = 0
        while True:
            attempt += 1
            self.total_attempts += 1
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if not self.should_retry(attempt, e):
                    raise
                delay = self.calculate_delay(attempt)
                self.total_retries += 1
                logger.warning("Attempt %d failed: %s. Retrying in %.2fs...", attempt, e, delay)
                time.sleep(delay)

    async def call_async(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Async counterpart of :meth:`call`; ``func`` is invoked afresh on every attempt."""
        attempt = 0
        while True:
            attempt += 1
            self.total_attempts += 1
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                if not self.should_retry(attempt, e):
                    raise
                delay = self.calculate_delay(attempt)
                self.total_retries += 1
                logger.warning("Attempt %d failed: %s. Retrying in %.2fs...", attempt, e, delay)
                await asyncio.sleep(delay)

    def get_stats(self) -> dict:
        return {
            "total_attempts": self.total_attempts,
            "total_retries": self.total_retries,
        }


__all__ = ["RetryPolicy", "transport_failures_only", "transport_or_unavailable"]
