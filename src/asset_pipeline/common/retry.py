"""
Bounded retry with linear backoff for async operations.

The delay before retry N is ``base_delay * N`` seconds (no jitter). When all
attempts are used, the last exception is re-raised as-is so callers can
match on its type.

Usage:
    payload = await retry_async(lambda: fetch(url), max_attempts=3, base_delay=0.4)

    # Or with a named policy
    detail = await retry_async(lambda: get(url), *PROVIDER_RETRY)
"""

import asyncio
import logging
from typing import Awaitable, Callable, NamedTuple, Optional, TypeVar

from asset_pipeline.common.logging import get_logger, log_with_context

logger = get_logger(__name__)

T = TypeVar("T")


class RetryConfig(NamedTuple):
    """Retry policy.

    Attributes:
        max_attempts: Total attempts including the first one
        base_delay: Seconds multiplied by the attempt number between attempts
    """

    max_attempts: int = 3
    base_delay: float = 0.3

    def get_delay(self, attempt: int) -> float:
        """Delay in seconds after the given (1-based) failed attempt."""
        return self.base_delay * attempt


# Provider search/detail requests
PROVIDER_RETRY = RetryConfig(max_attempts=3, base_delay=0.3)

# Asset downloads
DOWNLOAD_RETRY = RetryConfig(max_attempts=3, base_delay=0.4)


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 0.3,
    retry_if: Optional[Callable[[Exception], bool]] = None,
) -> T:
    """
    Run ``operation`` until it succeeds or ``max_attempts`` is reached.

    Backoff sleeps suspend only the calling task. Callers must budget for
    up to ``sum(base_delay * n for n in 1..max_attempts-1)`` seconds of delay
    on top of the operation time.

    Args:
        operation: Zero-argument callable returning a fresh awaitable per call
        max_attempts: Total attempts including the first one
        base_delay: Linear backoff unit in seconds
        retry_if: Predicate deciding whether a failure is worth another
            attempt (default: every exception is retried)

    Returns:
        The operation's result

    Raises:
        ValueError: If max_attempts < 1 or base_delay < 0
        Exception: Whatever the final attempt raised, unchanged
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
    if base_delay < 0:
        raise ValueError(f"base_delay must be >= 0, got {base_delay}")

    policy = RetryConfig(max_attempts, base_delay)
    attempt = 0
    while True:
        attempt += 1
        try:
            return await operation()
        except Exception as e:
            if attempt >= policy.max_attempts:
                raise
            if retry_if is not None and not retry_if(e):
                raise
            delay = policy.get_delay(attempt)
            log_with_context(
                logger,
                logging.DEBUG,
                f"Attempt {attempt}/{policy.max_attempts} failed, retrying in {delay:.2f}s",
                retry_count=attempt,
                error_category=getattr(getattr(e, "category", None), "value", None),
                error_message=str(e)[:500],
            )
            await asyncio.sleep(delay)


__all__ = [
    "RetryConfig",
    "PROVIDER_RETRY",
    "DOWNLOAD_RETRY",
    "retry_async",
]
