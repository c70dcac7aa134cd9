"""Retry with exponential backoff, and deadlines for awaitables."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from config import settings
from services.errors import LLMTimeoutError, RetryExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """``max_attempts`` retries after the first try."""
    max_attempts: int = 1
    base_delay_ms: int = 1000
    multiplier: float = 2

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        return cls(
            max_attempts=settings.retry_max_attempts,
            base_delay_ms=settings.retry_base_delay_ms,
            multiplier=settings.retry_backoff_multiplier,
        )

    def delay_ms(self, attempt: int) -> float:
        return self.base_delay_ms * self.multiplier ** attempt


async def run_with_retry(
    operation: Callable[[], Awaitable[T]],
    name: str,
    policy: RetryPolicy | None = None,
) -> T:
    """Await ``operation()`` until it succeeds or the policy runs out.

    ``operation`` is a factory so each attempt gets a fresh awaitable.
    """
    policy = policy or RetryPolicy.from_settings()
    total_attempts = policy.max_attempts + 1
    last_error: Exception | None = None

    for attempt in range(total_attempts):
        try:
            return await operation()
        except Exception as e:
            last_error = e
            if attempt < policy.max_attempts:
                delay = policy.delay_ms(attempt)
                logger.warning(
                    "%s failed (attempt %d/%d), retrying in %.0fms: %s",
                    name, attempt + 1, total_attempts, delay, e,
                )
                await asyncio.sleep(delay / 1000)

    logger.error("%s failed after %d attempts: %s", name, total_attempts, last_error)
    raise RetryExhaustedError(name, total_attempts, last_error) from last_error


async def gather_or_cancel(*awaitables: Awaitable) -> list:
    """Like ``asyncio.gather`` but the first failure cancels the siblings."""
    tasks = [asyncio.ensure_future(aw) for aw in awaitables]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def with_timeout(awaitable: Awaitable[T], timeout_ms: int, name: str) -> T:
    """Await with a deadline; the pending work is cancelled when it expires."""
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_ms / 1000)
    except asyncio.TimeoutError as e:
        raise LLMTimeoutError(name, timeout_ms) from e
