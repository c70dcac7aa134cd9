import asyncio

import pytest

from services.errors import (
    AIUnavailableError,
    LLMProviderError,
    LLMTimeoutError,
    RetryExhaustedError,
    is_timeout_error,
)
from services.resilience import RetryPolicy, gather_or_cancel, run_with_retry, with_timeout

NO_DELAY = RetryPolicy(max_attempts=2, base_delay_ms=0)


def test_delay_grows_exponentially():
    policy = RetryPolicy(max_attempts=3, base_delay_ms=1000, multiplier=2)
    assert [policy.delay_ms(a) for a in range(3)] == [1000, 2000, 4000]


@pytest.mark.asyncio
async def test_retry_succeeds_after_failures():
    attempts = []

    async def flaky():
        attempts.append(1)
        if len(attempts) < 3:
            raise LLMProviderError("boom")
        return "ok"

    assert await run_with_retry(flaky, "flaky call", NO_DELAY) == "ok"
    assert len(attempts) == 3


@pytest.mark.asyncio
async def test_retry_exhausted_wraps_last_error():
    async def always_fails():
        raise LLMProviderError("provider down")

    with pytest.raises(RetryExhaustedError) as exc_info:
        await run_with_retry(always_fails, "Analysis Agent", NO_DELAY)

    err = exc_info.value
    assert err.attempts == 3
    assert str(err) == "Analysis Agent failed after 3 attempts: provider down"
    assert err.timed_out is False


@pytest.mark.asyncio
async def test_retry_exhausted_keeps_timeout_tag():
    async def times_out():
        raise LLMTimeoutError("Feedback Agent", 50)

    with pytest.raises(RetryExhaustedError) as exc_info:
        await run_with_retry(times_out, "Feedback Agent", RetryPolicy(max_attempts=0))
    assert exc_info.value.timed_out is True
    assert "timed out" in str(exc_info.value)


@pytest.mark.asyncio
async def test_with_timeout_raises_typed_error():
    with pytest.raises(LLMTimeoutError) as exc_info:
        await with_timeout(asyncio.sleep(1), 10, "keyword extraction")

    assert exc_info.value.timed_out is True
    assert str(exc_info.value) == "keyword extraction timed out after 10ms"


@pytest.mark.asyncio
async def test_with_timeout_returns_value():
    async def quick():
        return 42

    assert await with_timeout(quick(), 1000, "quick") == 42


@pytest.mark.asyncio
async def test_gather_or_cancel_returns_in_order():
    async def value(v, delay):
        await asyncio.sleep(delay)
        return v

    assert await gather_or_cancel(value("a", 0.02), value("b", 0)) == ["a", "b"]


@pytest.mark.asyncio
async def test_gather_or_cancel_cancels_siblings():
    cancelled = asyncio.Event()

    async def slow():
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.set()
            raise

    async def failing():
        await asyncio.sleep(0.01)
        raise LLMProviderError("nope")

    with pytest.raises(LLMProviderError):
        await gather_or_cancel(slow(), failing())
    assert cancelled.is_set()


def test_is_timeout_error():
    assert is_timeout_error(LLMTimeoutError("x", 1))
    assert is_timeout_error(AIUnavailableError("skill matching", timed_out=True))
    assert is_timeout_error(RuntimeError("Request timed out"))
    assert not is_timeout_error(AIUnavailableError("skill matching"))
