import pytest

from services.rate_limiter import InMemoryRateLimitStore, RateLimitEntry, RateLimiter


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return RateLimiter(
        store=InMemoryRateLimitStore(),
        window_ms=60_000,
        max_requests=5,
        cleanup_threshold=1000,
        clock=clock,
    )


def test_first_request_opens_window(limiter):
    result = limiter.check("user-1")
    assert result.allowed is True
    assert result.remaining == 4
    assert result.reset_in_ms == 60_000


def test_sixth_request_is_blocked(limiter, clock):
    for expected_remaining in (4, 3, 2, 1, 0):
        result = limiter.check("user-1")
        assert result.allowed is True
        assert result.remaining == expected_remaining
        clock.advance(1000)

    blocked = limiter.check("user-1")
    assert blocked.allowed is False
    assert blocked.remaining == 0
    assert blocked.reset_in_ms == 55_000


def test_blocked_requests_do_not_extend_window(limiter, clock):
    for _ in range(5):
        limiter.check("user-1")
    clock.advance(30_000)
    assert limiter.check("user-1").reset_in_ms == 30_000
    assert limiter.check("user-1").allowed is False
    assert limiter.store.get("user-1").count == 5


def test_window_resets_after_expiry(limiter, clock):
    for _ in range(6):
        limiter.check("user-1")
    clock.advance(60_001)
    result = limiter.check("user-1")
    assert result.allowed is True
    assert result.remaining == 4
    assert result.reset_in_ms == 60_000


def test_users_are_independent(limiter):
    for _ in range(5):
        limiter.check("user-1")
    assert limiter.check("user-1").allowed is False
    assert limiter.check("user-2").allowed is True


def test_sweep_runs_past_threshold(clock):
    store = InMemoryRateLimitStore()
    limiter = RateLimiter(store=store, window_ms=1000, max_requests=5, cleanup_threshold=3, clock=clock)
    for i in range(4):
        limiter.check(f"user-{i}")
    assert len(store) == 4

    clock.advance(2000)
    limiter.check("user-new")
    assert len(store) == 1
    assert store.get("user-new") is not None


def test_store_sweep_keeps_live_entries():
    store = InMemoryRateLimitStore()
    store.set("old", RateLimitEntry(count=1, reset_time=100))
    store.set("live", RateLimitEntry(count=1, reset_time=500))
    assert store.sweep(now=200) == 1
    assert store.get("old") is None
    assert store.get("live") is not None
