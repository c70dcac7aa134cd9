"""Per-user fixed-window request limiting for AI endpoints."""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Protocol

from config import settings

logger = logging.getLogger(__name__)


@dataclass
class RateLimitEntry:
    count: int
    reset_time: float  # clock milliseconds at which the window closes


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_in_ms: int


class RateLimitStore(Protocol):
    def get(self, key: str) -> RateLimitEntry | None: ...

    def set(self, key: str, entry: RateLimitEntry) -> None: ...

    def sweep(self, now: float) -> int: ...

    def __len__(self) -> int: ...


class InMemoryRateLimitStore:
    """Process-local store. Counters vanish on restart."""

    def __init__(self) -> None:
        self._entries: dict[str, RateLimitEntry] = {}

    def get(self, key: str) -> RateLimitEntry | None:
        return self._entries.get(key)

    def set(self, key: str, entry: RateLimitEntry) -> None:
        self._entries[key] = entry

    def sweep(self, now: float) -> int:
        """Drop entries whose window has closed. Returns how many were removed."""
        expired = [k for k, e in self._entries.items() if now > e.reset_time]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


class RateLimiter:
    def __init__(
        self,
        store: RateLimitStore | None = None,
        window_ms: int | None = None,
        max_requests: int | None = None,
        cleanup_threshold: int | None = None,
        clock: Callable[[], float] = _monotonic_ms,
    ):
        self.store = store if store is not None else InMemoryRateLimitStore()
        self.window_ms = window_ms or settings.rate_limit_window_ms
        self.max_requests = max_requests or settings.rate_limit_max_requests
        self.cleanup_threshold = cleanup_threshold or settings.rate_limit_cleanup_threshold
        self.clock = clock
        self._lock = threading.Lock()

    def check(self, user_id: str) -> RateLimitResult:
        """Count one request for ``user_id`` and report whether it may proceed."""
        with self._lock:
            now = self.clock()

            if len(self.store) > self.cleanup_threshold:
                removed = self.store.sweep(now)
                logger.debug("Rate limiter swept %d expired entries", removed)

            entry = self.store.get(user_id)
            if entry is None or now > entry.reset_time:
                self.store.set(user_id, RateLimitEntry(count=1, reset_time=now + self.window_ms))
                return RateLimitResult(
                    allowed=True,
                    remaining=self.max_requests - 1,
                    reset_in_ms=self.window_ms,
                )

            reset_in = int(entry.reset_time - now)
            if entry.count >= self.max_requests:
                return RateLimitResult(allowed=False, remaining=0, reset_in_ms=reset_in)

            entry.count += 1
            self.store.set(user_id, entry)
            return RateLimitResult(
                allowed=True,
                remaining=self.max_requests - entry.count,
                reset_in_ms=reset_in,
            )


_default_limiter: RateLimiter | None = None


def get_rate_limiter() -> RateLimiter:
    global _default_limiter
    if _default_limiter is None:
        _default_limiter = RateLimiter()
    return _default_limiter


def check_rate_limit(user_id: str) -> RateLimitResult:
    return get_rate_limiter().check(user_id)
