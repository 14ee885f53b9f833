"""In-process rate limiting for anonymous write endpoints.

Fixed-window counters keyed by ``<action>_<voter_hash>``. State lives in
process memory only: it resets on restart and is not shared between workers,
so limits are best-effort. Anything implementing ``RateLimiter`` (e.g. a
Redis-backed counter) can be swapped in through ``get_rate_limiter``.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock
from typing import Protocol

from cachetools import TLRUCache

from dytto_api.app.config import settings

logger = logging.getLogger(__name__)


class RateLimiter(Protocol):
    def allow(self, key: str, limit: int, window_seconds: float) -> bool: ...


@dataclass(slots=True)
class _Window:
    count: int
    reset_at: float


def _window_expiry(_key: str, window: _Window, _now: float) -> float:
    return window.reset_at


class FixedWindowRateLimiter:
    """Allow up to ``limit`` hits per key per window; the counter resets entirely
    once the window has ended, so bursts straddling a boundary are possible.

    Windows are dropped from memory when they end, and at most ``maxsize``
    keys are tracked at once.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        maxsize: int = 100_000,
    ) -> None:
        self._clock = clock
        self._windows: TLRUCache = TLRUCache(
            maxsize=maxsize, ttu=_window_expiry, timer=clock
        )
        self._lock = Lock()

    def allow(self, key: str, limit: int, window_seconds: float) -> bool:
        now = self._clock()
        with self._lock:
            window = self._windows.get(key)
            if window is None or now >= window.reset_at:
                self._windows[key] = _Window(count=1, reset_at=now + window_seconds)
                return True

            if window.count >= limit:
                return False

            window.count += 1
            return True

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def __len__(self) -> int:
        with self._lock:
            self._windows.expire()
            return len(self._windows)


_limiter = FixedWindowRateLimiter(maxsize=settings.rate_limit_max_keys)


def get_rate_limiter() -> RateLimiter:
    """FastAPI dependency returning the process-wide limiter."""
    return _limiter
