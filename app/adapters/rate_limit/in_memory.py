"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
- Each identifier's window starts at its first request. Bursts straddling
  a window edge can admit up to twice ``max_requests``.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult


@dataclass
class _WindowState:
    count: int
    reset_at: int


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter counting requests per identifier in fixed windows.

    Once an identifier reaches ``max_requests`` inside its window, further
    requests are rejected without being counted, and the window is not
    extended; the client has to wait until ``reset_at``.
    """

    def __init__(
        self,
        *,
        max_requests: int = 100,
        window_ms: int = 60_000,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            max_requests: Maximum number of allowed requests per window.
            window_ms: Window length in milliseconds.
            clock: Time source function returning UNIX time in seconds.

        Raises:
            ValueError: If max_requests or window_ms are invalid.
        """
        if max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if window_ms < 1:
            raise ValueError("window_ms must be >= 1")

        self._max_requests = max_requests
        self._window_ms = window_ms
        self._clock = clock
        self._lock = threading.RLock()
        self._state_by_identifier: dict[str, _WindowState] = {}

    @property
    def max_requests(self) -> int:
        return self._max_requests

    @property
    def window_ms(self) -> int:
        return self._window_ms

    def __len__(self) -> int:
        with self._lock:
            return len(self._state_by_identifier)

    def _now_ms(self) -> int:
        return round(self._clock() * 1000)

    def _blocked(self, *, now: int, reset_at: int) -> RateLimitResult:
        return RateLimitResult(
            allowed=False,
            limit=self._max_requests,
            remaining=0,
            reset_at=reset_at,
            retry_after_seconds=max(0, math.ceil((reset_at - now) / 1000)),
        )

    def check(self, identifier: str) -> RateLimitResult:
        now = self._now_ms()

        with self._lock:
            state = self._state_by_identifier.get(identifier)
            if state is not None and now > state.reset_at:
                del self._state_by_identifier[identifier]
                state = None

            if state is None:
                state = _WindowState(count=1, reset_at=now + self._window_ms)
                self._state_by_identifier[identifier] = state
                return RateLimitResult(
                    allowed=True,
                    limit=self._max_requests,
                    remaining=self._max_requests - 1,
                    reset_at=state.reset_at,
                )

            if state.count >= self._max_requests:
                return self._blocked(now=now, reset_at=state.reset_at)

            state.count += 1
            return RateLimitResult(
                allowed=True,
                limit=self._max_requests,
                remaining=self._max_requests - state.count,
                reset_at=state.reset_at,
            )

    def cleanup(self) -> int:
        now = self._now_ms()
        with self._lock:
            expired = [k for k, s in self._state_by_identifier.items() if now > s.reset_at]
            for identifier in expired:
                del self._state_by_identifier[identifier]
        return len(expired)
