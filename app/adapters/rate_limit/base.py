"""Rate limiter interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a single rate limit check.

    Attributes:
        allowed: Whether the request may proceed.
        limit: Max requests per window.
        remaining: Requests left in the current window (0 when blocked).
        reset_at: Epoch milliseconds at which the current window ends.
        retry_after_seconds: Whole seconds until reset_at when blocked, else None.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: int
    retry_after_seconds: int | None = None


class AbstractRateLimiter(ABC):
    """Interface for per-identifier rate limiters."""

    @abstractmethod
    def check(self, identifier: str) -> RateLimitResult:
        """Count one request for identifier and decide whether it is allowed.

        Args:
            identifier: Client identifier (typically an IP address).

        Returns:
            RateLimitResult describing the decision.
        """
        raise NotImplementedError

    @abstractmethod
    def cleanup(self) -> int:
        """Drop state for identifiers whose window has ended; return the count."""
        raise NotImplementedError
