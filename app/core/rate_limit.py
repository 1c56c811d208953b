"""Rate limiting dependency for FastAPI routes.

Strategy:
- Fixed-window limit per client IP, taken from proxy headers.
- Clients without proxy headers all share the ``"unknown"`` bucket.
- Allowed responses carry ``X-RateLimit-Remaining`` / ``X-RateLimit-Reset``
  (unless ``APP_RATE_LIMIT_INCLUDE_HEADERS`` is off);
  rejected ones become HTTP 429 with the window reset time.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Request, Response

from app.adapters.rate_limit import AbstractRateLimiter, RateLimitResult
from app.core.config import settings
from app.core.errors import RateLimitAppError
from app.core.lifecycle import get_rate_limiter
from app.core.logging import hash_identifier

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"


def get_client_ip(request: Request) -> str:
    """Derive the rate limit identifier from proxy headers.

    Uses the first entry of ``X-Forwarded-For``, then ``X-Real-IP``, then
    the ``"unknown"`` sentinel.
    """

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    return UNKNOWN_CLIENT


def _throttle_headers(result: RateLimitResult) -> dict[str, str]:
    if not settings.app.rate_limit_include_headers:
        return {}
    return {
        "Retry-After": str(result.retry_after_seconds or 0),
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(result.reset_at),
    }


async def enforce_rate_limit(
    request: Request,
    response: Response,
    limiter: Annotated[AbstractRateLimiter, Depends(get_rate_limiter)],
) -> RateLimitResult | None:
    """FastAPI dependency counting the request against the client's window.

    Returns:
        The limiter decision, or None when rate limiting is disabled.

    Raises:
        RateLimitAppError: 429 when the client's window is exhausted.
    """

    if not settings.app.rate_limit_enabled:
        return None

    client_ip = get_client_ip(request)
    result = limiter.check(client_ip)

    if result.allowed:
        if settings.app.rate_limit_include_headers:
            response.headers["X-RateLimit-Remaining"] = str(result.remaining)
            response.headers["X-RateLimit-Reset"] = str(result.reset_at)
        logger.debug(
            "rate_limit.allowed",
            extra={"client_hash": hash_identifier(client_ip), "remaining": result.remaining},
        )
        return result

    logger.warning(
        "rate_limit.exceeded",
        extra={
            "client_hash": hash_identifier(client_ip),
            "limit": result.limit,
            "reset_at": result.reset_at,
            "retry_after_s": result.retry_after_seconds,
        },
    )
    raise RateLimitAppError(
        code="rate_limit_exceeded",
        message="Too many requests. Please try again later.",
        details={"reset_at": result.reset_at},
        headers=_throttle_headers(result),
    )
