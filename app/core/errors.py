"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    hint: str
    errors: list[str]
    id: int
    code: int
    name: str
    reset_at: int
    retry_after: int
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    # HTTP status used by the global handler
    status_code = 400

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class AuthenticationAppError(AppError):
    """Raised when the admin token is missing or invalid."""

    status_code = 401


class AuthorizationAppError(AppError):
    """Raised when authentication is misconfigured on the server side."""

    status_code = 403


class NotFoundAppError(AppError):
    """Raised when a requested entity does not exist."""

    status_code = 404


class ConflictAppError(AppError):
    """Raised when a mutation conflicts with current state (duplicates, deleted rows)."""

    status_code = 409


@dataclass
class RateLimitAppError(AppError):
    """Raised when a client exhausted its rate limit window.

    Attributes:
        headers: Throttling headers to attach to the 429 response.
    """

    headers: dict[str, str] = field(default_factory=dict)

    status_code = 429
