"""Admin token authentication.

The API has a single administrator identified by a pre-shared token,
configured through ``APP_ADMIN_TOKEN``. Clients send it either as an
``auth_token`` cookie or as ``Authorization: Bearer <token>``; the cookie
wins when both are present.
"""

from __future__ import annotations

import logging
import secrets
from typing import Annotated

from fastapi import Cookie, Header

from app.core.config import settings
from app.core.errors import AuthenticationAppError, AuthorizationAppError
from app.core.logging import hash_identifier

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_token(auth_cookie: str | None, authorization: str | None) -> str | None:
    """Pick the admin token from the cookie, else from a Bearer header.

    Examples:
        >>> extract_token("abc", "Bearer xyz")
        'abc'
        >>> extract_token(None, "Bearer xyz")
        'xyz'
        >>> extract_token(None, "Basic xyz") is None
        True
    """
    if auth_cookie:
        return auth_cookie
    if authorization and authorization.startswith(BEARER_PREFIX):
        return authorization[len(BEARER_PREFIX):].strip() or None
    return None


def validate_admin_token(provided: str | None) -> None:
    """Check a token against the configured admin token.

    Raises:
        AuthorizationAppError: Authentication is required but no token is configured.
        AuthenticationAppError: The token is missing or does not match.
    """
    if not settings.app.admin_token_required:
        return

    expected = settings.app.admin_token
    if not expected:
        logger.error("auth.misconfigured", extra={"reason": "admin_token_not_configured"})
        raise AuthorizationAppError(
            code="admin_token_not_configured",
            message="Authentication is enabled but no admin token is configured",
            details={"hint": "Set APP_ADMIN_TOKEN or disable auth with APP_ADMIN_TOKEN_REQUIRED=false"},
        )

    if not provided:
        logger.warning("auth.missing_token")
        raise AuthenticationAppError(code="unauthorized", message="Unauthorized")

    if not secrets.compare_digest(provided.encode(), expected.encode()):
        logger.warning("auth.invalid_token", extra={"token_hash": hash_identifier(provided)})
        raise AuthenticationAppError(code="unauthorized", message="Unauthorized")


async def require_admin(
    auth_token: Annotated[str | None, Cookie()] = None,
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """FastAPI dependency guarding admin-only routes.

    Usage:
        router = APIRouter(dependencies=[Depends(require_admin)])
    """
    validate_admin_token(extract_token(auth_token, authorization))
