"""Unit tests for admin token authentication."""

from unittest.mock import patch

import pytest

from app.core.auth import extract_token, validate_admin_token
from app.core.errors import AuthenticationAppError, AuthorizationAppError


class TestExtractToken:
    def test_cookie_wins_over_header(self) -> None:
        assert extract_token("from-cookie", "Bearer from-header") == "from-cookie"

    def test_bearer_header(self) -> None:
        assert extract_token(None, "Bearer abc") == "abc"

    def test_other_schemes_are_ignored(self) -> None:
        assert extract_token(None, "Basic abc") is None

    def test_empty_bearer_is_missing(self) -> None:
        assert extract_token(None, "Bearer   ") is None

    def test_nothing_provided(self) -> None:
        assert extract_token(None, None) is None


class TestValidateAdminToken:
    @patch("app.core.auth.settings")
    def test_validate_bypassed_when_auth_disabled(self, mock_settings) -> None:
        """Validation is skipped when APP_ADMIN_TOKEN_REQUIRED=false."""
        mock_settings.app.admin_token_required = False

        validate_admin_token(None)
        validate_admin_token("anything")

    @patch("app.core.auth.settings")
    def test_validate_raises_when_no_token_configured(self, mock_settings) -> None:
        mock_settings.app.admin_token_required = True
        mock_settings.app.admin_token = None

        with pytest.raises(AuthorizationAppError) as exc_info:
            validate_admin_token("some-token")

        assert exc_info.value.code == "admin_token_not_configured"
        assert exc_info.value.status_code == 403

    @patch("app.core.auth.settings")
    def test_validate_rejects_missing_token(self, mock_settings) -> None:
        mock_settings.app.admin_token_required = True
        mock_settings.app.admin_token = "secret"

        with pytest.raises(AuthenticationAppError) as exc_info:
            validate_admin_token(None)

        assert exc_info.value.code == "unauthorized"

    @patch("app.core.auth.settings")
    def test_validate_rejects_wrong_token(self, mock_settings) -> None:
        mock_settings.app.admin_token_required = True
        mock_settings.app.admin_token = "secret"

        with pytest.raises(AuthenticationAppError):
            validate_admin_token("not-the-secret")

    @patch("app.core.auth.settings")
    def test_validate_accepts_matching_token(self, mock_settings) -> None:
        mock_settings.app.admin_token_required = True
        mock_settings.app.admin_token = "secret"

        validate_admin_token("secret")
