"""
Tests for the authentication service.
"""

from unittest.mock import MagicMock

import httpx
import pytest
from respx import MockRouter

from twitch_auth.core.auth_service import AuthService
from twitch_auth.core.domain import Auth, AuthError, Credentials, Extra, Info
from twitch_auth.core.exceptions import AuthenticationFailed
from twitch_auth.oauth.client import TOKEN_URL
from twitch_auth.oauth.strategy import USER_URL, TwitchStrategy


@pytest.fixture
def mock_strategy():
    """Strategy double whose callback succeeds."""
    strategy = MagicMock()
    strategy.name = "twitchtv"
    strategy.handle_callback.return_value = MagicMock(succeeded=True, errors=[])
    strategy.uid.return_value = "alice"
    strategy.info.return_value = Info(name="Alice", email="a@x.com")
    strategy.credentials.return_value = Credentials(token="access", expires=True)
    strategy.extra.return_value = Extra(raw_info={"is_partnered": True})
    return strategy


class TestLogin:
    """Tests for AuthService.login."""

    def test_delegates_to_request_phase(self, mock_strategy, make_request):
        """Test login returns the strategy's redirect."""
        request = make_request()
        service = AuthService(mock_strategy)

        response = service.login(request, {"client_id": "id"})

        mock_strategy.handle_request.assert_called_once_with(request, {"client_id": "id"})
        assert response is mock_strategy.handle_request.return_value


class TestAuthenticate:
    """Tests for AuthService.authenticate."""

    def test_success_assembles_auth(self, mock_strategy, make_request):
        """Test a successful callback produces the full Auth result."""
        service = AuthService(mock_strategy)

        auth = service.authenticate(make_request())

        assert isinstance(auth, Auth)
        assert auth.provider == "twitchtv"
        assert auth.uid == "alice"
        assert auth.info.name == "Alice"
        assert auth.credentials.token == "access"
        assert auth.extra.raw_info == {"is_partnered": True}

    def test_success_runs_cleanup(self, mock_strategy, make_request):
        """Test cleanup runs after a successful callback."""
        context = mock_strategy.handle_callback.return_value
        service = AuthService(mock_strategy)

        service.authenticate(make_request())

        mock_strategy.handle_cleanup.assert_called_once_with(context)

    def test_failure_raises(self, mock_strategy, make_request):
        """Test a failed callback raises AuthenticationFailed with its errors."""
        errors = [AuthError(message_key="missing_code", message="No code received")]
        mock_strategy.handle_callback.return_value = MagicMock(succeeded=False, errors=errors)
        service = AuthService(mock_strategy)

        with pytest.raises(AuthenticationFailed) as exc_info:
            service.authenticate(make_request())

        assert exc_info.value.provider == "twitchtv"
        assert exc_info.value.errors == errors
        assert "missing_code: No code received" in str(exc_info.value)
        mock_strategy.uid.assert_not_called()

    def test_failure_runs_cleanup(self, mock_strategy, make_request):
        """Test cleanup runs after a failed callback."""
        mock_strategy.handle_callback.return_value = MagicMock(succeeded=False, errors=[])
        service = AuthService(mock_strategy)

        with pytest.raises(AuthenticationFailed):
            service.authenticate(make_request())

        mock_strategy.handle_cleanup.assert_called_once()

    def test_with_twitch_strategy(
        self, strategy, make_request, token_response, helix_user, respx_mock: MockRouter
    ):
        """Test the full callback against mocked Twitch endpoints."""
        respx_mock.post(TOKEN_URL).mock(return_value=httpx.Response(200, json=token_response))
        respx_mock.get(USER_URL).mock(
            return_value=httpx.Response(200, json={"data": [helix_user]})
        )
        service = AuthService(strategy)

        auth = service.authenticate(
            make_request({"code": "abc"}, path="/auth/twitchtv/callback")
        )

        assert auth.provider == "twitchtv"
        assert auth.strategy == TwitchStrategy.__name__
        assert auth.uid == "alice"
        assert auth.info.name == "Alice"
        assert auth.info.nickname is None
        assert auth.credentials.token == "test-access-token"
        assert auth.credentials.expires is True
        assert auth.extra.raw_info["is_partnered"] is True
