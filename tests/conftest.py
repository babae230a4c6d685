"""
Shared test configuration and fixtures.
"""

import os
from unittest.mock import patch
from urllib.parse import urlencode

import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

# Set environment variables before importing app
with patch.dict(
    os.environ,
    {
        "SESSION_SECRET_KEY": "test-secret",
        "BASE_URL": "http://testserver",
        "TWITCH_CLIENT_ID": "test-client-id",
        "TWITCH_CLIENT_SECRET": "test-client-secret",
    },
):
    from twitch_auth.main import app

from twitch_auth.oauth.client import TwitchOAuthClient
from twitch_auth.oauth.config import TwitchConfig, get_twitch_config
from twitch_auth.oauth.strategy import TwitchStrategy


@pytest.fixture
def twitch_config():
    """Config with test credentials."""
    return TwitchConfig(
        client_id="test-client-id",
        client_secret="test-client-secret",
        base_url="http://testserver",
    )


@pytest.fixture
def oauth_client(twitch_config):
    """Twitch OAuth client using the test config."""
    return TwitchOAuthClient(twitch_config)


@pytest.fixture
def strategy(twitch_config):
    """Twitch strategy using the test config."""
    return TwitchStrategy(twitch_config)


@pytest.fixture
def make_request():
    """Build a Starlette request carrying the given query params."""

    def _make_request(query: dict | None = None, path: str = "/auth/twitchtv") -> Request:
        return Request(
            {
                "type": "http",
                "method": "GET",
                "scheme": "http",
                "server": ("testserver", 80),
                "root_path": "",
                "path": path,
                "query_string": urlencode(query or {}).encode(),
                "headers": [(b"host", b"testserver")],
            }
        )

    return _make_request


@pytest.fixture
def token_response():
    """Successful Twitch token response."""
    return {
        "access_token": "test-access-token",
        "refresh_token": "test-refresh-token",
        "expires_in": 14400,
        "scope": ["user:read:email"],
        "token_type": "bearer",
    }


@pytest.fixture
def helix_user():
    """Single user record from GET /helix/users."""
    return {
        "id": "141981764",
        "login": "alice",
        "display_name": "Alice",
        "type": "",
        "broadcaster_type": "partner",
        "description": "Streams on weekends.",
        "profile_image_url": "https://static-cdn.jtvnw.net/alice-300x300.png",
        "offline_image_url": "https://static-cdn.jtvnw.net/alice-offline.png",
        "view_count": 5980557,
        "email": "a@x.com",
        "created_at": "2016-12-14T20:32:28Z",
    }


@pytest.fixture
def client(twitch_config):
    """Test client with the Twitch config overridden."""
    app.dependency_overrides[get_twitch_config] = lambda: twitch_config

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.pop(get_twitch_config, None)
