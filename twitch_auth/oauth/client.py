"""
OAuth 2.0 client for Twitch.

Supplies the Twitch endpoints and client credentials to authlib's httpx
OAuth2Client. Every call builds a fresh client from:
fixed defaults -> caller overrides -> configured credentials.
"""

import logging
from typing import Any

import httpx
from authlib.integrations.httpx_client import OAuth2Client, OAuthError
from authlib.oauth2.rfc6749.parameters import prepare_grant_uri

from twitch_auth.core.exceptions import TokenExchangeError
from twitch_auth.oauth.config import TwitchConfig
from twitch_auth.oauth.models import TwitchToken


logger = logging.getLogger(__name__)

SITE = "https://id.twitch.tv"
AUTHORIZE_URL = "https://id.twitch.tv/oauth2/authorize"
TOKEN_URL = "https://id.twitch.tv/oauth2/token"


class TwitchOAuthClient:
    """Twitch-flavoured wrapper around authlib's OAuth2Client."""

    DEFAULTS: dict[str, Any] = {
        "base_url": SITE,
        "authorization_endpoint": AUTHORIZE_URL,
        "token_endpoint": TOKEN_URL,
        # Twitch wants the secret in the form body, not in a Basic header
        "token_endpoint_auth_method": "client_secret_post",
    }

    def __init__(self, config: TwitchConfig):
        self._config = config

    def client_options(self, overrides: dict[str, Any] | None = None) -> dict[str, Any]:
        """Merge defaults, per-call overrides and configured credentials."""
        options = dict(self.DEFAULTS)
        options.update(overrides or {})
        if self._config.client_id:
            options["client_id"] = self._config.client_id
        if self._config.client_secret:
            options["client_secret"] = self._config.client_secret
        return options

    def client(self, token: dict[str, Any] | None = None, **overrides) -> OAuth2Client:
        """
        Construct an authlib client for requests to Twitch.

        Args:
            token: Optional authlib token dict for authenticated requests
            **overrides: Client options (redirect_uri, client_id, ...)

        Returns:
            Configured OAuth2Client (caller closes it)
        """
        return OAuth2Client(token=token, **self.client_options(overrides))

    def authorize_url(self, params: dict[str, Any] | None = None, **overrides) -> str:
        """
        Build the URL the browser is redirected to in the request phase.

        Args:
            params: Authorization params (scope, state, ...); None values skipped.
                A state is only sent when the caller supplies one.
            **overrides: Client options, usually redirect_uri

        Returns:
            Fully-formed authorize URL
        """
        options = self.client_options(overrides)
        params = {key: value for key, value in (params or {}).items() if value is not None}
        return prepare_grant_uri(
            AUTHORIZE_URL,
            client_id=options.get("client_id"),
            response_type="code",
            redirect_uri=options.get("redirect_uri"),
            **params,
        )

    def get_access_token(self, params: dict[str, Any], **overrides) -> TwitchToken:
        """
        Exchange an authorization code for an access token.

        Twitch reports errors either as an OAuth error body or as a token
        response without an access token; both raise TokenExchangeError.

        Args:
            params: Token request params, usually {"code": ...}
            **overrides: Client options, usually redirect_uri

        Returns:
            The issued TwitchToken

        Raises:
            TokenExchangeError: If Twitch rejects the exchange or is unreachable
        """
        try:
            with self.client(**overrides) as client:
                token = client.fetch_token(TOKEN_URL, **params)
        except OAuthError as e:
            raise TokenExchangeError(e.error, e.description) from e
        except httpx.HTTPError as e:
            raise TokenExchangeError("OAuth2", str(e)) from e
        except ValueError as e:
            raise TokenExchangeError("OAuth2", f"Invalid token response: {e}") from e

        if not token.get("access_token"):
            raise TokenExchangeError(
                token.get("error") or "token_error",
                token.get("error_description")
                or token.get("message")
                or "No access token received",
            )

        return TwitchToken.from_oauth_response(token)

    def get(
        self,
        token: TwitchToken,
        url: str,
        headers: dict[str, str] | None = None,
        overrides: dict[str, Any] | None = None,
        **options,
    ) -> httpx.Response:
        """
        Authenticated GET against the Twitch API.

        Sends the token as a Bearer Authorization header. Twitch also wants
        the client secret as a request parameter and the client id as a
        Client-Id header. The response is returned as-is.

        Raises:
            httpx.RequestError: On network failures
            OAuthError: If the token has expired and cannot be refreshed
        """
        client_options = self.client_options(overrides)
        headers = dict(headers or {})
        params = dict(options.pop("params", None) or {})

        if client_options.get("client_id"):
            headers.setdefault("Client-Id", client_options["client_id"])
        if client_options.get("client_secret"):
            params["client_secret"] = client_options["client_secret"]

        with OAuth2Client(token=token.to_authlib_token(), **client_options) as client:
            return client.get(url, headers=headers, params=params, **options)
