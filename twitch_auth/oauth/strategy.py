"""
Twitch authentication strategy.

Implements the three phases a host auth layer drives:

- request: redirect the browser to Twitch's authorize page
- callback: exchange the code, fetch the user, return a CallbackContext
- cleanup: empty the CallbackContext

and the accessors (uid, credentials, info, extra) that turn a successful
CallbackContext into provider-agnostic structures.

To customize the requested scopes, pass them on the request URL:

    /auth/twitchtv?scope=user:read:email+channel:read:subscriptions

A `state` param is handed to Twitch and returned on the callback.
"""

import logging
from collections.abc import Mapping
from typing import Any

import httpx
from authlib.integrations.httpx_client import OAuthError
from fastapi import Request, status
from fastapi.responses import RedirectResponse

from twitch_auth.core.domain import Credentials, Extra, Info
from twitch_auth.core.exceptions import TokenExchangeError
from twitch_auth.oauth.client import TwitchOAuthClient
from twitch_auth.oauth.config import TwitchConfig
from twitch_auth.oauth.models import CallbackContext, TwitchUser


logger = logging.getLogger(__name__)

USER_URL = "https://api.twitch.tv/helix/users"


class TwitchStrategy:
    """Authentication strategy for Twitch."""

    name = "twitchtv"

    def __init__(self, config: TwitchConfig, oauth_client: TwitchOAuthClient | None = None):
        self.config = config
        self.oauth_client = oauth_client or TwitchOAuthClient(config)

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def handle_request(
        self, request: Request, options: Mapping[str, Any] | None = None
    ) -> RedirectResponse:
        """
        Redirect to the Twitch authorization page.

        Uses the `scope` query param, falling back to the configured
        default scope, and passes `state` through when present.
        """
        params = {
            "scope": request.query_params.get("scope") or self.config.default_scope,
            "state": request.query_params.get("state"),
        }
        url = self.oauth_client.authorize_url(
            params, **self._client_overrides(request, options)
        )

        logger.info(
            "Redirecting to Twitch authorization page",
            extra={"provider": self.name, "scope": params["scope"]},
        )
        return RedirectResponse(url=url, status_code=status.HTTP_302_FOUND)

    def handle_callback(
        self, request: Request, options: Mapping[str, Any] | None = None
    ) -> CallbackContext:
        """
        Handle the redirect back from Twitch.

        Returns a CallbackContext holding the token and user on success, or
        the errors that ended the attempt. Nothing is retried.
        """
        context = CallbackContext()

        code = request.query_params.get("code")
        if not code:
            logger.warning("Callback received without code", extra={"provider": self.name})
            return context.fail("missing_code", "No code received")

        overrides = self._client_overrides(request, options)
        try:
            token = self.oauth_client.get_access_token({"code": code}, **overrides)
        except TokenExchangeError as e:
            logger.warning(
                f"Token exchange failed: {e}",
                extra={"provider": self.name, "error": e.error},
            )
            return context.fail(e.error, e.description)

        context.token = token
        return self._fetch_user(context, overrides)

    def handle_cleanup(self, context: CallbackContext) -> CallbackContext:
        """Drop the token and user kept during the callback."""
        return context.clear()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def uid(self, context: CallbackContext) -> str | None:
        """
        Value of the configured uid field (default `login`) on the user.
        """
        if context.user is None:
            return None
        value = context.user.get_field(self.config.uid_field)
        return None if value is None else str(value)

    def credentials(self, context: CallbackContext) -> Credentials | None:
        token = context.token
        if token is None:
            return None
        return Credentials(
            token=token.access_token,
            refresh_token=token.refresh_token,
            token_type=token.token_type,
            expires=token.expires_at is not None,
            expires_at=token.expires_at,
            scopes=list(token.scope),
        )

    def info(self, context: CallbackContext) -> Info | None:
        user = context.user
        if user is None:
            return None
        return Info(
            name=user.display_name,
            image=user.profile_image_url,
            email=user.email,
            description=user.description,
            urls={"self": user.profile_url},
        )

    def extra(self, context: CallbackContext) -> Extra | None:
        """Raw token and user as received, plus the partner flag."""
        if context.token is None or context.user is None:
            return None
        return Extra(
            raw_info={
                "token": context.token.model_dump(),
                "user": context.user.raw,
                "is_partnered": context.user.is_partnered,
            }
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def callback_url(self, request: Request) -> str:
        """Configured callback URL, or one derived from the request."""
        if self.config.callback_url:
            return self.config.callback_url
        return f"{str(request.base_url).rstrip('/')}{self.config.callback_path}"

    def _client_overrides(
        self, request: Request, options: Mapping[str, Any] | None
    ) -> dict[str, Any]:
        overrides: dict[str, Any] = {"redirect_uri": self.callback_url(request)}
        options = options or {}
        client_id = options.get("client_id")
        client_secret = options.get("client_secret")
        if client_id and client_secret:
            overrides["client_id"] = client_id
            overrides["client_secret"] = client_secret
        return overrides

    def _fetch_user(
        self, context: CallbackContext, overrides: dict[str, Any]
    ) -> CallbackContext:
        client_overrides = {
            key: value for key, value in overrides.items() if key != "redirect_uri"
        }
        try:
            response = self.oauth_client.get(
                context.token, USER_URL, overrides=client_overrides
            )
        except (httpx.RequestError, OAuthError) as e:
            logger.warning(
                f"Error fetching Twitch user: {e}",
                extra={"provider": self.name},
            )
            return context.fail("OAuth2", str(e) or type(e).__name__)

        if response.status_code == status.HTTP_401_UNAUTHORIZED:
            logger.warning("Twitch rejected the access token", extra={"provider": self.name})
            return context.fail("token", "unauthorized")

        user = None
        if 200 <= response.status_code < 400:
            user = self._parse_user(response)

        if user is None:
            logger.warning(
                f"Unexpected response from Twitch users endpoint: HTTP {response.status_code}",
                extra={"provider": self.name},
            )
            return context.fail(
                "unexpected_response",
                f"Unexpected response from Twitch users endpoint (HTTP {response.status_code})",
            )

        context.user = user
        logger.info("Fetched Twitch user", extra={"provider": self.name, "user_id": user.id})
        return context

    @staticmethod
    def _parse_user(response: httpx.Response) -> TwitchUser | None:
        """First record of the `data` array, None for any other shape."""
        try:
            body = response.json()
        except ValueError:
            return None
        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, list) or not data or not isinstance(data[0], dict):
            return None
        try:
            return TwitchUser.from_payload(data[0])
        except ValueError:
            return None
