import logging
from collections.abc import Mapping
from typing import Any

from starlette.requests import Request
from starlette.responses import Response

from twitch_auth.core.domain import Auth, Credentials, Extra, Info
from twitch_auth.core.exceptions import AuthenticationFailed
from twitch_auth.core.ports import AuthStrategy

logger = logging.getLogger(__name__)


class AuthService:
    """
    Service for running an authentication strategy.

    Calls the strategy phases in the order a host auth layer does and
    assembles the final Auth result. Cleanup always runs.
    """

    def __init__(self, strategy: AuthStrategy):
        self.strategy = strategy

    def login(self, request: Request, options: Mapping[str, Any] | None = None) -> Response:
        """Start the flow by redirecting to the provider."""
        return self.strategy.handle_request(request, options)

    def authenticate(
        self, request: Request, options: Mapping[str, Any] | None = None
    ) -> Auth:
        """
        Handle the provider callback.

        Args:
            request: Incoming callback request
            options: Per-request client options (client_id, client_secret)

        Returns:
            The assembled Auth result

        Raises:
            AuthenticationFailed: If the callback phase reported errors
        """
        context = self.strategy.handle_callback(request, options)
        try:
            if not context.succeeded:
                raise AuthenticationFailed(self.strategy.name, list(context.errors))

            auth = Auth(
                provider=self.strategy.name,
                strategy=type(self.strategy).__name__,
                uid=self.strategy.uid(context),
                info=self.strategy.info(context) or Info(),
                credentials=self.strategy.credentials(context) or Credentials(),
                extra=self.strategy.extra(context) or Extra(),
            )
        finally:
            self.strategy.handle_cleanup(context)

        logger.info(
            f"Authenticated user with {auth.provider}",
            extra={"provider": auth.provider, "uid": auth.uid},
        )
        return auth
