"""
Port definitions (interfaces) for authentication strategies.

A strategy is driven from outside in a fixed order: request phase,
then on the redirect back the callback phase, the accessors (only after a
successful callback), and finally cleanup.
"""

from collections.abc import Mapping
from typing import Any, Protocol

from starlette.requests import Request
from starlette.responses import Response

from twitch_auth.core.domain import AuthError, Credentials, Extra, Info


class CallbackState(Protocol):
    """Request-scoped result of a callback phase."""

    errors: list[AuthError]

    @property
    def succeeded(self) -> bool: ...


class AuthStrategy(Protocol):
    """
    Port (interface) for a provider-specific authentication strategy.

    Implemented by e.g. TwitchStrategy. The host works with the returned
    CallbackState and never looks inside it.
    """

    name: str

    def handle_request(
        self, request: Request, options: Mapping[str, Any] | None = None
    ) -> Response:
        """Redirect the user to the identity provider."""
        ...

    def handle_callback(
        self, request: Request, options: Mapping[str, Any] | None = None
    ) -> CallbackState:
        """Handle the provider redirect and return the request-scoped state."""
        ...

    def handle_cleanup(self, context: Any) -> Any:
        """Discard the request-scoped state."""
        ...

    def uid(self, context: Any) -> str | None: ...

    def credentials(self, context: Any) -> Credentials | None: ...

    def info(self, context: Any) -> Info | None: ...

    def extra(self, context: Any) -> Extra | None: ...
