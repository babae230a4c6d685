"""
Domain exceptions for the authentication flow.

TokenExchangeError is raised by the OAuth client and turned into an
AuthError by the strategy. AuthenticationFailed is raised by the auth
service and caught by the centralized exception handler in main.py.
"""

from twitch_auth.core.domain import AuthError


class TokenExchangeError(Exception):
    """
    Raised when the provider rejects the authorization code exchange.

    Carries the provider's error code and description verbatim.
    """

    def __init__(self, error: str, description: str | None = None):
        super().__init__(f"{error}: {description}" if description else error)
        self.error = error
        self.description = description


class AuthenticationFailed(Exception):
    """
    Raised when the callback phase finished with errors.

    Terminal for the current authentication attempt. Should result in a
    401 response; the host decides how to present it.
    """

    def __init__(self, provider: str, errors: list[AuthError]):
        messages = ", ".join(f"{e.message_key}: {e.message}" for e in errors)
        super().__init__(f"Authentication with {provider} failed ({messages})")
        self.provider = provider
        self.errors = errors
