"""
FastAPI dependencies for the Twitch auth endpoints.

Provides dependency injection for the strategy and auth service.
"""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from twitch_auth.core.auth_service import AuthService
from twitch_auth.oauth.config import TwitchConfig, get_twitch_config
from twitch_auth.oauth.strategy import TwitchStrategy


logger = logging.getLogger(__name__)


def get_strategy(
    config: Annotated[TwitchConfig, Depends(get_twitch_config)],
) -> TwitchStrategy:
    """
    Provide the Twitch strategy.

    Raises:
        HTTPException: 503 if Twitch credentials are not configured
    """
    if not config.is_configured():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Provider 'twitchtv' is not configured",
        )
    return TwitchStrategy(config)


def get_auth_service(
    strategy: Annotated[TwitchStrategy, Depends(get_strategy)],
) -> AuthService:
    """Provide AuthService dependency."""
    return AuthService(strategy)


def get_current_user(request: Request) -> dict:
    """
    Return the signed-in user stored in the session.

    Raises:
        HTTPException: 401 if not authenticated
    """
    user = request.session.get("user")
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user


# Type aliases for cleaner dependency injection
Service = Annotated[AuthService, Depends(get_auth_service)]
CurrentUser = Annotated[dict, Depends(get_current_user)]
