"""
Provider-agnostic authentication result models.

These are the structures a strategy hands back to the host application.
They know nothing about Twitch; the strategy maps provider data into them.
"""

from typing import Any

from pydantic import BaseModel, Field


class AuthError(BaseModel):
    """A single failure reported by a strategy during the callback phase."""

    message_key: str = Field(description="Machine-readable error kind")
    message: str | None = Field(default=None, description="Human-readable detail")


class Credentials(BaseModel):
    """Access credentials obtained from the provider."""

    token: str | None = Field(default=None, description="Access token")
    refresh_token: str | None = Field(default=None, description="Refresh token")
    token_type: str | None = Field(default=None, description="Token type")
    expires: bool = Field(default=False, description="Whether the token expires")
    expires_at: int | None = Field(
        default=None, description="Token expiration timestamp (Unix epoch)"
    )
    scopes: list[str] = Field(default_factory=list, description="Granted scopes")


class Info(BaseModel):
    """Normalized user profile fields."""

    name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    nickname: str | None = None
    email: str | None = None
    location: str | None = None
    description: str | None = None
    image: str | None = None
    phone: str | None = None
    urls: dict[str, str | None] = Field(default_factory=dict)


class Extra(BaseModel):
    """Raw provider data kept alongside the normalized fields."""

    raw_info: dict[str, Any] = Field(default_factory=dict)


class Auth(BaseModel):
    """
    Complete result of a successful authentication.

    Assembled by the auth service from the strategy's accessors.
    """

    provider: str = Field(description="Provider name (e.g. twitchtv)")
    strategy: str = Field(description="Strategy class that produced the result")
    uid: str | None = Field(description="Stable per-user identifier")
    info: Info
    credentials: Credentials
    extra: Extra
