"""
Twitch token and user models.

TwitchToken wraps the token authlib returns from the code exchange.
TwitchUser is the typed form of one record from the Helix users endpoint.
CallbackContext holds both for the duration of a single callback.
"""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from twitch_auth.core.domain import AuthError


TWITCH_CHANNEL_URL = "https://www.twitch.tv"


class TwitchToken(BaseModel):
    """
    OAuth2 token issued by Twitch.

    Unknown fields from the token response are kept as extras.
    Twitch returns scope as a list; a space-separated string is also accepted.
    """

    access_token: str = Field(description="OAuth2 access token")
    refresh_token: str | None = Field(
        default=None, description="OAuth2 refresh token for token renewal"
    )
    expires_at: int | None = Field(
        default=None, description="Token expiration timestamp (Unix epoch)"
    )
    token_type: str = Field(default="bearer", description="Token type")
    scope: list[str] = Field(default_factory=list, description="Granted scopes")

    model_config = ConfigDict(extra="allow", frozen=True)

    @field_validator("scope", mode="before")
    @classmethod
    def split_scope(cls, v):
        """Accept a space-separated scope string."""
        if v is None:
            return []
        if isinstance(v, str):
            return v.split()
        return v

    @classmethod
    def from_oauth_response(cls, token_data: dict[str, Any]) -> "TwitchToken":
        """
        Create TwitchToken from authlib token response.

        Args:
            token_data: Raw token dict from authlib

        Returns:
            TwitchToken instance
        """
        other_params = {
            key: value
            for key, value in token_data.items()
            if key not in cls.model_fields
        }
        return cls(
            access_token=token_data["access_token"],
            refresh_token=token_data.get("refresh_token"),
            expires_at=token_data.get("expires_at"),
            token_type=token_data.get("token_type") or "bearer",
            scope=token_data.get("scope"),
            **other_params,
        )

    def to_authlib_token(self) -> dict[str, Any]:
        """
        Convert to dict format expected by authlib for authenticated requests.

        Returns:
            Dict compatible with authlib OAuth client
        """
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_at": self.expires_at,
            "token_type": self.token_type,
            "scope": " ".join(self.scope),
        }

    @property
    def other_params(self) -> dict[str, Any]:
        """Token response fields without a dedicated attribute."""
        return dict(self.model_extra or {})


class TwitchUser(BaseModel):
    """
    Twitch user profile from GET /helix/users.

    Only the fields the strategy reads are typed. Everything else is kept
    as an untyped extra, and field lookups by name go to the record as
    received.
    """

    id: Any = None
    login: str | None = None
    display_name: str | None = None
    broadcaster_type: str | None = None
    description: str | None = None
    profile_image_url: str | None = None
    email: str | None = None

    # Legacy (kraken) fields
    partnered: bool | None = None
    self_link: str | None = Field(default=None, alias="self")

    _raw: dict[str, Any] = PrivateAttr(default_factory=dict)

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "TwitchUser":
        """Build a user from one element of the Helix `data` array."""
        user = cls.model_validate(payload)
        user._raw = payload
        return user

    @property
    def raw(self) -> dict[str, Any]:
        """The record as received from Twitch."""
        return self._raw

    @property
    def is_partnered(self) -> bool:
        """Partner status, from the legacy flag or the broadcaster type."""
        if self.partnered is not None:
            return self.partnered
        return self.broadcaster_type == "partner"

    @property
    def profile_url(self) -> str | None:
        """Link to the user's channel page."""
        if self.self_link:
            return self.self_link
        if self.login:
            return f"{TWITCH_CHANNEL_URL}/{self.login}"
        return None

    def get_field(self, name: str) -> Any:
        """Read a field of the received record by key, None if absent."""
        return self._raw.get(name)


@dataclass
class CallbackContext:
    """
    Request-scoped state of one callback.

    Holds either both the token and the user, or neither. Errors are
    appended by the strategy; cleanup empties everything.
    """

    token: TwitchToken | None = None
    user: TwitchUser | None = None
    errors: list[AuthError] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.token is not None and self.user is not None and not self.errors

    def fail(self, message_key: str, message: str | None) -> "CallbackContext":
        """Record an error and drop any partial result."""
        self.token = None
        self.user = None
        self.errors.append(AuthError(message_key=message_key, message=message))
        return self

    def clear(self) -> "CallbackContext":
        self.token = None
        self.user = None
        self.errors = []
        return self
