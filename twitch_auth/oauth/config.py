"""
Twitch OAuth2 configuration.

Loaded once from environment variables at startup and passed explicitly
to the OAuth client and the strategy. Nothing reads the environment after
the config value has been built.
"""

import os
import logging
from dataclasses import dataclass
from functools import lru_cache


logger = logging.getLogger(__name__)

DEFAULT_SCOPE = "user:read:email"
DEFAULT_UID_FIELD = "login"
DEFAULT_CALLBACK_PATH = "/auth/twitchtv/callback"


@dataclass(frozen=True)
class TwitchConfig:
    """
    Twitch strategy settings.

    client_id and client_secret are required for real calls. base_url is
    used to build the callback URL; when empty the callback URL is derived
    from the incoming request instead.
    """

    client_id: str | None
    client_secret: str | None
    default_scope: str = DEFAULT_SCOPE
    uid_field: str = DEFAULT_UID_FIELD
    base_url: str = ""
    callback_path: str = DEFAULT_CALLBACK_PATH

    @classmethod
    def from_env(cls) -> "TwitchConfig":
        """Load configuration from environment variables."""
        return cls(
            client_id=os.getenv("TWITCH_CLIENT_ID"),
            client_secret=os.getenv("TWITCH_CLIENT_SECRET"),
            default_scope=os.getenv("TWITCH_DEFAULT_SCOPE") or DEFAULT_SCOPE,
            uid_field=os.getenv("TWITCH_UID_FIELD") or DEFAULT_UID_FIELD,
            base_url=os.getenv("BASE_URL", "").rstrip("/"),
        )

    @property
    def callback_url(self) -> str | None:
        """Absolute callback URL, or None when no base_url is configured."""
        if not self.base_url:
            return None
        return f"{self.base_url}{self.callback_path}"

    def is_configured(self) -> bool:
        """Check that both client credentials are present."""
        return bool(self.client_id and self.client_secret)


@lru_cache()
def get_twitch_config() -> TwitchConfig:
    """Get Twitch configuration singleton."""
    config = TwitchConfig.from_env()
    if not config.is_configured():
        logger.warning("Twitch OAuth not configured (missing credentials)")
    return config
