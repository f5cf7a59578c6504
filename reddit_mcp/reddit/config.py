"""
Reddit credentials and client configuration.

Loads the OAuth2 application credentials and the optional user
credentials from environment variables and validates them eagerly, so a
misconfigured server fails at startup instead of on its first tool call.
"""

import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, model_validator

from .exceptions import ConfigurationError

DEFAULT_USER_AGENT = "reddit-mcp-server/1.0.0"

# Lifetime Reddit gives its bearer tokens; used for a pre-supplied token
# whose real expiry we cannot know.
DEFAULT_ACCESS_TOKEN_LIFETIME = 3600

GrantType = Literal["refresh_token", "password", "client_credentials"]

_ENV_VARS = {
    "client_id": "REDDIT_CLIENT_ID",
    "client_secret": "REDDIT_CLIENT_SECRET",
    "user_agent": "REDDIT_USER_AGENT",
    "username": "REDDIT_USERNAME",
    "password": "REDDIT_PASSWORD",
    "refresh_token": "REDDIT_REFRESH_TOKEN",
    "access_token": "REDDIT_ACCESS_TOKEN",
    "access_token_expires_in": "REDDIT_ACCESS_TOKEN_EXPIRES_IN",
    "timeout_seconds": "REDDIT_TIMEOUT",
}


class RedditConfig(BaseModel):
    """
    Configuration for the Reddit access layer.

    client_id, client_secret and user_agent are always required. Any
    combination of access_token, refresh_token and username/password may
    be supplied; which one is used is decided by the session manager.

    Example:
        >>> config = RedditConfig(
        ...     client_id="abc", client_secret="xyz", user_agent="bot/1.0"
        ... )
        >>> config.grant_type
        'client_credentials'
    """

    client_id: str = ""
    client_secret: str = ""
    user_agent: str = DEFAULT_USER_AGENT
    username: Optional[str] = None
    password: Optional[str] = None
    refresh_token: Optional[str] = None
    access_token: Optional[str] = None
    access_token_expires_in: int = Field(DEFAULT_ACCESS_TOKEN_LIFETIME, gt=0)
    timeout_seconds: float = Field(30.0, gt=0)

    @model_validator(mode="after")
    def check_required(self) -> "RedditConfig":
        """Reject empty application credentials."""
        for field in ("client_id", "client_secret", "user_agent"):
            value = getattr(self, field)
            if not value or not value.strip():
                raise ConfigurationError(
                    f"{_ENV_VARS[field]} is required", field=field
                )
        return self

    @property
    def grant_type(self) -> GrantType:
        """OAuth2 grant used when a new token has to be fetched."""
        if self.refresh_token:
            return "refresh_token"
        if self.username and self.password:
            return "password"
        return "client_credentials"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RedditConfig":
        """
        Build configuration from environment variables.

        Empty optional variables count as unset.

        Args:
            environ: Mapping to read from (default: os.environ)

        Returns:
            Validated RedditConfig

        Raises:
            ConfigurationError: If a required credential is missing or empty,
                or a numeric setting is out of range
        """
        env = os.environ if environ is None else environ

        def read(field: str) -> Optional[str]:
            value = env.get(_ENV_VARS[field])
            return value if value else None

        values = {
            "client_id": read("client_id") or "",
            "client_secret": read("client_secret") or "",
            "user_agent": read("user_agent") or DEFAULT_USER_AGENT,
            "username": read("username"),
            "password": read("password"),
            "refresh_token": read("refresh_token"),
            "access_token": read("access_token"),
        }

        for field in ("access_token_expires_in", "timeout_seconds"):
            raw = read(field)
            if raw is None:
                continue
            try:
                values[field] = float(raw) if field == "timeout_seconds" else int(raw)
            except ValueError as e:
                raise ConfigurationError(
                    f"{_ENV_VARS[field]} must be a number, got {raw!r}",
                    field=field,
                ) from e

        try:
            return cls(**values)
        except ValidationError as e:
            error = e.errors()[0]
            field = str(error["loc"][0]) if error["loc"] else None
            raise ConfigurationError(
                f"{_ENV_VARS.get(field, field)}: {error['msg']}", field=field
            ) from e
