"""
OAuth2 session management for the Reddit API.

Owns the bearer token and its expiry, chooses the grant flow and performs
the token exchange against Reddit's token endpoint.

Grant selection order (first match wins):
    1. a cached, still valid token (no network call)
    2. refresh_token, when a refresh token is configured
    3. password, when both username and password are configured
    4. client_credentials (read-only application access)
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

import httpx
import structlog

from .config import RedditConfig
from .exceptions import AuthenticationError, MalformedResponseError, TransportError

logger = structlog.get_logger(__name__)

TOKEN_URL = "https://www.reddit.com/api/v1/access_token"

# Tokens are treated as expired this many seconds before Reddit expires them.
TOKEN_SAFETY_MARGIN_SECONDS = 60


@dataclass
class Session:
    """
    Mutable token state shared by every request of one client.

    ``expires_at`` already has the safety margin subtracted, so a token is
    usable while ``now < expires_at``.
    """

    access_token: Optional[str] = None
    expires_at: float = 0.0
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)

    def is_valid(self, now: float) -> bool:
        return self.access_token is not None and now < self.expires_at

    @classmethod
    def seeded(cls, access_token: str, lifetime_seconds: float, now: float) -> "Session":
        """Session holding a pre-supplied token that lives ``lifetime_seconds``."""
        return cls(
            access_token=access_token,
            expires_at=now + lifetime_seconds - TOKEN_SAFETY_MARGIN_SECONDS,
        )


def build_grant(config: RedditConfig) -> Dict[str, str]:
    """
    Build the form body for the token exchange.

    Args:
        config: Reddit configuration

    Returns:
        Form fields for the highest-priority grant the configuration allows

    Example:
        >>> build_grant(RedditConfig(client_id="a", client_secret="b"))
        {'grant_type': 'client_credentials'}
    """
    if config.refresh_token:
        return {
            "grant_type": "refresh_token",
            "refresh_token": config.refresh_token,
        }
    if config.username and config.password:
        return {
            "grant_type": "password",
            "username": config.username,
            "password": config.password,
        }
    return {"grant_type": "client_credentials"}


class SessionManager:
    """
    Keeps a valid bearer token in a Session.

    Concurrent callers share the session lock: the first one to find the
    token expired performs the exchange, the others wait and reuse it.

    Example:
        >>> manager = SessionManager(config, Session(), http_client)
        >>> token = await manager.ensure_valid_token()
    """

    def __init__(
        self,
        config: RedditConfig,
        session: Session,
        http_client: httpx.AsyncClient,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config
        self.session = session
        self.http_client = http_client
        self.clock = clock

    async def ensure_valid_token(self) -> str:
        """
        Return a usable bearer token, refreshing it if necessary.

        Returns:
            Access token valid for at least the safety margin

        Raises:
            AuthenticationError: If Reddit rejects the token exchange
            TransportError: If the token endpoint cannot be reached
        """
        if self.session.is_valid(self.clock()):
            return self.session.access_token

        async with self.session.lock:
            # Another request may have refreshed while we waited.
            if self.session.is_valid(self.clock()):
                return self.session.access_token
            return await self._exchange()

    async def refresh(self) -> str:
        """Fetch a new token regardless of the cached one."""
        async with self.session.lock:
            return await self._exchange()

    def invalidate(self) -> None:
        """Forget the cached token; the next request fetches a new one."""
        self.session.access_token = None
        self.session.expires_at = 0.0

    async def _exchange(self) -> str:
        grant = build_grant(self.config)
        grant_type = grant["grant_type"]

        logger.debug("token_exchange_started", grant_type=grant_type)

        requested_at = self.clock()
        try:
            response = await self.http_client.post(
                TOKEN_URL,
                auth=(self.config.client_id, self.config.client_secret),
                data=grant,
                headers={"User-Agent": self.config.user_agent},
            )
        except httpx.TransportError as e:
            raise TransportError(f"Token endpoint unreachable: {e}") from e

        if not response.is_success:
            logger.warning(
                "token_exchange_rejected",
                grant_type=grant_type,
                status_code=response.status_code,
            )
            raise AuthenticationError(
                f"Authentication failed ({grant_type})",
                status_code=response.status_code,
                reason=response.reason_phrase,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedResponseError("Token response is not JSON") from e

        if not isinstance(payload, dict):
            raise MalformedResponseError("Token response is not a JSON object")

        # Reddit reports bad user credentials as 200 {"error": "invalid_grant"}
        if "error" in payload:
            logger.warning(
                "token_exchange_rejected",
                grant_type=grant_type,
                status_code=response.status_code,
                error=payload["error"],
            )
            raise AuthenticationError(
                f"Authentication failed ({grant_type})",
                status_code=response.status_code,
                reason=str(payload["error"]),
            )

        try:
            access_token = payload["access_token"]
            lifetime = float(payload["expires_in"])
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResponseError(
                f"Token response missing access_token/expires_in: {e}"
            ) from e

        self.session.access_token = access_token
        self.session.expires_at = requested_at + lifetime - TOKEN_SAFETY_MARGIN_SECONDS

        logger.info(
            "token_refreshed",
            grant_type=grant_type,
            expires_in=lifetime,
            scope=payload.get("scope"),
        )
        return access_token
