"""
Authenticated request execution against oauth.reddit.com.

Every call asks the session manager for a valid token first, so no request
ever goes out without authentication. Failures are never retried here.
"""

from typing import Any, Dict, Optional

import httpx
import structlog

from .config import RedditConfig
from .exceptions import MalformedResponseError, RemoteAPIError, TransportError
from .session import SessionManager

logger = structlog.get_logger(__name__)

API_BASE = "https://oauth.reddit.com"


def _retry_after(response: httpx.Response) -> Optional[float]:
    value = response.headers.get("Retry-After")
    try:
        return float(value) if value is not None else None
    except ValueError:
        return None


class RequestExecutor:
    """
    Sends authenticated requests and classifies their responses.

    Example:
        >>> executor = RequestExecutor(config, session_manager, http_client)
        >>> listing = await executor.execute("/r/python/hot", {"limit": 10})
    """

    def __init__(
        self,
        config: RedditConfig,
        session_manager: SessionManager,
        http_client: httpx.AsyncClient,
    ) -> None:
        self.config = config
        self.session_manager = session_manager
        self.http_client = http_client

    async def execute(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        method: str = "GET",
    ) -> Any:
        """
        Perform an authenticated request and return the decoded JSON body.

        Args:
            path: API path starting with "/", e.g. "/r/python/about"
            params: Optional query parameters
            method: HTTP method (default: GET)

        Returns:
            Decoded JSON payload (untyped; mapped by the normalizer)

        Raises:
            AuthenticationError: If a token could not be obtained
            RemoteAPIError: If Reddit answered with a non-2xx status
            MalformedResponseError: If a 2xx body is not valid JSON
            TransportError: If no response was received
        """
        token = await self.session_manager.ensure_valid_token()

        headers = {
            "Authorization": f"Bearer {token}",
            "User-Agent": self.config.user_agent,
            "Content-Type": "application/json",
        }

        try:
            response = await self.http_client.request(
                method,
                f"{API_BASE}{path}",
                params=params,
                headers=headers,
            )
        except httpx.TransportError as e:
            logger.error("reddit_api_unreachable", path=path, error=str(e))
            raise TransportError(f"Reddit API unreachable: {e}") from e

        logger.debug(
            "reddit_api_request",
            method=method,
            path=path,
            status_code=response.status_code,
            rate_limit_remaining=response.headers.get("X-Ratelimit-Remaining"),
        )

        if not response.is_success:
            raise RemoteAPIError.from_status(
                response.status_code,
                response.reason_phrase,
                retry_after=_retry_after(response),
            )

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(
                f"Reddit API returned non-JSON body for {path}"
            ) from e
