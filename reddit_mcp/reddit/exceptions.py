"""
Custom exceptions for Reddit API integration.

This module defines the hierarchy of errors raised by the Reddit access
layer. Every error propagates unchanged from the core up to the MCP tool
that triggered it; only the tool layer translates them into protocol
errors (see reddit_mcp.server.tool_error).
"""

from typing import Optional


class RedditError(Exception):
    """
    Base exception for all Reddit access layer errors.

    Attributes:
        message: Human-readable description
        status_code: HTTP status code when the error came from a response
        reason: HTTP reason phrase (or OAuth error code) from the response
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> None:
        """
        Initialize RedditError.

        Args:
            message: Error description
            status_code: Optional HTTP status code from Reddit
            reason: Optional reason phrase from Reddit
        """
        self.message = message
        self.status_code = status_code
        self.reason = reason
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return the message, followed by status and reason when known."""
        if self.status_code is None:
            return self.message
        if self.reason:
            return f"{self.message} ({self.status_code} {self.reason})"
        return f"{self.message} ({self.status_code})"


class ConfigurationError(RedditError):
    """
    Raised when required credentials are missing or empty.

    Detected eagerly when the configuration is built, before any network
    activity.

    Example:
        >>> raise ConfigurationError("REDDIT_CLIENT_ID is required", field="client_id")
    """

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        self.field = field
        super().__init__(message)


class AuthenticationError(RedditError):
    """
    Raised when the OAuth2 token exchange is rejected by Reddit.

    This occurs when:
    - client_id or client_secret are wrong (401)
    - the refresh token was revoked
    - username/password are wrong (Reddit answers 200 with an
      ``invalid_grant`` error body in that case)

    Example:
        >>> raise AuthenticationError(status_code=401, reason="Unauthorized")
    """

    def __init__(
        self,
        message: str = "Reddit authentication failed",
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> None:
        super().__init__(message, status_code=status_code, reason=reason)


class RemoteAPIError(RedditError):
    """
    Raised when a Reddit API call returns a non-2xx response.

    The response body is never parsed in that case. Use
    ``RemoteAPIError.from_status`` to get the most specific subclass.

    Example:
        >>> raise RemoteAPIError(status_code=502, reason="Bad Gateway")
    """

    def __init__(
        self,
        message: str = "Reddit API error",
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> None:
        super().__init__(message, status_code=status_code, reason=reason)

    @classmethod
    def from_status(
        cls,
        status_code: int,
        reason: Optional[str] = None,
        retry_after: Optional[float] = None,
    ) -> "RemoteAPIError":
        """
        Build the error matching an HTTP status.

        Args:
            status_code: HTTP status code of the failed response
            reason: HTTP reason phrase
            retry_after: Value of the Retry-After header, if any

        Returns:
            RemoteAPIError or one of its status-specific subclasses

        Example:
            >>> err = RemoteAPIError.from_status(404, "Not Found")
            >>> isinstance(err, NotFoundError)
            True
        """
        if status_code == 403:
            return PermissionDeniedError(status_code=status_code, reason=reason)
        if status_code == 404:
            return NotFoundError(status_code=status_code, reason=reason)
        if status_code == 429:
            return RateLimitError(
                status_code=status_code, reason=reason, retry_after=retry_after
            )
        if status_code >= 500:
            return ServerError(status_code=status_code, reason=reason)
        return cls(status_code=status_code, reason=reason)


class PermissionDeniedError(RemoteAPIError):
    """
    Raised on 403 responses.

    This occurs when:
    - Subreddit is private and the token lacks access
    - The user account is suspended
    """

    def __init__(
        self,
        message: str = "Access to Reddit resource forbidden",
        status_code: int = 403,
        reason: Optional[str] = None,
    ) -> None:
        super().__init__(message, status_code=status_code, reason=reason)


class NotFoundError(RemoteAPIError):
    """Raised on 404 responses (missing subreddit, post or user)."""

    def __init__(
        self,
        message: str = "Reddit resource not found",
        status_code: int = 404,
        reason: Optional[str] = None,
    ) -> None:
        super().__init__(message, status_code=status_code, reason=reason)


class RateLimitError(RemoteAPIError):
    """
    Raised on 429 responses.

    Nothing in this package waits or retries; ``retry_after`` is reported
    so the caller can decide.

    Attributes:
        retry_after: Seconds Reddit asked us to wait, if it said so
    """

    def __init__(
        self,
        message: str = "Reddit API rate limit exceeded",
        status_code: int = 429,
        reason: Optional[str] = None,
        retry_after: Optional[float] = None,
    ) -> None:
        self.retry_after = retry_after
        super().__init__(message, status_code=status_code, reason=reason)


class ServerError(RemoteAPIError):
    """Raised on 5xx responses."""

    def __init__(
        self,
        message: str = "Reddit API server error",
        status_code: int = 500,
        reason: Optional[str] = None,
    ) -> None:
        super().__init__(message, status_code=status_code, reason=reason)


class MalformedResponseError(RedditError):
    """
    Raised when a Reddit payload does not have the expected shape.

    This is a contract violation by the remote service (or a bug in our
    mapping) and is never masked.

    Example:
        >>> raise MalformedResponseError("Post payload missing 'id'")
    """


class TransportError(RedditError):
    """
    Raised when an HTTP call produced no response at all.

    This covers DNS failures, refused connections and timeouts.
    """
