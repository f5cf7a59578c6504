"""
Reddit API client.

RedditClient exposes one typed query method per supported operation. Each
call runs the same pipeline: make sure the session holds a valid token,
perform the HTTP request, then map the payload into entities.

Each RedditClient owns its own Session, so independent clients never share
tokens. The MCP tools use the process-wide instance returned by
get_reddit_client().
"""

import time
from typing import Any, Callable, Dict, List, Literal, Optional
from urllib.parse import quote

import httpx
import structlog

from reddit_mcp.models.entities import Comment, Post, Subreddit, User

from .comments import flatten
from .config import RedditConfig
from .exceptions import MalformedResponseError
from .executor import RequestExecutor
from .normalizer import (
    to_comments,
    to_post,
    to_posts,
    to_subreddit,
    to_subreddits,
    to_user,
)
from .session import Session, SessionManager

logger = structlog.get_logger(__name__)

SubredditSort = Literal["hot", "new", "top", "rising"]
CommentSort = Literal["best", "top", "new", "controversial", "old"]
UserSort = Literal["hot", "new", "top"]
SearchSort = Literal["relevance", "hot", "top", "new", "comments"]
TimeFilter = Literal["hour", "day", "week", "month", "year", "all"]


def _segment(value: str) -> str:
    return quote(value, safe="")


class RedditClient:
    """
    Authenticated, read-only access to Reddit content.

    Args:
        config: Credentials and client settings
        http_client: Optional httpx client to use (it is then not closed by
            aclose()); one is created with the configured timeout otherwise
        session: Optional pre-built session; by default a fresh one, seeded
            with config.access_token when present
        clock: Time source in epoch seconds

    Example:
        >>> async with RedditClient(RedditConfig.from_env()) as reddit:
        ...     posts = await reddit.get_subreddit_posts("python", "top", 10)
    """

    def __init__(
        self,
        config: RedditConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        session: Optional[Session] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config
        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(
            timeout=config.timeout_seconds
        )

        if session is None:
            if config.access_token:
                session = Session.seeded(
                    config.access_token, config.access_token_expires_in, clock()
                )
            else:
                session = Session()
        self.session = session

        self.session_manager = SessionManager(
            config, self.session, self.http_client, clock=clock
        )
        self.executor = RequestExecutor(config, self.session_manager, self.http_client)

        logger.info(
            "reddit_client_created",
            grant_type=config.grant_type,
            pre_supplied_token=config.access_token is not None,
        )

    async def __aenter__(self) -> "RedditClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client:
            await self.http_client.aclose()

    async def get_subreddit_posts(
        self,
        subreddit: str,
        sort: SubredditSort = "hot",
        limit: int = 25,
        time_filter: Optional[TimeFilter] = None,
    ) -> List[Post]:
        """
        List posts of a subreddit.

        Args:
            subreddit: Subreddit name without the r/ prefix
            sort: Listing to read
            limit: Number of posts (1-100)
            time_filter: Time window, meaningful for "top"

        Returns:
            Posts in listing order
        """
        params: Dict[str, Any] = {"limit": limit}
        if time_filter:
            params["t"] = time_filter
        data = await self.executor.execute(
            f"/r/{_segment(subreddit)}/{sort}", params
        )
        return to_posts(data)

    async def get_post(self, post_id: str) -> Post:
        """
        Fetch a single post by id (without the t3_ prefix).

        Raises:
            MalformedResponseError: If the thread response holds no post
        """
        data = await self.executor.execute(f"/comments/{_segment(post_id)}")
        try:
            raw = data[0]["data"]["children"][0]["data"]
        except (IndexError, KeyError, TypeError) as e:
            raise MalformedResponseError(
                f"Thread response for {post_id} holds no post: {e}"
            ) from e
        return to_post(raw)

    async def get_post_comments(
        self, post_id: str, sort: CommentSort = "best"
    ) -> List[Comment]:
        """
        Fetch every loaded comment of a post as a flat pre-order list.

        Args:
            post_id: Post id without the t3_ prefix
            sort: Thread ordering requested from Reddit

        Returns:
            Comments, each followed by its replies; empty when the thread
            has none
        """
        data = await self.executor.execute(
            f"/comments/{_segment(post_id)}", {"sort": sort}
        )
        if not isinstance(data, list) or len(data) < 2:
            return []

        listing = data[1]
        if not isinstance(listing, dict):
            raise MalformedResponseError("Comment listing is not an object")
        children = (listing.get("data") or {}).get("children") or []
        return flatten(children)

    async def get_subreddit_info(self, subreddit: str) -> Subreddit:
        """Fetch subreddit metadata."""
        data = await self.executor.execute(f"/r/{_segment(subreddit)}/about")
        return to_subreddit(_thing_data(data))

    async def get_user_info(self, username: str) -> User:
        """Fetch account metadata."""
        data = await self.executor.execute(f"/user/{_segment(username)}/about")
        return to_user(_thing_data(data))

    async def get_user_posts(
        self, username: str, sort: UserSort = "new", limit: int = 25
    ) -> List[Post]:
        """List posts submitted by a user."""
        data = await self.executor.execute(
            f"/user/{_segment(username)}/submitted",
            {"sort": sort, "limit": limit},
        )
        return to_posts(data)

    async def get_user_comments(
        self, username: str, sort: UserSort = "new", limit: int = 25
    ) -> List[Comment]:
        """List comments written by a user."""
        data = await self.executor.execute(
            f"/user/{_segment(username)}/comments",
            {"sort": sort, "limit": limit},
        )
        return to_comments(data)

    async def search_posts(
        self,
        query: str,
        subreddit: Optional[str] = None,
        sort: SearchSort = "relevance",
        time_filter: Optional[TimeFilter] = None,
        limit: int = 25,
    ) -> List[Post]:
        """
        Search posts, site-wide or within one subreddit.

        Args:
            query: Search terms
            subreddit: Restrict results to this subreddit when given
            sort: Result ordering
            time_filter: Optional time window
            limit: Number of results (1-100)
        """
        path = f"/r/{_segment(subreddit)}/search" if subreddit else "/search"
        params: Dict[str, Any] = {
            "q": query,
            "sort": sort,
            "limit": limit,
            "type": "link",
        }
        if subreddit:
            params["restrict_sr"] = "true"
        if time_filter:
            params["t"] = time_filter

        data = await self.executor.execute(path, params)
        return to_posts(data)

    async def search_subreddits(self, query: str, limit: int = 25) -> List[Subreddit]:
        """Search subreddits by name and description."""
        data = await self.executor.execute(
            "/subreddits/search", {"q": query, "limit": limit}
        )
        return to_subreddits(data)


def _thing_data(payload: Any) -> Dict[str, Any]:
    try:
        return payload["data"]
    except (KeyError, TypeError) as e:
        raise MalformedResponseError(f"Expected a Reddit thing: {e}") from e


class RedditClientManager:
    """
    Holds the process-wide RedditClient used by the MCP tools.

    The client is built lazily from environment variables on first use.

    Example:
        >>> reddit = reddit_client_manager.get_client()
        >>> posts = await reddit.get_subreddit_posts("python")
    """

    def __init__(self) -> None:
        self._client: Optional[RedditClient] = None

    def get_client(self) -> RedditClient:
        """
        Return the shared client, creating it if needed.

        Raises:
            ConfigurationError: If required credentials are missing
        """
        if self._client is None:
            self._client = RedditClient(RedditConfig.from_env())
        return self._client

    def set_client(self, client: RedditClient) -> None:
        """Install an already-built client (used at startup)."""
        self._client = client

    async def reset_client(self) -> None:
        """Close and drop the shared client; the next call rebuilds it."""
        if self._client is not None:
            logger.info("reddit_client_reset")
            await self._client.aclose()
        self._client = None

    def is_initialized(self) -> bool:
        return self._client is not None


reddit_client_manager = RedditClientManager()


def get_reddit_client() -> RedditClient:
    """Convenience accessor for the shared client."""
    return reddit_client_manager.get_client()
