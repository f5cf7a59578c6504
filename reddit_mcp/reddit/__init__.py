"""
Reddit API integration layer.

This package provides the authenticated, read-only access to Reddit:
- RedditConfig: credentials loaded from the environment
- Session / SessionManager: OAuth2 token cache and grant selection
- RequestExecutor: authenticated requests against oauth.reddit.com
- Response normalization into Post, Comment, Subreddit and User
- Comment tree flattening
- RedditClient: the typed query operations

Example:
    >>> from reddit_mcp.reddit import RedditClient, RedditConfig
    >>> async with RedditClient(RedditConfig.from_env()) as reddit:
    ...     comments = await reddit.get_post_comments("abc123")
"""

from reddit_mcp.reddit.client import (
    CommentSort,
    RedditClient,
    RedditClientManager,
    SearchSort,
    SubredditSort,
    TimeFilter,
    UserSort,
    get_reddit_client,
    reddit_client_manager,
)
from reddit_mcp.reddit.comments import (
    CommentNode,
    PlaceholderNode,
    flatten,
    parse_nodes,
)
from reddit_mcp.reddit.config import RedditConfig
from reddit_mcp.reddit.exceptions import (
    AuthenticationError,
    ConfigurationError,
    MalformedResponseError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
    RedditError,
    RemoteAPIError,
    ServerError,
    TransportError,
)
from reddit_mcp.reddit.executor import RequestExecutor
from reddit_mcp.reddit.normalizer import (
    ResponseNormalizer,
    to_comment,
    to_comments,
    to_post,
    to_posts,
    to_subreddit,
    to_subreddits,
    to_user,
)
from reddit_mcp.reddit.session import Session, SessionManager, build_grant

__all__ = [
    # Client
    "RedditClient",
    "RedditClientManager",
    "reddit_client_manager",
    "get_reddit_client",
    "SubredditSort",
    "CommentSort",
    "UserSort",
    "SearchSort",
    "TimeFilter",
    # Configuration and session
    "RedditConfig",
    "Session",
    "SessionManager",
    "build_grant",
    "RequestExecutor",
    # Exceptions
    "RedditError",
    "ConfigurationError",
    "AuthenticationError",
    "RemoteAPIError",
    "PermissionDeniedError",
    "NotFoundError",
    "RateLimitError",
    "ServerError",
    "MalformedResponseError",
    "TransportError",
    # Normalizers
    "ResponseNormalizer",
    "to_post",
    "to_comment",
    "to_subreddit",
    "to_user",
    "to_posts",
    "to_comments",
    "to_subreddits",
    # Comment trees
    "CommentNode",
    "PlaceholderNode",
    "parse_nodes",
    "flatten",
]
