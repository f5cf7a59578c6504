"""
Post MCP tools: get_subreddit_posts, get_post and get_post_comments.

Each tool validates its input with a pydantic model, runs one query on the
shared RedditClient and returns the entities wrapped in a ToolResponse.
"""

import re
import time
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from reddit_mcp.reddit import RedditError, get_reddit_client
from reddit_mcp.server import build_response, mcp, tool_error
from reddit_mcp.utils.logger import get_logger, log_tool_execution

logger = get_logger(__name__)

NAME_PATTERN = "^[A-Za-z0-9_-]+$"


def _extract_post_id(post_id_or_url: str) -> str:
    """
    Extract Reddit post ID from various input formats.

    Handles:
    - Plain ID: "abc123"
    - With t3_ prefix: "t3_abc123"
    - Full URL: "https://reddit.com/r/python/comments/abc123/title/"
    - Short URL: "https://redd.it/abc123"

    Args:
        post_id_or_url: Post ID or URL in any supported format

    Returns:
        Clean post ID without prefix

    Raises:
        ValueError: If input format is invalid

    Example:
        >>> _extract_post_id("t3_abc123")
        'abc123'
        >>> _extract_post_id("https://reddit.com/r/python/comments/xyz789/title/")
        'xyz789'
    """
    value = post_id_or_url.strip()

    if value.startswith("t3_"):
        value = value[3:]

    if "reddit.com" in value or "redd.it" in value:
        patterns = [
            r"/comments/([a-z0-9]+)",
            r"redd\.it/([a-z0-9]+)",
        ]

        for pattern in patterns:
            match = re.search(pattern, value)
            if match:
                return match.group(1)

        raise ValueError(f"Could not extract post ID from URL: {post_id_or_url}")

    if not re.match(r"^[a-z0-9]{1,12}$", value):
        raise ValueError(
            f"Invalid post ID format: {post_id_or_url}. "
            "Expected format: 'abc123', 't3_abc123', or full Reddit URL"
        )

    return value


class GetSubredditPostsInput(BaseModel):
    """Input schema for get_subreddit_posts tool."""

    subreddit: str = Field(
        ...,
        min_length=1,
        pattern=NAME_PATTERN,
        description="Name of the subreddit (without r/ prefix)",
    )

    sort: Literal["hot", "new", "top", "rising"] = Field(
        "hot",
        description="Sort order for posts",
    )

    time_filter: Optional[Literal["hour", "day", "week", "month", "year", "all"]] = Field(
        None,
        description="Time window for the top listing",
    )

    limit: int = Field(
        25,
        ge=1,
        le=100,
        description="Number of posts to retrieve (1-100)",
    )


class PostIdInput(BaseModel):
    """Post id, accepting plain ids, t3_ ids and Reddit URLs."""

    post_id: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Reddit post ID (with or without t3_ prefix) or full URL",
    )

    @field_validator("post_id")
    @classmethod
    def clean_post_id(cls, v: str) -> str:
        return _extract_post_id(v)


class GetPostInput(PostIdInput):
    """Input schema for get_post tool."""


class GetPostCommentsInput(PostIdInput):
    """Input schema for get_post_comments tool."""

    sort: Literal["best", "top", "new", "controversial", "old"] = Field(
        "best",
        description="Sort order for comments",
    )


@mcp.tool()
async def get_subreddit_posts(params: GetSubredditPostsInput) -> Dict[str, Any]:
    """
    Get posts from a specific subreddit.

    Args:
        params: Validated parameters (GetSubredditPostsInput)

    Returns:
        Dictionary containing:
            - data: subreddit, sort and the list of posts
            - metadata: execution time and result count
    """
    start_time = time.time()

    logger.info(
        "get_subreddit_posts_started",
        subreddit=params.subreddit,
        sort=params.sort,
        limit=params.limit,
    )

    try:
        reddit = get_reddit_client()
        posts = await reddit.get_subreddit_posts(
            params.subreddit, params.sort, params.limit, params.time_filter
        )
    except RedditError as e:
        log_tool_execution(
            "get_subreddit_posts", (time.time() - start_time) * 1000, error=str(e)
        )
        raise tool_error(e) from e

    response = build_response(
        {
            "subreddit": params.subreddit,
            "sort": params.sort,
            "posts": [post.to_dict() for post in posts],
        },
        len(posts),
        start_time,
    )
    log_tool_execution(
        "get_subreddit_posts",
        response["metadata"]["execution_time_ms"],
        result_count=len(posts),
    )
    return response


@mcp.tool()
async def get_post(params: GetPostInput) -> Dict[str, Any]:
    """
    Get details of a specific Reddit post.

    Args:
        params: Validated parameters (GetPostInput)

    Returns:
        Dictionary containing:
            - data: the post
            - metadata: execution time and result count
    """
    start_time = time.time()

    logger.info("get_post_started", post_id=params.post_id)

    try:
        reddit = get_reddit_client()
        post = await reddit.get_post(params.post_id)
    except RedditError as e:
        log_tool_execution("get_post", (time.time() - start_time) * 1000, error=str(e))
        raise tool_error(e) from e

    response = build_response({"post": post.to_dict()}, 1, start_time)
    log_tool_execution("get_post", response["metadata"]["execution_time_ms"])
    return response


@mcp.tool()
async def get_post_comments(params: GetPostCommentsInput) -> Dict[str, Any]:
    """
    Get comments from a Reddit post.

    The whole loaded thread is returned as one flat list in thread order:
    every comment is directly followed by its replies. "Load more" stubs
    are not expanded.

    Args:
        params: Validated parameters (GetPostCommentsInput)

    Returns:
        Dictionary containing:
            - data: post id, sort and the flat list of comments
            - metadata: execution time and result count
    """
    start_time = time.time()

    logger.info(
        "get_post_comments_started",
        post_id=params.post_id,
        sort=params.sort,
    )

    try:
        reddit = get_reddit_client()
        comments = await reddit.get_post_comments(params.post_id, params.sort)
    except RedditError as e:
        log_tool_execution(
            "get_post_comments", (time.time() - start_time) * 1000, error=str(e)
        )
        raise tool_error(e) from e

    response = build_response(
        {
            "post_id": params.post_id,
            "sort": params.sort,
            "comments": [comment.to_dict() for comment in comments],
        },
        len(comments),
        start_time,
    )
    log_tool_execution(
        "get_post_comments",
        response["metadata"]["execution_time_ms"],
        result_count=len(comments),
    )
    return response
