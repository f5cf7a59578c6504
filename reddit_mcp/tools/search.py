"""
Search Posts MCP Tool.

Implements the search_posts tool for searching Reddit posts by query with
optional subreddit restriction, time window, sorting and result limiting.
"""

import time
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from reddit_mcp.reddit import RedditError, get_reddit_client
from reddit_mcp.server import build_response, mcp, tool_error
from reddit_mcp.tools.posts import NAME_PATTERN
from reddit_mcp.utils.logger import get_logger, log_tool_execution

logger = get_logger(__name__)


class SearchPostsInput(BaseModel):
    """
    Input schema for search_posts tool.

    Validates and sanitizes search parameters before they reach Reddit.
    """

    query: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Search query",
    )

    subreddit: Optional[str] = Field(
        None,
        pattern=NAME_PATTERN,
        description="Optional: restrict search to specific subreddit",
    )

    sort: Literal["relevance", "hot", "top", "new", "comments"] = Field(
        "relevance",
        description="Sort order for search results",
    )

    time_filter: Optional[Literal["hour", "day", "week", "month", "year", "all"]] = Field(
        None,
        description="Optional: time window for results",
    )

    limit: int = Field(
        25,
        ge=1,
        le=100,
        description="Number of results to retrieve (1-100)",
    )

    @field_validator("query")
    @classmethod
    def sanitize_query(cls, v: str) -> str:
        """
        Strip null bytes and surrounding whitespace.

        Raises:
            ValueError: If query is empty after sanitization
        """
        sanitized = v.replace("\x00", "").strip()

        if not sanitized:
            raise ValueError("Query cannot be empty")

        return sanitized


@mcp.tool()
async def search_posts(params: SearchPostsInput) -> Dict[str, Any]:
    """
    Search for Reddit posts.

    Args:
        params: Validated search parameters (SearchPostsInput)

    Returns:
        Dictionary containing:
            - data: query, optional subreddit and the list of posts
            - metadata: execution time and result count

    Example:
        >>> result = await search_posts(SearchPostsInput(
        ...     query="asyncio", subreddit="python", sort="top", time_filter="year"
        ... ))
        >>> result["data"]["posts"][0]["permalink"]
        'https://reddit.com/r/Python/comments/...'
    """
    start_time = time.time()

    logger.info(
        "search_posts_started",
        query=params.query,
        subreddit=params.subreddit,
        sort=params.sort,
        time_filter=params.time_filter,
        limit=params.limit,
    )

    try:
        reddit = get_reddit_client()
        posts = await reddit.search_posts(
            params.query,
            subreddit=params.subreddit,
            sort=params.sort,
            time_filter=params.time_filter,
            limit=params.limit,
        )
    except RedditError as e:
        log_tool_execution(
            "search_posts", (time.time() - start_time) * 1000, error=str(e)
        )
        raise tool_error(e) from e

    response = build_response(
        {
            "query": params.query,
            "subreddit": params.subreddit,
            "posts": [post.to_dict() for post in posts],
        },
        len(posts),
        start_time,
    )
    log_tool_execution(
        "search_posts",
        response["metadata"]["execution_time_ms"],
        result_count=len(posts),
    )
    return response
