"""
Subreddit MCP tools: get_subreddit_info and search_subreddits.
"""

import time
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator

from reddit_mcp.reddit import RedditError, get_reddit_client
from reddit_mcp.server import build_response, mcp, tool_error
from reddit_mcp.tools.posts import NAME_PATTERN
from reddit_mcp.utils.logger import get_logger, log_tool_execution

logger = get_logger(__name__)


class GetSubredditInfoInput(BaseModel):
    """Input schema for get_subreddit_info tool."""

    subreddit: str = Field(
        ...,
        min_length=1,
        pattern=NAME_PATTERN,
        description="Name of the subreddit (without r/ prefix)",
    )


class SearchSubredditsInput(BaseModel):
    """Input schema for search_subreddits tool."""

    query: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Search query for subreddit names/descriptions",
    )

    limit: int = Field(
        25,
        ge=1,
        le=100,
        description="Number of results to retrieve (1-100)",
    )

    @field_validator("query")
    @classmethod
    def strip_query(cls, v: str) -> str:
        sanitized = v.replace("\x00", "").strip()
        if not sanitized:
            raise ValueError("Query cannot be empty")
        return sanitized


@mcp.tool()
async def get_subreddit_info(params: GetSubredditInfoInput) -> Dict[str, Any]:
    """
    Get information about a subreddit.

    Returns:
        Dictionary containing:
            - data: the subreddit
            - metadata: execution time and result count
    """
    start_time = time.time()

    logger.info("get_subreddit_info_started", subreddit=params.subreddit)

    try:
        reddit = get_reddit_client()
        subreddit = await reddit.get_subreddit_info(params.subreddit)
    except RedditError as e:
        log_tool_execution(
            "get_subreddit_info", (time.time() - start_time) * 1000, error=str(e)
        )
        raise tool_error(e) from e

    response = build_response({"subreddit": subreddit.to_dict()}, 1, start_time)
    log_tool_execution("get_subreddit_info", response["metadata"]["execution_time_ms"])
    return response


@mcp.tool()
async def search_subreddits(params: SearchSubredditsInput) -> Dict[str, Any]:
    """
    Search for subreddits.

    Returns:
        Dictionary containing:
            - data: query and the matching subreddits
            - metadata: execution time and result count
    """
    start_time = time.time()

    logger.info("search_subreddits_started", query=params.query, limit=params.limit)

    try:
        reddit = get_reddit_client()
        subreddits = await reddit.search_subreddits(params.query, params.limit)
    except RedditError as e:
        log_tool_execution(
            "search_subreddits", (time.time() - start_time) * 1000, error=str(e)
        )
        raise tool_error(e) from e

    response = build_response(
        {
            "query": params.query,
            "subreddits": [subreddit.to_dict() for subreddit in subreddits],
        },
        len(subreddits),
        start_time,
    )
    log_tool_execution(
        "search_subreddits",
        response["metadata"]["execution_time_ms"],
        result_count=len(subreddits),
    )
    return response
