"""
User MCP tools: get_user_info, get_user_posts and get_user_comments.
"""

import re
import time
from typing import Any, Dict, Literal

from pydantic import BaseModel, Field, field_validator

from reddit_mcp.reddit import RedditError, get_reddit_client
from reddit_mcp.server import build_response, mcp, tool_error
from reddit_mcp.tools.posts import NAME_PATTERN
from reddit_mcp.utils.logger import get_logger, log_tool_execution

logger = get_logger(__name__)


class UsernameInput(BaseModel):
    """Username, with an optional u/ or /u/ prefix stripped."""

    username: str = Field(
        ...,
        min_length=1,
        description="Reddit username (without u/ prefix)",
    )

    @field_validator("username")
    @classmethod
    def clean_username(cls, v: str) -> str:
        value = v.strip()
        for prefix in ("/u/", "u/"):
            if value.startswith(prefix):
                value = value[len(prefix):]
                break
        if not re.match(NAME_PATTERN, value):
            raise ValueError(f"Invalid username: {v}")
        return value


class GetUserInfoInput(UsernameInput):
    """Input schema for get_user_info tool."""


class UserListingInput(UsernameInput):
    """Input schema for get_user_posts and get_user_comments tools."""

    sort: Literal["hot", "new", "top"] = Field(
        "new",
        description="Sort order",
    )

    limit: int = Field(
        25,
        ge=1,
        le=100,
        description="Number of items to retrieve (1-100)",
    )


@mcp.tool()
async def get_user_info(params: GetUserInfoInput) -> Dict[str, Any]:
    """
    Get information about a Reddit user.

    Returns:
        Dictionary containing:
            - data: the user
            - metadata: execution time and result count
    """
    start_time = time.time()

    logger.info("get_user_info_started", username=params.username)

    try:
        reddit = get_reddit_client()
        user = await reddit.get_user_info(params.username)
    except RedditError as e:
        log_tool_execution(
            "get_user_info", (time.time() - start_time) * 1000, error=str(e)
        )
        raise tool_error(e) from e

    response = build_response({"user": user.to_dict()}, 1, start_time)
    log_tool_execution("get_user_info", response["metadata"]["execution_time_ms"])
    return response


@mcp.tool()
async def get_user_posts(params: UserListingInput) -> Dict[str, Any]:
    """
    Get posts submitted by a user.

    Returns:
        Dictionary containing:
            - data: username, sort and the list of posts
            - metadata: execution time and result count
    """
    start_time = time.time()

    logger.info(
        "get_user_posts_started",
        username=params.username,
        sort=params.sort,
        limit=params.limit,
    )

    try:
        reddit = get_reddit_client()
        posts = await reddit.get_user_posts(params.username, params.sort, params.limit)
    except RedditError as e:
        log_tool_execution(
            "get_user_posts", (time.time() - start_time) * 1000, error=str(e)
        )
        raise tool_error(e) from e

    response = build_response(
        {
            "username": params.username,
            "sort": params.sort,
            "posts": [post.to_dict() for post in posts],
        },
        len(posts),
        start_time,
    )
    log_tool_execution(
        "get_user_posts",
        response["metadata"]["execution_time_ms"],
        result_count=len(posts),
    )
    return response


@mcp.tool()
async def get_user_comments(params: UserListingInput) -> Dict[str, Any]:
    """
    Get comments made by a user.

    Returns:
        Dictionary containing:
            - data: username, sort and the list of comments
            - metadata: execution time and result count
    """
    start_time = time.time()

    logger.info(
        "get_user_comments_started",
        username=params.username,
        sort=params.sort,
        limit=params.limit,
    )

    try:
        reddit = get_reddit_client()
        comments = await reddit.get_user_comments(
            params.username, params.sort, params.limit
        )
    except RedditError as e:
        log_tool_execution(
            "get_user_comments", (time.time() - start_time) * 1000, error=str(e)
        )
        raise tool_error(e) from e

    response = build_response(
        {
            "username": params.username,
            "sort": params.sort,
            "comments": [comment.to_dict() for comment in comments],
        },
        len(comments),
        start_time,
    )
    log_tool_execution(
        "get_user_comments",
        response["metadata"]["execution_time_ms"],
        result_count=len(comments),
    )
    return response
