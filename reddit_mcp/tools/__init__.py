"""MCP tool implementations for Reddit data access."""

from reddit_mcp.tools.posts import (
    GetPostCommentsInput,
    GetPostInput,
    GetSubredditPostsInput,
    get_post,
    get_post_comments,
    get_subreddit_posts,
)
from reddit_mcp.tools.search import SearchPostsInput, search_posts
from reddit_mcp.tools.subreddits import (
    GetSubredditInfoInput,
    SearchSubredditsInput,
    get_subreddit_info,
    search_subreddits,
)
from reddit_mcp.tools.users import (
    GetUserInfoInput,
    UserListingInput,
    get_user_comments,
    get_user_info,
    get_user_posts,
)

__all__ = [
    # Post tools
    "get_subreddit_posts",
    "GetSubredditPostsInput",
    "get_post",
    "GetPostInput",
    "get_post_comments",
    "GetPostCommentsInput",
    # Subreddit tools
    "get_subreddit_info",
    "GetSubredditInfoInput",
    "search_subreddits",
    "SearchSubredditsInput",
    # User tools
    "get_user_info",
    "GetUserInfoInput",
    "get_user_posts",
    "get_user_comments",
    "UserListingInput",
    # Search tool
    "search_posts",
    "SearchPostsInput",
]
