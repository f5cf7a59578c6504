"""Entity and response models."""

from reddit_mcp.models.entities import Comment, Post, Subreddit, User

__all__ = ["Post", "Comment", "Subreddit", "User"]
