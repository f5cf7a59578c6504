"""
Canonical Reddit entities returned by the query operations.

These are immutable values built fresh from every response by
reddit_mcp.reddit.normalizer; nothing else constructs them from raw
payloads.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class Entity(BaseModel):
    """Base class for frozen Reddit entities."""

    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> Dict[str, Any]:
        """Plain dictionary form, used for JSON tool output."""
        return self.model_dump()


class Post(Entity):
    """
    A Reddit submission.

    ``permalink`` is always absolute. ``thumbnail`` is None unless Reddit
    sent a real image URL, and is then left out of ``to_dict()``.
    """

    id: str
    title: str
    author: str
    subreddit: str
    url: str
    selftext: str
    created_utc: float
    score: int
    num_comments: int
    permalink: str
    is_self: bool
    domain: str
    thumbnail: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.thumbnail is None:
            return self.model_dump(exclude={"thumbnail"})
        return self.model_dump()


class Comment(Entity):
    """A comment; ``parent_id`` keeps Reddit's t1_/t3_ prefix."""

    id: str
    author: str
    body: str
    created_utc: float
    score: int
    permalink: str
    parent_id: str
    subreddit: str


class Subreddit(Entity):
    """Subreddit metadata; ``url`` is derived from ``display_name``."""

    display_name: str
    title: str
    description: str
    subscribers: Optional[int]
    created_utc: float
    public_description: str
    url: str
    over18: bool


class User(Entity):
    """Public account metadata."""

    name: str
    id: str
    created_utc: float
    comment_karma: int
    link_karma: int
    is_verified: bool
    has_verified_email: bool
