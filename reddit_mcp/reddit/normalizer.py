"""
Response normalization for Reddit API data.

This module is the single place where untyped Reddit JSON is turned into
the typed entities of reddit_mcp.models.entities. Functions here are pure:
no network access, no shared state.

Normalization rules:
    - selftext: empty string when absent
    - permalink (posts, comments): prefixed with https://reddit.com
    - thumbnail (posts): dropped when it is "self" or "default"
    - url (subreddits): always https://reddit.com/r/<display_name>
    - everything else is copied by name
"""

from typing import Any, Callable, Dict, List, TypeVar

from pydantic import ValidationError

from reddit_mcp.models.entities import Comment, Post, Subreddit, User

from .exceptions import MalformedResponseError

REDDIT_ORIGIN = "https://reddit.com"

# Placeholder values Reddit uses instead of a thumbnail URL
THUMBNAIL_SENTINELS = frozenset({"self", "default"})

RawData = Dict[str, Any]
T = TypeVar("T")


def _mapping(kind: str, build: Callable[[RawData], T], raw: RawData) -> T:
    try:
        return build(raw)
    except (KeyError, TypeError, AttributeError) as e:
        raise MalformedResponseError(
            f"{kind} payload missing or invalid field: {e}"
        ) from e
    except ValidationError as e:
        raise MalformedResponseError(
            f"{kind} payload has unexpected field types: {e}"
        ) from e


class ResponseNormalizer:
    """
    Normalizer for Reddit API responses.

    Converts the ``data`` object of a Reddit "thing" into the matching
    entity. All methods are static.

    Example:
        >>> post = ResponseNormalizer.normalize_post(listing["data"]["children"][0]["data"])
        >>> post.permalink
        'https://reddit.com/r/python/comments/abc123/title/'
    """

    @staticmethod
    def normalize_post(raw: RawData) -> Post:
        """
        Normalize a submission (kind t3).

        Args:
            raw: ``data`` object of a t3 thing

        Returns:
            Post entity

        Raises:
            MalformedResponseError: If required fields are missing
        """

        def build(data: RawData) -> Post:
            thumbnail = data.get("thumbnail")
            return Post(
                id=data["id"],
                title=data["title"],
                author=data["author"],
                subreddit=data["subreddit"],
                url=data["url"],
                selftext=data.get("selftext") or "",
                created_utc=data["created_utc"],
                score=data["score"],
                num_comments=data["num_comments"],
                permalink=f"{REDDIT_ORIGIN}{data['permalink']}",
                is_self=data["is_self"],
                domain=data["domain"],
                thumbnail=None if thumbnail in THUMBNAIL_SENTINELS else thumbnail,
            )

        return _mapping("Post", build, raw)

    @staticmethod
    def normalize_comment(raw: RawData) -> Comment:
        """
        Normalize a comment (kind t1).

        ``replies`` are ignored here; see reddit_mcp.reddit.comments.

        Args:
            raw: ``data`` object of a t1 thing

        Returns:
            Comment entity
        """

        def build(data: RawData) -> Comment:
            return Comment(
                id=data["id"],
                author=data["author"],
                body=data["body"],
                created_utc=data["created_utc"],
                score=data["score"],
                permalink=f"{REDDIT_ORIGIN}{data['permalink']}",
                parent_id=data["parent_id"],
                subreddit=data["subreddit"],
            )

        return _mapping("Comment", build, raw)

    @staticmethod
    def normalize_subreddit(raw: RawData) -> Subreddit:
        """
        Normalize subreddit metadata (kind t5).

        The ``url`` field of the payload is ignored and rebuilt from
        ``display_name``.
        """

        def build(data: RawData) -> Subreddit:
            return Subreddit(
                display_name=data["display_name"],
                title=data["title"],
                description=data["description"],
                subscribers=data["subscribers"],
                created_utc=data["created_utc"],
                public_description=data["public_description"],
                url=f"{REDDIT_ORIGIN}/r/{data['display_name']}",
                over18=data["over18"],
            )

        return _mapping("Subreddit", build, raw)

    @staticmethod
    def normalize_user(raw: RawData) -> User:
        """Normalize account metadata (kind t2)."""

        def build(data: RawData) -> User:
            return User(
                name=data["name"],
                id=data["id"],
                created_utc=data["created_utc"],
                comment_karma=data["comment_karma"],
                link_karma=data["link_karma"],
                is_verified=data["is_verified"],
                has_verified_email=data["has_verified_email"],
            )

        return _mapping("User", build, raw)

    @staticmethod
    def listing_children(listing: Any) -> List[RawData]:
        """
        Return the ``data`` objects of a Listing's children.

        Args:
            listing: ``{"kind": "Listing", "data": {"children": [...]}}``

        Raises:
            MalformedResponseError: If the value is not a Listing
        """
        try:
            return [child["data"] for child in listing["data"]["children"]]
        except (KeyError, TypeError) as e:
            raise MalformedResponseError(f"Expected a Listing payload: {e}") from e



def to_post(raw: RawData) -> Post:
    """Map a t3 ``data`` object to a Post."""
    return ResponseNormalizer.normalize_post(raw)


def to_comment(raw: RawData) -> Comment:
    """Map a t1 ``data`` object to a Comment."""
    return ResponseNormalizer.normalize_comment(raw)


def to_subreddit(raw: RawData) -> Subreddit:
    """Map a t5 ``data`` object to a Subreddit."""
    return ResponseNormalizer.normalize_subreddit(raw)


def to_user(raw: RawData) -> User:
    """Map a t2 ``data`` object to a User."""
    return ResponseNormalizer.normalize_user(raw)


def to_posts(listing: Any) -> List[Post]:
    """
    Map every child of a post Listing.

    Example:
        >>> posts = to_posts(await executor.execute("/r/python/hot"))
    """
    return [to_post(data) for data in ResponseNormalizer.listing_children(listing)]


def to_comments(listing: Any) -> List[Comment]:
    """Map every child of a comment Listing (no tree walking)."""
    return [to_comment(data) for data in ResponseNormalizer.listing_children(listing)]


def to_subreddits(listing: Any) -> List[Subreddit]:
    """Map every child of a subreddit Listing."""
    return [to_subreddit(data) for data in ResponseNormalizer.listing_children(listing)]
