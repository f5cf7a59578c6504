"""
Shared fixtures: configuration, raw Reddit payload builders and a fake
Reddit backend served through httpx.MockTransport.
"""

import json
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import parse_qs

import httpx
import pytest

from reddit_mcp.reddit import RedditClient, RedditConfig

TOKEN_HOST = "www.reddit.com"
API_HOST = "oauth.reddit.com"


def listing(children: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Wrap things in a Reddit Listing."""
    return {"kind": "Listing", "data": {"children": children, "after": None}}


def post_data(**overrides: Any) -> Dict[str, Any]:
    """Raw t3 ``data`` object."""
    data = {
        "id": "abc123",
        "title": "Test Post",
        "author": "testuser",
        "subreddit": "python",
        "url": "https://example.com/article",
        "selftext": "This is a test post",
        "created_utc": 1699200000.0,
        "score": 100,
        "num_comments": 50,
        "permalink": "/r/python/comments/abc123/test_post/",
        "is_self": True,
        "domain": "self.python",
        "thumbnail": "self",
        "upvote_ratio": 0.95,
    }
    data.update(overrides)
    return data


def comment_data(comment_id: str = "c1", **overrides: Any) -> Dict[str, Any]:
    """Raw t1 ``data`` object without replies."""
    data = {
        "id": comment_id,
        "author": "commenter",
        "body": f"Comment {comment_id}",
        "created_utc": 1699200100.0,
        "score": 10,
        "permalink": f"/r/python/comments/abc123/test_post/{comment_id}/",
        "parent_id": "t3_abc123",
        "subreddit": "python",
        "replies": "",
    }
    data.update(overrides)
    return data


def comment_node(comment_id: str, replies: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    """t1 thing, optionally carrying a replies Listing."""
    data = comment_data(comment_id)
    if replies is not None:
        data["replies"] = listing(replies)
    return {"kind": "t1", "data": data}


def more_node(*ids: str) -> Dict[str, Any]:
    """Placeholder thing for "load more comments" stubs."""
    return {
        "kind": "more",
        "data": {"count": len(ids), "children": list(ids), "id": "_", "parent_id": "t3_abc123"},
    }


def subreddit_data(**overrides: Any) -> Dict[str, Any]:
    """Raw t5 ``data`` object."""
    data = {
        "display_name": "python",
        "title": "Python",
        "description": "News about the programming language Python.",
        "subscribers": 1200000,
        "created_utc": 1201230879.0,
        "public_description": "The official Python community for Reddit!",
        "url": "/r/python/",
        "over18": False,
    }
    data.update(overrides)
    return data


def user_data(**overrides: Any) -> Dict[str, Any]:
    """Raw t2 ``data`` object."""
    data = {
        "name": "spez",
        "id": "1w72",
        "created_utc": 1118030400.0,
        "comment_karma": 750000,
        "link_karma": 180000,
        "is_verified": True,
        "has_verified_email": True,
    }
    data.update(overrides)
    return data


class FakeReddit:
    """
    In-memory stand-in for Reddit's token endpoint and API host.

    Attributes:
        token_responses: Queue of (status, json body) returned by the
            token endpoint; the last one repeats
        routes: Map of API path to (status, json body)
        requests: Every request received, in order
    """

    def __init__(self) -> None:
        self.token_responses: List[Tuple[int, Any]] = [
            (200, {"access_token": "token-1", "token_type": "bearer", "expires_in": 3600, "scope": "*"})
        ]
        self.routes: Dict[str, Tuple[int, Any]] = {}
        self.requests: List[httpx.Request] = []

    @property
    def token_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.host == TOKEN_HOST]

    @property
    def api_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.host == API_HOST]

    def token_form(self, index: int = -1) -> Dict[str, str]:
        """Decoded form body of a token request."""
        body = self.token_requests[index].content.decode()
        return {key: values[0] for key, values in parse_qs(body).items()}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.url.host == TOKEN_HOST:
            if len(self.token_responses) > 1:
                status, body = self.token_responses.pop(0)
            else:
                status, body = self.token_responses[0]
            return httpx.Response(status, json=body)

        status, body = self.routes.get(request.url.path, (404, {"message": "Not Found"}))
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, content=json.dumps(body).encode())


class FakeClock:
    """Settable time source."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def reddit_config() -> RedditConfig:
    return RedditConfig(
        client_id="test_client_id",
        client_secret="test_client_secret",
        user_agent="test-agent/1.0",
    )


@pytest.fixture
def fake_reddit() -> FakeReddit:
    return FakeReddit()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def http_client(fake_reddit: FakeReddit) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_reddit.handler))


@pytest.fixture
def make_client(http_client: httpx.AsyncClient, clock: FakeClock) -> Callable[..., RedditClient]:
    """Build a RedditClient wired to the fake backend."""

    def build(config: RedditConfig) -> RedditClient:
        return RedditClient(config, http_client=http_client, clock=clock)

    return build
