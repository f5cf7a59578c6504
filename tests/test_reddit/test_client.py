"""
Unit tests for the Reddit client.

Each query method is exercised against the fake Reddit backend so the
request path, query parameters and entity mapping are checked together.
"""

import pytest

from conftest import comment_node, listing, more_node, post_data, subreddit_data, user_data
from reddit_mcp.reddit.client import (
    RedditClient,
    RedditClientManager,
    get_reddit_client,
    reddit_client_manager,
)
from reddit_mcp.reddit.config import RedditConfig
from reddit_mcp.reddit.exceptions import (
    AuthenticationError,
    ConfigurationError,
    MalformedResponseError,
    NotFoundError,
    PermissionDeniedError,
    RemoteAPIError,
)


def post_listing(*ids):
    return listing([{"kind": "t3", "data": post_data(id=i)} for i in ids])


@pytest.fixture
def reddit(make_client, reddit_config):
    return make_client(reddit_config)


class TestClientConstruction:
    """Test RedditClient setup."""

    def test_fresh_session_without_access_token(self, reddit):
        assert reddit.session.access_token is None

    @pytest.mark.asyncio
    async def test_presupplied_token_seeds_session(self, make_client, fake_reddit, clock):
        config = RedditConfig(
            client_id="id",
            client_secret="secret",
            access_token="pre-supplied",
            access_token_expires_in=600,
        )
        reddit = make_client(config)

        assert reddit.session.access_token == "pre-supplied"
        assert reddit.session.expires_at == clock() + 600 - 60

        fake_reddit.routes["/r/python/about"] = (200, {"kind": "t5", "data": subreddit_data()})
        await reddit.get_subreddit_info("python")

        assert fake_reddit.token_requests == []
        assert fake_reddit.api_requests[0].headers["Authorization"] == "Bearer pre-supplied"

    def test_clients_do_not_share_sessions(self, make_client, reddit_config):
        assert make_client(reddit_config).session is not make_client(reddit_config).session

    @pytest.mark.asyncio
    async def test_injected_http_client_not_closed(self, reddit, http_client):
        await reddit.aclose()
        assert not http_client.is_closed

    @pytest.mark.asyncio
    async def test_owned_http_client_closed(self, reddit_config):
        async with RedditClient(reddit_config) as reddit:
            http_client = reddit.http_client
        assert http_client.is_closed


class TestSubredditPosts:
    """Test get_subreddit_posts."""

    @pytest.mark.asyncio
    async def test_request_and_mapping(self, reddit, fake_reddit):
        fake_reddit.routes["/r/python/top"] = (200, post_listing("p1", "p2"))

        posts = await reddit.get_subreddit_posts("python", "top", 10)

        assert [p.id for p in posts] == ["p1", "p2"]
        request = fake_reddit.api_requests[0]
        assert request.url.path == "/r/python/top"
        assert dict(request.url.params) == {"limit": "10"}

    @pytest.mark.asyncio
    async def test_time_filter(self, reddit, fake_reddit):
        fake_reddit.routes["/r/python/top"] = (200, post_listing())

        await reddit.get_subreddit_posts("python", "top", 5, time_filter="week")

        assert fake_reddit.api_requests[0].url.params["t"] == "week"

    @pytest.mark.asyncio
    async def test_defaults(self, reddit, fake_reddit):
        fake_reddit.routes["/r/python/hot"] = (200, post_listing())

        assert await reddit.get_subreddit_posts("python") == []
        assert fake_reddit.api_requests[0].url.params["limit"] == "25"

    @pytest.mark.asyncio
    async def test_missing_subreddit(self, reddit):
        with pytest.raises(NotFoundError):
            await reddit.get_subreddit_posts("doesnotexist")

    @pytest.mark.asyncio
    async def test_private_subreddit(self, reddit, fake_reddit):
        fake_reddit.routes["/r/secret/hot"] = (403, {"reason": "private"})

        with pytest.raises(PermissionDeniedError):
            await reddit.get_subreddit_posts("secret")


class TestGetPost:
    """Test get_post."""

    @pytest.mark.asyncio
    async def test_returns_first_listing_post(self, reddit, fake_reddit):
        fake_reddit.routes["/comments/abc123"] = (200, [post_listing("abc123"), listing([])])

        post = await reddit.get_post("abc123")

        assert post.id == "abc123"
        assert post.permalink == "https://reddit.com/r/python/comments/abc123/test_post/"

    @pytest.mark.asyncio
    async def test_empty_thread_is_malformed(self, reddit, fake_reddit):
        fake_reddit.routes["/comments/abc123"] = (200, [listing([]), listing([])])

        with pytest.raises(MalformedResponseError):
            await reddit.get_post("abc123")


class TestGetPostComments:
    """Test get_post_comments."""

    @pytest.mark.asyncio
    async def test_flattens_thread(self, reddit, fake_reddit):
        thread = [
            post_listing("abc123"),
            listing([
                comment_node("A", [comment_node("B", [comment_node("D")]), comment_node("C")]),
                more_node("E", "F"),
            ]),
        ]
        fake_reddit.routes["/comments/abc123"] = (200, thread)

        comments = await reddit.get_post_comments("abc123", "top")

        assert [c.id for c in comments] == ["A", "B", "D", "C"]
        assert fake_reddit.api_requests[0].url.params["sort"] == "top"

    @pytest.mark.asyncio
    async def test_default_sort(self, reddit, fake_reddit):
        fake_reddit.routes["/comments/abc123"] = (200, [post_listing("abc123"), listing([])])

        assert await reddit.get_post_comments("abc123") == []
        assert fake_reddit.api_requests[0].url.params["sort"] == "best"

    @pytest.mark.asyncio
    async def test_single_listing_response(self, reddit, fake_reddit):
        fake_reddit.routes["/comments/abc123"] = (200, [post_listing("abc123")])

        assert await reddit.get_post_comments("abc123") == []

    @pytest.mark.asyncio
    async def test_only_more_nodes(self, reddit, fake_reddit):
        fake_reddit.routes["/comments/abc123"] = (
            200,
            [post_listing("abc123"), listing([more_node("x")])],
        )

        assert await reddit.get_post_comments("abc123") == []


class TestInfoQueries:
    """Test subreddit and user metadata queries."""

    @pytest.mark.asyncio
    async def test_subreddit_info(self, reddit, fake_reddit):
        fake_reddit.routes["/r/python/about"] = (200, {"kind": "t5", "data": subreddit_data()})

        subreddit = await reddit.get_subreddit_info("python")

        assert subreddit.display_name == "python"
        assert subreddit.url == "https://reddit.com/r/python"

    @pytest.mark.asyncio
    async def test_user_info(self, reddit, fake_reddit):
        fake_reddit.routes["/user/spez/about"] = (200, {"kind": "t2", "data": user_data()})

        user = await reddit.get_user_info("spez")

        assert user.name == "spez"
        assert user.link_karma == 180000

    @pytest.mark.asyncio
    async def test_about_without_data(self, reddit, fake_reddit):
        fake_reddit.routes["/user/spez/about"] = (200, {"kind": "t2"})

        with pytest.raises(MalformedResponseError):
            await reddit.get_user_info("spez")

    @pytest.mark.asyncio
    async def test_unknown_user(self, reddit):
        with pytest.raises(NotFoundError):
            await reddit.get_user_info("nobody_here")


class TestUserListings:
    """Test get_user_posts and get_user_comments."""

    @pytest.mark.asyncio
    async def test_user_posts(self, reddit, fake_reddit):
        fake_reddit.routes["/user/spez/submitted"] = (200, post_listing("p1"))

        posts = await reddit.get_user_posts("spez", "top", 5)

        assert [p.id for p in posts] == ["p1"]
        assert dict(fake_reddit.api_requests[0].url.params) == {"sort": "top", "limit": "5"}

    @pytest.mark.asyncio
    async def test_user_comments(self, reddit, fake_reddit):
        fake_reddit.routes["/user/spez/comments"] = (
            200,
            listing([comment_node("c1"), comment_node("c2")]),
        )

        comments = await reddit.get_user_comments("spez")

        assert [c.id for c in comments] == ["c1", "c2"]
        assert fake_reddit.api_requests[0].url.params["sort"] == "new"


class TestSearch:
    """Test search_posts and search_subreddits."""

    @pytest.mark.asyncio
    async def test_site_wide_search(self, reddit, fake_reddit):
        fake_reddit.routes["/search"] = (200, post_listing("p1"))

        posts = await reddit.search_posts("python async")

        assert [p.id for p in posts] == ["p1"]
        params = fake_reddit.api_requests[0].url.params
        assert params["q"] == "python async"
        assert params["sort"] == "relevance"
        assert params["type"] == "link"
        assert "restrict_sr" not in params
        assert "t" not in params

    @pytest.mark.asyncio
    async def test_subreddit_search(self, reddit, fake_reddit):
        fake_reddit.routes["/r/python/search"] = (200, post_listing())

        await reddit.search_posts("asyncio", subreddit="python", sort="top", time_filter="year", limit=3)

        params = fake_reddit.api_requests[0].url.params
        assert params["restrict_sr"] == "true"
        assert params["t"] == "year"
        assert params["limit"] == "3"

    @pytest.mark.asyncio
    async def test_search_subreddits(self, reddit, fake_reddit):
        fake_reddit.routes["/subreddits/search"] = (
            200,
            listing([{"kind": "t5", "data": subreddit_data(display_name="learnpython")}]),
        )

        subreddits = await reddit.search_subreddits("python", limit=10)

        assert [s.display_name for s in subreddits] == ["learnpython"]
        assert dict(fake_reddit.api_requests[0].url.params) == {"q": "python", "limit": "10"}

    @pytest.mark.asyncio
    async def test_path_segments_are_quoted(self, reddit, fake_reddit):
        with pytest.raises(NotFoundError):
            await reddit.get_subreddit_info("../admin")

        assert "%2F" in fake_reddit.api_requests[0].url.raw_path.decode()


class TestAuthenticationFlow:
    """Auth failures surface from any query."""

    @pytest.mark.asyncio
    async def test_rejected_credentials(self, reddit, fake_reddit):
        fake_reddit.token_responses = [(401, {"message": "Unauthorized"})]

        with pytest.raises(AuthenticationError):
            await reddit.get_subreddit_posts("python")

        assert fake_reddit.api_requests == []


class TestRedditClientManager:
    """Test RedditClientManager."""

    def test_not_initialized_by_default(self):
        assert not RedditClientManager().is_initialized()

    def test_set_client(self, reddit):
        manager = RedditClientManager()
        manager.set_client(reddit)

        assert manager.is_initialized()
        assert manager.get_client() is reddit

    def test_get_client_builds_from_env(self, monkeypatch):
        monkeypatch.setenv("REDDIT_CLIENT_ID", "env_id")
        monkeypatch.setenv("REDDIT_CLIENT_SECRET", "env_secret")
        manager = RedditClientManager()

        client = manager.get_client()

        assert client.config.client_id == "env_id"
        assert manager.get_client() is client

    def test_get_client_without_credentials(self, monkeypatch):
        monkeypatch.delenv("REDDIT_CLIENT_ID", raising=False)
        monkeypatch.delenv("REDDIT_CLIENT_SECRET", raising=False)

        with pytest.raises(ConfigurationError):
            RedditClientManager().get_client()

    @pytest.mark.asyncio
    async def test_reset_client(self, reddit):
        manager = RedditClientManager()
        manager.set_client(reddit)

        await manager.reset_client()

        assert not manager.is_initialized()

    def test_module_accessor(self, reddit, monkeypatch):
        monkeypatch.setattr(reddit_client_manager, "_client", reddit)
        assert get_reddit_client() is reddit


QUERY_CALLS = [
    ("get_subreddit_posts", ("python",), "/r/python/hot"),
    ("get_post", ("abc123",), "/comments/abc123"),
    ("get_post_comments", ("abc123",), "/comments/abc123"),
    ("get_subreddit_info", ("python",), "/r/python/about"),
    ("get_user_info", ("spez",), "/user/spez/about"),
    ("get_user_posts", ("spez",), "/user/spez/submitted"),
    ("get_user_comments", ("spez",), "/user/spez/comments"),
    ("search_posts", ("asyncio",), "/search"),
    ("search_subreddits", ("python",), "/subreddits/search"),
]


class TestRemoteErrorsForEveryQuery:
    """Any non-2xx API response keeps its status, whatever the query."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method, args, path", QUERY_CALLS)
    @pytest.mark.parametrize("status", [400, 502])
    async def test_status_preserved(self, reddit, fake_reddit, method, args, path, status):
        fake_reddit.routes[path] = (status, {"message": "error"})

        with pytest.raises(RemoteAPIError) as exc_info:
            await getattr(reddit, method)(*args)

        assert exc_info.value.status_code == status
        assert fake_reddit.api_requests[0].url.path == path
