"""
FastMCP server initialization and configuration.

Creates the MCP server, translates Reddit access layer errors into tool
errors and registers the health check tool. The Reddit tools register
themselves on import of reddit_mcp.tools.
"""
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from reddit_mcp.models.responses import (
    ErrorResponse,
    HealthCheckResponse,
    ResponseMetadata,
    ToolResponse,
)
from reddit_mcp.reddit import reddit_client_manager
from reddit_mcp.reddit.exceptions import (
    AuthenticationError,
    ConfigurationError,
    MalformedResponseError,
    RedditError,
    RemoteAPIError,
    TransportError,
)
from reddit_mcp.utils.logger import get_logger

logger = get_logger(__name__)

# Server metadata
SERVER_NAME = "reddit-mcp-server"
SERVER_VERSION = "1.0.0"
SERVER_INSTRUCTIONS = (
    "Read-only access to Reddit: subreddit listings, posts, comment threads, "
    "subreddit and user metadata, and search."
)

# Error codes carried in ErrorResponse.code
REMOTE_API_ERROR = -32000
AUTHENTICATION_ERROR = -32001
CONFIGURATION_ERROR = -32002
TRANSPORT_ERROR = -32003
INTERNAL_ERROR = -32603


def error_response(error: Exception) -> ErrorResponse:
    """
    Describe an exception raised while executing a tool.

    Args:
        error: Exception raised by the Reddit access layer (or anything else)

    Returns:
        ErrorResponse with code, message and status details

    Error Codes:
        -32000: Reddit API returned a non-2xx status (RemoteAPIError)
        -32001: Token exchange rejected (AuthenticationError)
        -32002: Missing credentials (ConfigurationError)
        -32003: Reddit unreachable (TransportError)
        -32603: Unexpected payload or internal error
    """
    if isinstance(error, AuthenticationError):
        code, message = AUTHENTICATION_ERROR, "Reddit authentication failed"
    elif isinstance(error, RemoteAPIError):
        code, message = REMOTE_API_ERROR, "Reddit API error"
    elif isinstance(error, ConfigurationError):
        code, message = CONFIGURATION_ERROR, "Reddit client is not configured"
    elif isinstance(error, TransportError):
        code, message = TRANSPORT_ERROR, "Reddit API unreachable"
    elif isinstance(error, MalformedResponseError):
        code, message = INTERNAL_ERROR, "Unexpected response from Reddit"
    else:
        code, message = INTERNAL_ERROR, "Internal server error"

    data: dict[str, Any] = {
        "error_type": type(error).__name__,
        "reason": str(error),
    }
    if isinstance(error, RedditError) and error.status_code is not None:
        data["status_code"] = error.status_code

    return ErrorResponse(code=code, message=message, data=data)


def tool_error(error: Exception) -> ToolError:
    """
    Translate an exception into the ToolError FastMCP reports to clients.

    The ToolError message is the JSON-encoded ErrorResponse.

    Example:
        >>> try:
        ...     posts = await reddit.get_subreddit_posts("python")
        ... except RedditError as e:
        ...     raise tool_error(e) from e
    """
    return ToolError(error_response(error).model_dump_json())


def build_response(data: Any, result_count: int, start_time: float) -> dict[str, Any]:
    """
    Wrap tool data with response metadata.

    Args:
        data: JSON-compatible tool data
        result_count: Number of entities in data
        start_time: time.time() taken when the tool started

    Returns:
        Dictionary form of ToolResponse
    """
    metadata = ResponseMetadata(
        execution_time_ms=round((time.time() - start_time) * 1000, 2),
        result_count=result_count,
    )
    return ToolResponse(data=data, metadata=metadata).model_dump()


@asynccontextmanager
async def server_lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Close the shared Reddit client when the server stops."""
    try:
        yield
    finally:
        await reddit_client_manager.reset_client()


def create_mcp_server() -> FastMCP:
    """
    Create and configure the FastMCP server instance.

    Returns:
        FastMCP server with the health check registered
    """
    mcp = FastMCP(
        name=SERVER_NAME,
        instructions=SERVER_INSTRUCTIONS,
        lifespan=server_lifespan,
    )

    logger.info(
        "mcp_server_initialized",
        name=SERVER_NAME,
        version=SERVER_VERSION,
    )

    register_health_check(mcp)

    return mcp


async def health_check() -> dict[str, Any]:
    """
    Report server health.

    Returns:
        Server version, credential status, whether a token is cached and
        which OAuth2 grant the next token exchange will use
    """
    components = {"server": "healthy"}
    grant_type = None

    try:
        reddit = reddit_client_manager.get_client()
    except ConfigurationError as e:
        logger.warning("health_check_unconfigured", reason=str(e))
        components["reddit_config"] = "unhealthy"
    else:
        components["reddit_config"] = "healthy"
        grant_type = reddit.config.grant_type
        # A missing token is fetched on the next request, so it is not a failure
        components["auth_token"] = (
            "cached" if reddit.session.is_valid(time.time()) else "not_cached"
        )

    if components["reddit_config"] == "unhealthy":
        overall_status = "unhealthy"
    else:
        overall_status = "healthy"

    response = HealthCheckResponse(
        status=overall_status,
        version=SERVER_VERSION,
        components=components,
        grant_type=grant_type,
    )

    logger.debug("health_check_performed", status=overall_status)

    return response.model_dump()


def register_health_check(mcp: FastMCP) -> None:
    """Register the health_check tool on a server."""
    mcp.tool(
        name="health_check",
        description="Report server health and Reddit authentication state",
    )(health_check)


# Create global MCP server instance (singleton)
mcp = create_mcp_server()
