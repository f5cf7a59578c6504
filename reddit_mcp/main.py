"""
Reddit MCP Server - Main Entry Point

Loads configuration, builds the Reddit client and runs the FastMCP server
(stdio transport by default).
"""
import os
import sys

from dotenv import load_dotenv

from reddit_mcp.reddit import (
    ConfigurationError,
    RedditClient,
    RedditConfig,
    reddit_client_manager,
)
from reddit_mcp.server import SERVER_VERSION, mcp
from reddit_mcp.utils.logger import get_logger, setup_logging

# Import tools to register them with the MCP server
import reddit_mcp.tools  # noqa: F401

logger = get_logger(__name__)


def main() -> None:
    """
    Main entry point.

    Initializes:
        1. Environment (.env) and structured logging
        2. Reddit configuration, failing fast on missing credentials
        3. The shared Reddit client
        4. The FastMCP server loop
    """
    load_dotenv()

    log_level = os.getenv("LOG_LEVEL", "INFO")
    setup_logging(level=log_level)

    logger.info(
        "server_starting",
        version=SERVER_VERSION,
        environment=os.getenv("ENVIRONMENT", "production"),
        log_level=log_level,
    )

    try:
        config = RedditConfig.from_env()
    except ConfigurationError as e:
        logger.error("reddit_config_invalid", field=e.field, error=str(e))
        sys.exit(1)

    reddit_client_manager.set_client(RedditClient(config))

    transport = os.getenv("MCP_TRANSPORT", "stdio")
    logger.info("starting_mcp_server", transport=transport, grant_type=config.grant_type)

    try:
        mcp.run(transport=transport)
    except Exception as e:
        logger.error("server_error", error=str(e), exc_info=True)
        raise
    finally:
        logger.info("server_shutdown_complete")


if __name__ == "__main__":
    main()
