"""Reddit MCP server: read-only Reddit access over the Model Context Protocol."""

__version__ = "1.0.0"
