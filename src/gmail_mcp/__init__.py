"""Gmail REST API client exposed as MCP tools."""

__version__ = "1.0.0"
