"""Unified exception hierarchy for gmail-mcp."""


class GmailMcpError(Exception):
    """Base exception for all gmail-mcp errors."""


class ConfigError(GmailMcpError):
    """Missing or invalid configuration."""


# Gmail
class GmailError(GmailMcpError):
    """Base exception for Gmail operations."""


class TransportError(GmailError):
    """The HTTP exchange failed before a response was received."""


class MessageFormatError(GmailError):
    """An outgoing message field cannot be placed in a mail header."""


class TokenRefreshError(GmailError):
    """The authorization server rejected or failed the refresh exchange.

    Args:
        status: HTTP status returned by the token endpoint.
        body: Raw response text, kept verbatim for diagnostics.
    """

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"Token refresh failed ({status}): {body}")


class ApiError(GmailError):
    """The Gmail API returned a non-success status.

    Args:
        status: HTTP status of the failed call.
        body: Raw response text, not re-parsed.
    """

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"Gmail API error ({status}): {body}")


# Tools
class ToolError(GmailMcpError):
    """Base exception for tool dispatch."""


class UnknownOperationError(ToolError):
    """No tool is registered under the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ToolInputError(ToolError):
    """Tool arguments are missing or have the wrong type."""
