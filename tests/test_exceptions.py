"""Tests for exception hierarchy."""

from gmail_mcp.exceptions import (
    ApiError,
    ConfigError,
    GmailError,
    GmailMcpError,
    MessageFormatError,
    TokenRefreshError,
    ToolError,
    ToolInputError,
    TransportError,
    UnknownOperationError,
)


def test_all_inherit_from_base():
    for exc_class in [
        ConfigError,
        GmailError, TokenRefreshError, ApiError, TransportError, MessageFormatError,
        ToolError, UnknownOperationError, ToolInputError,
    ]:
        assert issubclass(exc_class, GmailMcpError)


def test_gmail_hierarchy():
    assert issubclass(TokenRefreshError, GmailError)
    assert issubclass(ApiError, GmailError)
    assert issubclass(TransportError, GmailError)
    assert issubclass(MessageFormatError, GmailError)


def test_tool_hierarchy():
    assert issubclass(UnknownOperationError, ToolError)
    assert issubclass(ToolInputError, ToolError)


def test_token_refresh_error_carries_status_and_body():
    e = TokenRefreshError(401, '{"error": "invalid_grant"}')
    assert e.status == 401
    assert e.body == '{"error": "invalid_grant"}'
    assert str(e) == 'Token refresh failed (401): {"error": "invalid_grant"}'


def test_api_error_message():
    e = ApiError(500, "server exploded")
    assert (e.status, e.body) == (500, "server exploded")
    assert str(e) == "Gmail API error (500): server exploded"


def test_unknown_operation_message():
    e = UnknownOperationError("gmail_fly")
    assert e.name == "gmail_fly"
    assert str(e) == "Unknown tool: gmail_fly"
