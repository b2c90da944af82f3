"""Tool dispatch layer: typed inputs, registry and result rendering."""

from gmail_mcp.tools.models import ToolResult
from gmail_mcp.tools.registry import (
    TOOLS,
    ToolSpec,
    call_tool,
    dispatch,
    get_tool,
    parse_arguments,
    render_result,
)

__all__ = [
    "TOOLS",
    "ToolResult",
    "ToolSpec",
    "call_tool",
    "dispatch",
    "get_tool",
    "parse_arguments",
    "render_result",
]
