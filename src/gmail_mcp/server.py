"""MCP server exposing the Gmail tools over stdio."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any, Mapping

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool, ToolAnnotations

from gmail_mcp import __version__
from gmail_mcp.config import Credential, Settings
from gmail_mcp.exceptions import ConfigError, ToolError, UnknownOperationError
from gmail_mcp.gmail.client import GmailClient
from gmail_mcp.gmail.transport import HttpxTransport, Transport
from gmail_mcp.tools import TOOLS, ToolResult, call_tool, get_tool

logger = logging.getLogger(__name__)

SERVER_NAME = "gmail-mcp"


class GmailMcpServer:
    """MCP server for the Gmail tools.

    Credentials come from ``settings`` when complete, otherwise from the
    ``GOOGLE_CLIENT_ID``, ``GOOGLE_CLIENT_SECRET`` and ``GOOGLE_REFRESH_TOKEN``
    arguments of each call, field by field. One client, and with it one
    cached access token, is kept per distinct credential; all clients share
    a single transport.

    Args:
        settings: Server settings; read from the environment when omitted.
        transport: Optional shared transport, mainly for tests.
    """

    def __init__(self, settings: Settings | None = None, transport: Transport | None = None):
        self.settings = settings or Settings.from_env()
        self.server = Server(SERVER_NAME, version=__version__)
        self._owns_transport = transport is None
        self._transport = transport or HttpxTransport(timeout=self.settings.timeout)
        self._clients: dict[Credential, GmailClient] = {}
        self._setup_handlers()

    def _setup_handlers(self) -> None:
        """Register MCP tool handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            return [
                Tool(
                    name=spec.name,
                    description=spec.description,
                    inputSchema=spec.input_schema(),
                    annotations=ToolAnnotations(
                        title=spec.title,
                        readOnlyHint=spec.read_only,
                        destructiveHint=spec.destructive,
                        idempotentHint=spec.idempotent,
                        openWorldHint=True,
                    ),
                )
                for spec in TOOLS
            ]

        @self.server.call_tool()
        async def handle_tool(name: str, arguments: dict | None) -> list[TextContent]:
            result = await self.handle_call(name, arguments or {})
            if result.is_error:
                # The MCP layer turns a raised error into an isError result.
                raise ToolError(result.text)
            return [TextContent(type="text", text=result.text)]

    def client_for(self, args: Mapping[str, Any]) -> GmailClient:
        """Return the client for the configured or per-call credential."""
        credential = self.settings.credential_for(args)
        client = self._clients.get(credential)
        if client is None:
            client = GmailClient.from_credential(
                credential,
                transport=self._transport,
                api_base=self.settings.api_base,
                token_url=self.settings.token_url,
                timeout=self.settings.timeout,
            )
            self._clients[credential] = client
            logger.info(f"Created Gmail client for {credential!r}")
        return client

    async def handle_call(self, name: str, args: Mapping[str, Any]) -> ToolResult:
        """Resolve credentials and run one tool call."""
        try:
            get_tool(name)
            client = self.client_for(args)
        except (ConfigError, UnknownOperationError) as e:
            return ToolResult(f"Error: {e}", is_error=True)
        return await call_tool(client, name, args)

    async def run(self) -> None:
        """Serve over stdio until the client disconnects."""
        logger.info(f"Starting {SERVER_NAME} {__version__} with {len(TOOLS)} tools")
        try:
            async with stdio_server() as (read_stream, write_stream):
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options(),
                )
        finally:
            if self._owns_transport:
                await self._transport.aclose()


def main() -> None:
    """Console entry point."""
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        print(f"gmail-mcp: {e}", file=sys.stderr)
        sys.exit(2)

    # stdout carries the MCP protocol; logs go to stderr.
    logging.basicConfig(
        level=settings.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(GmailMcpServer(settings).run())


if __name__ == "__main__":
    main()
