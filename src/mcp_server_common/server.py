"""Wiring between a ToolRegistry and the MCP low-level server over stdio."""

import logging
from typing import Any, Dict, Optional

from mcp import types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server

from .registry import ToolRegistry

logger = logging.getLogger(__name__)


class ToolCallError(Exception):
    """Raised inside the call_tool handler so the SDK returns an isError result."""


def create_server(name: str, version: str, registry: ToolRegistry) -> Server:
    """
    Build an MCP server whose tools are served by the registry.

    Args:
        name: Server name announced during initialization
        version: Server version announced during initialization
        registry: Registry providing tool definitions and dispatch

    Returns:
        Configured mcp.server.Server instance
    """
    server = Server(name, version=version)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        return [
            types.Tool(
                name=tool["name"],
                description=tool["description"],
                inputSchema=tool["inputSchema"],
            )
            for tool in registry.get_tool_definitions()
        ]

    # The registry validates arguments itself so errors keep its wording
    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> list[types.TextContent]:
        result = await registry.handle_tool_call(name, arguments)
        if result.is_error:
            # The SDK converts handler exceptions into CallToolResult(isError=True)
            raise ToolCallError(result.text)
        return [types.TextContent(type="text", text=result.text)]

    return server


async def run_stdio(server: Server, name: str, version: str):
    """Serve MCP requests over stdin/stdout until the client disconnects."""
    logger.info(f"{name} v{version} running on stdio")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name=name,
                server_version=version,
                capabilities=server.get_capabilities(
                    notification_options=NotificationOptions(),
                    experimental_capabilities={},
                ),
            ),
        )
