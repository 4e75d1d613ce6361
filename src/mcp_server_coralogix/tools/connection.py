"""Connectivity check for the Coralogix server."""

import os
from typing import Any, Dict, List

from .. import config

CONNECTION_TOOLS: List[Dict[str, Any]] = [
    {
        "name": "test_connection",
        "description": "Check that the Coralogix MCP server is running and that its credentials are configured",
        "inputSchema": {"type": "object", "properties": {}, "required": []},
    },
]


def _presence(value: str) -> str:
    return "✅ Present" if value else "❌ Missing"


async def handle_connection_tool(name: str, args: Dict[str, Any]) -> str:
    if name != "test_connection":
        raise ValueError(f"Unknown connection tool: {name}")

    api_key = os.getenv("CORALOGIX_API_KEY", "")
    domain = os.getenv("CORALOGIX_DOMAIN", "")

    return (
        "✅ Coralogix MCP Server is working!\n\n"
        "Environment check:\n"
        f"- API Key: {_presence(api_key)}\n"
        f"- Domain: {_presence(domain)}\n"
        f"- Domain Value: {domain or 'Not set'}\n\n"
        f"Server version: {config.SERVER_VERSION}"
    )
