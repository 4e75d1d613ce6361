#!/usr/bin/env python
"""
Amadeus MCP Server - travel API integration

This MCP server exposes the Amadeus Self-Service APIs as tools:
- Flight search, inspiration, cheapest dates, pricing and booking
- Seat maps and flight delay prediction
- Hotel search, offers, sentiments and name autocomplete
- Airports, cities and airlines reference data
- Tours and activities, points of interest
- Travel analytics and trip purpose prediction
"""

import asyncio
import logging
import sys

from dotenv import load_dotenv

from mcp_server_common import configure_logging
from mcp_server_common.server import create_server, run_stdio

from . import config
from .tools import registry

SERVER_NAME = "amadeus-travel-api"
SERVER_VERSION = "1.0.0"

logger = logging.getLogger(__name__)

USAGE = f"""Amadeus MCP Server v{SERVER_VERSION}

Usage: mcp-server-amadeus [--help]

Serves the Amadeus travel tools over MCP stdio.

Environment variables:
  AMADEUS_CLIENT_ID       Your Amadeus API key (required)
  AMADEUS_CLIENT_SECRET   Your Amadeus API secret (required)
  AMADEUS_ENVIRONMENT     'test' (default) or 'production'
  LOG_LEVEL               Logging level (default: INFO)
"""


def print_banner():
    """Report the configuration state on stderr (stdout belongs to MCP)."""
    if not config.credentials_configured():
        print("\n" + "=" * 70, file=sys.stderr)
        print("AMADEUS MCP SERVER - CONFIGURATION REQUIRED", file=sys.stderr)
        print("=" * 70, file=sys.stderr)
        print("\nPlease set the following environment variables:", file=sys.stderr)
        print("  - AMADEUS_CLIENT_ID: Your Amadeus API key", file=sys.stderr)
        print("  - AMADEUS_CLIENT_SECRET: Your Amadeus API secret", file=sys.stderr)
        print("\nOptional:", file=sys.stderr)
        print("  - AMADEUS_ENVIRONMENT: 'test' (default) or 'production'", file=sys.stderr)
        print("\nGet your credentials at: https://developers.amadeus.com", file=sys.stderr)
        print("=" * 70 + "\n", file=sys.stderr)
    else:
        client_id = config.get_client_id()
        print("\n" + "=" * 70, file=sys.stderr)
        print("AMADEUS MCP SERVER STARTING", file=sys.stderr)
        print("=" * 70, file=sys.stderr)
        print(f"Environment: {config.get_environment()}", file=sys.stderr)
        print(f"Base URL: {config.get_base_url()}", file=sys.stderr)
        print(f"Client ID: {client_id[:8]}...", file=sys.stderr)
        print(f"Tools: {len(registry.get_tool_definitions())}", file=sys.stderr)
        print("=" * 70 + "\n", file=sys.stderr)


def main(argv=None):
    """Main entry point for the Amadeus MCP server."""
    argv = sys.argv[1:] if argv is None else argv
    if "--help" in argv or "-h" in argv:
        print(USAGE)
        return

    load_dotenv()
    configure_logging()
    print_banner()

    server = create_server(SERVER_NAME, SERVER_VERSION, registry)
    try:
        asyncio.run(run_stdio(server, SERVER_NAME, SERVER_VERSION))
    except KeyboardInterrupt:
        logger.info("Shutting down Amadeus MCP server")


if __name__ == "__main__":
    main()
