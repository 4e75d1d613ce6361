#!/usr/bin/env python
"""
Coralogix MCP Server - observability platform integration

This MCP server exposes the Coralogix APIs as tools:
- DataPrime and Lucene queries, direct and in the background
- Alert definitions, alert events and bulk alert operations
- Custom dashboards and the archive storage target
- Enrichments, parsing rule groups and Events2Metrics
- Data usage, quota and billing reports
"""

import asyncio
import logging
import signal
import sys

from dotenv import load_dotenv

from mcp_server_common import configure_logging
from mcp_server_common.server import create_server, run_stdio

from . import config
from .client import resolve_base_url
from .config import SERVER_NAME, SERVER_VERSION
from .tools import registry

logger = logging.getLogger(__name__)

USAGE = f"""Coralogix MCP Server v{SERVER_VERSION}

Usage: mcp-server-coralogix [--help]

Serves the Coralogix observability tools over MCP stdio.

Environment variables:
  CORALOGIX_API_KEY   Your Coralogix API key (required)
  CORALOGIX_DOMAIN    Your Coralogix domain, e.g. eu2.coralogix.com (required)
  LOG_LEVEL           Logging level (default: INFO)
"""


def _shutdown(signum, frame):
    logger.info(f"Received signal {signum}, shutting down Coralogix MCP server")
    sys.exit(0)


def main(argv=None):
    """Main entry point for the Coralogix MCP server."""
    argv = sys.argv[1:] if argv is None else argv
    if "--help" in argv or "-h" in argv:
        print(USAGE)
        return

    load_dotenv()
    configure_logging()

    if not config.credentials_configured():
        print(
            "ERROR: CORALOGIX_API_KEY and CORALOGIX_DOMAIN environment variables are required",
            file=sys.stderr,
        )
        sys.exit(1)

    domain = config.get_domain()
    try:
        resolve_base_url(domain)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"INFO: Using Coralogix domain: {domain}", file=sys.stderr)

    signal.signal(signal.SIGTERM, _shutdown)

    server = create_server(SERVER_NAME, SERVER_VERSION, registry)
    try:
        asyncio.run(run_stdio(server, SERVER_NAME, SERVER_VERSION))
    except KeyboardInterrupt:
        logger.info("Shutting down Coralogix MCP server")


if __name__ == "__main__":
    main()
