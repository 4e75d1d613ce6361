"""Logging helpers shared by the MCP servers.

Everything goes to stderr: stdout carries the MCP stdio protocol frames.
"""

import logging
import os
import sys
from typing import Optional

logger = logging.getLogger("mcp_server")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None):
    """Configure root logging to stderr, honouring LOG_LEVEL."""
    logging.basicConfig(
        level=(level or os.getenv("LOG_LEVEL", "INFO")).upper(),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def log_info(prefix: str, tool_name: str, message: str):
    """Structured info logging for MCP tools."""
    logger.info(f"[{prefix}:{tool_name}] {message}")


def log_error(prefix: str, tool_name: str, error_type: str, message: str):
    """Structured error logging for MCP tools."""
    logger.error(f"[{prefix}:{tool_name}] ERROR ({error_type}): {message}")
