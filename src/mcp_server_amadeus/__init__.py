"""Amadeus travel MCP server."""

from .server import main

__all__ = ["main"]
