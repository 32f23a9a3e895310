"""Drive Audit MCP Server - modular implementation."""

import logging
import sys

from .main import mcp, get_service, set_service

from . import connection_tools
from . import audit_tools

__all__ = ["mcp", "get_service", "set_service", "main"]


def main():
    """Entry point for the Drive Audit MCP server."""
    # stdout carries the stdio transport
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)
    mcp.run(show_banner=False)
