"""MCP Server initialization and entry point."""

from fastmcp import FastMCP
from ..audit.service import AuditService
from typing import Optional

# Initialize MCP Server
mcp = FastMCP("Drive Audit")

# Global service, initialized lazily
_service: Optional[AuditService] = None


def get_service() -> AuditService:
    """Get or create the global AuditService instance.

    Returns:
        The AuditService wired from the current configuration.
    """
    global _service
    if not _service:
        _service = AuditService()
    return _service


def set_service(service: Optional[AuditService]) -> None:
    """Replace the global AuditService instance."""
    global _service
    _service = service
