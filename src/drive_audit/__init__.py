"""Drive Audit - Google Workspace public sharing audit MCP server.

This package lists every user of a Google Workspace domain through
domain-wide delegation, finds the Drive files each user has shared publicly,
and keeps a history of the resulting audit reports.
"""
from .client import WorkspaceClient
from .auth import ServiceAccountCredentialProvider

__version__ = "0.1.0"
__all__ = ["WorkspaceClient", "ServiceAccountCredentialProvider"]
