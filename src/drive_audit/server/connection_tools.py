"""Domain connection MCP tools."""
import json
import logging

from .main import mcp, get_service
from ..utils.errors import format_error, DriveAuditError

logger = logging.getLogger(__name__)


@mcp.tool()
def create_domain_connection(owner_id: str, domain: str, admin_email: str) -> str:
    """
    Save the Google Workspace domain and admin account used for audits.
    Setting up the same domain again updates its admin and reactivates it.
    Args:
        owner_id: Account that owns the connection.
        domain: The Workspace primary domain (e.g. "example.com").
        admin_email: A super admin of the domain to impersonate for directory reads.
    """
    try:
        service = get_service()
        connection = service.get_connection(
            service.create_connection(owner_id, domain, admin_email)
        )
        return f"Connection saved for {connection.domain}. ID: {connection.id}"
    except DriveAuditError as e:
        return format_error("Create connection", e)
    except Exception as e:
        logger.error(f"Create connection failed: {e}", exc_info=True)
        return f"Create connection failed: Unexpected error ({type(e).__name__}: {e})"


@mcp.tool()
def test_domain_connection(domain: str, admin_email: str) -> str:
    """
    Check that the service account can read the domain's directory.
    Args:
        domain: The Workspace primary domain.
        admin_email: Admin account to impersonate.
    Returns:
        JSON with success, message and (on success) userCount.
    """
    try:
        return json.dumps(get_service().test_connection(domain, admin_email))
    except Exception as e:
        logger.error(f"Connection test failed: {e}", exc_info=True)
        return json.dumps({"success": False, "message": f"Connection failed: {e}"})


@mcp.tool()
def list_domain_connections(owner_id: str) -> str:
    """
    List the domain connections belonging to an account.
    Args:
        owner_id: Account that owns the connections.
    """
    try:
        connections = get_service().list_connections(owner_id)
        if not connections:
            return "No connections found."
        return json.dumps([c.to_dict() for c in connections], indent=2)
    except DriveAuditError as e:
        return format_error("List connections", e)
    except Exception as e:
        logger.error(f"List connections failed: {e}", exc_info=True)
        return f"List connections failed: Unexpected error ({type(e).__name__}: {e})"


@mcp.tool()
def deactivate_domain_connection(connection_id: str) -> str:
    """
    Deactivate a domain connection. The record is kept.
    Args:
        connection_id: ID returned when the connection was created.
    """
    try:
        get_service().deactivate_connection(connection_id)
        return f"Connection {connection_id} deactivated."
    except DriveAuditError as e:
        return format_error("Deactivate connection", e)
    except Exception as e:
        logger.error(f"Deactivate connection failed: {e}", exc_info=True)
        return f"Deactivate connection failed: Unexpected error ({type(e).__name__}: {e})"
