"""Domain audit MCP tools."""
import json
import logging
from typing import Optional

from .main import mcp, get_service
from ..utils.errors import format_error, DriveAuditError

logger = logging.getLogger(__name__)


@mcp.tool()
def run_domain_audit(domain: str, admin_email: str) -> str:
    """
    Audit every active user in a domain for publicly shared Drive files.
    This scans the whole domain and can take several minutes.
    Args:
        domain: The Workspace primary domain.
        admin_email: Admin account to impersonate for the directory listing.
    Returns:
        JSON summary with auditId, totals and the per-user results.
    """
    try:
        summary = get_service().run_audit(domain, admin_email)
        return json.dumps(summary.to_dict(), indent=2)
    except DriveAuditError as e:
        return format_error("Domain audit", e)
    except Exception as e:
        logger.error(f"Domain audit failed: {e}", exc_info=True)
        return f"Domain audit failed: Unexpected error ({type(e).__name__}: {e})"


@mcp.tool()
def list_audit_history(domain: Optional[str] = None) -> str:
    """
    List the 50 most recent audits, newest first.
    Args:
        domain: Only list audits of this domain.
    """
    try:
        runs = get_service().list_audit_history(domain)
        if not runs:
            return "No audits found."

        output = ["Audit History:"]
        for run in runs:
            created = run.created_at.strftime("%Y-%m-%d %H:%M") if run.created_at else "?"
            output.append(
                f"  - {run.id} | {run.domain} | {created} | "
                f"{run.total_files} public files, {len(run.results)}/{run.total_users} users"
            )
        return "\n".join(output)
    except DriveAuditError as e:
        return format_error("List audits", e)
    except Exception as e:
        logger.error(f"List audits failed: {e}", exc_info=True)
        return f"List audits failed: Unexpected error ({type(e).__name__}: {e})"


@mcp.tool()
def get_audit_run(audit_id: str) -> str:
    """
    Get the full report of one audit.
    Args:
        audit_id: ID of the audit.
    """
    try:
        return json.dumps(get_service().get_audit_run(audit_id).to_dict(), indent=2)
    except DriveAuditError as e:
        return format_error("Get audit", e)
    except Exception as e:
        logger.error(f"Get audit failed: {e}", exc_info=True)
        return f"Get audit failed: Unexpected error ({type(e).__name__}: {e})"
