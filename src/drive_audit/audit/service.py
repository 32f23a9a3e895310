"""Operations exposed to the outer layer: connection setup, audits, history."""

import logging
import re
from typing import Any, Dict, List, Optional

from ..auth import ServiceAccountCredentialProvider
from ..client import WorkspaceClient
from ..core.config import AuditConfig, get_config
from ..utils.errors import DriveAuditError, ValidationError
from .models import AuditRun, AuditSummary, DomainConnection
from .orchestrator import AuditOrchestrator
from .store import AuditStore, get_audit_store

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_connection_input(domain: str, admin_email: str) -> tuple[str, str]:
    """Normalize and check connection setup input.

    Returns:
        The stripped, lower-cased domain and the stripped admin email.

    Raises:
        ValidationError: If either value is blank or the email is malformed.
    """
    domain = (domain or "").strip().lower()
    admin_email = (admin_email or "").strip()
    if not domain:
        raise ValidationError("Domain is required")
    if not admin_email:
        raise ValidationError("Admin email is required")
    if not EMAIL_RE.match(admin_email):
        raise ValidationError(f"Admin email '{admin_email}' is not a valid email address")
    return domain, admin_email


class AuditService:
    """Facade wiring configuration, the Workspace client and the store."""

    def __init__(
        self,
        client: Optional[WorkspaceClient] = None,
        store: Optional[AuditStore] = None,
        config: Optional[AuditConfig] = None,
    ) -> None:
        self.config = config or get_config()
        self.client = client or WorkspaceClient(
            ServiceAccountCredentialProvider(self.config.get_service_account_key)
        )
        self.store = store or get_audit_store()
        self.orchestrator = AuditOrchestrator(
            self.client, self.store, max_workers=self.config.max_workers
        )

    def create_connection(self, owner_id: str, domain: str, admin_email: str) -> str:
        """Create or refresh the owner's connection for a domain."""
        if not (owner_id or "").strip():
            raise ValidationError("Owner id is required")
        domain, admin_email = validate_connection_input(domain, admin_email)
        return self.store.upsert_connection(owner_id, domain, admin_email)

    def test_connection(self, domain: str, admin_email: str) -> Dict[str, Any]:
        """Check that delegation works by listing a single directory user.

        Known failures are reported in the result rather than raised; the
        store is never written.
        """
        try:
            domain, admin_email = validate_connection_input(domain, admin_email)
            users = self.client.sample_users(domain, admin_email)
        except DriveAuditError as e:
            logger.warning(f"Connection test for {domain} failed: {e}")
            return {"success": False, "message": f"Connection failed: {e.format_message()}"}

        return {
            "success": True,
            "message": "Successfully connected to Google Workspace APIs",
            "userCount": len(users),
        }

    def run_audit(self, domain: str, admin_email: str) -> AuditSummary:
        """Run a full domain audit and store it."""
        domain, admin_email = validate_connection_input(domain, admin_email)
        return self.orchestrator.run_audit(domain, admin_email)

    def list_connections(self, owner_id: str) -> List[DomainConnection]:
        return self.store.list_connections(owner_id)

    def get_connection(self, connection_id: str) -> DomainConnection:
        return self.store.get_connection(connection_id)

    def deactivate_connection(self, connection_id: str) -> None:
        self.store.deactivate_connection(connection_id)

    def list_audit_history(self, domain: Optional[str] = None) -> List[AuditRun]:
        if domain is not None:
            domain = domain.strip().lower()
        return self.store.list_audit_history(domain or None)

    def get_audit_run(self, audit_id: str) -> AuditRun:
        return self.store.get_audit_run(audit_id)
