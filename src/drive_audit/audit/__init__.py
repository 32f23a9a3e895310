"""Domain sharing audit: records, storage and orchestration.

The service facade lives in ``drive_audit.audit.service``.
"""

from .models import (
    AuditRun,
    AuditSummary,
    DirectoryUser,
    DomainConnection,
    PermissionEntry,
    SharedFileRecord,
    UserAuditResult,
    is_publicly_reachable,
)
from .orchestrator import AuditOrchestrator
from .store import (
    AuditStore,
    InMemoryAuditStore,
    LocalFileAuditStore,
    get_audit_store,
    set_audit_store,
)

__all__ = [
    # Records
    "AuditRun",
    "AuditSummary",
    "DirectoryUser",
    "DomainConnection",
    "PermissionEntry",
    "SharedFileRecord",
    "UserAuditResult",
    "is_publicly_reachable",
    # Orchestration
    "AuditOrchestrator",
    # Storage
    "AuditStore",
    "InMemoryAuditStore",
    "LocalFileAuditStore",
    "get_audit_store",
    "set_audit_store",
]
