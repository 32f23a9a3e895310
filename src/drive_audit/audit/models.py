"""Typed records for connections, directory users and audit results.

Persisted records are frozen and hold tuples, so an audit run cannot be
edited once it has been written.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from ..utils.constants import PERM_TYPE_ANYONE, PERM_TYPE_DOMAIN


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


@dataclass
class DomainConnection:
    """A configured domain and the admin identity used to read its directory."""

    id: str
    owner_id: str
    domain: str
    admin_email: str
    is_active: bool = True
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "domain": self.domain,
            "admin_email": self.admin_email,
            "is_active": self.is_active,
            "created_at": _format_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DomainConnection":
        return cls(
            id=data["id"],
            owner_id=data["owner_id"],
            domain=data["domain"],
            admin_email=data["admin_email"],
            is_active=data.get("is_active", True),
            created_at=_parse_timestamp(data.get("created_at")),
        )


@dataclass(frozen=True)
class DirectoryUser:
    """A user as listed by the Admin SDK directory."""

    email: str
    name: Optional[str] = None
    suspended: bool = False
    id: Optional[str] = None

    @classmethod
    def from_api(cls, user: Dict[str, Any]) -> "DirectoryUser":
        """Build from a ``users.list`` entry."""
        return cls(
            email=user.get("primaryEmail", ""),
            name=(user.get("name") or {}).get("fullName"),
            suspended=bool(user.get("suspended", False)),
            id=user.get("id"),
        )


@dataclass(frozen=True)
class PermissionEntry:
    """One grant on a file. ``type`` is Drive's grantee type."""

    type: str
    role: Optional[str] = None
    domain: Optional[str] = None

    def grants_public_access(self, audited_domain: str) -> bool:
        if self.type == PERM_TYPE_ANYONE:
            return True
        return self.type == PERM_TYPE_DOMAIN and self.domain == audited_domain

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "role": self.role, "domain": self.domain}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PermissionEntry":
        return cls(
            type=data.get("type", ""),
            role=data.get("role"),
            domain=data.get("domain"),
        )


def is_publicly_reachable(
    permissions: Tuple[PermissionEntry, ...], audited_domain: str
) -> bool:
    """Whether any permission exposes a file beyond named users.

    Args:
        permissions: The file's permission entries.
        audited_domain: Domain of the organization being audited.

    Returns:
        True for an "anyone" grant or a domain grant to ``audited_domain``.
    """
    return any(p.grants_public_access(audited_domain) for p in permissions)


@dataclass(frozen=True)
class SharedFileRecord:
    """A file found to be publicly reachable."""

    id: str
    name: str
    owner: str
    web_view_link: Optional[str] = None
    modified_time: Optional[str] = None
    permissions: Tuple[PermissionEntry, ...] = ()

    @classmethod
    def from_api(cls, file: Dict[str, Any], fallback_owner: str) -> "SharedFileRecord":
        """Build from a ``files.list`` entry.

        The first owner reported by Drive wins; ``fallback_owner`` is used
        when Drive reports none.
        """
        owners = file.get("owners") or []
        owner = owners[0].get("emailAddress") if owners else None
        return cls(
            id=file["id"],
            name=file.get("name", ""),
            owner=owner or fallback_owner,
            web_view_link=file.get("webViewLink"),
            modified_time=file.get("modifiedTime"),
            permissions=tuple(
                PermissionEntry.from_dict(p) for p in file.get("permissions") or []
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "owner": self.owner,
            "web_view_link": self.web_view_link,
            "modified_time": self.modified_time,
            "permissions": [p.to_dict() for p in self.permissions],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SharedFileRecord":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            owner=data.get("owner", ""),
            web_view_link=data.get("web_view_link"),
            modified_time=data.get("modified_time"),
            permissions=tuple(
                PermissionEntry.from_dict(p) for p in data.get("permissions", [])
            ),
        )


@dataclass(frozen=True)
class UserAuditResult:
    """Public files owned by one user. Only built when there is at least one."""

    user: str
    user_name: Optional[str]
    files: Tuple[SharedFileRecord, ...]

    @property
    def file_count(self) -> int:
        return len(self.files)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user": self.user,
            "user_name": self.user_name,
            "file_count": self.file_count,
            "files": [f.to_dict() for f in self.files],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserAuditResult":
        return cls(
            user=data["user"],
            user_name=data.get("user_name"),
            files=tuple(SharedFileRecord.from_dict(f) for f in data.get("files", [])),
        )


@dataclass(frozen=True)
class AuditRun:
    """One completed domain audit.

    ``id`` and ``created_at`` are assigned by the store when the run is saved.
    """

    domain: str
    total_users: int
    results: Tuple[UserAuditResult, ...] = ()
    failed_users: Tuple[str, ...] = ()
    id: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def total_files(self) -> int:
        return sum(r.file_count for r in self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "domain": self.domain,
            "total_users": self.total_users,
            "total_files": self.total_files,
            "results": [r.to_dict() for r in self.results],
            "failed_users": list(self.failed_users),
            "created_at": _format_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuditRun":
        return cls(
            id=data.get("id"),
            domain=data["domain"],
            total_users=data["total_users"],
            results=tuple(UserAuditResult.from_dict(r) for r in data.get("results", [])),
            failed_users=tuple(data.get("failed_users", [])),
            created_at=_parse_timestamp(data.get("created_at")),
        )


@dataclass
class AuditSummary:
    """What ``run_audit`` hands back: the persisted run plus derived counts."""

    run: AuditRun
    users_with_public_files: int = field(init=False)

    def __post_init__(self) -> None:
        self.users_with_public_files = len(self.run.results)

    @property
    def audit_id(self) -> Optional[str]:
        return self.run.id

    @property
    def total_users(self) -> int:
        return self.run.total_users

    @property
    def total_files(self) -> int:
        return self.run.total_files

    @property
    def results(self) -> Tuple[UserAuditResult, ...]:
        return self.run.results

    @property
    def failed_users(self) -> Tuple[str, ...]:
        return self.run.failed_users

    def to_dict(self) -> Dict[str, Any]:
        return {
            "auditId": self.audit_id,
            "totalUsers": self.total_users,
            "usersWithPublicFiles": self.users_with_public_files,
            "totalFiles": self.total_files,
            "failedUsers": list(self.failed_users),
            "results": [r.to_dict() for r in self.results],
        }
