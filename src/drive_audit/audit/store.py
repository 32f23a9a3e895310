"""
Audit Store for Drive Audit.

This module provides a standardized interface for persisting domain
connections and audit history, with an in-memory implementation and one
that persists to a local JSON file.
"""

import dataclasses
import json
import logging
import os
import tempfile
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from threading import RLock
from typing import Callable, Dict, List, Optional

from ..utils.constants import AUDIT_HISTORY_LIMIT
from ..utils.errors import NotFoundError
from .models import AuditRun, DomainConnection

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


class AuditStore(ABC):
    """Abstract base class for connection and audit run storage."""

    @abstractmethod
    def upsert_connection(self, owner_id: str, domain: str, admin_email: str) -> str:
        """Create the (owner, domain) connection or refresh the existing one."""
        pass

    @abstractmethod
    def list_connections(self, owner_id: str) -> List[DomainConnection]:
        """List all connections belonging to an owner."""
        pass

    @abstractmethod
    def get_connection(self, connection_id: str) -> DomainConnection:
        """Get a connection by id."""
        pass

    @abstractmethod
    def deactivate_connection(self, connection_id: str) -> None:
        """Mark a connection inactive."""
        pass

    @abstractmethod
    def save_audit_run(self, run: AuditRun) -> str:
        """Append an audit run and return its id."""
        pass

    @abstractmethod
    def list_audit_history(
        self, domain: Optional[str] = None, limit: int = AUDIT_HISTORY_LIMIT
    ) -> List[AuditRun]:
        """List audit runs, newest first."""
        pass

    @abstractmethod
    def get_audit_run(self, audit_id: str) -> AuditRun:
        """Get an audit run by id."""
        pass


class InMemoryAuditStore(AuditStore):
    """Audit store kept in process memory."""

    def __init__(self, clock: Callable[[], datetime] = _now) -> None:
        self._connections: Dict[str, DomainConnection] = {}
        self._audits: Dict[str, AuditRun] = {}
        self._audit_order: List[str] = []  # insertion order
        self._clock = clock
        self._lock = RLock()

    def _persist_locked(self) -> None:
        """Hook for subclasses that write state elsewhere. Caller must hold lock."""
        pass

    def upsert_connection(self, owner_id: str, domain: str, admin_email: str) -> str:
        with self._lock:
            for connection in self._connections.values():
                if connection.owner_id == owner_id and connection.domain == domain:
                    connection.admin_email = admin_email
                    connection.is_active = True
                    self._persist_locked()
                    logger.info(f"Updated connection {connection.id} for {domain}")
                    return connection.id

            connection = DomainConnection(
                id=_new_id(),
                owner_id=owner_id,
                domain=domain,
                admin_email=admin_email,
                is_active=True,
                created_at=self._clock(),
            )
            self._connections[connection.id] = connection
            self._persist_locked()
            logger.info(f"Created connection {connection.id} for {domain}")
            return connection.id

    def list_connections(self, owner_id: str) -> List[DomainConnection]:
        with self._lock:
            return [
                dataclasses.replace(c)
                for c in self._connections.values()
                if c.owner_id == owner_id
            ]

    def get_connection(self, connection_id: str) -> DomainConnection:
        with self._lock:
            connection = self._connections.get(connection_id)
            if connection is None:
                raise NotFoundError("Connection", connection_id)
            return dataclasses.replace(connection)

    def deactivate_connection(self, connection_id: str) -> None:
        with self._lock:
            connection = self._connections.get(connection_id)
            if connection is None:
                raise NotFoundError("Connection", connection_id)
            if connection.is_active:
                connection.is_active = False
                self._persist_locked()
                logger.info(f"Deactivated connection {connection_id}")

    def save_audit_run(self, run: AuditRun) -> str:
        with self._lock:
            stored = dataclasses.replace(run, id=_new_id(), created_at=self._clock())
            self._audits[stored.id] = stored
            self._audit_order.append(stored.id)
            self._persist_locked()
            logger.info(
                f"Stored audit {stored.id} for {stored.domain} "
                f"({stored.total_files} public files)"
            )
            return stored.id

    def list_audit_history(
        self, domain: Optional[str] = None, limit: int = AUDIT_HISTORY_LIMIT
    ) -> List[AuditRun]:
        limit = min(limit, AUDIT_HISTORY_LIMIT)
        with self._lock:
            indexed = [
                (self._audits[audit_id], position)
                for position, audit_id in enumerate(self._audit_order)
            ]
        if domain is not None:
            indexed = [(run, pos) for run, pos in indexed if run.domain == domain]
        indexed.sort(key=lambda item: (item[0].created_at, item[1]), reverse=True)
        return [run for run, _ in indexed[:limit]]

    def get_audit_run(self, audit_id: str) -> AuditRun:
        with self._lock:
            run = self._audits.get(audit_id)
        if run is None:
            raise NotFoundError("Audit", audit_id)
        return run


class LocalFileAuditStore(InMemoryAuditStore):
    """Audit store that persists its whole state to a local JSON file."""

    def __init__(self, path: str, clock: Callable[[], datetime] = _now) -> None:
        """
        Initialize the file-backed store.

        Args:
            path: JSON file holding connections and audits. Created on first write.
            clock: Source of creation timestamps.
        """
        super().__init__(clock=clock)
        self.path = path
        self._load_from_disk()
        logger.info(f"LocalFileAuditStore initialized: {path}")

    def _load_from_disk(self) -> None:
        """Load persisted state. A missing file means an empty store."""
        if not os.path.exists(self.path):
            logger.debug("No persisted audit store file found")
            return

        with open(self.path, "r") as f:
            data = json.load(f)

        for item in data.get("connections", []):
            connection = DomainConnection.from_dict(item)
            self._connections[connection.id] = connection
        for item in data.get("audits", []):
            run = AuditRun.from_dict(item)
            self._audits[run.id] = run
            self._audit_order.append(run.id)

        logger.info(
            f"Loaded {len(self._connections)} connections and "
            f"{len(self._audits)} audits from disk"
        )

    def _persist_locked(self) -> None:
        """Write state to disk atomically. Caller must hold lock."""
        data = {
            "connections": [c.to_dict() for c in self._connections.values()],
            "audits": [self._audits[audit_id].to_dict() for audit_id in self._audit_order],
        }

        target_dir = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(target_dir, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(dir=target_dir, suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, indent=2)
            os.replace(temp_path, self.path)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

        logger.debug(f"Persisted audit store to {self.path}")


# Global audit store instance
_audit_store: Optional[AuditStore] = None


def get_audit_store() -> AuditStore:
    """Get the global audit store instance."""
    global _audit_store

    if _audit_store is None:
        from ..core.config import get_config

        config = get_config()
        config.get_data_dir()
        _audit_store = LocalFileAuditStore(config.store_path)
        logger.info(f"Initialized audit store: {type(_audit_store).__name__}")

    return _audit_store


def set_audit_store(store: Optional[AuditStore]) -> None:
    """Set the global audit store instance."""
    global _audit_store
    _audit_store = store
    logger.info(f"Set audit store: {type(store).__name__}")
