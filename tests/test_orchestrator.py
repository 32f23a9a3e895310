"""Unit tests for the domain audit orchestrator."""

import sys
import os
import threading
import time
from unittest.mock import Mock

import httplib2
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../src"))

from drive_audit.audit.models import DirectoryUser, PermissionEntry, SharedFileRecord
from drive_audit.audit.orchestrator import AuditOrchestrator
from drive_audit.audit.store import InMemoryAuditStore
from drive_audit.client import WorkspaceClient
from drive_audit.utils.errors import ConfigurationError, DirectoryUnavailable, ScanError


def public_file(file_id, owner):
    return SharedFileRecord(
        id=file_id,
        name=file_id,
        owner=owner,
        permissions=(PermissionEntry(type="anyone", role="reader"),),
    )


class FakeWorkspaceClient:
    """In-memory stand-in for WorkspaceClient."""

    def __init__(self, users, files=None, failing=(), directory_error=None, delay=0.0, errors=None):
        self.users = users
        self.files = files or {}
        self.failing = set(failing)
        self.directory_error = directory_error
        self.delay = delay
        self.errors = errors or {}
        self.scanned = []
        self._lock = threading.Lock()

    def list_users(self, domain, admin_email):
        if self.directory_error:
            raise self.directory_error
        return list(self.users)

    def scan_public_files(self, domain, user_email):
        with self._lock:
            self.scanned.append(user_email)
        if self.delay:
            time.sleep(self.delay)
        if user_email in self.errors:
            raise self.errors[user_email]
        if user_email in self.failing:
            raise ScanError(user_email, "API error (HTTP 500)")
        return [public_file(f"{user_email}-{i}", user_email) for i in range(self.files.get(user_email, 0))]


def scenario_a_client():
    return FakeWorkspaceClient(
        users=[
            DirectoryUser("a@example.com", "User A"),
            DirectoryUser("b@example.com", "User B"),
            DirectoryUser("s@example.com", "Suspended", suspended=True),
        ],
        files={"a@example.com": 2, "s@example.com": 4},
    )


class TestRunAudit:
    """Tests for AuditOrchestrator.run_audit."""

    def setup_method(self):
        self.store = InMemoryAuditStore()

    def test_scenario_a(self):
        client = scenario_a_client()
        orchestrator = AuditOrchestrator(client, self.store, max_workers=1)

        summary = orchestrator.run_audit("example.com", "admin@example.com")

        assert summary.total_users == 3
        assert summary.total_files == 2
        assert summary.users_with_public_files == 1
        [result] = summary.results
        assert result.user == "a@example.com"
        assert result.user_name == "User A"
        assert result.file_count == 2
        assert len(result.files) == 2
        assert "s@example.com" not in client.scanned

    def test_run_is_persisted(self):
        orchestrator = AuditOrchestrator(scenario_a_client(), self.store, max_workers=1)

        summary = orchestrator.run_audit("example.com", "admin@example.com")

        stored = self.store.get_audit_run(summary.audit_id)
        assert stored == summary.run
        assert stored.domain == "example.com"
        assert [r.id for r in self.store.list_audit_history()] == [summary.audit_id]

    def test_scenario_b_directory_failure_persists_nothing(self):
        client = FakeWorkspaceClient(
            users=[], directory_error=DirectoryUnavailable("example.com", "Access denied.")
        )
        orchestrator = AuditOrchestrator(client, self.store)

        with pytest.raises(DirectoryUnavailable):
            orchestrator.run_audit("example.com", "admin@example.com")

        assert self.store.list_audit_history() == []

    def test_scan_error_does_not_abort_run(self):
        client = FakeWorkspaceClient(
            users=[
                DirectoryUser("a@example.com"),
                DirectoryUser("broken@example.com"),
                DirectoryUser("c@example.com"),
            ],
            files={"a@example.com": 1, "broken@example.com": 5, "c@example.com": 3},
            failing=["broken@example.com"],
        )
        orchestrator = AuditOrchestrator(client, self.store, max_workers=1)

        summary = orchestrator.run_audit("example.com", "admin@example.com")

        assert [r.user for r in summary.results] == ["a@example.com", "c@example.com"]
        assert summary.total_files == 4
        assert summary.total_users == 3
        assert summary.failed_users == ("broken@example.com",)
        assert self.store.get_audit_run(summary.audit_id).failed_users == ("broken@example.com",)

    def test_all_scans_fail_still_persists(self):
        client = FakeWorkspaceClient(
            users=[DirectoryUser("a@example.com"), DirectoryUser("b@example.com")],
            failing=["a@example.com", "b@example.com"],
        )
        orchestrator = AuditOrchestrator(client, self.store)

        summary = orchestrator.run_audit("example.com", "admin@example.com")

        assert summary.total_files == 0
        assert summary.results == ()
        assert summary.total_users == 2
        assert len(self.store.list_audit_history()) == 1

    def test_empty_directory(self):
        orchestrator = AuditOrchestrator(FakeWorkspaceClient(users=[]), self.store)
        summary = orchestrator.run_audit("example.com", "admin@example.com")
        assert summary.total_users == 0
        assert summary.total_files == 0

    def test_parallel_matches_directory_order(self):
        users = [DirectoryUser(f"user{i}@example.com") for i in range(12)]
        files = {u.email: (i % 3) for i, u in enumerate(users)}
        failing = ["user4@example.com"]

        sequential = AuditOrchestrator(
            FakeWorkspaceClient(users, files, failing), InMemoryAuditStore(), max_workers=1
        ).run_audit("example.com", "admin@example.com")
        parallel = AuditOrchestrator(
            FakeWorkspaceClient(users, files, failing, delay=0.01), InMemoryAuditStore(), max_workers=4
        ).run_audit("example.com", "admin@example.com")

        assert [r.user for r in parallel.results] == [r.user for r in sequential.results]
        assert parallel.results == sequential.results
        assert parallel.failed_users == sequential.failed_users == ("user4@example.com",)

    def test_totals_invariant(self):
        users = [DirectoryUser(f"u{i}@example.com", suspended=(i % 4 == 0)) for i in range(20)]
        files = {u.email: i % 5 for i, u in enumerate(users)}
        client = FakeWorkspaceClient(users, files, failing=["u7@example.com"])

        summary = AuditOrchestrator(client, self.store, max_workers=3).run_audit(
            "example.com", "admin@example.com"
        )

        active = {u.email for u in users if not u.suspended}
        assert summary.total_files == sum(r.file_count for r in summary.results)
        assert len(summary.results) <= summary.total_users == len(users)
        assert all(r.user in active for r in summary.results)
        assert all(r.file_count > 0 for r in summary.results)

    def test_unexpected_scan_error_is_recorded_as_failed(self):
        client = FakeWorkspaceClient(
            users=[DirectoryUser("a@example.com"), DirectoryUser("b@example.com")],
            files={"b@example.com": 2},
            errors={"a@example.com": RuntimeError("boom")},
        )
        orchestrator = AuditOrchestrator(client, self.store, max_workers=1)

        summary = orchestrator.run_audit("example.com", "admin@example.com")

        assert summary.total_files == 2
        assert [r.user for r in summary.results] == ["b@example.com"]
        assert summary.failed_users == ("a@example.com",)

    @pytest.mark.parametrize("max_workers", [1, 3])
    def test_configuration_error_aborts_run(self, max_workers):
        client = FakeWorkspaceClient(
            users=[DirectoryUser("a@example.com"), DirectoryUser("b@example.com")],
            errors={"b@example.com": ConfigurationError("no key")},
        )
        orchestrator = AuditOrchestrator(client, self.store, max_workers=max_workers)

        with pytest.raises(ConfigurationError):
            orchestrator.run_audit("example.com", "admin@example.com")
        assert self.store.list_audit_history() == []


def workspace_client_with_unreachable_user(unreachable, files_by_user):
    """A real WorkspaceClient whose Drive calls for one user fail in DNS."""
    client = WorkspaceClient(Mock())

    def drive_service(user_email):
        service = Mock()
        execute = service.files.return_value.list.return_value.execute
        if user_email == unreachable:
            execute.side_effect = httplib2.ServerNotFoundError("dns")
        else:
            execute.return_value = {"files": files_by_user.get(user_email, [])}
        return service

    client.drive_service = Mock(side_effect=drive_service)
    client.list_users = Mock(return_value=[
        DirectoryUser("a@example.com"),
        DirectoryUser("b@example.com"),
    ])
    return client


class TestRunAuditWithWorkspaceClient:
    """Runs the orchestrator over WorkspaceClient with mocked Google services."""

    @pytest.mark.parametrize("max_workers", [1, 2])
    def test_network_failure_for_one_user_does_not_abort_run(self, max_workers):
        client = workspace_client_with_unreachable_user(
            "a@example.com",
            {"b@example.com": [{
                "id": "f1",
                "name": "Budget",
                "owners": [{"emailAddress": "b@example.com"}],
                "permissions": [{"type": "anyone", "role": "reader"}],
            }]},
        )
        store = InMemoryAuditStore()
        orchestrator = AuditOrchestrator(client, store, max_workers=max_workers)

        summary = orchestrator.run_audit("example.com", "admin@example.com")

        assert summary.total_files == 1
        assert [r.user for r in summary.results] == ["b@example.com"]
        assert summary.failed_users == ("a@example.com",)
        assert store.get_audit_run(summary.audit_id).total_files == 1
