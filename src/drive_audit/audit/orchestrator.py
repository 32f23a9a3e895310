"""Domain-wide sharing audit.

Lists the directory once, scans every active user's Drive for publicly
reachable files, and stores the aggregate as one audit run. A user whose
scan fails is recorded and skipped; only a directory failure aborts the run.
"""

import concurrent.futures
import logging
from typing import Any, Dict, List

from ..utils.constants import DEFAULT_MAX_WORKERS
from ..utils.errors import ConfigurationError, ScanError
from .models import AuditRun, AuditSummary, DirectoryUser, SharedFileRecord, UserAuditResult
from .store import AuditStore

logger = logging.getLogger(__name__)


class AuditOrchestrator:
    """Runs full domain audits and hands the results to an AuditStore."""

    def __init__(
        self,
        client: Any,
        store: AuditStore,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        """
        Args:
            client: Provides ``list_users`` and ``scan_public_files``
                (normally a WorkspaceClient).
            store: Where completed runs are saved.
            max_workers: Ceiling on concurrent user scans. 1 scans sequentially.
        """
        self.client = client
        self.store = store
        self.max_workers = max(1, max_workers)

    def run_audit(self, domain: str, admin_email: str) -> AuditSummary:
        """Audit every active user of ``domain`` and persist the result.

        Args:
            domain: The organization's domain.
            admin_email: Admin identity used to read the directory.

        Returns:
            Summary of the stored run.

        Raises:
            DirectoryUnavailable: If the directory cannot be listed. Nothing is stored.
            ConfigurationError: If the service-account key is unusable.
        """
        users = self.client.list_users(domain, admin_email)
        active = [u for u in users if not u.suspended]
        logger.info(
            f"Starting audit of {domain}: {len(users)} users, "
            f"{len(users) - len(active)} suspended"
        )

        scanned, failed = self._scan_users(domain, active)

        # Directory order, so a run's persisted order is stable.
        results = []
        for user in active:
            files = scanned.get(user.email)
            if files:
                results.append(
                    UserAuditResult(user=user.email, user_name=user.name, files=tuple(files))
                )
        failed_users = tuple(u.email for u in active if u.email in failed)

        run = AuditRun(
            domain=domain,
            total_users=len(users),
            results=tuple(results),
            failed_users=failed_users,
        )
        audit_id = self.store.save_audit_run(run)
        summary = AuditSummary(run=self.store.get_audit_run(audit_id))

        logger.info(
            f"Audit {audit_id} of {domain} complete: {summary.total_files} public files "
            f"across {summary.users_with_public_files} users, {len(failed_users)} failed"
        )
        return summary

    def _scan_users(
        self, domain: str, users: List[DirectoryUser]
    ) -> tuple[Dict[str, List[SharedFileRecord]], set]:
        """Scan each user, collecting files and failures on the calling thread."""
        scanned: Dict[str, List[SharedFileRecord]] = {}
        failed: set = set()

        if self.max_workers == 1:
            for user in users:
                try:
                    scanned[user.email] = self.client.scan_public_files(domain, user.email)
                except ConfigurationError:
                    raise
                except Exception as e:
                    self._record_failure(domain, user.email, e)
                    failed.add(user.email)
            return scanned, failed

        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_email = {
                executor.submit(self.client.scan_public_files, domain, u.email): u.email
                for u in users
            }

            for future in concurrent.futures.as_completed(future_to_email):
                email = future_to_email[future]
                try:
                    scanned[email] = future.result()
                except ConfigurationError:
                    raise
                except Exception as e:
                    self._record_failure(domain, email, e)
                    failed.add(email)

        return scanned, failed

    @staticmethod
    def _record_failure(domain: str, user_email: str, error: Exception) -> None:
        """Log a user whose scan failed. Only a bad key aborts the run."""
        if isinstance(error, ScanError):
            logger.warning(f"Skipping user in audit of {domain}: {error}")
        else:
            logger.error(
                f"Skipping user {user_email} in audit of {domain} after unexpected error: "
                f"{type(error).__name__}: {error}",
                exc_info=error,
            )
