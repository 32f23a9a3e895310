"""Public sharing scan mixin for WorkspaceClient."""
import logging
from typing import Any

from googleapiclient.errors import HttpError

from ..audit.models import SharedFileRecord, is_publicly_reachable
from ..utils.constants import FILES_PAGE_SIZE, PUBLIC_FILES_FIELDS, PUBLIC_FILES_QUERY
from ..utils.errors import (
    TRANSPORT_ERRORS,
    ScanError,
    describe_http_error,
    describe_transport_error,
)
from .pagination import iter_pages

logger = logging.getLogger(__name__)


class SharingMixin:
    """Mixin providing the per-user public sharing scan."""

    def scan_public_files(self, domain: str, user_email: str) -> list[SharedFileRecord]:
        """List a user's files that anyone (or the whole domain) can reach.

        The Drive visibility query only narrows the listing; each file is
        kept only if its permissions include an "anyone" grant or a domain
        grant to ``domain``.

        Args:
            domain: Domain of the organization being audited.
            user_email: The user to impersonate.

        Returns:
            Publicly reachable files, in listing order.

        Raises:
            ScanError: If any page request fails.
            ConfigurationError: If the service-account key is unusable.
        """
        service = self.drive_service(user_email)

        def fetch_page(page_token: Any) -> dict[str, Any]:
            return service.files().list(
                q=PUBLIC_FILES_QUERY,
                fields=PUBLIC_FILES_FIELDS,
                pageSize=FILES_PAGE_SIZE,
                pageToken=page_token,
            ).execute()

        files: list[SharedFileRecord] = []
        skipped = 0
        try:
            for page in iter_pages(fetch_page):
                for item in page.get('files', []):
                    record = SharedFileRecord.from_api(item, fallback_owner=user_email)
                    if is_publicly_reachable(record.permissions, domain):
                        files.append(record)
                    else:
                        skipped += 1
        except HttpError as e:
            raise ScanError(user_email, describe_http_error(e))
        except TRANSPORT_ERRORS as e:
            raise ScanError(user_email, describe_transport_error(e))

        if skipped:
            logger.debug(f"Dropped {skipped} files for {user_email} without a public grant")
        return files
