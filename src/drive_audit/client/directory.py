"""Directory listing mixin for WorkspaceClient."""
import logging
from typing import Any

from googleapiclient.errors import HttpError

from ..audit.models import DirectoryUser
from ..utils.constants import (
    DIRECTORY_PAGE_SIZE,
    DIRECTORY_USER_FIELDS,
    TEST_CONNECTION_PAGE_SIZE,
)
from ..utils.errors import (
    TRANSPORT_ERRORS,
    DirectoryUnavailable,
    describe_http_error,
    describe_transport_error,
)
from .pagination import iter_pages

logger = logging.getLogger(__name__)


class DirectoryMixin:
    """Mixin providing Admin SDK user directory operations."""

    def list_users(self, domain: str, admin_email: str) -> list[DirectoryUser]:
        """List every user in a domain, suspended ones included.

        Args:
            domain: The organization's primary domain.
            admin_email: Admin identity to impersonate for the directory read.

        Returns:
            All users, in the order the directory returned them.

        Raises:
            DirectoryUnavailable: If any page request fails.
            ConfigurationError: If the service-account key is unusable.
        """
        service = self.directory_service(admin_email)

        def fetch_page(page_token: Any) -> dict[str, Any]:
            return service.users().list(
                domain=domain,
                maxResults=DIRECTORY_PAGE_SIZE,
                fields=DIRECTORY_USER_FIELDS,
                pageToken=page_token,
            ).execute()

        users: list[DirectoryUser] = []
        try:
            for page in iter_pages(fetch_page):
                users.extend(DirectoryUser.from_api(u) for u in page.get('users', []))
                logger.debug(f"Fetched directory page for {domain}: {len(users)} users so far")
        except HttpError as e:
            raise DirectoryUnavailable(domain, describe_http_error(e))
        except TRANSPORT_ERRORS as e:
            raise DirectoryUnavailable(domain, describe_transport_error(e))

        logger.info(f"Listed {len(users)} users in {domain}")
        return users

    def sample_users(self, domain: str, admin_email: str) -> list[DirectoryUser]:
        """Fetch a single page holding at most one user.

        Used as a smoke test of the delegation setup.
        """
        service = self.directory_service(admin_email)
        try:
            response = service.users().list(
                domain=domain,
                maxResults=TEST_CONNECTION_PAGE_SIZE,
                fields=DIRECTORY_USER_FIELDS,
            ).execute()
        except HttpError as e:
            raise DirectoryUnavailable(domain, describe_http_error(e))
        except TRANSPORT_ERRORS as e:
            raise DirectoryUnavailable(domain, describe_transport_error(e))

        return [DirectoryUser.from_api(u) for u in response.get('users', [])]
