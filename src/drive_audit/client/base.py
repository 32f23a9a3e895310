"""Base client with impersonated Google API service construction."""
from googleapiclient.discovery import build
from typing import Any

from ..auth import ServiceAccountCredentialProvider


class WorkspaceClientBase:
    """Base class that builds API services acting as a given user."""

    def __init__(self, credential_provider: ServiceAccountCredentialProvider) -> None:
        """Initialize the client.

        Args:
            credential_provider: Issues credentials for each impersonated user.
        """
        self.credential_provider = credential_provider

    def _build_service(self, service_name: str, version: str, subject: str) -> Any:
        """Build a discovery service whose calls run as ``subject``.

        A new service is built per call since the underlying HTTP object is
        not safe to share across threads.
        """
        creds = self.credential_provider.issue(subject)
        return build(service_name, version, credentials=creds, cache_discovery=False)

    def directory_service(self, admin_email: str) -> Any:
        """Admin SDK directory service acting as ``admin_email``."""
        return self._build_service('admin', 'directory_v1', admin_email)

    def drive_service(self, user_email: str) -> Any:
        """Drive v3 service acting as ``user_email``."""
        return self._build_service('drive', 'v3', user_email)
