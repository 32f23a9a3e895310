"""
Service-account credentials with domain-wide delegation.

This module turns the configured service-account key into Google credentials
that act as a single user of the audited organization.
"""

import json
import logging
from typing import Any, Callable, Dict, List, Optional, Union

from google.oauth2 import service_account

from ..utils.errors import ConfigurationError
from .scopes import get_scopes

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"
PRIVATE_KEY_MARKER = "PRIVATE KEY-----"


def parse_service_account_key(raw_key: Optional[str]) -> Dict[str, Any]:
    """
    Parse and validate service-account key material.

    Args:
        raw_key: The JSON text of a service-account key file.

    Returns:
        The key as a dict, with ``token_uri`` filled in when missing.

    Raises:
        ConfigurationError: If the key is absent or not well-formed.
    """
    if not raw_key or not raw_key.strip():
        raise ConfigurationError(
            "GOOGLE_SERVICE_ACCOUNT_KEY environment variable is required"
        )

    try:
        info = json.loads(raw_key)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Service account key is not valid JSON: {e}")

    if not isinstance(info, dict):
        raise ConfigurationError("Service account key must be a JSON object")

    missing = [k for k in ("client_email", "private_key") if not info.get(k)]
    if missing:
        raise ConfigurationError(
            f"Service account key is missing required fields: {', '.join(missing)}"
        )

    if PRIVATE_KEY_MARKER not in info["private_key"]:
        raise ConfigurationError("Service account private_key is not a PEM private key")

    info.setdefault("token_uri", DEFAULT_TOKEN_URI)
    return info


class ServiceAccountCredentialProvider:
    """Issues impersonated credentials from an injected service-account key.

    The key may be given as text or as a callable returning the text; either
    way it is resolved and parsed on every call to ``issue`` and nothing
    derived from it is kept on the provider.
    """

    def __init__(
        self, service_account_key: Union[str, None, Callable[[], Optional[str]]]
    ) -> None:
        self._service_account_key = service_account_key

    def _raw_key(self) -> Optional[str]:
        if callable(self._service_account_key):
            return self._service_account_key()
        return self._service_account_key

    def issue(
        self, subject: str, scopes: Optional[List[str]] = None
    ) -> service_account.Credentials:
        """Build credentials that impersonate ``subject``.

        Args:
            subject: Email of the user to act as.
            scopes: Scopes to request. Defaults to the fixed audit scope set.

        Returns:
            Service-account credentials bound to ``subject``.

        Raises:
            ConfigurationError: If the key is absent, unreadable or malformed.
        """
        info = parse_service_account_key(self._raw_key())
        try:
            credentials = service_account.Credentials.from_service_account_info(
                info,
                scopes=scopes or get_scopes(),
                subject=subject,
            )
        except (ValueError, TypeError, KeyError) as e:
            raise ConfigurationError(f"Invalid service account key: {e}")

        logger.debug(f"Issued credentials for {info['client_email']} as {subject}")
        return credentials
