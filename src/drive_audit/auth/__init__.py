"""
Service-account authentication package for Drive Audit.

This package issues credentials through Google Workspace domain-wide
delegation:
- A fixed scope set shared by every credential
- One credential per impersonated user, built from an injected key
"""

from .scopes import AUDIT_SCOPES, get_scopes
from .service_account import (
    ServiceAccountCredentialProvider,
    parse_service_account_key,
)

__all__ = [
    # Scopes
    "AUDIT_SCOPES",
    "get_scopes",
    # Credentials
    "ServiceAccountCredentialProvider",
    "parse_service_account_key",
]
