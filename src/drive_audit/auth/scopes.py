"""
Google OAuth Scopes for Drive Audit.

This module defines the scopes granted to impersonated service-account
credentials. Every credential carries the same fixed set, whichever API
call it ends up being used for.
"""

from typing import List

# Admin SDK directory scope
DIRECTORY_USERS_READONLY_SCOPE = (
    "https://www.googleapis.com/auth/admin.directory.users.readonly"
)

# Google Drive scopes
DRIVE_METADATA_READONLY_SCOPE = "https://www.googleapis.com/auth/drive.metadata.readonly"
DRIVE_READONLY_SCOPE = "https://www.googleapis.com/auth/drive.readonly"
DRIVE_FILE_SCOPE = "https://www.googleapis.com/auth/drive.file"

# Google Sheets scopes
SHEETS_WRITE_SCOPE = "https://www.googleapis.com/auth/spreadsheets"

AUDIT_SCOPES = [
    DIRECTORY_USERS_READONLY_SCOPE,
    DRIVE_METADATA_READONLY_SCOPE,
    DRIVE_READONLY_SCOPE,
    SHEETS_WRITE_SCOPE,
    DRIVE_FILE_SCOPE,
]


def get_scopes() -> List[str]:
    """
    Get the scopes issued to every impersonated credential.

    Returns:
        A fresh list of the audit scopes, in declaration order.
    """
    return list(AUDIT_SCOPES)
