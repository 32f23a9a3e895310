"""Centralized constants for the Drive Audit server."""

# Page sizes (API maximums)
DIRECTORY_PAGE_SIZE = 500
FILES_PAGE_SIZE = 1000
TEST_CONNECTION_PAGE_SIZE = 1

# Default Values
DEFAULT_MAX_WORKERS = 5
AUDIT_HISTORY_LIMIT = 50

# Drive query for link-shareable files visible to the impersonated user
PUBLIC_FILES_QUERY = "visibility='anyoneCanFind' or visibility='anyoneWithLink'"
PUBLIC_FILES_FIELDS = (
    "nextPageToken, files(id, name, webViewLink, modifiedTime, permissions, owners)"
)
DIRECTORY_USER_FIELDS = (
    "nextPageToken, users(id, primaryEmail, name/fullName, suspended)"
)

# Permission Types
PERM_TYPE_ANYONE = 'anyone'
PERM_TYPE_DOMAIN = 'domain'
