"""Custom exceptions for the Drive Audit server.

This module provides structured error handling with specific exception types
for different failure scenarios. All exceptions inherit from DriveAuditError.
"""
from typing import Optional, Any

from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import Error as GoogleApiClientError
from httplib2 import HttpLib2Error

# Failures below the HTTP status level: DNS, sockets, token refresh,
# malformed responses. HttpError is a GoogleApiClientError, so catch it first.
TRANSPORT_ERRORS = (GoogleAuthError, GoogleApiClientError, HttpLib2Error, OSError)


class DriveAuditError(Exception):
    """Base exception for all drive-audit errors.

    Attributes:
        message: Human-readable error description.
        user_email: Optional user the error relates to.
    """

    def __init__(self, message: str, user_email: Optional[str] = None) -> None:
        self.message = message
        self.user_email = user_email
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format the error message, optionally including the user."""
        if self.user_email:
            return f"{self.message} (user: {self.user_email})"
        return self.message


class ConfigurationError(DriveAuditError):
    """Raised when the service-account key is missing or malformed."""
    pass


class ValidationError(DriveAuditError):
    """Raised when connection setup input is incomplete or malformed."""
    pass


class NotFoundError(DriveAuditError):
    """Raised when an audit run or connection id does not exist."""

    def __init__(self, entity: str, entity_id: str) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} '{entity_id}' not found")


class DirectoryUnavailable(DriveAuditError):
    """Raised when the organization's user directory cannot be listed."""

    def __init__(self, domain: str, cause: str) -> None:
        self.domain = domain
        self.cause = cause
        super().__init__(f"Failed to fetch domain users for {domain}: {cause}")


class ScanError(DriveAuditError):
    """Raised when one user's shared files cannot be listed.

    Attributes:
        cause: Description of the underlying failure.
    """

    def __init__(self, user_email: str, cause: str) -> None:
        self.cause = cause
        super().__init__(f"Failed to fetch files: {cause}", user_email)


def describe_http_error(error: Any) -> str:
    """Describe a googleapiclient HttpError in plain words.

    Args:
        error: The error raised by a Google API call.

    Returns:
        A readable cause, keyed on the HTTP status when there is one.
    """
    try:
        status = error.resp.status
    except AttributeError:
        return f"API error: {str(error)}"

    if status == 401:
        return "Authentication failed. Check domain-wide delegation for the service account."
    elif status == 403:
        return "Access denied. The impersonated user lacks permission or the API is disabled."
    elif status == 404:
        return "Resource not found. Check the domain and user."
    elif status == 429:
        return "API quota exceeded. Please wait a moment and try again."
    else:
        return f"API error (HTTP {status}): {str(error)}"


def describe_transport_error(error: Exception) -> str:
    """Describe a failure that happened before an HTTP status was received."""
    return f"{type(error).__name__}: {error}"


# Standard error message format helper
def format_error(action: str, error: Exception) -> str:
    """Format an error message consistently.

    Args:
        action: The action that failed (e.g., "Run audit").
        error: The exception that occurred.

    Returns:
        Formatted error string.
    """
    if isinstance(error, DriveAuditError):
        return f"{action} failed: {error.format_message()}"
    return f"{action} failed: {str(error)}"
