"""
Shared configuration for Drive Audit.

This module centralizes configuration values read from the environment
(and an optional ``.env`` file) so the rest of the package receives them
explicitly instead of reading process state on its own.
"""

import logging
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ..utils.constants import DEFAULT_MAX_WORKERS
from ..utils.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()


class AuditConfig:
    """
    Centralized configuration for the audit service.

    Provides a single source of truth for the service-account secret, the
    local data directory and the scan concurrency ceiling.
    """

    def __init__(self) -> None:
        # Service-account key, inline JSON or a key file
        self.service_account_key_env = os.getenv("GOOGLE_SERVICE_ACCOUNT_KEY")
        self.service_account_file = os.getenv("GOOGLE_SERVICE_ACCOUNT_FILE")

        # Local storage for connections and audit history
        self.data_dir = os.path.expanduser(
            os.getenv("DRIVE_AUDIT_DATA_DIR", "~/.config/drive-audit")
        )
        self.store_path = os.path.join(self.data_dir, "audit_store.json")

        self.max_workers = self._parse_max_workers(
            os.getenv("DRIVE_AUDIT_MAX_WORKERS")
        )

    @staticmethod
    def _parse_max_workers(value: Optional[str]) -> int:
        """Parse the worker ceiling, falling back to the default on bad input."""
        if not value:
            return DEFAULT_MAX_WORKERS
        try:
            workers = int(value)
        except ValueError:
            logger.warning(
                f"Ignoring invalid DRIVE_AUDIT_MAX_WORKERS={value!r}, "
                f"using {DEFAULT_MAX_WORKERS}"
            )
            return DEFAULT_MAX_WORKERS
        return max(1, workers)

    def get_service_account_key(self) -> Optional[str]:
        """
        Get the raw service-account key text.

        Returns:
            The inline JSON if set, else the content of the key file, else None.

        Raises:
            ConfigurationError: If the key file is set but cannot be read.
        """
        if self.service_account_key_env:
            return self.service_account_key_env

        if self.service_account_file:
            path = os.path.expanduser(self.service_account_file)
            try:
                with open(path, "r") as f:
                    return f.read()
            except OSError as e:
                raise ConfigurationError(
                    f"Cannot read service account file {path}: {e}"
                )

        return None

    def is_configured(self) -> bool:
        """Check if a service-account key source is set."""
        return bool(self.service_account_key_env or self.service_account_file)

    def get_data_dir(self) -> str:
        """
        Get the data directory path, creating it if necessary.

        Returns:
            Path to the data directory.
        """
        if not os.path.exists(self.data_dir):
            os.makedirs(self.data_dir, exist_ok=True)
        return self.data_dir

    def get_environment_summary(self) -> Dict[str, Any]:
        """Get a summary of the current configuration (excluding secrets)."""
        return {
            "service_account_configured": self.is_configured(),
            "service_account_source": (
                "env" if self.service_account_key_env
                else "file" if self.service_account_file
                else None
            ),
            "data_dir": self.data_dir,
            "store_path": self.store_path,
            "max_workers": self.max_workers,
        }


# Global configuration instance
_config: Optional[AuditConfig] = None


def get_config() -> AuditConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = AuditConfig()
    return _config


def reload_config() -> AuditConfig:
    """Reload the configuration from environment variables."""
    global _config
    _config = AuditConfig()
    return _config
