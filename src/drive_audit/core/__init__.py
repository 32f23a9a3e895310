"""
Core utilities package for Drive Audit.

This package provides shared configuration.
"""

from .config import (
    AuditConfig,
    get_config,
    reload_config,
)

__all__ = [
    "AuditConfig",
    "get_config",
    "reload_config",
]
