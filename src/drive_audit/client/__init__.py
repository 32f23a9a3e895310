"""Google Workspace client - modular implementation.

This module provides a facade that combines all client mixins into
a single WorkspaceClient class.
"""
from .base import WorkspaceClientBase
from .directory import DirectoryMixin
from .sharing import SharingMixin


class WorkspaceClient(
    WorkspaceClientBase,
    DirectoryMixin,
    SharingMixin,
):
    """Google Workspace client used by the domain audit.

    Combines the directory and sharing mixins; every call acts as an
    impersonated user of the audited organization.
    """
    pass


__all__ = ['WorkspaceClient']
