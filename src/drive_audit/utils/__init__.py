"""Shared errors and constants for Drive Audit."""
