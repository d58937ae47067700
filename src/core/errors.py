"""Migration exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each pipeline stage raises a specific error type for debuggability.
"""

from __future__ import annotations


class MigrationError(Exception):
    """Base exception for all migration failures."""


class MigrationConfigError(MigrationError):
    """Raised for invalid runtime configuration."""


class MigrationIngestError(MigrationError):
    """Raised for missing sources and flat-file parsing failures."""


class SourceRowError(MigrationIngestError):
    """Raised when a source row does not match its column contract."""


class MigrationTransformError(MigrationError):
    """Raised for document transform failures."""


class MigrationStoreError(MigrationError):
    """Raised for destination connection and write failures."""


class DocumentThrottledError(MigrationStoreError):
    """Raised when the destination rejects a write with a throttling signal."""

    def __init__(self, message: str, retry_after_seconds: float | None = None) -> None:
        super().__init__(message)
        self.retry_after_seconds = retry_after_seconds


class MigrationDependencyError(MigrationError):
    """Raised when a runtime dependency cannot be initialized."""
