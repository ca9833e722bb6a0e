"""Exception hierarchy for the export engine."""

from __future__ import annotations


class DatarootExportError(RuntimeError):
    """Base error for every failure raised by the export engine."""


class ConfigurationError(DatarootExportError, ValueError):
    """Export settings are malformed; raised before any filesystem access."""


class AvailabilityError(DatarootExportError):
    """The destination directory is missing or not writable."""


class BackupFailed(DatarootExportError):
    """An existing file could not be backed up ahead of an overwrite."""


class CopyFailed(DatarootExportError):
    """A single source file could not be copied to its destination."""


class WriteTargetIsDirectory(DatarootExportError):
    """The row export destination already exists as a directory."""


class CannotOpenTarget(DatarootExportError):
    """The row export destination could not be opened for writing."""


class RowWriteFailed(DatarootExportError):
    """A row could not be written; the row export is aborted."""


__all__ = [
    "AvailabilityError",
    "BackupFailed",
    "CannotOpenTarget",
    "ConfigurationError",
    "CopyFailed",
    "DatarootExportError",
    "RowWriteFailed",
    "WriteTargetIsDirectory",
]
