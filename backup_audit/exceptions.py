"""
Custom exception hierarchy for the backup auditor.

Each class corresponds to one failure kind the audit and review steps
distinguish when deciding whether to warn and continue or abort.
"""
from pathlib import Path
from typing import Optional


class BackupAuditError(Exception):
    """Base exception for all backup auditor errors."""
    pass


class ConfigError(BackupAuditError):
    """Raised when a required setting (env var, CLI flag) is missing or invalid."""
    pass


class PathNotFoundError(BackupAuditError):
    """Raised when a configured directory does not exist."""
    pass


class PathNotAccessibleError(BackupAuditError):
    """Raised when a path exists but cannot be used (not a dir, not writable, drive gone)."""
    pass


class HashIoError(BackupAuditError):
    """Raised when a file cannot be read for hashing."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Failed to hash {path}: {reason}")
        self.path = path


class RelocationError(BackupAuditError):
    """
    Raised when moving a file to the trash fails.

    `stage` is "copy" when nothing was changed on disk, or "delete" when the
    trash copy exists but the original could not be removed.
    """

    COPY = "copy"
    DELETE = "delete"

    def __init__(self, stage: str, source: Path, destination: Optional[Path], reason: str):
        super().__init__(f"{stage} failed for {source}: {reason}")
        self.stage = stage
        self.source = source
        self.destination = destination


class CommandSpawnError(BackupAuditError):
    """Raised when an external viewer or file manager cannot be launched."""
    pass


class InvalidInputError(BackupAuditError):
    """Raised when interactive input can no longer be read."""
    pass
