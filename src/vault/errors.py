"""Typed exception hierarchy for local vault errors."""

from typing import Optional

from src.clickup_client.errors import SyncError


class VaultError(SyncError):
    """Base exception for all local vault errors."""
    pass


class FilesystemError(VaultError):
    """Raised when filesystem operations fail (read, write, permissions, etc)."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Filesystem operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason
