"""Errors raised by the clickup-sync command surface.

Everything here derives from CLIError so SyncCommand can map the whole family
to a general-error exit code. Sync engine and client errors keep their own
hierarchies.
"""

from typing import Optional

from src.clickup_client.errors import SyncError


class CLIError(SyncError):
    """Base exception for command-level failures."""


class ConfigNotFoundError(CLIError):
    """No ``.clickup-sync/config.yaml`` in the vault."""

    def __init__(self, config_path: str):
        super().__init__(
            f"Configuration not found at {config_path}. "
            f"Run 'clickup-sync --init --doc ID --local FOLDER' first."
        )
        self.config_path = config_path


class InitError(CLIError):
    """``--init`` was given bad input or could not write the configuration."""


class StateError(CLIError):
    """The state file holding the page mapping is unusable.

    Covers both a file that cannot be read or written (``operation`` set) and
    one whose content is malformed (``state_field`` names the bad field when
    known).

    Attributes:
        state_path: Path of ``state.yaml``
        reason: What went wrong
        state_field: Offending top-level field, if any
        operation: 'read', 'write' or 'create_directory' for I/O failures
    """

    def __init__(
        self,
        state_path: str,
        reason: str,
        state_field: Optional[str] = None,
        operation: Optional[str] = None,
    ):
        if operation:
            message = f"Cannot {operation} mapping state {state_path}: {reason}"
        elif state_field:
            message = f"Bad '{state_field}' in mapping state {state_path}: {reason}"
        else:
            message = f"Bad mapping state {state_path}: {reason}"
        super().__init__(message)
        self.state_path = state_path
        self.reason = reason
        self.state_field = state_field
        self.operation = operation
