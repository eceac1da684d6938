"""Command-line interface for syncing a Markdown vault with ClickUp Docs.

This package provides the `clickup-sync` CLI tool that loads the sync
configuration and state, runs the sync engine in one of its modes (sync all,
sync one file, download, cleanup, watch) and reports the outcome with
colored output and meaningful exit codes.
"""

from .sync_command import SyncCommand
from .init_command import InitCommand
from .models import ExitCode, SyncState, SyncSummary
from .errors import (
    CLIError,
    ConfigNotFoundError,
    InitError,
    StateError,
)

__all__ = [
    'SyncCommand',
    'InitCommand',
    'ExitCode',
    'SyncState',
    'SyncSummary',
    'CLIError',
    'ConfigNotFoundError',
    'InitError',
    'StateError',
]
