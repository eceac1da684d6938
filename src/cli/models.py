"""Data models for CLI operations.

This module defines the exit codes, the persisted sync state and the
summary shown to the user at the end of a run.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Optional


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Operation completed successfully
    - GENERAL_ERROR (1): General error (config issues, validation failures)
    - PARTIAL_FAILURE (2): Run completed but some files or pages failed
    - AUTH_ERROR (3): ClickUp API key or workspace id missing
    - NETWORK_ERROR (4): Network connectivity or API availability issues

    Example:
        >>> exit_code = ExitCode.SUCCESS
        >>> sys.exit(exit_code)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    PARTIAL_FAILURE = 2
    AUTH_ERROR = 3
    NETWORK_ERROR = 4


@dataclass
class SyncState:
    """Persisted sync state in .clickup-sync/state.yaml.

    Attributes:
        last_synced: ISO 8601 timestamp of the last completed run (None if never synced)
        page_mapping: Identity mapping entries, ``"<docId>:::<path>" -> page id``

    Example:
        >>> state = SyncState(page_mapping={"abc:::Notes/a.md": "p1"})
        >>> state = SyncState()  # Never synced
    """
    last_synced: Optional[str] = None
    page_mapping: Dict[str, str] = field(default_factory=dict)


@dataclass
class SyncSummary:
    """Summary of a run for display to the user.

    Attributes:
        success_count: Files or pages synced successfully
        error_count: Files, pages or targets that failed

    Example:
        >>> summary = SyncSummary(success_count=5, error_count=1)
        >>> summary.has_failures
        True
    """
    success_count: int = 0
    error_count: int = 0

    @property
    def has_failures(self) -> bool:
        return self.error_count > 0
