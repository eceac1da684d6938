"""Data models for the sync engine.

This module defines all data models used by the reconciliation engine.
All models use dataclasses for clean, type-safe data structures.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


VAULT_ROOT_LABEL = "(Vault Root)"


def normalize_folder_path(folder_path: str) -> str:
    """Normalize a folder path to end in '/' unless it is the vault root.

    Examples:
        >>> normalize_folder_path("Notes")
        'Notes/'
        >>> normalize_folder_path("")
        ''
    """
    folder = (folder_path or "").strip()
    if folder == "" or folder.endswith('/'):
        return folder
    return folder + '/'


@dataclass
class SyncTarget:
    """One configured correspondence between a vault folder and a ClickUp Doc.

    Attributes:
        doc_id: ClickUp Doc id (targets with an empty id are skipped)
        folder_path: Vault folder path ("" means the vault root)
        parent_page_id: Page new pages are created under when no folder
                        page resolves (None for top-level pages)
    """
    doc_id: str
    folder_path: str = ""
    parent_page_id: Optional[str] = None

    @property
    def prefix(self) -> str:
        return normalize_folder_path(self.folder_path)

    @property
    def label(self) -> str:
        return self.folder_path or VAULT_ROOT_LABEL

    def matches(self, path: str) -> bool:
        """Check whether a vault path belongs to this target's folder."""
        prefix = self.prefix
        return prefix == "" or path.startswith(prefix)

    def relative_path(self, path: str) -> str:
        """Path of a file relative to this target's folder."""
        prefix = self.prefix
        if prefix and path.startswith(prefix):
            return path[len(prefix):].lstrip('/')
        return path.lstrip('/')


@dataclass
class SyncConfig:
    """Sync settings loaded from .clickup-sync/config.yaml.

    Attributes:
        sync_targets: Targets in configuration order
        workspace_id: Optional workspace id overriding CLICKUP_WORKSPACE_ID
        sync_on_save: Whether the watcher uploads files as they are saved
    """
    sync_targets: List[SyncTarget] = field(default_factory=list)
    workspace_id: Optional[str] = None
    sync_on_save: bool = False


@dataclass(frozen=True)
class RemotePage:
    """A page of a ClickUp Doc as returned by the API.

    Snapshot per sync pass; never mutated locally.
    """
    id: str
    name: str
    parent_id: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any], parent_id: Optional[str] = None) -> 'RemotePage':
        """Build a page from an API payload.

        Args:
            data: One page object from the API
            parent_id: Parent to use when the payload carries none (nested listings)

        Raises:
            ValueError: If the payload has no id
        """
        page_id = data.get('id')
        if page_id is None or str(page_id).strip() == "":
            raise ValueError("Page data missing required 'id' field")

        name = data.get('name') or data.get('title') or 'Untitled'
        raw_parent = data.get('parent_id') or data.get('parent_page_id') or parent_id
        return cls(
            id=str(page_id),
            name=str(name),
            parent_id=str(raw_parent) if raw_parent else None,
        )


@dataclass
class RemotePageNode:
    """A RemotePage with its children, built fresh every sync pass.

    Attributes:
        id: Page id
        name: Page display name
        parent_id: Parent page id (None or unresolvable for roots)
        children: Child nodes in listing order
    """
    id: str
    name: str
    parent_id: Optional[str] = None
    children: List['RemotePageNode'] = field(default_factory=list)

    @classmethod
    def from_page(cls, page: RemotePage) -> 'RemotePageNode':
        return cls(id=page.id, name=page.name, parent_id=page.parent_id)

    def to_page(self) -> RemotePage:
        return RemotePage(id=self.id, name=self.name, parent_id=self.parent_id)


@dataclass
class SyncCounts:
    """Success/error accumulator folded over files or page subtrees."""
    success: int = 0
    error: int = 0

    def __add__(self, other: 'SyncCounts') -> 'SyncCounts':
        return SyncCounts(self.success + other.success, self.error + other.error)

    def __iadd__(self, other: 'SyncCounts') -> 'SyncCounts':
        self.success += other.success
        self.error += other.error
        return self


@dataclass
class TargetReport:
    """Outcome of syncing one target.

    Attributes:
        target: The sync target
        counts: Per-file success/error counts
        aborted: True if the target was skipped or its page fetch failed
        reason: Why the target was aborted
    """
    target: SyncTarget
    counts: SyncCounts = field(default_factory=SyncCounts)
    aborted: bool = False
    reason: Optional[str] = None


@dataclass
class SyncReport:
    """Aggregate outcome of a sync run across all targets."""
    targets: List[TargetReport] = field(default_factory=list)

    @property
    def totals(self) -> SyncCounts:
        totals = SyncCounts()
        for report in self.targets:
            totals += report.counts
        return totals
