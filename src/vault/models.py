"""Data models for the local vault.

Vault entries are tagged with an explicit kind so callers never have to check
an object to find out whether it is a folder or a file.
"""

from dataclasses import dataclass
from enum import Enum


class EntryKind(Enum):
    """Kind of a vault entry."""
    FILE = "file"
    FOLDER = "folder"


@dataclass(frozen=True)
class VaultEntry:
    """A file or folder inside the vault.

    Attributes:
        kind: Whether this entry is a file or a folder
        path: Vault-relative path using '/' separators (no trailing slash)
    """
    kind: EntryKind
    path: str

    @property
    def name(self) -> str:
        return self.path.rsplit('/', 1)[-1]


@dataclass(frozen=True)
class VaultFile:
    """A Markdown file in the vault.

    Attributes:
        path: Vault-relative path, e.g. "Notes/Projects/plan.md"
        basename: File name without extension, e.g. "plan"
    """
    path: str
    basename: str

    @classmethod
    def from_path(cls, path: str) -> 'VaultFile':
        name = path.rsplit('/', 1)[-1]
        basename = name.rsplit('.', 1)[0] if '.' in name else name
        return cls(path=path, basename=basename)
