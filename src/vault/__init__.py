"""Local vault library for document sync.

This package provides the folder-backed store of Markdown notes that the
sync engine reads from and writes into, plus filename sanitizing for pages
downloaded from ClickUp.
"""

from .errors import VaultError, FilesystemError
from .filesafe_converter import FilesafeConverter
from .local_vault import LocalVault
from .models import EntryKind, VaultEntry, VaultFile

__all__ = [
    'VaultError',
    'FilesystemError',
    'FilesafeConverter',
    'LocalVault',
    'EntryKind',
    'VaultEntry',
    'VaultFile',
]
