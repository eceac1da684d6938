"""Folder-backed vault of Markdown notes.

This module provides the LocalVault class, the file storage collaborator of
the sync engine. It exposes the vault as vault-relative '/'-separated paths,
lists entries with an explicit file/folder kind, and wraps every OS failure
in FilesystemError.
"""

import logging
import os
from typing import List, Optional

from .errors import FilesystemError
from .models import EntryKind, VaultEntry, VaultFile

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = ".md"

# Maximum file size to prevent memory exhaustion
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB in bytes


class LocalVault:
    """A directory of Markdown notes addressed by vault-relative paths.

    Listing and existence checks always hit the filesystem; nothing is
    cached between calls, so every sync pass sees the current state.

    Example:
        >>> vault = LocalVault("./notes")
        >>> vault.create("Projects/plan.md", "# Plan")
        >>> [f.path for f in vault.list_markdown_files()]
        ['Projects/plan.md']
    """

    def __init__(self, root: str):
        """Initialize the vault.

        Args:
            root: Directory holding the notes (created on first write if missing)
        """
        self.root = os.path.abspath(root)

    def _resolve(self, path: str, operation: str) -> str:
        """Resolve a vault-relative path to an absolute path inside the root.

        Raises:
            FilesystemError: If the path is absolute or escapes the vault root
        """
        normalized = path.replace('\\', '/').strip('/')
        if os.path.isabs(path) or path.startswith('/'):
            raise FilesystemError(path, operation, 'Vault paths must be relative')

        full_path = os.path.join(self.root, *normalized.split('/')) if normalized else self.root

        real_base = os.path.realpath(self.root)
        real_path = os.path.realpath(full_path)
        if not real_path.startswith(real_base + os.sep) and real_path != real_base:
            raise FilesystemError(
                path,
                operation,
                f'Path traversal detected: {path} is outside vault root {self.root}'
            )
        return full_path

    def _relative(self, full_path: str) -> str:
        return os.path.relpath(full_path, self.root).replace(os.sep, '/')

    def exists(self, path: str) -> bool:
        """Check whether a file or folder exists at the given path."""
        try:
            return os.path.exists(self._resolve(path, 'exists'))
        except FilesystemError:
            return False

    def read(self, path: str) -> str:
        """Read a file's text content.

        Raises:
            FilesystemError: If the file is missing, too large, or unreadable
        """
        full_path = self._resolve(path, 'read')
        try:
            file_size = os.path.getsize(full_path)
        except OSError as e:
            raise FilesystemError(path, 'read', str(e))

        if file_size > MAX_FILE_SIZE:
            size_mb = file_size / (1024 * 1024)
            raise FilesystemError(
                path,
                'read',
                f'File size ({size_mb:.2f} MB) exceeds maximum allowed size '
                f'({MAX_FILE_SIZE // (1024 * 1024)} MB)'
            )

        try:
            with open(full_path, 'r', encoding='utf-8', newline='') as f:
                return f.read()
        except PermissionError:
            raise FilesystemError(path, 'read', 'Permission denied')
        except (OSError, UnicodeDecodeError) as e:
            raise FilesystemError(path, 'read', str(e))

    def _write(self, path: str, content: str, operation: str) -> None:
        full_path = self._resolve(path, operation)
        try:
            with open(full_path, 'w', encoding='utf-8', newline='') as f:
                f.write(content)
        except PermissionError:
            raise FilesystemError(path, operation, 'Permission denied')
        except OSError as e:
            raise FilesystemError(path, operation, str(e))

    def create(self, path: str, content: str) -> None:
        """Create a new file, creating missing parent folders.

        Raises:
            FilesystemError: If the file already exists or cannot be written
        """
        full_path = self._resolve(path, 'create')
        if os.path.exists(full_path):
            raise FilesystemError(path, 'create', 'File already exists')

        parent = os.path.dirname(full_path)
        try:
            os.makedirs(parent, exist_ok=True)
        except OSError as e:
            raise FilesystemError(path, 'create_directory', str(e))

        self._write(path, content, 'create')
        logger.debug(f"Created file {path}")

    def modify(self, path: str, content: str) -> None:
        """Overwrite an existing file.

        Raises:
            FilesystemError: If the file does not exist or cannot be written
        """
        full_path = self._resolve(path, 'modify')
        if not os.path.isfile(full_path):
            raise FilesystemError(path, 'modify', 'File does not exist')

        self._write(path, content, 'modify')
        logger.debug(f"Modified file {path}")

    def create_folder(self, path: str) -> None:
        """Create a folder and any missing parents (no-op if it exists).

        Raises:
            FilesystemError: If a file is in the way or the folder cannot be created
        """
        full_path = self._resolve(path, 'create_folder')
        if os.path.isdir(full_path):
            return
        try:
            os.makedirs(full_path, exist_ok=True)
        except OSError as e:
            raise FilesystemError(path, 'create_folder', str(e))
        logger.debug(f"Created folder {path}")

    def entries(self) -> List[VaultEntry]:
        """List every folder and file in the vault, sorted by path.

        Hidden files and folders (names starting with '.') are skipped.

        Raises:
            FilesystemError: If the vault root cannot be read
        """
        if not os.path.isdir(self.root):
            logger.info(f"Vault root {self.root} does not exist - treating as empty")
            return []

        result: List[VaultEntry] = []
        try:
            for current, dirs, files in os.walk(self.root):
                dirs[:] = sorted(d for d in dirs if not d.startswith('.'))
                for dirname in dirs:
                    result.append(VaultEntry(
                        EntryKind.FOLDER,
                        self._relative(os.path.join(current, dirname)),
                    ))
                for filename in files:
                    if filename.startswith('.'):
                        continue
                    result.append(VaultEntry(
                        EntryKind.FILE,
                        self._relative(os.path.join(current, filename)),
                    ))
        except PermissionError:
            raise FilesystemError(self.root, 'list', 'Permission denied')
        except OSError as e:
            raise FilesystemError(self.root, 'list', str(e))

        result.sort(key=lambda entry: entry.path)
        return result

    def list_markdown_files(self) -> List[VaultFile]:
        """List Markdown files in lexical path order."""
        return [
            VaultFile.from_path(entry.path)
            for entry in self.entries()
            if entry.kind is EntryKind.FILE and entry.path.endswith(MARKDOWN_SUFFIX)
        ]

    def get_file(self, path: str) -> Optional[VaultFile]:
        """Return the VaultFile at a path, or None if no such file exists."""
        try:
            full_path = self._resolve(path, 'stat')
        except FilesystemError:
            return None
        if not os.path.isfile(full_path):
            return None
        return VaultFile.from_path(path.replace('\\', '/').strip('/'))
