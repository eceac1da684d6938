"""InitCommand for configuration initialization.

This module implements the --init command that adds a sync target (a ClickUp
Doc and a vault folder) to ``.clickup-sync/config.yaml``, creating the file
and the local folder when needed.
"""

import logging
import os
from typing import Optional

from src.sync_engine.config_loader import ConfigLoader
from src.sync_engine.errors import ConfigError
from src.sync_engine.models import SyncConfig, SyncTarget
from src.vault.errors import FilesystemError

from .errors import InitError

logger = logging.getLogger(__name__)


class InitCommand:
    """Adds sync targets to the configuration.

    Adding a target that is already configured (same doc, folder and
    parent) is a no-op.

    Example:
        >>> init = InitCommand(vault_root=".")
        >>> init.run(doc_id="abc-123", folder_path="Notes")
        True
    """

    def __init__(self, vault_root: str = ".", config_path: Optional[str] = None):
        """Initialize the init command.

        Args:
            vault_root: Vault root directory
            config_path: Optional config file path (defaults to .clickup-sync/config.yaml)
        """
        self.vault_root = vault_root
        self.config_path = config_path or ConfigLoader.default_path(vault_root)

    def _load_existing(self) -> SyncConfig:
        if not os.path.exists(self.config_path):
            return SyncConfig()
        try:
            return ConfigLoader.load(self.config_path)
        except (ConfigError, FilesystemError) as e:
            raise InitError(f"Existing configuration at {self.config_path} is invalid: {e}")

    def _create_local_folder(self, folder_path: str) -> None:
        local_dir = os.path.join(self.vault_root, folder_path) if folder_path else self.vault_root
        try:
            os.makedirs(local_dir, exist_ok=True)
            logger.info(f"Created local sync directory: {local_dir}")
        except OSError as e:
            raise InitError(f"Failed to create local directory {local_dir}: {str(e)}")

    def run(
        self,
        doc_id: str,
        folder_path: str,
        parent_page_id: Optional[str] = None,
    ) -> bool:
        """Add a sync target.

        Args:
            doc_id: ClickUp Doc id
            folder_path: Vault folder ("" or "." for the vault root)
            parent_page_id: Optional page new pages are created under

        Returns:
            True if the target was added, False if it was already configured

        Raises:
            InitError: If the input is invalid or the configuration cannot be written
        """
        doc_id = (doc_id or "").strip()
        if not doc_id:
            raise InitError("Doc id cannot be empty")

        folder = (folder_path or "").strip().strip('/')
        if folder == ".":
            folder = ""
        if folder.startswith('..') or os.path.isabs(folder_path or ""):
            raise InitError(f"Folder must be inside the vault: '{folder_path}'")

        parent = (parent_page_id or "").strip() or None
        target = SyncTarget(doc_id=doc_id, folder_path=folder, parent_page_id=parent)

        sync_config = self._load_existing()
        if target in sync_config.sync_targets:
            logger.info(f"Target {target.label} -> {doc_id} is already configured")
            return False

        self._create_local_folder(folder)
        sync_config.sync_targets.append(target)

        try:
            ConfigLoader.save(self.config_path, sync_config)
        except FilesystemError as e:
            raise InitError(f"Failed to save configuration: {str(e)}")

        logger.info(f"Added sync target {target.label} -> ClickUp Doc {doc_id}")
        return True
