"""YAML configuration loading and validation.

This module handles loading and saving sync configuration from
``.clickup-sync/config.yaml``. Credentials are never stored here; they come
from the environment (see ``src.clickup_client.auth``).
"""

import os
from typing import Any, Dict, List

import yaml

from src.vault.errors import FilesystemError

from .errors import ConfigError
from .models import SyncConfig, SyncTarget


class ConfigLoader:
    """Handles configuration file loading, validation, and saving.

    Configuration file structure:
        workspace_id: "9012345"
        sync_on_save: false
        sync_targets:
          - doc_id: "abc-123"
            folder_path: "Notes"
            parent_page_id: null
    """

    DEFAULT_CONFIG_DIR = '.clickup-sync'
    DEFAULT_CONFIG_FILE = 'config.yaml'

    # Required fields for each target
    REQUIRED_TARGET_FIELDS = {'folder_path'}

    @classmethod
    def default_path(cls, vault_root: str) -> str:
        return os.path.join(vault_root, cls.DEFAULT_CONFIG_DIR, cls.DEFAULT_CONFIG_FILE)

    @classmethod
    def load(cls, config_path: str) -> SyncConfig:
        """Load and parse configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            SyncConfig object with parsed configuration

        Raises:
            FilesystemError: If file cannot be read
            ConfigError: If configuration is invalid or malformed
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise FilesystemError(config_path, 'read', 'Configuration file not found')
        except PermissionError:
            raise FilesystemError(config_path, 'read', 'Permission denied')
        except OSError as e:
            raise FilesystemError(config_path, 'read', str(e))

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}")

        if config_dict is None:
            return SyncConfig()

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        return cls._parse_config(config_dict)

    @classmethod
    def save(cls, config_path: str, sync_config: SyncConfig) -> None:
        """Save configuration to a YAML file.

        Raises:
            FilesystemError: If file cannot be written
        """
        config_dict: Dict[str, Any] = {}
        if sync_config.workspace_id:
            config_dict['workspace_id'] = sync_config.workspace_id
        config_dict['sync_on_save'] = sync_config.sync_on_save
        config_dict['sync_targets'] = [
            {
                'doc_id': target.doc_id,
                'folder_path': target.folder_path,
                'parent_page_id': target.parent_page_id,
            }
            for target in sync_config.sync_targets
        ]

        yaml_str = yaml.safe_dump(
            config_dict,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )

        config_dir = os.path.dirname(config_path)
        if config_dir:
            try:
                os.makedirs(config_dir, exist_ok=True)
            except OSError as e:
                raise FilesystemError(config_dir, 'create_directory', str(e))

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                f.write(yaml_str)
        except PermissionError:
            raise FilesystemError(config_path, 'write', 'Permission denied')
        except OSError as e:
            raise FilesystemError(config_path, 'write', str(e))

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any]) -> SyncConfig:
        """Parse and validate a configuration dictionary.

        Raises:
            ConfigError: If configuration is invalid
        """
        targets_raw = config_dict.get('sync_targets')
        if targets_raw is None:
            targets_raw = []
        if not isinstance(targets_raw, list):
            raise ConfigError("Field 'sync_targets' must be a list", 'sync_targets')

        targets: List[SyncTarget] = []
        for i, target_dict in enumerate(targets_raw):
            if not isinstance(target_dict, dict):
                raise ConfigError(
                    f"Target configuration at index {i} must be a dictionary",
                    f'sync_targets[{i}]'
                )

            missing = cls.REQUIRED_TARGET_FIELDS - set(target_dict.keys())
            if missing:
                raise ConfigError(
                    f"Missing required fields in target {i}: {', '.join(sorted(missing))}",
                    f'sync_targets[{i}]'
                )

            folder_path = target_dict.get('folder_path')
            if folder_path is not None and not isinstance(folder_path, str):
                raise ConfigError(
                    f"Field 'folder_path' in target {i} must be a string",
                    f'sync_targets[{i}].folder_path'
                )
            doc_id = target_dict.get('doc_id')
            parent_page_id = target_dict.get('parent_page_id')
            if isinstance(doc_id, (dict, list)) or isinstance(parent_page_id, (dict, list)):
                raise ConfigError(
                    f"Fields 'doc_id' and 'parent_page_id' in target {i} must be scalars",
                    f'sync_targets[{i}]'
                )

            targets.append(SyncTarget(
                doc_id=str(doc_id).strip() if doc_id is not None else "",
                folder_path=(folder_path or "").strip().lstrip('/'),
                parent_page_id=str(parent_page_id).strip() if parent_page_id else None,
            ))

        workspace_id = config_dict.get('workspace_id')
        sync_on_save = config_dict.get('sync_on_save', False)
        if not isinstance(sync_on_save, bool):
            raise ConfigError("Field 'sync_on_save' must be a boolean", 'sync_on_save')

        return SyncConfig(
            sync_targets=targets,
            workspace_id=str(workspace_id).strip() if workspace_id else None,
            sync_on_save=sync_on_save,
        )
