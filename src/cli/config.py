"""State file loading and saving.

This module handles loading and saving the sync state, including the
identity mapping, from ``.clickup-sync/state.yaml``. Saves are atomic: the
YAML is written to a temporary file in the same directory and then moved
into place.
"""

import os
import tempfile
from typing import Any, Dict

import yaml

from .errors import StateError
from .models import SyncState


class StateManager:
    """Handles state file loading, validation, and saving.

    State file structure:
        last_synced: "2026-01-15T10:30:00+00:00"
        page_mapping:
          "abc-123:::Notes/a.md": "page-9"

    If the file is missing or empty, it's treated as a fresh state
    (never synced, empty mapping).
    """

    DEFAULT_STATE_DIR = '.clickup-sync'
    DEFAULT_STATE_FILE = 'state.yaml'

    @classmethod
    def default_path(cls, vault_root: str) -> str:
        return os.path.join(vault_root, cls.DEFAULT_STATE_DIR, cls.DEFAULT_STATE_FILE)

    @classmethod
    def load(cls, state_path: str) -> SyncState:
        """Load and parse state from a YAML file.

        Args:
            state_path: Path to the YAML state file

        Returns:
            SyncState object with parsed state

        Raises:
            StateError: If the file cannot be read or is malformed
        """
        try:
            with open(state_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            # Missing state file is normal for first sync
            return SyncState()
        except PermissionError:
            raise StateError(state_path, 'Permission denied', operation='read')
        except OSError as e:
            raise StateError(state_path, str(e), operation='read')

        if not content.strip():
            return SyncState()

        try:
            state_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise StateError(state_path, f"Invalid YAML syntax: {str(e)}")

        if state_dict is None:
            return SyncState()

        if not isinstance(state_dict, dict):
            raise StateError(
                state_path,
                f"State must be a YAML dictionary, got {type(state_dict).__name__}"
            )

        return cls._parse_state(state_path, state_dict)

    @classmethod
    def save(cls, state_path: str, sync_state: SyncState) -> None:
        """Atomically save state to a YAML file.

        Args:
            state_path: Path to the YAML state file
            sync_state: SyncState object to save

        Raises:
            StateError: If the file cannot be written
        """
        state_dict = {
            'last_synced': sync_state.last_synced,
            'page_mapping': dict(sync_state.page_mapping),
        }

        yaml_str = yaml.safe_dump(
            state_dict,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )

        state_dir = os.path.dirname(state_path) or '.'
        try:
            os.makedirs(state_dir, exist_ok=True)
        except OSError as e:
            raise StateError(state_path, str(e), operation='create directory for')

        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(prefix='.state-', suffix='.tmp', dir=state_dir)
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(yaml_str)
            os.replace(tmp_path, state_path)
            tmp_path = None
        except PermissionError:
            raise StateError(state_path, 'Permission denied', operation='write')
        except OSError as e:
            raise StateError(state_path, str(e), operation='write')
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)

    @classmethod
    def _parse_state(cls, state_path: str, state_dict: Dict[str, Any]) -> SyncState:
        """Parse and validate state dictionary.

        Raises:
            StateError: If state is invalid
        """
        last_synced = state_dict.get('last_synced')

        if last_synced is not None:
            if not isinstance(last_synced, str):
                raise StateError(
                    state_path,
                    f"must be a string (ISO 8601 timestamp), got {type(last_synced).__name__}",
                    state_field='last_synced'
                )
            if not last_synced.strip():
                raise StateError(state_path, "cannot be empty", state_field='last_synced')
            last_synced = last_synced.strip()

        page_mapping = state_dict.get('page_mapping', {})

        if page_mapping is not None:
            if not isinstance(page_mapping, dict):
                raise StateError(
                    state_path,
                    f"must be a dictionary, got {type(page_mapping).__name__}",
                    state_field='page_mapping'
                )

            for key, page_id in page_mapping.items():
                if not isinstance(key, str):
                    raise StateError(
                        state_path,
                        f"keys must be strings, got {type(key).__name__}",
                        state_field='page_mapping'
                    )
                if not isinstance(page_id, str):
                    raise StateError(
                        state_path,
                        f"values must be strings, got {type(page_id).__name__}",
                        state_field='page_mapping'
                    )
        else:
            page_mapping = {}

        return SyncState(last_synced=last_synced, page_mapping=dict(page_mapping))
