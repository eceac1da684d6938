"""Sync command orchestration for CLI.

This module provides the SyncCommand class that wires configuration, state,
the ClickUp client and the local vault into a SyncOrchestrator, runs one of
the CLI modes (sync all, sync one file, download, cleanup, watch) and maps
the outcome to an exit code.
"""

import logging
import os
from datetime import datetime, timezone
from typing import Callable, Optional

from src.cli.config import StateManager
from src.cli.errors import CLIError, ConfigNotFoundError
from src.cli.models import ExitCode, SyncState, SyncSummary
from src.cli.output import OutputHandler
from src.cli.watcher import DEFAULT_DEBOUNCE_SECONDS, VaultWatcher
from src.clickup_client.api_wrapper import APIWrapper
from src.clickup_client.auth import Authenticator
from src.clickup_client.errors import (
    APIAccessError,
    APIUnreachableError,
    InvalidCredentialsError,
)
from src.sync_engine.config_loader import ConfigLoader
from src.sync_engine.errors import ConfigError
from src.sync_engine.models import SyncConfig
from src.sync_engine.orchestrator import SyncOrchestrator
from src.sync_engine.page_mapping import PageMapping
from src.sync_engine.session import SyncSession
from src.vault.errors import FilesystemError
from src.vault.local_vault import LocalVault

logger = logging.getLogger(__name__)


class SyncCommand:
    """Runs the CLI sync modes against one vault.

    The workflow for every mode:
        1. Load configuration and sync state
        2. Build the session (API wrapper, vault, mapping, persistence)
        3. Run the mode through the SyncOrchestrator
        4. Print the summary and return an exit code

    Example:
        >>> output = OutputHandler(verbosity=1)
        >>> sync_cmd = SyncCommand(vault_root=".", output_handler=output)
        >>> exit_code = sync_cmd.run_sync()
        >>> sys.exit(exit_code)
    """

    def __init__(
        self,
        vault_root: str = ".",
        config_path: Optional[str] = None,
        state_path: Optional[str] = None,
        output_handler: Optional[OutputHandler] = None,
        authenticator: Optional[Authenticator] = None,
        api_wrapper: Optional[APIWrapper] = None,
        state_manager: Optional[StateManager] = None,
    ):
        """Initialize sync command with dependencies.

        Args:
            vault_root: Vault root directory
            config_path: Path to configuration YAML file
            state_path: Path to state YAML file
            output_handler: OutputHandler for terminal output (optional)
            authenticator: Authenticator for the ClickUp API (optional)
            api_wrapper: APIWrapper for the ClickUp API (optional)
            state_manager: StateManager for state management (optional)

        Note:
            All dependencies are optional to support testing. In production
            they are created from the configuration on first use.
        """
        self.vault_root = vault_root
        self.config_path = config_path or ConfigLoader.default_path(vault_root)
        self.state_path = state_path or StateManager.default_path(vault_root)
        self.output_handler = output_handler or OutputHandler()
        self.authenticator = authenticator
        self.api_wrapper = api_wrapper
        self.state_manager = state_manager or StateManager()
        self.state = SyncState()

    def _load_config(self) -> SyncConfig:
        if not os.path.exists(self.config_path):
            self.output_handler.print("No sync configuration found.\n")
            self.output_handler.print("To get started, add a sync target:\n")
            self.output_handler.print("  clickup-sync --init --doc DOC_ID --local Notes\n")
            self.output_handler.print("Required environment variables:")
            self.output_handler.print("  CLICKUP_API_KEY         - Personal API token (pk_...)")
            self.output_handler.print("  CLICKUP_WORKSPACE_ID    - Workspace (team) id\n")
            self.output_handler.print("Run 'clickup-sync --help' for more options.")
            raise ConfigNotFoundError(self.config_path)

        logger.info(f"Loading configuration from {self.config_path}")
        config = ConfigLoader.load(self.config_path)
        logger.info(f"Loaded config with {len(config.sync_targets)} sync target(s)")
        return config

    def _persist_mapping(self, mapping: PageMapping) -> None:
        self.state.page_mapping = mapping.to_dict()
        self.state_manager.save(self.state_path, self.state)

    def _build_orchestrator(self, config: SyncConfig) -> SyncOrchestrator:
        self.state = self.state_manager.load(self.state_path)
        logger.info(f"Last synced: {self.state.last_synced or 'never'}")

        if not self.authenticator:
            self.authenticator = Authenticator(workspace_id=config.workspace_id)
        if not self.api_wrapper:
            self.api_wrapper = APIWrapper(self.authenticator)

        session = SyncSession(
            api=self.api_wrapper,
            vault=LocalVault(self.vault_root),
            mapping=PageMapping(self.state.page_mapping),
            authenticator=self.authenticator,
            persist_callback=self._persist_mapping,
            notify_callback=self.output_handler.warning,
        )
        return SyncOrchestrator(session, config.sync_targets)

    def _mark_synced(self) -> None:
        self.state.last_synced = datetime.now(timezone.utc).isoformat()
        self.state_manager.save(self.state_path, self.state)

    def _to_vault_path(self, file_path: str) -> str:
        """Convert a CLI file argument to a vault-relative path.

        Raises:
            CLIError: If the file is outside the vault
        """
        vault_root = os.path.abspath(self.vault_root)
        full_path = os.path.abspath(file_path)
        if not os.path.exists(full_path) and not os.path.isabs(file_path):
            full_path = os.path.abspath(os.path.join(vault_root, file_path))
        relative = os.path.relpath(full_path, vault_root)
        if relative.startswith('..'):
            raise CLIError(f"File {file_path} is outside the vault {vault_root}")
        return relative.replace(os.sep, '/')

    def _summary_exit_code(self, summary: SyncSummary, action: str) -> ExitCode:
        self.output_handler.print_summary(summary.success_count, summary.error_count, action)
        if summary.has_failures:
            return ExitCode.PARTIAL_FAILURE
        return ExitCode.SUCCESS

    def _execute(self, operation: Callable[[SyncConfig], ExitCode]) -> ExitCode:
        """Load configuration, run an operation and translate exceptions."""
        try:
            config = self._load_config()
            return operation(config)

        except InvalidCredentialsError as e:
            logger.error(f"Authentication failed: {e}")
            self.output_handler.error(f"Authentication failed: {e}")
            self.output_handler.info(
                "Check CLICKUP_API_KEY and CLICKUP_WORKSPACE_ID environment variables"
            )
            return ExitCode.AUTH_ERROR

        except (APIUnreachableError, APIAccessError) as e:
            logger.error(f"API error: {e}")
            self.output_handler.error(f"API error: {e}")
            self.output_handler.info("Check your internet connection and try again")
            return ExitCode.NETWORK_ERROR

        except (ConfigError, ConfigNotFoundError) as e:
            logger.error(f"Configuration error: {e}")
            self.output_handler.error(f"Configuration error: {e}")
            return ExitCode.GENERAL_ERROR

        except (CLIError, FilesystemError) as e:
            logger.error(f"Error: {e}")
            self.output_handler.error(f"Error: {e}")
            return ExitCode.GENERAL_ERROR

        except Exception as e:
            logger.exception("Unexpected error during sync")
            self.output_handler.error(f"Unexpected error: {e}")
            return ExitCode.GENERAL_ERROR

    def run_sync(self, single_file: Optional[str] = None) -> ExitCode:
        """Upload all targets, or a single file.

        Args:
            single_file: Optional path of one file to sync

        Returns:
            ExitCode indicating success or specific failure type
        """
        def operation(config: SyncConfig) -> ExitCode:
            orchestrator = self._build_orchestrator(config)

            if single_file:
                path = self._to_vault_path(single_file)
                self.authenticator.get_credentials()
                if orchestrator.sync_file(path):
                    self.output_handler.success(f"Synced {path}")
                    return ExitCode.SUCCESS
                self.output_handler.error(f"Failed to sync {path}")
                return ExitCode.PARTIAL_FAILURE

            if not config.sync_targets:
                self.output_handler.warning("No sync targets configured")
                return ExitCode.SUCCESS

            with self.output_handler.spinner("Syncing to ClickUp..."):
                report = orchestrator.sync_all_targets()
            self._mark_synced()

            totals = report.totals
            return self._summary_exit_code(SyncSummary(totals.success, totals.error), "Synced")

        return self._execute(operation)

    def run_download(self, target_index: int = 0, parent_page_id: Optional[str] = None) -> ExitCode:
        """Download a target's doc (or one page's children) into its folder.

        Args:
            target_index: Index of the target in the configuration
            parent_page_id: Optional page whose children are downloaded
        """
        def operation(config: SyncConfig) -> ExitCode:
            if not 0 <= target_index < len(config.sync_targets):
                raise CLIError(
                    f"Target index {target_index} out of range "
                    f"({len(config.sync_targets)} target(s) configured)"
                )
            orchestrator = self._build_orchestrator(config)
            target = config.sync_targets[target_index]

            with self.output_handler.spinner(f"Downloading into {target.label}..."):
                counts = orchestrator.sync_down(target, parent_page_id)
            self._mark_synced()

            return self._summary_exit_code(SyncSummary(counts.success, counts.error), "Downloaded")

        return self._execute(operation)

    def run_cleanup(self) -> ExitCode:
        """Garbage-collect stale mapping entries."""
        def operation(config: SyncConfig) -> ExitCode:
            orchestrator = self._build_orchestrator(config)
            removed = orchestrator.cleanup_mapping()
            self.output_handler.success(f"Removed {removed} stale mapping entries")
            return ExitCode.SUCCESS

        return self._execute(operation)

    def run_watch(self, debounce: float = DEFAULT_DEBOUNCE_SECONDS, force: bool = False) -> ExitCode:
        """Upload Markdown files as they are saved, until interrupted.

        Refuses to start while ``sync_on_save`` is off in the configuration
        unless ``force`` is set.
        """
        def operation(config: SyncConfig) -> ExitCode:
            if not (config.sync_on_save or force):
                self.output_handler.error(
                    "sync_on_save is disabled in the configuration "
                    "(set it to true or pass --force)"
                )
                return ExitCode.GENERAL_ERROR
            orchestrator = self._build_orchestrator(config)
            self.authenticator.get_credentials()
            watcher = VaultWatcher(self.vault_root, orchestrator.sync_file, debounce)
            self.output_handler.print(f"Watching {os.path.abspath(self.vault_root)} (Ctrl+C to stop)")
            watcher.run()
            return ExitCode.SUCCESS

        return self._execute(operation)
