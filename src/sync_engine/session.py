"""Explicit context shared by the reconcilers during one run."""

import logging
from typing import Callable, Optional

from src.clickup_client.api_wrapper import APIWrapper
from src.clickup_client.auth import Authenticator
from src.vault.local_vault import LocalVault

from .page_mapping import PageMapping

logger = logging.getLogger(__name__)


class SyncSession:
    """Collaborators and mutable mapping for a sync run.

    The mapping is the only shared mutable state. Reconcilers call
    ``persist()`` after every mutation that must survive a crash.

    Attributes:
        api: ClickUp API wrapper
        vault: Local vault
        mapping: Identity mapping
        authenticator: Credential source (checked before any network call)
    """

    def __init__(
        self,
        api: APIWrapper,
        vault: LocalVault,
        mapping: PageMapping,
        authenticator: Authenticator,
        persist_callback: Optional[Callable[[PageMapping], None]] = None,
        notify_callback: Optional[Callable[[str], None]] = None,
    ):
        self.api = api
        self.vault = vault
        self.mapping = mapping
        self.authenticator = authenticator
        self._persist_callback = persist_callback
        self._notify_callback = notify_callback

    def persist(self) -> None:
        """Durably save the mapping.

        Raises:
            SyncError: Whatever the persist callback raises
        """
        if self._persist_callback is not None:
            self._persist_callback(self.mapping)

    def notify(self, message: str) -> None:
        """Surface a message to the user immediately."""
        logger.debug(f"Notice: {message}")
        if self._notify_callback is not None:
            self._notify_callback(message)
