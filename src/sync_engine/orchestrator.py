"""Target orchestrator: runs the reconcilers across all sync targets.

Targets are processed in configuration order, and files within a target in
lexical path order, one remote call at a time. A failing file or target never
stops the rest of the run.
"""

import logging
from typing import List, Optional

from src.vault.filesafe_converter import MARKDOWN_EXTENSION
from src.vault.models import VaultFile

from .downloader import Downloader
from .errors import PageFetchError
from .models import SyncCounts, SyncReport, SyncTarget, TargetReport
from .parent_resolver import relative_segments, resolve_parent
from .session import SyncSession
from .tree_builder import PageTree, RemoteTreeBuilder
from .uploader import Uploader

logger = logging.getLogger(__name__)


class SyncOrchestrator:
    """Entry points for sync all, sync one file, download and cleanup.

    Example:
        >>> orchestrator = SyncOrchestrator(session, config.sync_targets)
        >>> report = orchestrator.sync_all_targets()
        >>> print(report.totals.success, report.totals.error)
    """

    def __init__(self, session: SyncSession, targets: List[SyncTarget]):
        self._session = session
        self._targets = list(targets)
        self._tree_builder = RemoteTreeBuilder(session.api)
        self._uploader = Uploader(session)
        self._downloader = Downloader(session)

    @property
    def targets(self) -> List[SyncTarget]:
        return list(self._targets)

    def sync_all_targets(self) -> SyncReport:
        """Upload every Markdown file of every configured target.

        Returns:
            SyncReport with one TargetReport per configured target

        Raises:
            InvalidCredentialsError: If the API key or workspace id is missing
        """
        self._session.authenticator.get_credentials()

        all_files = self._session.vault.list_markdown_files()
        report = SyncReport()

        for target in self._targets:
            if not target.doc_id:
                logger.warning(f"Skipping target {target.label}: no ClickUp Doc id configured")
                self._session.notify(f"Skipping {target.label}: no ClickUp Doc id configured")
                report.targets.append(TargetReport(target, aborted=True, reason="No Doc id"))
                continue
            report.targets.append(self.sync_target(target, all_files))

        totals = report.totals
        logger.info(f"Sync complete: {totals.success} succeeded, {totals.error} failed")
        return report

    def sync_target(self, target: SyncTarget, all_files: List[VaultFile]) -> TargetReport:
        """Upload the files of one target.

        A failed page fetch counts as one error and aborts only this target.
        """
        logger.info(f"Syncing {target.label} -> ClickUp Doc {target.doc_id}")
        try:
            tree = self._tree_builder.fetch(target.doc_id)
        except PageFetchError as e:
            logger.error(str(e))
            self._session.notify(f"Failed to fetch pages from ClickUp Doc {target.doc_id}")
            return TargetReport(target, SyncCounts(error=1), aborted=True, reason=e.reason)

        counts = SyncCounts()
        for vault_file in all_files:
            if not target.matches(vault_file.path):
                continue
            if self._upload(vault_file, target, tree):
                counts.success += 1
            else:
                counts.error += 1

        logger.info(f"{target.label}: {counts.success} succeeded, {counts.error} failed")
        return TargetReport(target, counts)

    def _upload(self, vault_file: VaultFile, target: SyncTarget, tree: PageTree) -> bool:
        segments = relative_segments(vault_file.path, target)
        parent_id = resolve_parent(segments, tree.pages, tree.roots, target.parent_page_id)
        return self._uploader.upload_file(vault_file, target, tree.pages, parent_id)

    def find_target_for_file(self, path: str) -> Optional[SyncTarget]:
        """First configured target whose folder contains the path."""
        for target in self._targets:
            if target.matches(path):
                return target
        return None

    def sync_file(self, path: str) -> bool:
        """Upload a single file (sync on save).

        Returns:
            True on success; False for failures and ignored paths
        """
        if not path.endswith(MARKDOWN_EXTENSION):
            logger.debug(f"Ignoring non-Markdown file {path}")
            return False

        target = self.find_target_for_file(path)
        if target is None:
            logger.debug(f"No sync target for {path}")
            return False
        if not self._session.authenticator.is_configured() or not target.doc_id:
            logger.error(f"Cannot sync {path}: API key, workspace or Doc id missing")
            return False

        vault_file = self._session.vault.get_file(path)
        if vault_file is None:
            logger.warning(f"Cannot sync {path}: file not found in vault")
            return False

        try:
            tree = self._tree_builder.fetch(target.doc_id)
        except PageFetchError as e:
            logger.error(str(e))
            self._session.notify(f"Failed to fetch pages from ClickUp Doc {target.doc_id}")
            return False

        return self._upload(vault_file, target, tree)

    def sync_down(self, target: SyncTarget, parent_page_id: Optional[str] = None) -> SyncCounts:
        """Download a target's doc into its folder."""
        return self._downloader.sync_down(target, parent_page_id)

    def cleanup_mapping(self) -> int:
        """Garbage-collect the mapping against the vault and configured docs.

        Returns:
            Number of entries removed
        """
        existing = [f.path for f in self._session.vault.list_markdown_files()]
        valid_docs = [t.doc_id for t in self._targets if t.doc_id]
        removed = self._session.mapping.garbage_collect(existing, valid_docs)
        if removed:
            self._session.persist()
            logger.info(f"Removed {removed} stale mapping entries")
        else:
            logger.info("No stale mapping entries found")
        return removed
