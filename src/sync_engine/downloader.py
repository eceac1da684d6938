"""Download reconciler: materializes remote pages as vault files.

Pages are written depth-first. A page with children also becomes a folder
holding the children's files. Failures are counted per page and never stop
siblings or descendants.
"""

import logging
from typing import Any, List, Optional, Set

from src.clickup_client.errors import SyncError
from src.vault.filesafe_converter import FilesafeConverter

from .errors import PageContentError, PageFetchError
from .models import RemotePageNode, SyncCounts, SyncTarget
from .session import SyncSession
from .tree_builder import RemoteTreeBuilder

logger = logging.getLogger(__name__)

# Response fields searched for page content, in preference order
CONTENT_FIELDS = ('content', 'markdown', 'body', 'text')

UNTITLED = "Untitled"
ID_SUFFIX_LENGTH = 8


def extract_content(data: Any) -> Optional[str]:
    """Return the first non-empty string among the content fields, or None."""
    if not isinstance(data, dict):
        return None
    for field_name in CONTENT_FIELDS:
        value = data.get(field_name)
        if isinstance(value, str) and value:
            return value
    return None


class Downloader:
    """Writes a doc's pages (or one page's subtree) into a target folder.

    Example:
        >>> downloader = Downloader(session)
        >>> counts = downloader.sync_down(target)
        >>> print(f"Downloaded {counts.success}, failed {counts.error}")
    """

    def __init__(self, session: SyncSession):
        self._session = session

    def fetch_page_content(self, doc_id: str, page_id: str) -> str:
        """Fetch a page's Markdown content.

        Metadata is requested first; when it carries no content the content
        endpoint is queried. A non-JSON content response is taken verbatim.

        Returns:
            The page content ("" for an empty page)

        Raises:
            PageContentError: If a request returns a non-200 status
        """
        api = self._session.api

        response = api.get_page(doc_id, page_id)
        if response.status_code != 200:
            raise PageContentError(
                page_id, f"{response.error_message()} (Status: {response.status_code})"
            )
        content = extract_content(response.data)
        if content is not None:
            return content

        response = api.get_page_content(doc_id, page_id)
        if response.status_code != 200:
            raise PageContentError(
                page_id, f"{response.error_message()} (Status: {response.status_code})"
            )
        content = extract_content(response.data)
        if content is not None:
            return content
        if response.data is None:
            return response.text
        return ""

    def _find_existing(self, directory: str, stem: str) -> Optional[str]:
        """First Markdown file under ``directory`` (any depth) with the given stem."""
        for vault_file in self._session.vault.list_markdown_files():
            if directory and not vault_file.path.startswith(directory):
                continue
            if vault_file.basename == stem:
                return vault_file.path
        return None

    def _write_page(self, doc_id: str, page: RemotePageNode, directory: str, file_name: str) -> None:
        session = self._session
        content = self.fetch_page_content(doc_id, page.id)

        stem = FilesafeConverter.strip_extension(file_name)
        existing = self._find_existing(directory, stem)
        if existing is not None:
            session.vault.modify(existing, content)
            written = existing
        else:
            written = f"{directory}{file_name}"
            folder = directory.rstrip('/')
            if folder and not session.vault.exists(folder):
                session.vault.create_folder(folder)
            session.vault.create(written, content)

        session.mapping.set(doc_id, written, page.id)
        session.persist()
        logger.info(f"Downloaded page '{page.name}' ({page.id}) to {written}")

    def download_page(
        self,
        page: RemotePageNode,
        doc_id: str,
        base_path: str,
        current_path: str,
        seen_names: Set[str],
    ) -> SyncCounts:
        """Download a page and its subtree.

        Args:
            page: Page node to download
            doc_id: Doc the page belongs to
            base_path: Target folder prefix ("" or ending in '/')
            current_path: Path below ``base_path`` ("" or ending in '/')
            seen_names: File names already used in this download pass

        Returns:
            Success/error counts for the page and all its descendants
        """
        counts = SyncCounts()

        safe_name = FilesafeConverter.sanitize(page.name) or UNTITLED
        file_stem = safe_name
        if file_stem in seen_names:
            file_stem = f"{safe_name}-{page.id[:ID_SUFFIX_LENGTH]}"
        seen_names.add(file_stem)
        file_name = FilesafeConverter.to_filename(file_stem)
        directory = f"{base_path}{current_path}"

        try:
            self._write_page(doc_id, page, directory, file_name)
            counts.success += 1
        except SyncError as e:
            logger.error(f"Failed to download page '{page.name}' ({page.id}): {e}")
            counts.error += 1
        except Exception as e:
            logger.exception(f"Unexpected error downloading page '{page.name}' ({page.id}): {e}")
            counts.error += 1

        if page.children:
            child_path = f"{current_path}{safe_name}/"
            folder = f"{base_path}{child_path}".rstrip('/')
            try:
                if not self._session.vault.exists(folder):
                    self._session.vault.create_folder(folder)
            except SyncError as e:
                logger.warning(f"Could not create folder {base_path}{child_path}: {e}")

            for child in page.children:
                counts += self.download_page(child, doc_id, base_path, child_path, seen_names)

        return counts

    def sync_down(self, target: SyncTarget, parent_page_id: Optional[str] = None) -> SyncCounts:
        """Download a target's doc, or the children of one page, into its folder.

        Args:
            target: Target whose doc and folder are used
            parent_page_id: Restrict the download to this page's children

        Returns:
            Aggregated counts for every downloaded page
        """
        session = self._session
        if not session.authenticator.is_configured() or not target.doc_id:
            logger.error(f"Cannot download into {target.label}: API key, workspace or Doc id missing")
            session.notify("ClickUp API key, workspace id or Doc id is not configured")
            return SyncCounts(error=1)

        try:
            tree = RemoteTreeBuilder(session.api).fetch(target.doc_id)
        except PageFetchError as e:
            logger.error(str(e))
            session.notify(f"Failed to fetch pages from ClickUp Doc {target.doc_id}")
            return SyncCounts(error=1)

        roots: List[RemotePageNode] = tree.roots
        if parent_page_id:
            parent = tree.find_by_id(parent_page_id)
            if parent is None or not parent.children:
                logger.warning(f"Parent page {parent_page_id} not found or has no children")
                session.notify(f"Parent page {parent_page_id} not found or has no child pages")
                return SyncCounts()
            roots = parent.children

        counts = SyncCounts()
        seen_names: Set[str] = set()
        for node in roots:
            counts += self.download_page(node, target.doc_id, target.prefix, "", seen_names)

        logger.info(
            f"Download into {target.label} complete: {counts.success} succeeded, {counts.error} failed"
        )
        return counts
