"""Upload reconciler: pushes one vault file to its ClickUp page.

Per-file state machine:

    NoMapping -> NameMatchFound | NameMatchMissing
    MappingKnown / NameMatchFound -> AttemptUpdate
    AttemptUpdate -> UpdateSucceeded (success)
                   | UpdateFailed -> MappingInvalidated -> AttemptCreate
    AttemptCreate -> CreateSucceeded (success) | CreateFailed (failure)

Every path ends in success or failure; ``upload_file`` never raises.
"""

import logging
from typing import List, Optional

from src.clickup_client.errors import SyncError
from src.vault.models import VaultFile

from .models import RemotePage, SyncTarget
from .page_locator import find_in_flat
from .session import SyncSession

logger = logging.getLogger(__name__)

UPDATE_OK_STATUSES = (200, 204)
CREATE_OK_STATUSES = (200, 201)


class Uploader:
    """Creates or updates remote pages for vault files.

    Example:
        >>> uploader = Uploader(session)
        >>> uploader.upload_file(VaultFile.from_path("Notes/a.md"), target, pages)
        True
    """

    def __init__(self, session: SyncSession):
        self._session = session

    def upload_file(
        self,
        file: VaultFile,
        target: SyncTarget,
        flat_pages: List[RemotePage],
        parent_page_id: Optional[str] = None,
    ) -> bool:
        """Upload one file.

        Args:
            file: File to upload
            target: Target the file belongs to
            flat_pages: Flat page list of the target doc (for name discovery)
            parent_page_id: Resolved parent for a newly created page

        Returns:
            True if the page was updated or created, False otherwise
        """
        if not self._session.authenticator.is_configured():
            logger.error(f"Cannot upload {file.path}: ClickUp API key or workspace id not configured")
            return False
        if not target.doc_id:
            logger.error(f"Cannot upload {file.path}: no ClickUp Doc id for target {target.label}")
            return False

        try:
            return self._upload(file, target, flat_pages, parent_page_id)
        except SyncError as e:
            logger.error(f"Failed to upload {file.path}: {e}")
            return False
        except Exception as e:
            logger.exception(f"Unexpected error uploading {file.path}: {e}")
            return False

    def _upload(
        self,
        file: VaultFile,
        target: SyncTarget,
        flat_pages: List[RemotePage],
        parent_page_id: Optional[str],
    ) -> bool:
        session = self._session
        doc_id = target.doc_id
        content = session.vault.read(file.path)

        page_id = session.mapping.get(doc_id, file.path)
        if page_id is None:
            match = find_in_flat(file.basename, flat_pages)
            if match is not None:
                page_id = match.id
                logger.info(f"Found existing page '{file.basename}' ({page_id}) by name")
                session.mapping.set(doc_id, file.path, page_id)
                session.persist()

        if page_id is not None:
            response = session.api.update_page(doc_id, page_id, file.basename, content)
            if response.status_code in UPDATE_OK_STATUSES:
                logger.info(f"Updated page {page_id} from {file.path}")
                return True

            logger.warning(
                f"Update of page {page_id} for {file.path} failed: "
                f"{response.error_message()} (Status: {response.status_code}) - "
                f"mapping removed, creating a new page"
            )
            session.mapping.delete(doc_id, file.path)
            session.persist()

        response = session.api.create_page(doc_id, file.basename, content, parent_page_id)
        new_id = response.json_field('id')
        if response.status_code not in CREATE_OK_STATUSES or not new_id:
            logger.error(
                f"Create page for {file.path} failed: "
                f"{response.error_message()} (Status: {response.status_code})"
            )
            return False

        session.mapping.set(doc_id, file.path, str(new_id))
        session.persist()
        logger.info(f"Created page {new_id} from {file.path}")
        return True
