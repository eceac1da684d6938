"""Parent page inference from local folder structure.

A file at ``a/b/c.md`` under a target's folder is placed under the remote
page named like its innermost resolvable folder. Folder names are matched
against the whole doc, not scoped to the previous level's subtree, so an
unrelated page elsewhere with the same name can be picked up. Missing folder
levels are never created.
"""

import logging
from typing import List, Optional

from .models import RemotePage, RemotePageNode, SyncTarget
from .page_locator import find_by_name, find_in_flat

logger = logging.getLogger(__name__)


def relative_segments(file_path: str, target: SyncTarget) -> List[str]:
    """Directory components of a file path relative to the target folder.

    Examples:
        >>> relative_segments("Notes/a/b/c.md", SyncTarget("d", "Notes"))
        ['a', 'b']
        >>> relative_segments("c.md", SyncTarget("d", ""))
        []
    """
    relative = target.relative_path(file_path)
    parts = [part for part in relative.split('/') if part]
    return parts[:-1]


def resolve_parent(
    segments: List[str],
    flat_pages: List[RemotePage],
    tree: List[RemotePageNode],
    fallback_parent_id: Optional[str],
) -> Optional[str]:
    """Resolve the parent page id for a file from its folder segments.

    For each segment in order, the flat page list is scanned first, then the
    tree. A match replaces the current parent; a miss keeps it.

    Args:
        segments: Directory components relative to the target folder
        flat_pages: Flat page list of the doc
        tree: Root nodes of the doc
        fallback_parent_id: Target's configured parent (used if nothing resolves)

    Returns:
        The last resolved page id, or ``fallback_parent_id``
    """
    parent_id = fallback_parent_id

    for segment in segments:
        page = find_in_flat(segment, flat_pages)
        if page is not None:
            parent_id = page.id
            continue

        node = find_by_name(segment, tree)
        if node is not None:
            parent_id = node.id
            continue

        logger.debug(f"No remote page named '{segment}' - keeping parent {parent_id}")

    return parent_id
