"""Remote tree builder for ClickUp Doc page hierarchies.

This module fetches the page list of a doc once per sync pass and turns it
into a parent-indexed forest. Pages arrive in arbitrary order with forward
references to their parents, so the tree is built in two passes. The flat
list is kept alongside the forest for name scans.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.clickup_client.api_wrapper import APIWrapper
from src.clickup_client.errors import ClickUpError

from .errors import PageFetchError
from .models import RemotePage, RemotePageNode
from .page_locator import find_by_id, find_by_name

logger = logging.getLogger(__name__)


def build_tree(pages: List[RemotePage]) -> List[RemotePageNode]:
    """Build a forest from a flat page list.

    A page is a root when its parent id is missing or does not belong to the
    batch. Children and roots keep the order of the input list. When the
    same id appears more than once, the first occurrence wins.

    Args:
        pages: Flat page list in API order

    Returns:
        Root nodes in input order
    """
    nodes: Dict[str, RemotePageNode] = {}
    ordered: List[RemotePageNode] = []

    # First pass: one node per page id
    for page in pages:
        if page.id in nodes:
            logger.warning(f"Duplicate page id {page.id} ('{page.name}') in page list - ignoring")
            continue
        node = RemotePageNode.from_page(page)
        nodes[page.id] = node
        ordered.append(node)

    # Second pass: attach to parents
    roots: List[RemotePageNode] = []
    for node in ordered:
        if node.parent_id and node.parent_id in nodes:
            nodes[node.parent_id].children.append(node)
        else:
            if node.parent_id:
                logger.warning(
                    f"Page '{node.name}' ({node.id}) references parent {node.parent_id} "
                    f"which is not in the page list - treating as root"
                )
            roots.append(node)

    logger.debug(f"Built page tree: {len(roots)} root pages, {len(ordered)} total pages")
    return roots


def flatten_tree(roots: List[RemotePageNode]) -> List[RemotePage]:
    """Project a forest back into a flat pre-order page list."""
    flat: List[RemotePage] = []
    for node in roots:
        flat.append(node.to_page())
        flat.extend(flatten_tree(node.children))
    return flat


def parse_page_listing(body: Any) -> List[RemotePage]:
    """Parse a page listing response body into a flat page list.

    Accepts a bare list or ``{"pages": [...]}``. Nested ``pages`` arrays are
    flattened depth-first; a nested page without its own parent id inherits
    the id of the page that contains it.

    Raises:
        ValueError: If the body is not a list or a dict with a page list
    """
    if isinstance(body, dict):
        if 'pages' not in body:
            raise ValueError(f"Page listing has no 'pages' key (keys: {sorted(body)})")
        items = body['pages']
    else:
        items = body

    if not isinstance(items, list):
        raise ValueError(f"Unexpected page listing type: {type(items).__name__}")

    pages: List[RemotePage] = []
    _collect_pages(items, None, pages)
    return pages


def _collect_pages(items: List[Any], parent_id: Optional[str], out: List[RemotePage]) -> None:
    for item in items:
        if not isinstance(item, dict):
            logger.warning(f"Skipping non-object page entry: {item!r}")
            continue
        try:
            page = RemotePage.from_api(item, parent_id=parent_id)
        except ValueError as e:
            logger.warning(f"Skipping page entry: {e}")
            continue
        out.append(page)

        nested = item.get('pages')
        if isinstance(nested, list) and nested:
            _collect_pages(nested, page.id, out)


@dataclass
class PageTree:
    """Pages of one doc as both a flat list and a forest.

    Attributes:
        pages: Flat page list in API order
        roots: Root nodes of the forest
    """
    pages: List[RemotePage] = field(default_factory=list)
    roots: List[RemotePageNode] = field(default_factory=list)

    @classmethod
    def from_pages(cls, pages: List[RemotePage]) -> 'PageTree':
        return cls(pages=list(pages), roots=build_tree(pages))

    def find_by_id(self, page_id: str) -> Optional[RemotePageNode]:
        return find_by_id(page_id, self.roots)

    def find_by_name(self, name: str) -> Optional[RemotePageNode]:
        return find_by_name(name, self.roots)

    def __len__(self) -> int:
        return len(self.pages)


class RemoteTreeBuilder:
    """Fetches the page list of a doc and builds its PageTree.

    Example:
        >>> builder = RemoteTreeBuilder(api)
        >>> tree = builder.fetch("abc-123")
        >>> print(f"{len(tree.roots)} root pages")
    """

    def __init__(self, api: APIWrapper):
        self._api = api

    def fetch(self, doc_id: str) -> PageTree:
        """Fetch and build the page tree of a doc.

        Args:
            doc_id: The ClickUp Doc id

        Returns:
            PageTree (possibly empty if the doc has no pages)

        Raises:
            PageFetchError: If the page list could not be fetched or parsed
        """
        logger.info(f"ClickUp API: GET docs/{doc_id}/pages")
        try:
            response = self._api.list_pages(doc_id)
        except ClickUpError as e:
            raise PageFetchError(doc_id, str(e)) from e
        except ValueError as e:
            raise PageFetchError(doc_id, str(e)) from e

        if response.status_code != 200:
            raise PageFetchError(
                doc_id,
                f"{response.error_message()} (Status: {response.status_code})"
            )

        if response.data is None:
            if response.text.strip():
                raise PageFetchError(doc_id, "Response body is not valid JSON")
            return PageTree()

        try:
            pages = parse_page_listing(response.data)
        except ValueError as e:
            raise PageFetchError(doc_id, str(e)) from e

        logger.info(f"Found {len(pages)} existing pages in ClickUp Doc {doc_id}")
        return PageTree.from_pages(pages)
