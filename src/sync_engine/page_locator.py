"""Name- and id-based lookup over remote page trees.

Searches are depth-first pre-order and return the first match. Duplicate
page names are not disambiguated; the identity mapping takes precedence
over any name lookup.
"""

from typing import Iterable, List, Optional

from .models import RemotePage, RemotePageNode


def find_by_name(name: str, nodes: List[RemotePageNode]) -> Optional[RemotePageNode]:
    """Find the first node whose name equals ``name`` (case-sensitive).

    Args:
        name: Exact page name to look for
        nodes: Forest to search

    Returns:
        The first matching node in pre-order, or None
    """
    for node in nodes:
        if node.name == name:
            return node
        if node.children:
            found = find_by_name(name, node.children)
            if found:
                return found
    return None


def find_by_id(page_id: str, nodes: List[RemotePageNode]) -> Optional[RemotePageNode]:
    """Find the node with the given id, depth-first."""
    for node in nodes:
        if node.id == page_id:
            return node
        if node.children:
            found = find_by_id(page_id, node.children)
            if found:
                return found
    return None


def find_in_flat(name: str, pages: Iterable[RemotePage]) -> Optional[RemotePage]:
    """Linear scan of a flat page list for the first page named ``name``."""
    for page in pages:
        if page.name == name:
            return page
    return None
