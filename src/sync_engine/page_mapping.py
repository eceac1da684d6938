"""Identity mapping between local files and remote pages.

The mapping is a flat table keyed by ``"<docId>:::<localPath>"`` with the
remote page id as value. It is the source of truth for "this file already
corresponds to this page" and is always consulted before any name-based
lookup. The store is in memory only; callers persist it after mutating.
"""

import logging
from typing import Dict, Iterable, Optional, Set, Tuple

logger = logging.getLogger(__name__)

KEY_SEPARATOR = ":::"


def make_key(doc_id: str, path: str) -> str:
    """Build a mapping key that parse_key splits back into the same parts.

    Raises:
        ValueError: If either part contains the separator, or a colon at the
            join makes the split ambiguous (doc id "d:" with path "x")
    """
    key = f"{doc_id}{KEY_SEPARATOR}{path}"
    if parse_key(key) != (doc_id, path):
        raise ValueError(
            f"Cannot build an unambiguous mapping key around '{KEY_SEPARATOR}': "
            f"doc_id={doc_id!r}, path={path!r}"
        )
    return key


def parse_key(key: str) -> Optional[Tuple[str, str]]:
    """Split a mapping key into (doc_id, path).

    Returns:
        The two parts, or None if the key does not contain exactly one separator

    Examples:
        >>> parse_key("doc123:::notes/a.md")
        ('doc123', 'notes/a.md')
        >>> parse_key("doc123") is None
        True
    """
    parts = key.split(KEY_SEPARATOR)
    if len(parts) != 2:
        return None
    return parts[0], parts[1]


class PageMapping:
    """In-memory (doc_id, local_path) -> page_id table.

    Example:
        >>> mapping = PageMapping()
        >>> mapping.set("doc1", "notes/a.md", "p1")
        >>> mapping.get("doc1", "notes/a.md")
        'p1'
    """

    def __init__(self, entries: Optional[Dict[str, str]] = None):
        self._entries: Dict[str, str] = dict(entries or {})

    def get(self, doc_id: str, path: str) -> Optional[str]:
        return self._entries.get(make_key(doc_id, path))

    def set(self, doc_id: str, path: str, page_id: str) -> None:
        """Record (or overwrite) the page id for a file."""
        self._entries[make_key(doc_id, path)] = page_id

    def delete(self, doc_id: str, path: str) -> None:
        """Remove the entry for a file (no-op if absent)."""
        self._entries.pop(make_key(doc_id, path), None)

    def garbage_collect(
        self,
        existing_local_paths: Iterable[str],
        valid_doc_ids: Iterable[str],
    ) -> int:
        """Drop corrupt and stale entries.

        An entry is removed when its key does not split into exactly two
        parts, when its local path is not in ``existing_local_paths``, or when
        its doc id is not in ``valid_doc_ids``.

        Args:
            existing_local_paths: Paths of files currently in the vault
            valid_doc_ids: Doc ids of the configured sync targets

        Returns:
            Number of entries removed (persist only if non-zero)
        """
        existing: Set[str] = set(existing_local_paths)
        valid_docs: Set[str] = set(valid_doc_ids)
        removed = 0

        for key in list(self._entries):
            parsed = parse_key(key)
            if parsed is None:
                logger.warning(f"Invalid mapping key format found: {key}. Removing.")
                del self._entries[key]
                removed += 1
                continue

            doc_id, path = parsed
            file_exists = path in existing
            doc_is_valid = doc_id in valid_docs

            if not file_exists:
                logger.info(
                    f"Removing mapping for deleted/moved file: {path} "
                    f"(Doc: {doc_id}, Page ID: {self._entries[key]})"
                )
            if not doc_is_valid:
                logger.info(
                    f"Removing mapping for removed/invalid Doc ID: {doc_id} "
                    f"(File: {path}, Page ID: {self._entries[key]})"
                )
            if not file_exists or not doc_is_valid:
                del self._entries[key]
                removed += 1

        return removed

    def to_dict(self) -> Dict[str, str]:
        return dict(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
