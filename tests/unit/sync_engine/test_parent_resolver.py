"""Unit tests for sync_engine.parent_resolver and page_locator modules."""

from src.sync_engine.models import RemotePage, SyncTarget
from src.sync_engine.page_locator import find_by_id, find_by_name, find_in_flat
from src.sync_engine.parent_resolver import relative_segments, resolve_parent
from src.sync_engine.tree_builder import build_tree


def sample_pages():
    return [
        RemotePage('p-eng', 'Engineering'),
        RemotePage('p-api', 'API', 'p-eng'),
        RemotePage('p-ops', 'Ops'),
        RemotePage('p-api2', 'API', 'p-ops'),
    ]


class TestPageLocator:
    """Test cases for find_by_name, find_by_id and find_in_flat."""

    def test_find_by_name_pre_order_first_match(self):
        """The first match in pre-order wins for duplicate names."""
        roots = build_tree(sample_pages())

        assert find_by_name('API', roots).id == 'p-api'

    def test_find_by_name_is_case_sensitive(self):
        """Names must match exactly."""
        roots = build_tree(sample_pages())

        assert find_by_name('api', roots) is None

    def test_find_by_id_descends(self):
        """find_by_id searches nested children."""
        roots = build_tree(sample_pages())

        assert find_by_id('p-api2', roots).name == 'API'
        assert find_by_id('nope', roots) is None

    def test_find_in_flat(self):
        """find_in_flat returns the first page with the name."""
        assert find_in_flat('Ops', sample_pages()).id == 'p-ops'
        assert find_in_flat('Missing', sample_pages()) is None


class TestRelativeSegments:
    """Test cases for relative_segments."""

    def test_segments_exclude_file_name(self):
        """Only directory components below the target folder are returned."""
        target = SyncTarget('doc', 'Notes')

        assert relative_segments('Notes/a/b/c.md', target) == ['a', 'b']

    def test_root_target(self):
        """A vault-root target keeps the full directory path."""
        assert relative_segments('a/c.md', SyncTarget('doc', '')) == ['a']
        assert relative_segments('c.md', SyncTarget('doc', '')) == []


class TestResolveParent:
    """Test cases for resolve_parent."""

    def test_unmatched_segment_keeps_fallback(self):
        """A folder with no matching page resolves to the fallback."""
        pages = sample_pages()

        assert resolve_parent(['NoSuchFolder'], pages, build_tree(pages), 'fallback') == 'fallback'

    def test_no_segments_returns_fallback(self):
        """Files at the target root use the fallback parent."""
        assert resolve_parent([], sample_pages(), [], None) is None

    def test_last_matching_segment_wins(self):
        """Each matched segment replaces the current parent."""
        pages = sample_pages()

        assert resolve_parent(['Ops', 'Missing'], pages, build_tree(pages), None) == 'p-ops'
        assert resolve_parent(['Engineering', 'API'], pages, build_tree(pages), None) == 'p-api'

    def test_whole_doc_match_not_scoped(self):
        """Segment lookup is not limited to the previous page's subtree."""
        pages = sample_pages()

        # 'API' under 'Ops' still resolves to the first 'API' in the doc
        assert resolve_parent(['Ops', 'API'], pages, build_tree(pages), None) == 'p-api'

    def test_tree_consulted_when_flat_list_misses(self):
        """The tree is searched when the flat list has no match."""
        pages = sample_pages()

        assert resolve_parent(['Ops'], [], build_tree(pages), 'fallback') == 'p-ops'
