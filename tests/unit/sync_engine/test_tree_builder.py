"""Unit tests for sync_engine.tree_builder module."""

import logging
from unittest.mock import Mock

import pytest

from src.clickup_client.api_wrapper import APIResponse
from src.clickup_client.errors import APIUnreachableError
from src.sync_engine.errors import PageFetchError
from src.sync_engine.models import RemotePage
from src.sync_engine.tree_builder import (
    PageTree,
    RemoteTreeBuilder,
    build_tree,
    flatten_tree,
    parse_page_listing,
)


def page(page_id, name=None, parent_id=None):
    return RemotePage(page_id, name or page_id, parent_id)


def shape(nodes):
    """Nested (id, children) tuples for easy comparison."""
    return [(n.id, shape(n.children)) for n in nodes]


class TestBuildTree:
    """Test cases for build_tree."""

    def test_forward_references_resolved(self):
        """Children listed before their parent are still attached."""
        pages = [page("c", parent_id="b"), page("b", parent_id="a"), page("a")]

        assert shape(build_tree(pages)) == [("a", [("b", [("c", [])])])]

    def test_input_order_preserved(self):
        """Roots and siblings keep the listing order."""
        pages = [page("r2"), page("x", parent_id="r1"), page("r1"), page("y", parent_id="r1")]

        assert shape(build_tree(pages)) == [("r2", []), ("r1", [("x", []), ("y", [])])]

    def test_orphan_becomes_root_with_warning(self, caplog):
        """A page whose parent is not in the batch is a root and is logged."""
        with caplog.at_level(logging.WARNING):
            roots = build_tree([page("a"), page("o", parent_id="missing")])

        assert shape(roots) == [("a", []), ("o", [])]
        assert "missing" in caplog.text

    def test_every_page_appears_once(self):
        """Each page is either a root or exactly one parent's child."""
        pages = [page("a"), page("b", parent_id="a"), page("c", parent_id="a"),
                 page("d", parent_id="c"), page("e", parent_id="zzz")]

        flat_ids = [p.id for p in flatten_tree(build_tree(pages))]

        assert sorted(flat_ids) == ["a", "b", "c", "d", "e"]

    def test_duplicate_id_first_wins(self):
        """A repeated id keeps its first occurrence."""
        roots = build_tree([page("a", "first"), page("a", "second")])

        assert [(n.id, n.name) for n in roots] == [("a", "first")]

    def test_empty(self):
        """No pages means no roots."""
        assert build_tree([]) == []


class TestParsePageListing:
    """Test cases for parse_page_listing."""

    def test_wrapped_and_bare_lists(self):
        """Both {'pages': [...]} and a bare list are accepted."""
        items = [{'id': 'p1', 'name': 'One'}]

        assert parse_page_listing({'pages': items}) == [RemotePage('p1', 'One')]
        assert parse_page_listing(items) == [RemotePage('p1', 'One')]

    def test_nested_pages_inherit_parent(self):
        """Nested page arrays are flattened with their container as parent."""
        body = {'pages': [{'id': 'a', 'name': 'A', 'pages': [{'id': 'b', 'name': 'B'}]}]}

        assert parse_page_listing(body) == [RemotePage('a', 'A'), RemotePage('b', 'B', 'a')]

    def test_entries_without_id_skipped(self):
        """Entries lacking an id are ignored."""
        assert parse_page_listing([{'name': 'no id'}, {'id': 7, 'name': 'ok'}]) == [
            RemotePage('7', 'ok')
        ]

    def test_parent_field_variants(self):
        """parent_id and parent_page_id are both understood."""
        pages = parse_page_listing([
            {'id': 'a', 'name': 'A', 'parent_id': 'x'},
            {'id': 'b', 'name': 'B', 'parent_page_id': 'y'},
        ])

        assert [p.parent_id for p in pages] == ['x', 'y']

    def test_unexpected_body_raises(self):
        """A scalar body is rejected."""
        with pytest.raises(ValueError):
            parse_page_listing("nope")

    def test_object_without_pages_key_raises(self):
        """An object body must carry a 'pages' list."""
        with pytest.raises(ValueError):
            parse_page_listing({'err': 'Doc not ready'})


class TestRemoteTreeBuilder:
    """Test cases for RemoteTreeBuilder.fetch."""

    def test_fetch_builds_tree_and_flat_list(self):
        """fetch returns both views from one request."""
        api = Mock()
        api.list_pages.return_value = APIResponse(200, {'pages': [
            {'id': 'a', 'name': 'A'}, {'id': 'b', 'name': 'B', 'parent_page_id': 'a'},
        ]})

        tree = RemoteTreeBuilder(api).fetch('doc-1')

        api.list_pages.assert_called_once_with('doc-1')
        assert [p.id for p in tree.pages] == ['a', 'b']
        assert shape(tree.roots) == [('a', [('b', [])])]
        assert tree.find_by_id('b').name == 'B'
        assert tree.find_by_name('A').id == 'a'

    def test_empty_doc_is_empty_tree(self):
        """An empty doc is not a failure."""
        api = Mock()
        api.list_pages.return_value = APIResponse(200, {'pages': []})

        tree = RemoteTreeBuilder(api).fetch('doc-1')

        assert len(tree) == 0
        assert tree.roots == []

    def test_empty_body_is_empty_tree(self):
        """A 200 with no body is treated as no pages."""
        api = Mock()
        api.list_pages.return_value = APIResponse(200)

        assert RemoteTreeBuilder(api).fetch('doc-1') == PageTree()

    @pytest.mark.parametrize('response', [
        APIResponse(401, {'err': 'Token invalid'}),
        APIResponse(500, text='oops'),
        APIResponse(200, text='<html>not json</html>'),
        APIResponse(200, data='just a string'),
        APIResponse(200, {'err': 'Doc not ready'}),
        APIResponse(200, {'pages': None}),
    ])
    def test_bad_responses_raise_fetch_error(self, response):
        """Failures are distinguished from an empty doc."""
        api = Mock()
        api.list_pages.return_value = response

        with pytest.raises(PageFetchError) as exc_info:
            RemoteTreeBuilder(api).fetch('doc-1')
        assert exc_info.value.doc_id == 'doc-1'

    def test_transport_error_raises_fetch_error(self):
        """Transport exceptions become PageFetchError."""
        api = Mock()
        api.list_pages.side_effect = APIUnreachableError('https://api.test', 'timeout')

        with pytest.raises(PageFetchError):
            RemoteTreeBuilder(api).fetch('doc-1')
