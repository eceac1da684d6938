"""Integration tests: upload and download against an in-memory ClickUp Doc.

These tests run the full SyncCommand stack (config, state, orchestrator,
reconcilers, real vault on disk) with only the HTTP layer replaced.
"""

from unittest.mock import MagicMock

import pytest

from src.cli.config import StateManager
from src.cli.models import ExitCode, SyncState
from src.cli.sync_command import SyncCommand
from src.sync_engine.config_loader import ConfigLoader
from src.sync_engine.models import SyncConfig, SyncTarget
from src.vault.local_vault import LocalVault
from tests.helpers.fake_clickup import FakeAuthenticator


def make_command(vault_root, api):
    return SyncCommand(
        vault_root=vault_root,
        output_handler=MagicMock(),
        authenticator=FakeAuthenticator(),
        api_wrapper=api,
    )


@pytest.fixture
def configure():
    """Write sync targets into a vault's configuration."""
    def _configure(vault, *targets):
        ConfigLoader.save(ConfigLoader.default_path(vault.root), SyncConfig(sync_targets=list(targets)))
    return _configure


class TestRoundTrip:
    """Upload from one vault, download into another."""

    def test_upload_then_download_is_byte_identical(self, tmp_path, fake_api, configure):
        """Content survives the round trip unchanged."""
        content = "# Hello\n\nSome *markdown* with unicode: héllo ✓\r\nand mixed line endings\n"
        source = LocalVault(str(tmp_path / "source"))
        source.create('Notes/hello.md', content)
        configure(source, SyncTarget('doc-1', 'Notes'))

        assert make_command(source.root, fake_api).run_sync() == ExitCode.SUCCESS

        target = LocalVault(str(tmp_path / "target"))
        configure(target, SyncTarget('doc-1', 'Fresh'))

        assert make_command(target.root, fake_api).run_download() == ExitCode.SUCCESS
        assert target.read('Fresh/hello.md') == content

    def test_nested_folders_round_trip(self, tmp_path, fake_api, configure):
        """Folder pages uploaded first become parents and folders again on download."""
        source = LocalVault(str(tmp_path / "source"))
        source.create('Notes/Projects.md', 'index')
        source.create('Notes/Projects/plan.md', 'plan')
        configure(source, SyncTarget('doc-1', 'Notes'))

        # first pass creates the folder page, second pass places the child under it
        make_command(source.root, fake_api).run_sync()
        fake_api.remove_page('doc-1', fake_api.pages_named('doc-1', 'plan')[0]['id'])
        state_path = StateManager.default_path(source.root)
        state = StateManager.load(state_path)
        del state.page_mapping['doc-1:::Notes/Projects/plan.md']
        StateManager.save(state_path, state)
        make_command(source.root, fake_api).run_sync()

        projects = fake_api.pages_named('doc-1', 'Projects')[0]
        assert fake_api.pages_named('doc-1', 'plan')[0]['parent_page_id'] == projects['id']

        target = LocalVault(str(tmp_path / "target"))
        configure(target, SyncTarget('doc-1', 'Out'))
        make_command(target.root, fake_api).run_download()

        assert target.read('Out/Projects.md') == 'index'
        assert target.read('Out/Projects/plan.md') == 'plan'


class TestIdempotence:
    """Repeated runs converge."""

    def test_second_sync_creates_nothing(self, tmp_path, fake_api, configure):
        """A second upload with unchanged files only updates existing pages."""
        vault = LocalVault(str(tmp_path / "vault"))
        for path in ('Notes/a.md', 'Notes/b.md', 'Notes/sub/c.md'):
            vault.create(path, path)
        configure(vault, SyncTarget('doc-1', 'Notes'))

        make_command(vault.root, fake_api).run_sync()
        creates = fake_api.count_calls('create_page')
        make_command(vault.root, fake_api).run_sync()

        assert creates == 3
        assert fake_api.count_calls('create_page') == 3
        assert len(fake_api.docs['doc-1']) == 3

    def test_lost_state_recovered_by_name(self, tmp_path, fake_api, configure):
        """Without a state file, pages are found again by name instead of duplicated."""
        vault = LocalVault(str(tmp_path / "vault"))
        vault.create('Notes/a.md', 'v1')
        configure(vault, SyncTarget('doc-1', 'Notes'))
        make_command(vault.root, fake_api).run_sync()

        StateManager.save(StateManager.default_path(vault.root), SyncState())
        vault.modify('Notes/a.md', 'v2')
        make_command(vault.root, fake_api).run_sync()

        assert len(fake_api.docs['doc-1']) == 1
        assert fake_api.docs['doc-1'][0]['content'] == 'v2'

    def test_deleted_remote_page_is_recreated(self, tmp_path, fake_api, configure):
        """A mapped page removed remotely is created again on the next sync."""
        vault = LocalVault(str(tmp_path / "vault"))
        vault.create('Notes/a.md', 'a')
        configure(vault, SyncTarget('doc-1', 'Notes'))
        make_command(vault.root, fake_api).run_sync()
        old_id = fake_api.docs['doc-1'][0]['id']
        fake_api.remove_page('doc-1', old_id)

        assert make_command(vault.root, fake_api).run_sync() == ExitCode.SUCCESS

        mapping = StateManager.load(StateManager.default_path(vault.root)).page_mapping
        assert mapping['doc-1:::Notes/a.md'] != old_id
        assert len(fake_api.docs['doc-1']) == 1

    def test_download_twice_keeps_one_file_per_page(self, tmp_path, fake_api, configure):
        """A second download rewrites the same files."""
        fake_api.add_page('doc-1', 'A', 'a')
        vault = LocalVault(str(tmp_path / "vault"))
        configure(vault, SyncTarget('doc-1', 'Out'))

        make_command(vault.root, fake_api).run_download()
        make_command(vault.root, fake_api).run_download()

        assert [f.path for f in vault.list_markdown_files()] == ['Out/A.md']
