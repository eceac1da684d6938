"""Root pytest configuration for all tests.

This conftest applies to all test types (unit, integration) and provides
the shared in-memory ClickUp doc, vault and session fixtures.
"""

import logging

import pytest

from src.sync_engine.page_mapping import PageMapping
from src.sync_engine.session import SyncSession
from src.vault.local_vault import LocalVault
from tests.helpers.fake_clickup import FakeAuthenticator, FakeClickUpDoc

# Keep urllib3 connection chatter out of captured logs
logging.getLogger("urllib3").setLevel(logging.WARNING)


@pytest.fixture(autouse=True)
def clickup_env(monkeypatch):
    """Remove real ClickUp settings from the environment for every test."""
    for name in ("CLICKUP_API_KEY", "CLICKUP_WORKSPACE_ID", "CLICKUP_API_URL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_api():
    """In-memory ClickUp API with one empty doc 'doc-1'."""
    api = FakeClickUpDoc()
    api.add_doc("doc-1")
    return api


@pytest.fixture
def vault(tmp_path):
    """Empty vault rooted in a temporary directory."""
    root = tmp_path / "vault"
    root.mkdir()
    return LocalVault(str(root))


@pytest.fixture
def persisted():
    """List collecting every mapping snapshot passed to persist."""
    return []


@pytest.fixture
def notices():
    """List collecting every user notice."""
    return []


@pytest.fixture
def session(fake_api, vault, persisted, notices):
    """SyncSession over the fake API and the temporary vault."""
    return SyncSession(
        api=fake_api,
        vault=vault,
        mapping=PageMapping(),
        authenticator=FakeAuthenticator(),
        persist_callback=lambda mapping: persisted.append(mapping.to_dict()),
        notify_callback=notices.append,
    )
