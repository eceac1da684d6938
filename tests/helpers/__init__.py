"""Test helper modules for ClickUp sync testing.

This package provides utilities for unit and integration testing:
- fake_clickup: In-memory ClickUp Doc implementing the APIWrapper surface
"""

from .fake_clickup import FakeAuthenticator, FakeClickUpDoc

__all__ = [
    'FakeAuthenticator',
    'FakeClickUpDoc',
]
