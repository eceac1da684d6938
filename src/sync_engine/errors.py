"""Typed exception hierarchy for sync engine errors.

This module defines the exceptions raised inside the reconciliation engine.
All of them inherit from SyncEngineError. Per-file and per-page boundaries
catch them and turn them into counted failures.
"""

from typing import Optional

from src.clickup_client.errors import SyncError


class SyncEngineError(SyncError):
    """Base exception for all sync engine errors."""
    pass


class ConfigError(SyncEngineError):
    """Raised when configuration validation fails."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Configuration error in field '{config_field}': {message}"
        else:
            full_message = f"Configuration error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message


class PageFetchError(SyncEngineError):
    """Raised when the page list of a doc cannot be fetched.

    Distinct from an empty doc: callers must abort the target instead of
    treating the doc as having no pages.
    """

    def __init__(self, doc_id: str, reason: str):
        super().__init__(f"Failed to fetch pages for Doc {doc_id}: {reason}")
        self.doc_id = doc_id
        self.reason = reason


class PageContentError(SyncEngineError):
    """Raised when the content of a single page cannot be fetched."""

    def __init__(self, page_id: str, reason: str):
        super().__init__(f"Failed to fetch content for page {page_id}: {reason}")
        self.page_id = page_id
        self.reason = reason
