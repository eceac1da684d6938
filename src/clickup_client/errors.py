"""Typed exception hierarchy for ClickUp-related errors.

This module defines the root application exception and the transport-level
exceptions raised by the ClickUp client library. Every exception carries a
descriptive message with enough context to debug a failed request.
"""

from typing import Optional


class SyncError(Exception):
    """Base exception for all clickup-doc-sync errors.

    Use this to catch any application-level error from the sync tool.
    """
    pass


class ClickUpError(SyncError):
    """Base exception for all ClickUp API errors."""
    pass


class InvalidCredentialsError(ClickUpError):
    """Raised when the API key or workspace id is missing."""

    def __init__(self, missing: str, endpoint: Optional[str] = None):
        message = f"ClickUp credentials incomplete: {missing} is not set"
        if endpoint:
            message += f" (endpoint: {endpoint})"
        super().__init__(message)
        self.missing = missing
        self.endpoint = endpoint


class APIUnreachableError(ClickUpError):
    """Raised when the ClickUp API cannot be reached (network or timeout)."""

    def __init__(self, endpoint: str, reason: Optional[str] = None):
        message = f"API is not available at {endpoint}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.endpoint = endpoint
        self.reason = reason


class APIAccessError(ClickUpError):
    """Raised when API access fails after retries."""

    def __init__(self, message: str = "ClickUp API failure (after 3 retries)"):
        super().__init__(message)
