"""ClickUp client library for document sync.

This package provides Python abstractions over the ClickUp Docs REST API v3,
enabling clean interactions with the pages of a ClickUp Doc.
"""

from .errors import (
    SyncError,
    ClickUpError,
    InvalidCredentialsError,
    APIUnreachableError,
    APIAccessError,
)
from .auth import Authenticator, Credentials
from .api_wrapper import APIWrapper, APIResponse

__all__ = [
    "SyncError",
    "ClickUpError",
    "InvalidCredentialsError",
    "APIUnreachableError",
    "APIAccessError",
    "Authenticator",
    "Credentials",
    "APIWrapper",
    "APIResponse",
]
