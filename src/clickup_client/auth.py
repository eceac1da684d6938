"""Authentication module for loading ClickUp credentials.

This module handles loading the ClickUp API key and workspace id from
environment variables using python-dotenv. The settings file may override
the workspace id; the API key only ever comes from the environment.
"""

import os
from typing import NamedTuple, Optional

from dotenv import load_dotenv

from .errors import InvalidCredentialsError

DEFAULT_API_URL = "https://api.clickup.com/api/v3"


class Credentials(NamedTuple):
    """ClickUp API credentials."""
    api_key: str
    workspace_id: str
    base_url: str


class Authenticator:
    """Loads and validates ClickUp credentials from environment variables.

    Credentials are loaded from a .env file using python-dotenv and are never
    cached or logged.

    Environment variables:
        CLICKUP_API_KEY: Personal API token (required)
        CLICKUP_WORKSPACE_ID: Workspace (team) id (required unless overridden)
        CLICKUP_API_URL: API base URL (optional, defaults to the v3 API)

    Example:
        >>> auth = Authenticator()
        >>> creds = auth.get_credentials()
        >>> print(f"Using workspace {creds.workspace_id}")
    """

    def __init__(self, workspace_id: Optional[str] = None):
        """Initialize the authenticator by loading environment variables from .env file.

        Args:
            workspace_id: Optional workspace id overriding CLICKUP_WORKSPACE_ID
        """
        load_dotenv()
        self._workspace_override = workspace_id or None

    def _read(self) -> Credentials:
        api_key = (os.getenv('CLICKUP_API_KEY') or '').strip()
        workspace_id = (self._workspace_override or os.getenv('CLICKUP_WORKSPACE_ID') or '').strip()
        base_url = (os.getenv('CLICKUP_API_URL') or DEFAULT_API_URL).strip().rstrip('/')
        return Credentials(api_key=api_key, workspace_id=workspace_id, base_url=base_url)

    def is_configured(self) -> bool:
        """Check whether both the API key and the workspace id are present.

        Returns:
            True if a request could be authenticated, False otherwise
        """
        creds = self._read()
        return bool(creds.api_key and creds.workspace_id)

    def get_credentials(self) -> Credentials:
        """Get ClickUp credentials from environment variables.

        Returns:
            Credentials: A named tuple containing api_key, workspace_id and base_url

        Raises:
            InvalidCredentialsError: If the API key or workspace id is missing
        """
        creds = self._read()

        if not creds.api_key:
            raise InvalidCredentialsError('CLICKUP_API_KEY', endpoint=creds.base_url)
        if not creds.workspace_id:
            raise InvalidCredentialsError('CLICKUP_WORKSPACE_ID', endpoint=creds.base_url)

        return creds
