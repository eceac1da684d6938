"""API wrapper for the ClickUp Docs REST API v3.

This module wraps a requests Session and exposes the handful of page
operations the sync engine needs. Transport failures are translated into the
typed exception hierarchy; HTTP error statuses are returned to the caller
untouched so the sync engine can inspect them. It integrates with the retry
logic for handling rate limits.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from .auth import Authenticator
from .errors import APIUnreachableError, InvalidCredentialsError
from .retry_logic import RateLimitedError, retry_on_rate_limit

logger = logging.getLogger(__name__)

CONTENT_FORMAT = "text/md"

# Characters that would change the meaning of a URL path segment
_UNSAFE_ID_PATTERN = re.compile(r'[/?#\s]')


@dataclass
class APIResponse:
    """Normalized HTTP response from the ClickUp API.

    Attributes:
        status_code: HTTP status code
        data: Parsed JSON body, or None if the body was empty or not JSON
        text: Raw response body text
    """
    status_code: int
    data: Optional[Any] = None
    text: str = ""

    def json_field(self, name: str) -> Any:
        """Return a top-level field of a JSON object body, or None."""
        if isinstance(self.data, dict):
            return self.data.get(name)
        return None

    def error_message(self) -> str:
        """Best-effort error description for logging."""
        err = self.json_field('err') or self.json_field('message')
        if err:
            return str(err)
        return self.text[:200] if self.text else "Unknown error"


class APIWrapper:
    """Thin wrapper around a requests Session for ClickUp Doc pages.

    This class:
    1. Handles authentication using the Authenticator
    2. Builds workspace/doc/page URLs from validated identifiers
    3. Translates transport exceptions to typed exceptions
    4. Integrates retry logic for 429 rate limits
    5. Returns every HTTP status as an APIResponse instead of raising

    Example:
        >>> auth = Authenticator()
        >>> api = APIWrapper(auth)
        >>> response = api.list_pages("abc-123")
        >>> response.status_code
        200
    """

    def __init__(
        self,
        authenticator: Authenticator,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
    ):
        """Initialize the API wrapper with authentication credentials.

        Args:
            authenticator: Authenticator instance for loading credentials
            session: Optional requests Session (created lazily if omitted)
            timeout: Per-request timeout in seconds
        """
        self._authenticator = authenticator
        self._session = session
        self._timeout = timeout

    def _get_session(self) -> requests.Session:
        """Get or create the HTTP session with the authorization header set.

        Raises:
            InvalidCredentialsError: If credentials are missing
        """
        creds = self._authenticator.get_credentials()
        if self._session is None:
            self._session = requests.Session()
        self._session.headers.update({
            'Authorization': creds.api_key,
            'Accept': 'application/json',
        })
        return self._session

    def _validate_id(self, value: str, field_name: str) -> str:
        """Validate an identifier before it is interpolated into a URL.

        Raises:
            ValueError: If the identifier is empty or contains URL delimiters
        """
        if value is None or not str(value).strip():
            raise ValueError(f"{field_name} cannot be empty")
        value_str = str(value).strip()
        if _UNSAFE_ID_PATTERN.search(value_str):
            raise ValueError(
                f"Invalid {field_name} format: '{value}'. "
                f"Identifiers must not contain '/', '?', '#' or whitespace."
            )
        return value_str

    def _pages_url(self, doc_id: str, page_id: Optional[str] = None, suffix: str = "") -> str:
        creds = self._authenticator.get_credentials()
        doc = self._validate_id(doc_id, 'doc_id')
        url = f"{creds.base_url}/workspaces/{creds.workspace_id}/docs/{doc}/pages"
        if page_id is not None:
            url += f"/{self._validate_id(page_id, 'page_id')}"
        return url + suffix

    def _sanitize_credentials(self, text: str) -> str:
        """Sanitize error messages to prevent credential leakage.

        Masks Authorization headers, Bearer tokens, ClickUp personal tokens
        (``pk_...``) and the configured API key itself.

        Example:
            >>> api._sanitize_credentials("Authorization: pk_123_ABC failed")
            'Authorization: ***REDACTED***'
        """
        if not text:
            return text

        sanitized = re.sub(
            r'Authorization:\s*[^\n\r]+',
            'Authorization: ***REDACTED***',
            text,
            flags=re.IGNORECASE
        )
        sanitized = re.sub(
            r'Bearer\s+[^\s\n\r]+',
            'Bearer ***REDACTED***',
            sanitized,
            flags=re.IGNORECASE
        )
        sanitized = re.sub(r'\bpk_[A-Za-z0-9_]+', '***REDACTED***', sanitized)

        try:
            api_key = self._authenticator.get_credentials().api_key
        except InvalidCredentialsError:
            api_key = ""
        if api_key:
            sanitized = sanitized.replace(api_key, '***REDACTED***')

        return sanitized

    @staticmethod
    def _to_api_response(response: requests.Response) -> APIResponse:
        text = response.text or ""
        data = None
        if text.strip():
            try:
                data = response.json()
            except ValueError:
                logger.debug(f"Response body is not JSON (status {response.status_code})")
        return APIResponse(status_code=response.status_code, data=data, text=text)

    def _request(
        self,
        method: str,
        url: str,
        operation: str,
        json_body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> APIResponse:
        """Send one request, retrying on 429.

        Raises:
            InvalidCredentialsError: If credentials are missing
            APIUnreachableError: On connection failures and timeouts
            APIAccessError: If the rate limit persists after retries
        """
        session = self._get_session()

        def _send() -> APIResponse:
            try:
                response = session.request(
                    method,
                    url,
                    json=json_body,
                    params=params,
                    timeout=self._timeout,
                )
            except requests.RequestException as e:
                safe_error_msg = self._sanitize_credentials(str(e))
                logger.error(f"API operation failed: {operation} - {safe_error_msg}")
                creds = self._authenticator.get_credentials()
                raise APIUnreachableError(endpoint=creds.base_url, reason=safe_error_msg) from e

            if response.status_code == 429:
                raise RateLimitedError(response.status_code)

            logger.debug(f"ClickUp API: {method} {operation} -> {response.status_code}")
            return self._to_api_response(response)

        return retry_on_rate_limit(_send)

    def list_pages(self, doc_id: str) -> APIResponse:
        """List every page of a doc.

        Args:
            doc_id: The ClickUp Doc id

        Returns:
            APIResponse whose body is ``{"pages": [...]}`` or a bare list
        """
        return self._request('GET', self._pages_url(doc_id), f"list_pages({doc_id})")

    def get_page(self, doc_id: str, page_id: str) -> APIResponse:
        """Fetch page metadata, possibly with inline content."""
        return self._request(
            'GET',
            self._pages_url(doc_id, page_id),
            f"get_page({doc_id}, {page_id})",
        )

    def get_page_content(self, doc_id: str, page_id: str) -> APIResponse:
        """Fetch the markdown content of a page.

        Used when get_page returns metadata without a body.
        """
        return self._request(
            'GET',
            self._pages_url(doc_id, page_id, suffix="/content"),
            f"get_page_content({doc_id}, {page_id})",
            params={'format': 'markdown'},
        )

    def create_page(
        self,
        doc_id: str,
        name: str,
        content: str,
        parent_page_id: Optional[str] = None,
    ) -> APIResponse:
        """Create a new page.

        Args:
            doc_id: The ClickUp Doc id
            name: Page display name
            content: Markdown content
            parent_page_id: Optional parent page id (top-level page if None)

        Returns:
            APIResponse; a successful create is 200/201 with ``{"id": ...}``
        """
        body: Dict[str, Any] = {
            'name': name,
            'content': content,
            'content_format': CONTENT_FORMAT,
        }
        if parent_page_id:
            body['parent_page_id'] = parent_page_id

        return self._request(
            'POST',
            self._pages_url(doc_id),
            f"create_page({doc_id}, {name})",
            json_body=body,
        )

    def update_page(self, doc_id: str, page_id: str, name: str, content: str) -> APIResponse:
        """Replace a page's name and content.

        Returns:
            APIResponse; a successful update is 200 or 204
        """
        body = {
            'name': name,
            'content': content,
            'content_format': CONTENT_FORMAT,
        }
        return self._request(
            'PUT',
            self._pages_url(doc_id, page_id),
            f"update_page({doc_id}, {page_id})",
            json_body=body,
        )
