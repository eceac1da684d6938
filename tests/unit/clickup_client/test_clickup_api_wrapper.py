"""Unit tests for clickup_client.api_wrapper module."""

from unittest.mock import Mock, patch

import pytest
import requests

from src.clickup_client.api_wrapper import CONTENT_FORMAT, APIResponse, APIWrapper
from src.clickup_client.auth import Credentials
from src.clickup_client.errors import (
    APIAccessError,
    APIUnreachableError,
    InvalidCredentialsError,
)

BASE = "https://api.clickup.com/api/v3"


def create_mock_auth(api_key='pk_42_SECRET'):
    """Create a mock authenticator with standard credentials."""
    mock_auth = Mock()
    mock_auth.get_credentials.return_value = Credentials(api_key, 'ws-1', BASE)
    return mock_auth


def create_response(status_code=200, json_data=None, text=None):
    """Create a mock requests.Response."""
    response = Mock()
    response.status_code = status_code
    if text is None:
        text = "" if json_data is None else "{...}"
    response.text = text
    if json_data is None:
        response.json.side_effect = ValueError("No JSON")
    else:
        response.json.return_value = json_data
    return response


def create_wrapper(*responses, auth=None):
    session = Mock()
    session.headers = {}
    session.request.side_effect = list(responses)
    return APIWrapper(auth or create_mock_auth(), session=session), session


class TestAPIResponse:
    """Test cases for APIResponse helpers."""

    def test_json_field_on_non_dict_body(self):
        """json_field returns None when the body is not an object."""
        assert APIResponse(200, data=[1, 2]).json_field('id') is None

    def test_error_message_prefers_err_field(self):
        """error_message uses the API 'err' field when present."""
        assert APIResponse(400, data={'err': 'Bad doc'}).error_message() == 'Bad doc'

    def test_error_message_falls_back_to_text(self):
        """error_message falls back to the raw body."""
        assert APIResponse(500, text="boom").error_message() == "boom"
        assert APIResponse(500).error_message() == "Unknown error"


class TestAPIWrapperRequests:
    """Test cases for URL building and request bodies."""

    def test_init_does_not_load_credentials(self):
        """__init__ should not touch credentials until first use."""
        mock_auth = Mock()
        APIWrapper(mock_auth)
        mock_auth.get_credentials.assert_not_called()

    def test_list_pages_url_and_auth_header(self):
        """list_pages GETs the doc's pages with the API key header."""
        wrapper, session = create_wrapper(create_response(200, {'pages': []}))

        result = wrapper.list_pages('doc-1')

        assert result.status_code == 200
        assert result.data == {'pages': []}
        method, url = session.request.call_args[0]
        assert method == 'GET'
        assert url == f"{BASE}/workspaces/ws-1/docs/doc-1/pages"
        assert session.headers['Authorization'] == 'pk_42_SECRET'

    def test_get_page_content_requests_markdown(self):
        """get_page_content hits /content with format=markdown."""
        wrapper, session = create_wrapper(create_response(200, text="# Hi"))

        result = wrapper.get_page_content('doc-1', 'p1')

        assert result.data is None
        assert result.text == "# Hi"
        _, url = session.request.call_args[0]
        assert url.endswith("/docs/doc-1/pages/p1/content")
        assert session.request.call_args[1]['params'] == {'format': 'markdown'}

    def test_create_page_body_with_parent(self):
        """create_page POSTs name, content, format and parent."""
        wrapper, session = create_wrapper(create_response(201, {'id': 'new'}))

        result = wrapper.create_page('doc-1', 'Plan', '# Plan', parent_page_id='p0')

        assert result.json_field('id') == 'new'
        assert session.request.call_args[0][0] == 'POST'
        assert session.request.call_args[1]['json'] == {
            'name': 'Plan',
            'content': '# Plan',
            'content_format': CONTENT_FORMAT,
            'parent_page_id': 'p0',
        }

    def test_create_page_body_without_parent(self):
        """create_page omits parent_page_id for top-level pages."""
        wrapper, session = create_wrapper(create_response(201, {'id': 'new'}))

        wrapper.create_page('doc-1', 'Plan', '# Plan')

        assert 'parent_page_id' not in session.request.call_args[1]['json']

    def test_update_page_uses_put(self):
        """update_page PUTs to the page URL."""
        wrapper, session = create_wrapper(create_response(204))

        result = wrapper.update_page('doc-1', 'p1', 'Plan', 'body')

        assert result.status_code == 204
        method, url = session.request.call_args[0]
        assert method == 'PUT'
        assert url.endswith("/docs/doc-1/pages/p1")

    def test_error_status_is_returned_not_raised(self):
        """Non-2xx statuses come back as APIResponse."""
        wrapper, _ = create_wrapper(create_response(404, {'err': 'Not found'}))

        result = wrapper.get_page('doc-1', 'gone')

        assert result.status_code == 404
        assert result.error_message() == 'Not found'

    @pytest.mark.parametrize('bad_id', ['', '  ', 'a/b', 'a?b', 'a#b', 'a b'])
    def test_rejects_unsafe_ids(self, bad_id):
        """Identifiers with URL delimiters are rejected before any request."""
        wrapper, session = create_wrapper()

        with pytest.raises(ValueError):
            wrapper.get_page('doc-1', bad_id)
        session.request.assert_not_called()

    def test_missing_credentials_raise(self):
        """Missing credentials surface as InvalidCredentialsError."""
        mock_auth = Mock()
        mock_auth.get_credentials.side_effect = InvalidCredentialsError('CLICKUP_API_KEY')
        wrapper, _ = create_wrapper(auth=mock_auth)

        with pytest.raises(InvalidCredentialsError):
            wrapper.list_pages('doc-1')


class TestAPIWrapperFailures:
    """Test cases for transport failures and rate limits."""

    def test_connection_error_raises_unreachable(self):
        """A requests exception becomes APIUnreachableError."""
        wrapper, _ = create_wrapper(requests.ConnectionError("refused"))

        with pytest.raises(APIUnreachableError) as exc_info:
            wrapper.list_pages('doc-1')
        assert BASE in str(exc_info.value)

    def test_unreachable_message_masks_api_key(self):
        """The API key never appears in transport error messages."""
        wrapper, _ = create_wrapper(requests.ConnectionError("failed with pk_42_SECRET"))

        with pytest.raises(APIUnreachableError) as exc_info:
            wrapper.list_pages('doc-1')
        assert 'pk_42_SECRET' not in str(exc_info.value)
        assert '***REDACTED***' in str(exc_info.value)

    @patch('time.sleep')
    def test_retries_429_then_succeeds(self, mock_sleep):
        """A 429 response is retried with backoff."""
        wrapper, session = create_wrapper(
            create_response(429), create_response(200, {'pages': []})
        )

        result = wrapper.list_pages('doc-1')

        assert result.status_code == 200
        assert session.request.call_count == 2
        mock_sleep.assert_called_once_with(1)

    @patch('time.sleep')
    def test_persistent_429_raises_access_error(self, mock_sleep):
        """Four 429 responses exhaust the retries."""
        wrapper, session = create_wrapper(*[create_response(429) for _ in range(4)])

        with pytest.raises(APIAccessError):
            wrapper.list_pages('doc-1')
        assert session.request.call_count == 4


class TestSanitizeCredentials:
    """Test cases for _sanitize_credentials."""

    def test_masks_authorization_header(self):
        """Authorization header values are masked."""
        wrapper = APIWrapper(create_mock_auth())
        result = wrapper._sanitize_credentials("Authorization: pk_1_X\nnext")
        assert result == "Authorization: ***REDACTED***\nnext"

    def test_masks_bearer_token(self):
        """Bearer tokens are masked."""
        wrapper = APIWrapper(create_mock_auth())
        assert 'abc' not in wrapper._sanitize_credentials("Bearer abc")

    def test_empty_text_unchanged(self):
        """Empty text is returned as is."""
        wrapper = APIWrapper(create_mock_auth())
        assert wrapper._sanitize_credentials("") == ""
