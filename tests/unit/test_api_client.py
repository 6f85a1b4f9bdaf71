"""
Unit tests for the FeedAPIClient.

Tests the single-attempt load, status and body error mapping, and
envelope parsing.
"""

import pytest
import httpx
import requests
from unittest.mock import AsyncMock, Mock, patch

from feed_viewer.api.client import (
    FeedAPIClient,
    FeedError,
    MalformedBodyError,
    NetworkUnavailableError,
    parse_feed_envelope,
)
from tests.factories import make_entry, make_listing


def _response(status_code=200, payload=None):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


class TestFeedAPIClient:
    """Test cases for FeedAPIClient."""

    def setup_method(self):
        """Set up test fixtures."""
        self.client = FeedAPIClient(
            feed_url="https://feeds.test/r/reactjs.json",
            user_agent="tests/1.0"
        )

    def test_init_default_settings(self):
        """Test client initialization with default settings."""
        with patch('feed_viewer.api.client.get_settings') as mock_settings:
            mock_settings.return_value.feed_url = "https://default.test/feed.json"
            mock_settings.return_value.feed_request_timeout = None
            mock_settings.return_value.user_agent = "default-agent"

            client = FeedAPIClient()
            assert client.feed_url == "https://default.test/feed.json"
            assert client.timeout is None
            assert client.headers == {"User-Agent": "default-agent"}

    def test_init_custom_settings(self):
        client = FeedAPIClient(feed_url="https://custom.test/x.json", timeout=5)
        assert client.feed_url == "https://custom.test/x.json"
        assert client.timeout == 5

    @patch('feed_viewer.api.client.requests.get')
    def test_load_success_preserves_order(self, mock_get, listing_payload):
        mock_get.return_value = _response(payload=listing_payload)

        posts = self.client.load()

        assert [post.id for post in posts] == ["a1", "b2", "c3"]
        assert [post.score for post in posts] == [5, 20, 1]
        assert posts[0].body_text == "<p>first</p>"
        assert posts[0].external_url == "https://www.reddit.com/r/reactjs/comments/a1/"

    @patch('feed_viewer.api.client.requests.get')
    def test_load_makes_single_request(self, mock_get, listing_payload):
        mock_get.return_value = _response(payload=listing_payload)

        self.client.load()

        mock_get.assert_called_once_with(
            "https://feeds.test/r/reactjs.json",
            headers={"User-Agent": "tests/1.0"},
            timeout=None
        )

    @patch('feed_viewer.api.client.requests.get')
    def test_load_not_ok_status(self, mock_get):
        """A non-OK status is not retried and surfaces as NetworkUnavailableError."""
        mock_get.return_value = _response(status_code=503)

        with pytest.raises(NetworkUnavailableError) as exc_info:
            self.client.load()

        assert str(exc_info.value) == "Network response was not ok"
        assert exc_info.value.status_code == 503
        assert mock_get.call_count == 1

    @patch('feed_viewer.api.client.requests.get')
    def test_load_transport_error(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("connection refused")

        with pytest.raises(NetworkUnavailableError) as exc_info:
            self.client.load()

        assert "connection refused" in exc_info.value.message
        assert exc_info.value.status_code is None

    @patch('feed_viewer.api.client.requests.get')
    def test_load_body_not_json(self, mock_get):
        response = _response()
        response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
        mock_get.return_value = response

        with pytest.raises(MalformedBodyError) as exc_info:
            self.client.load()

        assert "Failed to decode feed response" in exc_info.value.message

    @patch('feed_viewer.api.client.requests.get')
    def test_load_unexpected_shape(self, mock_get):
        mock_get.return_value = _response(payload={"data": {"after": None}})

        with pytest.raises(MalformedBodyError):
            self.client.load()

    def test_errors_share_base_class(self):
        assert issubclass(NetworkUnavailableError, FeedError)
        assert issubclass(MalformedBodyError, FeedError)


class TestFeedAPIClientAsync:
    """Test cases for the async load path."""

    def _patched_async_client(self, mock_client, get):
        mock_instance = AsyncMock()
        mock_instance.get = get
        mock_instance.__aenter__ = AsyncMock(return_value=mock_instance)
        mock_instance.__aexit__ = AsyncMock(return_value=None)
        mock_client.return_value = mock_instance
        return mock_instance

    @pytest.mark.asyncio
    async def test_load_async_success(self, listing_payload):
        client = FeedAPIClient(feed_url="https://feeds.test/r/reactjs.json", timeout=3)

        with patch('feed_viewer.api.client.httpx.AsyncClient') as mock_client:
            instance = self._patched_async_client(
                mock_client, AsyncMock(return_value=_response(payload=listing_payload))
            )

            posts = await client.load_async()

        assert [post.id for post in posts] == ["a1", "b2", "c3"]
        instance.get.assert_awaited_once_with("https://feeds.test/r/reactjs.json")
        assert mock_client.call_args.kwargs["timeout"] == 3

    @pytest.mark.asyncio
    async def test_load_async_not_ok(self):
        client = FeedAPIClient(feed_url="https://feeds.test/r/reactjs.json")

        with patch('feed_viewer.api.client.httpx.AsyncClient') as mock_client:
            self._patched_async_client(mock_client, AsyncMock(return_value=_response(status_code=404)))

            with pytest.raises(NetworkUnavailableError) as exc_info:
                await client.load_async()

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_load_async_transport_error(self):
        client = FeedAPIClient(feed_url="https://feeds.test/r/reactjs.json")

        with patch('feed_viewer.api.client.httpx.AsyncClient') as mock_client:
            self._patched_async_client(
                mock_client, AsyncMock(side_effect=httpx.ConnectError("Connection failed"))
            )

            with pytest.raises(NetworkUnavailableError) as exc_info:
                await client.load_async()

        assert "Connection failed" in exc_info.value.message


class TestParseFeedEnvelope:
    """Test cases for envelope parsing."""

    def test_missing_selftext_becomes_empty(self):
        entry = make_entry("x1", 3)
        del entry["data"]["selftext"]

        posts = parse_feed_envelope(make_listing([entry]))

        assert posts[0].body_text == ""

    def test_null_selftext_becomes_empty(self):
        entry = make_entry("x1", 3)
        entry["data"]["selftext"] = None

        posts = parse_feed_envelope(make_listing([entry]))

        assert posts[0].body_text == ""

    def test_empty_listing(self):
        assert parse_feed_envelope(make_listing([])) == []

    def test_negative_and_zero_scores(self):
        posts = parse_feed_envelope(make_listing([make_entry("n", -4), make_entry("z", 0)]))
        assert [post.score for post in posts] == [-4, 0]

    @pytest.mark.parametrize("payload", [
        None,
        [],
        "not a listing",
        {"data": None},
        {"data": {"children": "nope"}},
        {"data": {"children": [{"kind": "t3"}]}},
        {"data": {"children": [{"data": {"id": "a", "title": "t"}}]}},
    ])
    def test_malformed_payloads(self, payload):
        with pytest.raises(MalformedBodyError):
            parse_feed_envelope(payload)

    def test_duplicate_ids_rejected(self):
        payload = make_listing([make_entry("dup", 1), make_entry("dup", 2)])

        with pytest.raises(MalformedBodyError) as exc_info:
            parse_feed_envelope(payload)

        assert "dup" in exc_info.value.message

    @pytest.mark.parametrize("url", [
        "javascript:alert(document.cookie)",
        " JavaScript:alert(1)",
        "data:text/html,<script>x</script>",
        "/r/reactjs/comments/x1/",
        "   ",
    ])
    def test_unsafe_post_link_dropped(self, url):
        posts = parse_feed_envelope(make_listing([make_entry("x1", 3, url=url)]))

        assert posts[0].external_url is None

    def test_http_links_kept(self):
        posts = parse_feed_envelope(make_listing([
            make_entry("a", 1, url="https://example.com/post"),
            make_entry("b", 2, url="http://example.com/other"),
        ]))

        assert [post.external_url for post in posts] == [
            "https://example.com/post",
            "http://example.com/other",
        ]
