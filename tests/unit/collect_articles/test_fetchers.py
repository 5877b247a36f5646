"""Tests for collect_articles.fetch_articles.fetchers module."""

import threading
from unittest.mock import Mock, patch

import pytest
import requests
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from collect_articles.config import FetcherConfig
from collect_articles.exceptions import FetchAbortedError, FetcherInitError, NavigationError, NetworkError
from collect_articles.fetch_articles.fetchers import (
    CRAWLER_USER_AGENT,
    BrowserFetcher,
    HttpFetcher,
    create_fetcher,
)

URL = "https://brunch.co.kr/@alice/1"


class TestCreateFetcher:
    def test_http(self) -> None:
        assert isinstance(create_fetcher(FetcherConfig(strategy="http")), HttpFetcher)

    def test_browser(self) -> None:
        assert isinstance(create_fetcher(FetcherConfig(strategy="browser")), BrowserFetcher)

    def test_unknown_strategy(self) -> None:
        with pytest.raises(FetcherInitError):
            create_fetcher(FetcherConfig(strategy="curl"))


class TestHttpFetcher:
    @patch("collect_articles.fetch_articles.fetchers.requests.Session")
    def test_returns_body(self, mock_session_cls) -> None:
        session = mock_session_cls.return_value
        session.headers = {}
        session.get.return_value = Mock(text="<html>ok</html>")

        with HttpFetcher(FetcherConfig(request_timeout=7)) as fetcher:
            assert fetcher.fetch(URL) == "<html>ok</html>"

        session.get.assert_called_once_with(URL, timeout=7, allow_redirects=True)
        assert session.headers["User-Agent"] == CRAWLER_USER_AGENT
        session.close.assert_called_once()

    @patch("collect_articles.fetch_articles.fetchers.requests.Session")
    def test_custom_user_agent(self, mock_session_cls) -> None:
        session = mock_session_cls.return_value
        session.headers = {}
        fetcher = HttpFetcher(FetcherConfig(user_agent="test-agent"))
        fetcher.open()
        assert session.headers["User-Agent"] == "test-agent"

    @patch("collect_articles.fetch_articles.fetchers.requests.Session")
    def test_timeout_maps_to_network_error(self, mock_session_cls) -> None:
        session = mock_session_cls.return_value
        session.headers = {}
        session.get.side_effect = requests.Timeout("slow")

        with HttpFetcher(FetcherConfig()) as fetcher:
            with pytest.raises(NetworkError, match="요청 시간 초과"):
                fetcher.fetch(URL)

    @patch("collect_articles.fetch_articles.fetchers.requests.Session")
    def test_http_status_maps_to_network_error(self, mock_session_cls) -> None:
        session = mock_session_cls.return_value
        session.headers = {}
        response = Mock(status_code=404)
        response.raise_for_status.side_effect = requests.HTTPError(response=response)
        session.get.return_value = response

        with HttpFetcher(FetcherConfig()) as fetcher:
            with pytest.raises(NetworkError, match="HTTP 404"):
                fetcher.fetch(URL)

    @patch("collect_articles.fetch_articles.fetchers.requests.Session")
    def test_connection_error_maps_to_network_error(self, mock_session_cls) -> None:
        session = mock_session_cls.return_value
        session.headers = {}
        session.get.side_effect = requests.ConnectionError("refused")

        with HttpFetcher(FetcherConfig()) as fetcher:
            with pytest.raises(NetworkError):
                fetcher.fetch(URL)

    def test_fetch_before_open(self) -> None:
        with pytest.raises(FetcherInitError):
            HttpFetcher(FetcherConfig()).fetch(URL)

    @patch("collect_articles.fetch_articles.fetchers.requests.Session")
    def test_cancelled_before_request(self, mock_session_cls) -> None:
        session = mock_session_cls.return_value
        session.headers = {}
        cancel_event = threading.Event()
        cancel_event.set()

        with HttpFetcher(FetcherConfig(), cancel_event) as fetcher:
            with pytest.raises(FetchAbortedError):
                fetcher.fetch(URL)
        session.get.assert_not_called()


def _browser_mocks(mock_sync_playwright):
    playwright = mock_sync_playwright.return_value.start.return_value
    browser = playwright.chromium.launch.return_value
    context = browser.new_context.return_value
    page = context.new_page.return_value
    page.goto.return_value = Mock(ok=True, status=200)
    page.content.return_value = '<html><div class="wrap_body">본문</div></html>'
    return playwright, browser, context, page


class TestBrowserFetcher:
    @patch("collect_articles.fetch_articles.fetchers.sync_playwright")
    def test_returns_rendered_markup(self, mock_sync_playwright) -> None:
        playwright, browser, context, page = _browser_mocks(mock_sync_playwright)

        with BrowserFetcher(FetcherConfig(strategy="browser")) as fetcher:
            assert fetcher.fetch(URL) == page.content.return_value

        page.goto.assert_called_once_with(URL, wait_until="domcontentloaded")
        page.wait_for_selector.assert_called_once()
        page.route.assert_called_once()
        context.close.assert_called_once()
        browser.close.assert_called_once()
        playwright.stop.assert_called_once()

    @patch("collect_articles.fetch_articles.fetchers.sync_playwright")
    def test_resource_blocking_can_be_disabled(self, mock_sync_playwright) -> None:
        _, _, _, page = _browser_mocks(mock_sync_playwright)

        with BrowserFetcher(FetcherConfig(block_resources=False)) as fetcher:
            fetcher.fetch(URL)
        page.route.assert_not_called()

    @patch("collect_articles.fetch_articles.fetchers.sync_playwright")
    def test_launch_failure(self, mock_sync_playwright) -> None:
        playwright = mock_sync_playwright.return_value.start.return_value
        playwright.chromium.launch.side_effect = PlaywrightError("Executable doesn't exist")

        fetcher = BrowserFetcher(FetcherConfig())
        with pytest.raises(FetcherInitError, match="브라우저 초기화에 실패했습니다"):
            fetcher.open()
        playwright.stop.assert_called_once()

    @patch("collect_articles.fetch_articles.fetchers.sync_playwright")
    def test_non_ok_response(self, mock_sync_playwright) -> None:
        _, _, context, page = _browser_mocks(mock_sync_playwright)
        page.goto.return_value = Mock(ok=False, status=404)

        with BrowserFetcher(FetcherConfig()) as fetcher:
            with pytest.raises(NavigationError, match="HTTP 404"):
                fetcher.fetch(URL)
        context.close.assert_called_once()

    @patch("collect_articles.fetch_articles.fetchers.sync_playwright")
    def test_navigation_timeout(self, mock_sync_playwright) -> None:
        _, _, context, page = _browser_mocks(mock_sync_playwright)
        page.goto.side_effect = PlaywrightTimeoutError("Timeout 30000ms exceeded")

        with BrowserFetcher(FetcherConfig()) as fetcher:
            with pytest.raises(NavigationError):
                fetcher.fetch(URL)
        context.close.assert_called_once()

    @patch("collect_articles.fetch_articles.fetchers.sync_playwright")
    def test_content_never_appears(self, mock_sync_playwright) -> None:
        _, _, _, page = _browser_mocks(mock_sync_playwright)
        page.wait_for_selector.side_effect = PlaywrightTimeoutError("Timeout 10000ms exceeded")

        with BrowserFetcher(FetcherConfig()) as fetcher:
            with pytest.raises(NavigationError):
                fetcher.fetch(URL)

    def test_block_route(self) -> None:
        image_route = Mock()
        image_route.request.resource_type = "image"
        BrowserFetcher._block_route(image_route)
        image_route.abort.assert_called_once()

        document_route = Mock()
        document_route.request.resource_type = "document"
        BrowserFetcher._block_route(document_route)
        document_route.continue_.assert_called_once()
        document_route.abort.assert_not_called()
