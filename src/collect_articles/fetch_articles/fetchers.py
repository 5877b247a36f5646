"""Page fetch strategies.

Both strategies return raw page markup so a single extractor handles either:

1. HttpFetcher   - requests session with a crawler user agent
2. BrowserFetcher - headless Chromium driven through Playwright

A fetcher owns its resource for the duration of one run. Use it as a context
manager (or call open()/close()) so the resource is released on every path.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

import requests
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from collect_articles.config import FetcherConfig
from collect_articles.exceptions import (
    FetchAbortedError,
    FetcherInitError,
    NavigationError,
    NetworkError,
)
from collect_articles.extract_fields.selectors import CONTENT_SELECTOR

logger = logging.getLogger(__name__)

# Brunch redirects regular browsers to a login wall; the crawler agent gets the article.
CRAWLER_USER_AGENT = "Googlebot/2.1 (+http://www.google.com/bot.html)"
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

HTTP_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "ko-KR,ko;q=0.9,en;q=0.8",
    "Accept-Encoding": "gzip, deflate",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}

BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
]

BLOCKED_RESOURCE_TYPES = frozenset({"image", "font", "media"})


class Fetcher:
    """Base class for fetch strategies."""

    name = "base"

    def __init__(self, config: FetcherConfig, cancel_event: Optional[threading.Event] = None):
        self.config = config
        self.cancel_event = cancel_event

    def open(self) -> None:
        """Acquire the underlying resource. Raises FetcherInitError on failure."""

    def close(self) -> None:
        """Release the underlying resource. Safe to call more than once."""

    def fetch(self, url: str) -> str:
        raise NotImplementedError

    def _check_cancelled(self, url: str) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise FetchAbortedError(f"Fetch cancelled: {url}")

    def __enter__(self) -> "Fetcher":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class HttpFetcher(Fetcher):
    """Plain HTTP GET returning the response body."""

    name = "http"

    def __init__(self, config: FetcherConfig, cancel_event: Optional[threading.Event] = None):
        super().__init__(config, cancel_event)
        self._session: Optional[requests.Session] = None

    def open(self) -> None:
        try:
            session = requests.Session()
            session.headers.update(HTTP_HEADERS)
            session.headers["User-Agent"] = self.config.user_agent or CRAWLER_USER_AGENT
        except Exception as e:
            raise FetcherInitError(f"Failed to create HTTP session: {e}") from e
        self._session = session
        logger.debug("HTTP session opened")

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
            logger.debug("HTTP session closed")

    def fetch(self, url: str) -> str:
        if self._session is None:
            raise FetcherInitError("HTTP fetcher used before open()")
        self._check_cancelled(url)

        logger.debug("GET %s", url)
        try:
            response = self._session.get(
                url,
                timeout=self.config.request_timeout,
                allow_redirects=True,
            )
            response.raise_for_status()
        except requests.Timeout as e:
            raise NetworkError(f"요청 시간 초과: {url}") from e
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            raise NetworkError(f"HTTP {status}: {url}") from e
        except requests.RequestException as e:
            raise NetworkError(f"Request failed for {url}: {e}") from e

        logger.debug("Received %d bytes from %s", len(response.text), url)
        return response.text


class BrowserFetcher(Fetcher):
    """Headless Chromium fetch returning the rendered DOM as HTML.

    The browser is launched once in open(); every fetch gets its own context
    and page, closed before fetch() returns.
    """

    name = "browser"

    def __init__(self, config: FetcherConfig, cancel_event: Optional[threading.Event] = None):
        super().__init__(config, cancel_event)
        self._playwright = None
        self._browser = None

    def open(self) -> None:
        try:
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(
                headless=self.config.headless,
                args=BROWSER_ARGS,
                timeout=self.config.navigation_timeout * 1000 * 2,
            )
        except Exception as e:
            self.close()
            raise FetcherInitError(f"브라우저 초기화에 실패했습니다: {e}") from e
        logger.info("Browser launched (headless=%s)", self.config.headless)

    def close(self) -> None:
        if self._browser is not None:
            try:
                self._browser.close()
            except PlaywrightError as e:
                logger.warning("Error while closing browser: %s", e)
            self._browser = None
        if self._playwright is not None:
            try:
                self._playwright.stop()
            except PlaywrightError as e:
                logger.warning("Error while stopping playwright: %s", e)
            self._playwright = None
            logger.debug("Browser closed")

    @staticmethod
    def _block_route(route) -> None:
        if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
            route.abort()
        else:
            route.continue_()

    def fetch(self, url: str) -> str:
        if self._browser is None:
            raise FetcherInitError("Browser fetcher used before open()")
        self._check_cancelled(url)

        context = self._browser.new_context(
            user_agent=self.config.user_agent or BROWSER_USER_AGENT,
            viewport={"width": 1280, "height": 800},
        )
        try:
            page = context.new_page()
            page.set_default_timeout(self.config.page_timeout * 1000)
            page.set_default_navigation_timeout(self.config.navigation_timeout * 1000)
            if self.config.block_resources:
                page.route("**/*", self._block_route)

            try:
                response = page.goto(url, wait_until="domcontentloaded")
            except PlaywrightTimeoutError as e:
                raise NavigationError(f"Navigation timed out: {url}") from e
            except PlaywrightError as e:
                raise NavigationError(f"Navigation failed for {url}: {e}") from e

            if response is None or not response.ok:
                status = response.status if response is not None else "no response"
                raise NavigationError(f"페이지 로드 실패: HTTP {status}")

            self._check_cancelled(url)
            try:
                page.wait_for_selector(CONTENT_SELECTOR, timeout=self.config.wait_timeout * 1000)
            except PlaywrightTimeoutError as e:
                raise NavigationError(f"Content did not appear within {self.config.wait_timeout}s: {url}") from e

            return page.content()
        finally:
            try:
                context.close()
            except PlaywrightError as e:
                logger.warning("Error while closing browser context for %s: %s", url, e)


FETCHERS = {
    HttpFetcher.name: HttpFetcher,
    BrowserFetcher.name: BrowserFetcher,
}


def create_fetcher(config: FetcherConfig, cancel_event: Optional[threading.Event] = None) -> Fetcher:
    """Build the fetcher selected by config.strategy (not yet opened)."""
    try:
        fetcher_cls = FETCHERS[config.strategy]
    except KeyError:
        raise FetcherInitError(
            f"Unknown fetch strategy {config.strategy!r}. Valid: {', '.join(sorted(FETCHERS))}"
        ) from None
    return fetcher_cls(config, cancel_event)
