"""Shared fixtures: brunch-like article pages and a scripted fetcher."""

import pytest

from collect_articles.config import FetcherConfig
from collect_articles.exceptions import NetworkError
from collect_articles.fetch_articles.fetchers import Fetcher

BASE_URL = "https://brunch.co.kr/@alice"

NOT_FOUND_HTML = """<html><head><title>404 Not Found</title></head>
<body><p>존재하지 않는 글입니다.</p></body></html>"""


def build_article_html(title: str, paragraphs: list[str], published: str | None = "2024-01-15T09:30:00+09:00") -> str:
    date_html = (
        f'<time class="date" datetime="{published}">{published[:10]}</time>' if published else ""
    )
    body = "".join(f"<p>{p}</p>" for p in paragraphs)
    return f"""<html>
<head><title>{title} - 브런치</title></head>
<body>
<div class="cover_info"><h1 class="cover_title">{title}</h1>{date_html}</div>
<div class="wrap_body">{body}</div>
</body>
</html>"""


class ScriptedFetcher(Fetcher):
    """Fetcher serving canned pages; exceptions in the map are raised."""

    name = "scripted"

    def __init__(self, pages: dict, open_error: Exception | None = None):
        super().__init__(FetcherConfig())
        self.pages = pages
        self.open_error = open_error
        self.opened = False
        self.closed = False
        self.fetched: list[str] = []

    def open(self) -> None:
        if self.open_error is not None:
            raise self.open_error
        self.opened = True

    def close(self) -> None:
        self.closed = True

    def fetch(self, url: str) -> str:
        self.fetched.append(url)
        page = self.pages.get(url)
        if isinstance(page, Exception):
            raise page
        if page is None:
            raise NetworkError(f"HTTP 404: {url}")
        return page


@pytest.fixture
def article_html():
    return build_article_html


@pytest.fixture
def not_found_html():
    return NOT_FOUND_HTML


@pytest.fixture
def make_pages():
    def _make(numbers, missing=()):
        pages = {}
        for number in numbers:
            url = f"{BASE_URL}/{number}"
            if number in missing:
                pages[url] = NOT_FOUND_HTML
            else:
                pages[url] = build_article_html(f"글 제목 {number}", [f"{number}번 글의 본문입니다."])
        return pages
    return _make


@pytest.fixture
def scripted_fetcher():
    return ScriptedFetcher
