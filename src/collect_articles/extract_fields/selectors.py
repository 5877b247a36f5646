"""Selectors and patterns for brunch article pages, most site-specific first."""

import re

TITLE_SELECTOR = "h1.cover_title"
CONTENT_SELECTOR = ".wrap_body"

TITLE_SELECTORS = (
    TITLE_SELECTOR,
    ".cover_title",
    "h1.title",
    "h1",
    ".article-title",
    "title",
)

CONTENT_SELECTORS = (
    CONTENT_SELECTOR,
    ".article-body",
    ".content",
    ".post-content",
    "article .text",
)

DATE_SELECTORS = (
    ".cover_info .date",
    "time[datetime]",
    '[class*="date"]',
    ".byline time",
    ".article-meta time",
    ".article_info time",
    ".publish-date",
    "[data-date]",
)

DATE_ATTRIBUTES = ("datetime", "data-date")

JSON_LD_SELECTOR = 'script[type="application/ld+json"]'
JSON_LD_DATE_KEYS = ("datePublished", "dateCreated")

DATE_PATTERNS = (
    re.compile(r'"datePublished"\s*:\s*"([^"]+)"'),
    re.compile(r'"publishDate"\s*:\s*"([^"]+)"'),
    re.compile(r'data-publish-date="([^"]+)"'),
    re.compile(r'datetime="([^"]+)"'),
    re.compile(r'"date"\s*:\s*"([^"]+)"'),
)

ERROR_SELECTOR = ".error"
NOT_FOUND_TITLE_MARKER = "404"
NOT_FOUND_PHRASES = (
    "존재하지 않는",
    "페이지를 찾을 수 없습니다",
)
