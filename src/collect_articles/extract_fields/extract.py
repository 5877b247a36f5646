"""Field extraction from fetched article markup.

Each field is resolved by an ordered tuple of strategies. A strategy is a
small pure function taking a ParsedPage and returning a string or None; the
first non-empty result wins.
"""

from __future__ import annotations

import copy
import json
import logging
import re
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Optional

from dateutil import parser as date_parser
from lxml import etree
from lxml import html as lxml_html
from readability import Document

from collect_articles.extract_fields import selectors
from collect_articles.helpers import article_number_from_url
from collect_articles.models import ArticleRecord

logger = logging.getLogger(__name__)

NOT_FOUND_REASON = "존재하지 않는 글입니다"
NO_TITLE_REASON = "제목을 찾을 수 없습니다"
NO_CONTENT_REASON = "내용을 찾을 수 없습니다"

MIN_READABILITY_CHARS = 200
MAX_DATE_TEXT_CHARS = 40

BLOCK_TAGS = frozenset({
    "p", "div", "br", "li", "ul", "ol", "blockquote", "pre", "section", "article",
    "figure", "figcaption", "h1", "h2", "h3", "h4", "h5", "h6", "tr", "hr",
})

_INLINE_SPACE = re.compile(r"[ \t\u00a0]+")


@dataclass(frozen=True)
class ParsedPage:
    raw: str
    tree: Any
    preserve_formatting: bool = False

    def select(self, selector: str) -> list:
        return self.tree.cssselect(selector)


Strategy = Callable[[ParsedPage], Optional[str]]


def parse_page(raw_html: str, preserve_formatting: bool = False) -> ParsedPage:
    """Parse markup into a ParsedPage. Raises on empty or unparseable input."""
    if not raw_html or not raw_html.strip():
        raise ValueError("Empty page")
    tree = lxml_html.document_fromstring(raw_html)
    return ParsedPage(raw=raw_html, tree=tree, preserve_formatting=preserve_formatting)


def element_text(element, preserve_formatting: bool = False) -> str:
    """Text of an element with block boundaries turned into line breaks.

    Paragraphs are separated by a blank line when preserve_formatting is set,
    by a single newline otherwise.
    """
    element = copy.deepcopy(element)
    etree.strip_elements(element, etree.Comment, "script", "style", with_tail=False)
    separator = "\n\n" if preserve_formatting else "\n"
    for node in element.iter():
        if isinstance(node.tag, str) and node.tag in BLOCK_TAGS and node is not element:
            node.tail = separator + (node.tail or "")

    lines = [_INLINE_SPACE.sub(" ", line).strip() for line in "".join(element.itertext()).splitlines()]
    if preserve_formatting:
        text = re.sub(r"\n{3,}", "\n\n", "\n".join(lines))
    else:
        text = "\n".join(line for line in lines if line)
    return text.strip()


def _single_line(text: str) -> str:
    return " ".join(text.split())


# ===== existence =====

def is_not_found(page: ParsedPage) -> bool:
    """True when the page is a 404 / deleted-article page."""
    title = " ".join(el.text_content() for el in page.select("title"))
    if selectors.NOT_FOUND_TITLE_MARKER in title:
        return True
    if page.select(selectors.ERROR_SELECTOR):
        return True
    body = page.tree.find("body")
    body_text = body.text_content() if body is not None else ""
    return any(phrase in body_text for phrase in selectors.NOT_FOUND_PHRASES)


# ===== title / body =====

def first_text(selector: str, page: ParsedPage) -> Optional[str]:
    matches = page.select(selector)
    if not matches:
        return None
    text = _single_line(element_text(matches[0]))
    return text or None


def joined_text(selector: str, page: ParsedPage) -> Optional[str]:
    texts = []
    for element in page.select(selector):
        text = element_text(element, page.preserve_formatting)
        if text:
            texts.append(text)
    return "\n\n".join(texts) or None


TITLE_STRATEGIES: tuple[Strategy, ...] = tuple(
    partial(first_text, selector) for selector in selectors.TITLE_SELECTORS
)


def readability_text(page: ParsedPage) -> Optional[str]:
    """Last resort: let readability-lxml pick the main content block."""
    try:
        summary_html = Document(page.raw).summary(html_partial=True)
        text = element_text(lxml_html.fromstring(summary_html), page.preserve_formatting)
    except Exception as e:
        logger.warning("readability failed: %s", e)
        return None
    return text if len(text) >= MIN_READABILITY_CHARS else None


BODY_STRATEGIES: tuple[Strategy, ...] = (
    *(partial(joined_text, selector) for selector in selectors.CONTENT_SELECTORS),
    readability_text,
)


# ===== published date =====

def _parses_as_date(text: str) -> bool:
    try:
        date_parser.parse(text)
    except (ValueError, OverflowError):
        return False
    return True


def date_from_selector(selector: str, page: ParsedPage) -> Optional[str]:
    matches = page.select(selector)
    if not matches:
        return None
    element = matches[0]
    for attribute in selectors.DATE_ATTRIBUTES:
        value = (element.get(attribute) or "").strip()
        if value:
            return value
    text = _single_line(element.text_content())
    # [class*="date"] can match whole containers
    if text and len(text) <= MAX_DATE_TEXT_CHARS and _parses_as_date(text):
        return text
    return None


def _find_date_key(data: Any) -> Optional[str]:
    if isinstance(data, list):
        for item in data:
            found = _find_date_key(item)
            if found:
                return found
        return None
    if not isinstance(data, dict):
        return None
    for key in selectors.JSON_LD_DATE_KEYS:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return _find_date_key(data.get("@graph"))


def date_from_json_ld(page: ParsedPage) -> Optional[str]:
    for script in page.select(selectors.JSON_LD_SELECTOR):
        try:
            data = json.loads(script.text or "")
        except json.JSONDecodeError:
            logger.debug("Skipping malformed JSON-LD block")
            continue
        found = _find_date_key(data)
        if found:
            return found
    return None


def date_from_markup(page: ParsedPage) -> Optional[str]:
    for pattern in selectors.DATE_PATTERNS:
        match = pattern.search(page.raw)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return None


DATE_STRATEGIES: tuple[Strategy, ...] = (
    *(partial(date_from_selector, selector) for selector in selectors.DATE_SELECTORS),
    date_from_json_ld,
    date_from_markup,
)


def normalize_date(value: Optional[str]) -> Optional[str]:
    """Normalize a date string to YYYY-MM-DD; unparseable values pass through."""
    if not value:
        return None
    try:
        return date_parser.parse(value).date().isoformat()
    except (ValueError, OverflowError, TypeError):
        logger.debug("Keeping unparsed date: %s", value)
        return value


def run_strategies(strategies: tuple[Strategy, ...], page: ParsedPage) -> Optional[str]:
    """Evaluate strategies in order and return the first non-empty result."""
    for strategy in strategies:
        value = strategy(page)
        if value:
            return value
    return None


def extract(raw_html: str, url: str, preserve_formatting: bool = False) -> ArticleRecord:
    """Extract an ArticleRecord from page markup. Never raises.

    Order:
    1. existence check (404 title, error container, not-found phrases)
    2. title strategies
    3. body strategies
    4. published date (selectors, JSON-LD, raw markup regex)

    Missing title or body fails the record; a missing date does not.
    """
    number = article_number_from_url(url)

    try:
        page = parse_page(raw_html, preserve_formatting)

        if is_not_found(page):
            logger.info("Article %d not found: %s", number, url)
            return ArticleRecord.failure(url, number, NOT_FOUND_REASON)

        title = run_strategies(TITLE_STRATEGIES, page)
        if not title:
            return ArticleRecord.failure(url, number, NO_TITLE_REASON)

        content = run_strategies(BODY_STRATEGIES, page)
        if not content:
            return ArticleRecord.failure(url, number, NO_CONTENT_REASON)

        published_date = normalize_date(run_strategies(DATE_STRATEGIES, page))
    except Exception as e:
        logger.warning("Extraction failed for %s: %s", url, e)
        return ArticleRecord.failure(url, number, f"파싱 실패: {e}")

    logger.debug("Extracted %s (%d chars)", title, len(content))
    return ArticleRecord(
        url=url,
        number=number,
        title=title,
        content=content,
        success=True,
        published_date=published_date,
    )
