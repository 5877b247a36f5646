"""Core clean logic: turn extracted article text into plain, normalized text."""

import html
import logging
import re
import unicodedata
from typing import Optional

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 200
MAX_CONTENT_LENGTH = 100_000
TITLE_SUFFIX = "..."
CONTENT_SUFFIX = "\n\n(내용이 너무 길어 일부만 표시됩니다...)"

_LINE_BREAK_TAGS = re.compile(r"<\s*(?:br\s*/?|/\s*(?:p|div|li|h[1-6]|blockquote|section|article))\s*>", re.IGNORECASE)
_TAGS = re.compile(r"<[^>]*>")
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_EXOTIC_SPACES = re.compile(r"[\u00a0\u1680\u2000-\u200a\u202f\u205f\u3000]")
_DOUBLE_QUOTES = re.compile(r"[\u201c\u201d\u201e\u201f\u2033]")
_SINGLE_QUOTES = re.compile(r"[\u2018\u2019\u201a\u201b\u2032]")

BOILERPLATE_PATTERNS = [
    re.compile(r"브런치\s*작가\s*되기"),
    re.compile(r"구독하기"),
    re.compile(r"좋아요\s*\d+"),
    re.compile(r"조회수\s*\d+"),
    re.compile(r"댓글\s*\d+"),
    re.compile(r"공유하기"),
    re.compile(r"카카오톡\s*공유"),
    re.compile(r"페이스북\s*공유"),
    re.compile(r"트위터\s*공유"),
    re.compile(r"링크\s*복사"),
    re.compile(r"브런치북\s*출간"),
    re.compile(r"매거진\s*구독"),
    re.compile(r"이전\s*글"),
    re.compile(r"다음\s*글"),
    re.compile(r"목록\s*보기"),
    re.compile(r"작가의\s*글\s*더보기"),
]


def strip_tags(text: str) -> str:
    text = _LINE_BREAK_TAGS.sub("\n", text)
    return _TAGS.sub("", text)


def decode_entities(text: str) -> str:
    # Named and numeric references; &nbsp; becomes U+00A0 and is flattened below.
    return html.unescape(text)


def normalize_characters(text: str) -> str:
    """NFKC, drop control characters, flatten exotic spaces and curly quotes."""
    text = unicodedata.normalize("NFKC", text)
    text = _CONTROL_CHARS.sub("", text)
    text = _EXOTIC_SPACES.sub(" ", text)
    text = _DOUBLE_QUOTES.sub('"', text)
    return _SINGLE_QUOTES.sub("'", text)


def normalize_punctuation(text: str) -> str:
    text = re.sub(r"\?{4,}", "???", text)
    text = re.sub(r"!{4,}", "!!!", text)
    text = re.sub(r"\.{4,}", "...", text)
    # Space after commas, except inside numbers like 3,000
    text = re.sub(r",(?=[^\s\d])|(?<!\d),(?=\d)", ", ", text)
    # Space after a sentence-ending period followed by a capital or Hangul
    return re.sub(r"\.([A-Z가-힣])", r". \1", text)


def normalize_whitespace(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r" *\n *", "\n", text)
    text = re.sub(r"\n\s*\n", "\n\n", text)
    return text.strip()


def remove_boilerplate(text: str) -> str:
    for pattern in BOILERPLATE_PATTERNS:
        text = pattern.sub("", text)
    return text


def _normalize_once(text: str) -> str:
    text = strip_tags(text)
    text = decode_entities(text)
    text = normalize_characters(text)
    text = normalize_punctuation(text)
    text = normalize_whitespace(text)
    text = remove_boilerplate(text)
    return normalize_whitespace(text)


def normalize(text: Optional[str]) -> str:
    """Clean text: strip tags, decode entities, normalize characters,
    punctuation and whitespace, and remove site boilerplate.

    Passes repeat until the text stops changing, so normalize is idempotent
    even when decoding entities exposes new markup.
    """
    if not text:
        return ""
    passes = 0
    while True:
        cleaned = _normalize_once(text)
        passes += 1
        if cleaned == text:
            break
        text = cleaned
    if passes > 2:
        logger.debug("normalize settled after %d passes", passes)
    return text


def truncate(text: str, max_length: int, suffix: str) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - len(suffix)] + suffix


def normalize_title(title: Optional[str], max_length: int = MAX_TITLE_LENGTH) -> str:
    title = " ".join(normalize(title).split())
    return truncate(title, max_length, TITLE_SUFFIX)


def normalize_body(content: Optional[str], max_length: int = MAX_CONTENT_LENGTH) -> str:
    return truncate(normalize(content), max_length, CONTENT_SUFFIX)
