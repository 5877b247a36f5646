"""Helper functions for collect_articles CLI and URL handling."""

from __future__ import annotations

import argparse
import re
from typing import Optional

BRUNCH_BASE_URL = "https://brunch.co.kr"
BRUNCH_URL_PATTERN = re.compile(r"^https://brunch\.co\.kr/@[a-zA-Z0-9_-]+(?:/\d+)?$")
AUTHOR_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")
_AUTHOR_IN_URL = re.compile(r"https://brunch\.co\.kr/@([a-zA-Z0-9_-]+)(?:/\d+)?")
_NUMBER_IN_URL = re.compile(r"https://brunch\.co\.kr/@[a-zA-Z0-9_-]+/(\d+)")


def extract_author_id(url: str) -> Optional[str]:
    '''Return the author id from a brunch URL, or None.'''
    match = _AUTHOR_IN_URL.search(url or "")
    return match.group(1) if match else None


def extract_article_number(url: str) -> Optional[int]:
    '''Return the article number from a brunch article URL, or None.'''
    match = _NUMBER_IN_URL.search(url or "")
    return int(match.group(1)) if match else None


def build_base_url(author_id: str) -> str:
    return f"{BRUNCH_BASE_URL}/@{author_id}"


def build_article_url(base_url: str, number: int) -> str:
    return f"{base_url.rstrip('/')}/{number}"


def article_number_from_url(url: str) -> int:
    '''Parse the trailing path segment as the article number (0 if not numeric).'''
    segment = (url or "").rstrip("/").rsplit("/", 1)[-1]
    return int(segment) if segment.isdigit() else 0


def parse_collect_articles_args(argv: list[str] | None = None) -> argparse.Namespace:
    '''Parse CLI arguments for collect_articles.'''

    parser = argparse.ArgumentParser(
        description="Collect a numbered range of brunch articles into one text file"
    )
    parser.add_argument("--url", required=True, help="Author URL, e.g. https://brunch.co.kr/@author")
    parser.add_argument("--start", type=int, required=True, help="First article number")
    parser.add_argument("--end", type=int, required=True, help="Last article number (inclusive)")
    parser.add_argument(
        "--strategy",
        choices=["http", "browser"],
        default=None,
        help="Fetch strategy (default: from config).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Config name (default/test/browser) or path to YAML file.",
    )
    parser.add_argument("--preserve-formatting", action="store_true")
    parser.add_argument(
        "--stream",
        action="store_true",
        help="Print progress and terminal events to stdout as JSON lines.",
    )
    parser.add_argument("--output-dir", default=None)
    return parser.parse_args(argv)
