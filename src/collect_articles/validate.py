"""Request validation. Input errors never enter the pipeline."""

from __future__ import annotations

import logging
from typing import Any

from collect_articles.exceptions import ValidationError
from collect_articles.helpers import (
    AUTHOR_ID_PATTERN,
    BRUNCH_URL_PATTERN,
    build_base_url,
    extract_author_id,
)
from collect_articles.models import ArticleRequest

logger = logging.getLogger(__name__)

MIN_ARTICLE_NUMBER = 1
MAX_ARTICLE_NUMBER = 999999
DEFAULT_MAX_ARTICLES = 50


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_url(url: Any) -> tuple[str, str]:
    """Validate a brunch author or article URL.

    Returns:
        Tuple of (author_id, canonical base URL)

    Raises:
        ValidationError: If the URL is empty or does not match the author pattern.
    """
    if not isinstance(url, str) or not url.strip():
        raise ValidationError(["브런치 URL을 입력해주세요."])

    url = url.strip()
    if not BRUNCH_URL_PATTERN.match(url):
        raise ValidationError(
            ["올바른 브런치 URL 형식이 아닙니다. 예: https://brunch.co.kr/@author/123"]
        )

    author_id = extract_author_id(url)
    if not author_id or not AUTHOR_ID_PATTERN.match(author_id):
        raise ValidationError(["작가 ID 형식이 올바르지 않습니다."])

    return author_id, build_base_url(author_id)


def validate_range(start: Any, end: Any, max_articles: int = DEFAULT_MAX_ARTICLES) -> list[str]:
    """Return a list of range errors (empty when the range is valid)."""
    errors = []

    for label, value in (("시작", start), ("종료", end)):
        if not _is_positive_int(value):
            errors.append(f"{label} 번호는 1 이상의 정수여야 합니다.")
        elif value > MAX_ARTICLE_NUMBER:
            errors.append(f"{label} 번호는 {MAX_ARTICLE_NUMBER} 이하여야 합니다.")

    if errors:
        return errors

    if end < start:
        errors.append("종료 번호는 시작 번호보다 크거나 같아야 합니다.")
    elif end - start + 1 > max_articles:
        errors.append(f"한 번에 최대 {max_articles}개의 글만 수집할 수 있습니다.")

    return errors


def validate_request(
    url: Any,
    start: Any,
    end: Any,
    preserve_formatting: bool = False,
    max_articles: int = DEFAULT_MAX_ARTICLES,
) -> tuple[ArticleRequest, str]:
    """Validate raw input and build an ArticleRequest.

    Returns:
        Tuple of (request, author_id)

    Raises:
        ValidationError: Carrying every URL and range problem found.
    """
    errors = []
    author_id = base_url = None
    try:
        author_id, base_url = validate_url(url)
    except ValidationError as e:
        errors.extend(e.errors)

    errors.extend(validate_range(start, end, max_articles))

    if errors:
        logger.warning("Rejected request: %s", "; ".join(errors))
        raise ValidationError(errors)

    request = ArticleRequest(
        base_url=base_url,
        start_number=start,
        end_number=end,
        preserve_formatting=bool(preserve_formatting),
    )
    return request, author_id
