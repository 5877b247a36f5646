"""Merge collected articles into one downloadable text document."""

import logging
from datetime import date, datetime, timezone
from typing import Optional

from collect_articles.clean_articles.clean import normalize, normalize_body, normalize_title
from collect_articles.models import UNTITLED, ArticleRecord, AssembledDocument, DocumentMetadata

logger = logging.getLogger(__name__)

APP_NAME = "브런치 텍스트 수집기"
APP_VERSION = "1.0.0"
APP_WEBSITE = "https://github.com/brunch-collector/brunch-collector"

FILENAME_PREFIX = "brunch"
DEFAULT_EXTENSION = "txt"

ARTICLE_SEPARATOR = "\n\n---\n\n"
TITLE_CONTENT_SEPARATOR = "\n\n"
FAILED_SEPARATOR = "\n---\n"
FAILED_SECTION_TITLE = "\n=== 스크래핑에 실패한 글들 ===\n"
EMPTY_DOCUMENT = "수집된 글이 없습니다."


def format_range(start_number: int, end_number: int) -> str:
    return str(start_number) if start_number == end_number else f"{start_number}-{end_number}"


def generate_filename(
    author_id: str,
    start_number: int,
    end_number: int,
    on_date: Optional[date] = None,
    extension: str = DEFAULT_EXTENSION,
) -> str:
    """Build brunch_{author}_{range}_{YYYYMMDD}.{ext}."""
    on_date = on_date or datetime.now(timezone.utc).date()
    return (
        f"{FILENAME_PREFIX}_{author_id}_{format_range(start_number, end_number)}_"
        f"{on_date.strftime('%Y%m%d')}.{extension}"
    )


def generate_header(
    author_id: str,
    start_number: int,
    end_number: int,
    success_count: int,
    total_count: int,
    now: datetime,
) -> str:
    return "\n".join([
        "브런치 텍스트 모음집",
        "",
        f"작가: @{author_id}",
        f"수집 범위: {start_number}번 ~ {end_number}번 글",
        f"수집 결과: {success_count}/{total_count}개 성공",
        f"생성 일시: {now.strftime('%Y-%m-%d %H:%M:%S')}",
        "",
        "※ 이 문서는 브런치 텍스트 수집기로 생성되었습니다.",
        "※ 수집된 콘텐츠의 저작권은 원작자에게 있습니다.",
        "",
    ])


def generate_footer(success_count: int, total_count: int, aborted_early: bool = False) -> str:
    failed_count = total_count - success_count
    parts = [
        "",
        "=== 수집 완료 ===",
        "",
        f"총 {total_count}개 글 중 {success_count}개 수집 성공",
    ]
    if failed_count > 0:
        parts.append(f"{failed_count}개 글 수집 실패")
    if aborted_early:
        parts.append("연속 실패로 남은 글은 수집하지 않았습니다.")
    parts.extend([
        "",
        f"생성 도구: {APP_NAME} v{APP_VERSION}",
        f"웹사이트: {APP_WEBSITE}",
        "",
    ])
    return "\n".join(parts)


def format_article(record: ArticleRecord, include_metadata: bool = True) -> str:
    """Render title, blank line, normalized body and an optional metadata line."""
    parts = []
    if record.title and record.title != UNTITLED:
        parts.append(normalize_title(record.title))
    parts.append(normalize_body(record.content))
    if include_metadata:
        metadata = [f"원문: {record.url}"]
        if record.published_date:
            metadata.insert(0, f"작성일: {record.published_date}")
        parts.append(f"[{' | '.join(metadata)}]")
    return TITLE_CONTENT_SEPARATOR.join(part for part in parts if part)


def format_failure(record: ArticleRecord) -> str:
    return "\n".join([
        f"글 번호: {record.number}",
        f"URL: {record.url}",
        f"오류: {normalize(record.content) or '알 수 없는 오류'}",
    ])


def assemble(
    records: list[ArticleRecord],
    author_id: str,
    start_number: int,
    end_number: int,
    now: Optional[datetime] = None,
    extension: str = DEFAULT_EXTENSION,
    include_metadata: bool = True,
    aborted_early: bool = False,
) -> AssembledDocument:
    """Build the final document from every record of a run.

    Successful articles appear in ascending number order, joined by a
    separator; every failed record is listed once in the failed-items
    section. Output depends only on the inputs and `now`.
    """
    now = now or datetime.now(timezone.utc)
    ordered = sorted(records, key=lambda r: r.number)
    successful = [r for r in ordered if r.success]
    failed = [r for r in ordered if not r.success]
    total = len(ordered)

    if not ordered:
        content = EMPTY_DOCUMENT
    else:
        parts = [
            generate_header(author_id, start_number, end_number, len(successful), total, now),
            ARTICLE_SEPARATOR,
            ARTICLE_SEPARATOR.join(format_article(r, include_metadata) for r in successful),
        ]
        if failed:
            parts.append(ARTICLE_SEPARATOR)
            parts.append(FAILED_SECTION_TITLE)
            parts.append(FAILED_SEPARATOR.join(format_failure(r) for r in failed))
        parts.append(ARTICLE_SEPARATOR)
        parts.append(generate_footer(len(successful), total, aborted_early))
        content = "".join(parts)

    metadata = DocumentMetadata(
        total_articles=total,
        success_count=len(successful),
        skipped_count=len(failed),
        skipped_urls=[r.url for r in failed],
        generated_at=now,
        author_id=author_id,
        range=format_range(start_number, end_number),
        aborted_early=aborted_early,
    )

    logger.info(
        "Assembled document: %d/%d articles, %d chars",
        len(successful),
        total,
        len(content),
    )
    return AssembledDocument(
        content=content,
        filename=generate_filename(author_id, start_number, end_number, now.date(), extension),
        metadata=metadata,
    )
