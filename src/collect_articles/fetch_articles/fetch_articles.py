"""Sequential fetch + extract loop over an article number range."""

import logging
import threading
import time
from typing import Callable, Optional

from collect_articles.config import ScrapeConfig
from collect_articles.exceptions import FetchAbortedError
from collect_articles.extract_fields.extract import extract
from collect_articles.fetch_articles.fetchers import Fetcher
from collect_articles.helpers import build_article_url
from collect_articles.models import ArticleRecord, ArticleRequest, ProgressEvent, RunResult

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressEvent], None]

ABORTED_REASON = "연속 실패로 수집 중단"


class RunCancelled(Exception):
    """Internal signal: the caller cancelled the run."""


def _process_article(fetcher: Fetcher, url: str, number: int, preserve_formatting: bool) -> ArticleRecord:
    """Fetch and extract one article. Fetch failures become failure records."""
    try:
        raw_html = fetcher.fetch(url)
    except FetchAbortedError:
        raise
    except Exception as e:
        logger.warning("Fetch failed for %s: %s", url, e)
        return ArticleRecord.failure(url, number, str(e) or type(e).__name__)

    return extract(raw_html, url, preserve_formatting)


def _check_cancelled(cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise RunCancelled()


def _wait(delay: float, cancel_event: Optional[threading.Event]) -> None:
    """Inter-request delay. Returns early (and raises) if the run is cancelled."""
    if delay <= 0:
        _check_cancelled(cancel_event)
        return
    if cancel_event is None:
        time.sleep(delay)
        return
    if cancel_event.wait(delay):
        raise RunCancelled()


def run_batch(
    request: ArticleRequest,
    fetcher: Fetcher,
    on_progress: Optional[ProgressCallback] = None,
    cancel_event: Optional[threading.Event] = None,
    config: Optional[ScrapeConfig] = None,
) -> RunResult:
    """Fetch and extract every article in the request range, one at a time.

    Per item: emit "processing" progress, fetch, extract, append the record,
    emit completed progress, then wait request_delay before the next item.

    Per-item errors become failure records and never abort the run. Only a
    failure to open the fetcher marks the result unsuccessful. After
    max_consecutive_failures failures in a row the remaining range is skipped;
    each skipped number still gets a failure record so nothing goes missing.
    The fetcher is closed on every exit path, including cancellation.
    """
    config = config or ScrapeConfig()
    result = RunResult()
    start_time = time.monotonic()
    total = request.total

    def emit(event: ProgressEvent) -> None:
        if on_progress is not None:
            on_progress(event)

    try:
        fetcher.open()
    except Exception as e:
        logger.error("Failed to initialise %s fetcher: %s", fetcher.name, e)
        fetcher.close()
        result.success = False
        result.error = f"스크래핑 중 오류가 발생했습니다: {e}"
        result.processing_time = time.monotonic() - start_time
        return result

    logger.info(
        "Collecting articles %d-%d from %s (%s fetcher)",
        request.start_number,
        request.end_number,
        request.base_url,
        fetcher.name,
    )

    consecutive_failures = 0
    try:
        for processed, number in enumerate(request.numbers):
            _check_cancelled(cancel_event)
            url = build_article_url(request.base_url, number)

            emit(ProgressEvent(
                current=processed,
                total=total,
                url=url,
                status=f"글 {number}번 처리 중...",
            ))

            try:
                record = _process_article(fetcher, url, number, request.preserve_formatting)
            except FetchAbortedError as e:
                raise RunCancelled() from e
            _check_cancelled(cancel_event)

            result.records.append(record)
            if record.success:
                consecutive_failures = 0
                logger.info("Article %d collected: %s", number, record.title)
            else:
                consecutive_failures += 1
                result.skipped_urls.append(url)
                logger.warning("Article %d skipped: %s", number, record.content)

            emit(ProgressEvent(
                current=processed + 1,
                total=total,
                url=url,
                title=record.title if record.success else f"글 {number}번",
                status="완료" if record.success else f"실패: {record.content}",
            ))

            limit = config.max_consecutive_failures
            if limit and consecutive_failures >= limit and number < request.end_number:
                logger.warning(
                    "Stopping early after %d consecutive failures at article %d",
                    consecutive_failures,
                    number,
                )
                result.aborted_early = True
                for remaining in range(number + 1, request.end_number + 1):
                    remaining_url = build_article_url(request.base_url, remaining)
                    result.records.append(ArticleRecord.failure(remaining_url, remaining, ABORTED_REASON))
                    result.skipped_urls.append(remaining_url)
                break

            if number < request.end_number:
                _wait(config.request_delay, cancel_event)
    except RunCancelled:
        logger.info("Run cancelled after %d of %d articles", len(result.records), total)
        result.cancelled = True
    except Exception as e:
        logger.exception("Fatal error during run")
        result.success = False
        result.error = f"스크래핑 중 오류가 발생했습니다: {e}"
    finally:
        fetcher.close()

    result.processing_time = time.monotonic() - start_time
    logger.info(
        "Run finished: %d/%d collected, %d skipped in %.1fs",
        result.success_count,
        total,
        len(result.skipped_urls),
        result.processing_time,
    )
    return result
