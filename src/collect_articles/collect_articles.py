"""Collect a range of articles and assemble them into one document."""

import logging
import threading
from datetime import datetime
from typing import Any, Callable, Optional

from collect_articles.assemble.assemble import assemble
from collect_articles.config import CollectorConfig, get_config
from collect_articles.events import (
    INTERNAL_ERROR,
    RATE_LIMIT_EXCEEDED,
    SCRAPING_ERROR,
    complete_event,
    error_event,
    progress_event,
)
from collect_articles.exceptions import FetcherInitError, RateLimitExceeded
from collect_articles.fetch_articles.fetch_articles import run_batch
from collect_articles.fetch_articles.fetchers import create_fetcher
from collect_articles.models import AssembledDocument, ProgressEvent
from collect_articles.rate_limit import RateLimiter
from collect_articles.validate import validate_request

logger = logging.getLogger(__name__)

EventCallback = Callable[[dict], Any]


def collect_articles(
    url: str,
    start_number: int,
    end_number: int,
    preserve_formatting: bool = False,
    config: Optional[CollectorConfig] = None,
    on_event: Optional[EventCallback] = None,
    cancel_event: Optional[threading.Event] = None,
    rate_limiter: Optional[RateLimiter] = None,
    client_key: str = "local",
    now: Optional[datetime] = None,
) -> Optional[AssembledDocument]:
    """Validate, scrape and assemble, streaming events to on_event.

    Raises ValidationError before any work starts. A rate-limited request,
    a fatal run error or a failure while assembling emits one error event
    and returns None; a cancelled run returns None without a terminal event.
    """
    config = config or get_config()

    def emit(event: dict) -> None:
        if on_event is not None:
            on_event(event)

    request, author_id = validate_request(
        url,
        start_number,
        end_number,
        preserve_formatting=preserve_formatting,
        max_articles=config.scrape.max_articles,
    )

    if rate_limiter is not None:
        try:
            rate_limiter.check(client_key)
        except RateLimitExceeded as e:
            logger.warning("%s", e)
            emit(error_event(RATE_LIMIT_EXCEEDED, details=f"{e.retry_after:.0f}초 후에 다시 시도해주세요."))
            return None

    def on_progress(event: ProgressEvent) -> None:
        emit(progress_event(event))
        logger.debug("Progress %d/%d - %s", event.current, event.total, event.title or event.status)

    try:
        fetcher = create_fetcher(config.fetcher, cancel_event)
    except FetcherInitError as e:
        logger.error("Cannot create fetcher: %s", e)
        emit(error_event(SCRAPING_ERROR, details=str(e)))
        return None

    result = run_batch(
        request,
        fetcher,
        on_progress=on_progress,
        cancel_event=cancel_event,
        config=config.scrape,
    )

    if result.cancelled:
        logger.info("Collection cancelled for @%s", author_id)
        return None

    if not result.success:
        emit(error_event(SCRAPING_ERROR, details=result.error))
        return None

    try:
        document = assemble(
            result.records,
            author_id,
            request.start_number,
            request.end_number,
            now=now,
            extension=config.output.extension,
            aborted_early=result.aborted_early,
        )
        event = complete_event(document)
    except Exception as e:
        logger.exception("Failed to assemble document for @%s", author_id)
        emit(error_event(INTERNAL_ERROR, details=str(e)))
        return None

    emit(event)
    return document
