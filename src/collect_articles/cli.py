"""CLI for collecting brunch articles into one text file."""

from __future__ import annotations

import logging
import signal
import sys
import threading
from dataclasses import replace

from common.cli_helpers import save_text_local, setup_logging
from collect_articles.collect_articles import collect_articles
from collect_articles.config import load_config
from collect_articles.events import VALIDATION_ERROR, encode_event, error_event
from collect_articles.exceptions import ValidationError
from collect_articles.helpers import parse_collect_articles_args
from collect_articles.rate_limit import create_rate_limiter

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    args = parse_collect_articles_args(argv)
    setup_logging()

    config = load_config(args.config)
    if args.strategy:
        config = replace(config, fetcher=replace(config.fetcher, strategy=args.strategy))

    cancel_event = threading.Event()

    def handle_interrupt(signum, frame) -> None:
        logger.warning("Interrupt received, stopping after the current article")
        cancel_event.set()

    signal.signal(signal.SIGINT, handle_interrupt)

    def on_event(event: dict) -> None:
        if args.stream:
            sys.stdout.write(encode_event(event))
            sys.stdout.flush()

    try:
        document = collect_articles(
            args.url,
            args.start,
            args.end,
            preserve_formatting=args.preserve_formatting,
            config=config,
            on_event=on_event,
            cancel_event=cancel_event,
            rate_limiter=create_rate_limiter(config.rate_limit),
        )
    except ValidationError as e:
        for error in e.errors:
            logger.error(error)
        on_event(error_event(VALIDATION_ERROR, details="; ".join(e.errors)))
        return 1

    if cancel_event.is_set():
        return 130
    if document is None:
        return 1

    output_dir = args.output_dir or config.output.directory
    filepath = save_text_local(document.content, document.filename, output_dir)
    logger.info(
        "Saved %d/%d articles to %s",
        document.metadata.success_count,
        document.metadata.total_articles,
        filepath,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
