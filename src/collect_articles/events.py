"""Stream event shapes sent to the caller during and after a run.

Events are plain dicts encoded one JSON object per line:

    {"type": "progress", "current": 1, "total": 3, "url": ..., "title": ..., "timestamp": ...}
    {"type": "complete", "data": {"content": ..., "filename": ..., "metadata": {...}}, "timestamp": ...}
    {"type": "error", "error": "SCRAPING_ERROR", "message": ..., "details": ..., "timestamp": ...}
"""

from datetime import datetime, timezone
from typing import Optional

from common.serialization import camelize_keys, serialize_dataclass, to_json_line
from collect_articles.models import AssembledDocument, ProgressEvent

VALIDATION_ERROR = "VALIDATION_ERROR"
RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
SCRAPING_ERROR = "SCRAPING_ERROR"
INTERNAL_ERROR = "INTERNAL_ERROR"

ERROR_MESSAGES = {
    VALIDATION_ERROR: "입력값이 올바르지 않습니다.",
    RATE_LIMIT_EXCEEDED: "요청이 너무 많습니다. 잠시 후 다시 시도해주세요.",
    SCRAPING_ERROR: "글 수집 중 오류가 발생했습니다.",
    INTERNAL_ERROR: "서버 내부 오류가 발생했습니다.",
}


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def progress_event(event: ProgressEvent) -> dict:
    payload = {
        "type": "progress",
        "current": event.current,
        "total": event.total,
        "url": event.url,
    }
    # Title carries the item title when known, the status text otherwise
    title = event.title or event.status
    if title:
        payload["title"] = title
    payload["timestamp"] = _timestamp()
    return payload


def complete_event(document: AssembledDocument) -> dict:
    return {
        "type": "complete",
        "data": {
            "content": document.content,
            "filename": document.filename,
            "metadata": camelize_keys(serialize_dataclass(document.metadata)),
        },
        "timestamp": _timestamp(),
    }


def error_event(error_kind: str, details: Optional[str] = None, message: Optional[str] = None) -> dict:
    payload = {
        "type": "error",
        "error": error_kind,
        "message": message or ERROR_MESSAGES.get(error_kind, ERROR_MESSAGES[INTERNAL_ERROR]),
    }
    if details:
        payload["details"] = details
    payload["timestamp"] = _timestamp()
    return payload


def encode_event(event: dict) -> str:
    """One event as a newline-terminated JSON line."""
    return to_json_line(event)
