"""Data models for collect_articles pipeline."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

UNTITLED = "(제목 없음)"


@dataclass(frozen=True)
class ArticleRequest:
    """Validated input for one collection run."""
    base_url: str
    start_number: int
    end_number: int
    preserve_formatting: bool = False

    @property
    def total(self) -> int:
        return self.end_number - self.start_number + 1

    @property
    def numbers(self) -> range:
        return range(self.start_number, self.end_number + 1)


@dataclass(frozen=True)
class ArticleRecord:
    """One extraction outcome. On failure, content holds the failure reason."""
    url: str
    number: int
    title: str
    content: str
    success: bool
    published_date: Optional[str] = None

    @classmethod
    def failure(cls, url: str, number: int, reason: str) -> "ArticleRecord":
        return cls(url=url, number=number, title=UNTITLED, content=reason, success=False)


@dataclass(frozen=True)
class ProgressEvent:
    current: int
    total: int
    url: str
    title: Optional[str] = None
    status: Optional[str] = None


@dataclass
class RunResult:
    """Outcome of a batch run, built up by the orchestrator."""
    records: list[ArticleRecord] = field(default_factory=list)
    skipped_urls: list[str] = field(default_factory=list)
    success: bool = True
    error: Optional[str] = None
    cancelled: bool = False
    aborted_early: bool = False
    processing_time: float = 0.0

    @property
    def success_count(self) -> int:
        return sum(1 for record in self.records if record.success)


@dataclass(frozen=True)
class DocumentMetadata:
    total_articles: int
    success_count: int
    skipped_count: int
    skipped_urls: list[str]
    generated_at: datetime
    author_id: str
    range: str
    aborted_early: bool = False


@dataclass(frozen=True)
class AssembledDocument:
    """Merged text document ready for download."""
    content: str
    filename: str
    metadata: DocumentMetadata
