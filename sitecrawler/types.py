"""Shared record types for the crawler.

Kept free of intra-package imports so every other module can use these records
without introducing cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ContentKind(str, Enum):
    """Coarse content categories used to decide whether to extract links."""

    HTML = "html"
    OTHER = "other"
    UNKNOWN = "unknown"


class CrawlStage(str, Enum):
    """Crawl stage names used in error logs and stats."""

    FRONTIER = "frontier"
    FETCH = "fetch"
    EXTRACT = "extract"


JSONPrimitive = str | int | float | bool | None
JSONValue = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]
JSONDict = dict[str, JSONValue]


def utc_now_iso() -> str:
    """Return an RFC3339-like UTC timestamp string."""

    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def infer_content_kind(content_type: str | None) -> ContentKind:
    """Infer coarse content kind from an HTTP Content-Type header."""

    normalized = (content_type or "").split(";", maxsplit=1)[0].strip().lower()
    if not normalized:
        return ContentKind.UNKNOWN
    if normalized in {"text/html", "application/xhtml+xml"}:
        return ContentKind.HTML
    return ContentKind.OTHER


@dataclass(slots=True)
class FetchResult:
    """Result of attempting to download one URL."""

    requested_url: str
    final_url: str | None
    status_code: int | None
    content_type: str | None
    body: bytes | None
    fetched_at: str = field(default_factory=utc_now_iso)
    elapsed_ms: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return (
            self.error is None
            and self.status_code is not None
            and 200 <= self.status_code < 300
            and self.body is not None
        )

    @property
    def content_length(self) -> int | None:
        return None if self.body is None else len(self.body)

    @property
    def content_kind(self) -> ContentKind:
        return infer_content_kind(self.content_type)

    @property
    def failure_reason(self) -> str:
        if self.error:
            return self.error
        if self.status_code is not None:
            return f"HTTP status {self.status_code}"
        return "Unknown fetch failure"


@dataclass(slots=True)
class CrawlStats:
    """Mutable counters used for the end-of-crawl summary."""

    admitted: int = 0
    skipped_seen: int = 0
    skipped_invalid: int = 0

    fetched_ok: int = 0
    fetched_error: int = 0
    skipped_non_html: int = 0
    extract_error: int = 0
    links_extracted: int = 0

    started_at: str = field(default_factory=utc_now_iso)
    finished_at: str | None = None

    def finish(self) -> None:
        self.finished_at = utc_now_iso()

    def to_json(self) -> JSONDict:
        return {
            "admitted": self.admitted,
            "skipped_seen": self.skipped_seen,
            "skipped_invalid": self.skipped_invalid,
            "fetched_ok": self.fetched_ok,
            "fetched_error": self.fetched_error,
            "skipped_non_html": self.skipped_non_html,
            "extract_error": self.extract_error,
            "links_extracted": self.links_extracted,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
        }


__all__ = [
    "ContentKind",
    "CrawlStage",
    "CrawlStats",
    "FetchResult",
    "JSONDict",
    "JSONPrimitive",
    "JSONValue",
    "infer_content_kind",
    "utc_now_iso",
]
