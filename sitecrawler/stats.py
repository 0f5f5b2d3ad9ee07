"""Thread-safe crawl statistics aggregation."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone
import threading
from typing import Any, Iterable, Mapping

from .frontier import AdmitResult, AdmitStatus
from .types import CrawlStats, FetchResult


class StatsCollector:
    """Collect crawler runtime statistics from concurrent workers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._core = CrawlStats()

        self._frontier_snapshot: dict[str, int] = {}

        self._fetch_status_code_counts: dict[str, int] = defaultdict(int)
        self._fetch_error_type_counts: dict[str, int] = defaultdict(int)
        self._fetch_elapsed_ms_total = 0
        self._fetch_elapsed_samples = 0
        self._fetch_bytes_total = 0

        self._extract_error_type_counts: dict[str, int] = defaultdict(int)

    def record_admit(self, result: AdmitResult) -> None:
        """Record one frontier admission outcome."""

        with self._lock:
            if result.status == AdmitStatus.ADMITTED:
                self._core.admitted += 1
            elif result.status == AdmitStatus.SKIPPED_SEEN:
                self._core.skipped_seen += 1
            else:
                self._core.skipped_invalid += 1

    def record_admit_many(self, results: Iterable[AdmitResult]) -> None:
        for result in results:
            self.record_admit(result)

    def record_frontier_snapshot(self, snapshot: Mapping[str, int]) -> None:
        """Attach the final frontier counters for diagnostics."""

        with self._lock:
            self._frontier_snapshot = dict(snapshot)

    def record_fetch(self, result: FetchResult) -> None:
        """Record one fetch result."""

        with self._lock:
            if result.ok:
                self._core.fetched_ok += 1
            else:
                self._core.fetched_error += 1

            if result.status_code is not None:
                self._fetch_status_code_counts[str(result.status_code)] += 1

            if result.error:
                err_type = result.error.split(":", maxsplit=1)[0].strip() or "Unknown"
                self._fetch_error_type_counts[err_type] += 1

            if result.elapsed_ms is not None:
                self._fetch_elapsed_ms_total += int(result.elapsed_ms)
                self._fetch_elapsed_samples += 1

            if result.content_length is not None:
                self._fetch_bytes_total += int(result.content_length)

    def record_non_html(self) -> None:
        with self._lock:
            self._core.skipped_non_html += 1

    def record_links(self, count: int) -> None:
        """Record links produced by one successful extraction."""

        with self._lock:
            self._core.links_extracted += max(0, count)

    def record_extract_error(self, exc: BaseException) -> None:
        with self._lock:
            self._core.extract_error += 1
            self._extract_error_type_counts[exc.__class__.__name__] += 1

    def finish(self) -> None:
        """Mark crawl as finished."""

        with self._lock:
            self._core.finish()

    def to_json(self) -> dict[str, Any]:
        """Return a JSON-serializable summary payload."""

        with self._lock:
            start = _parse_iso_utc(self._core.started_at)
            end = (
                _parse_iso_utc(self._core.finished_at)
                if self._core.finished_at
                else datetime.now(timezone.utc)
            )
            duration_seconds = max(0.0, (end - start).total_seconds())

            fetched_total = self._core.fetched_ok + self._core.fetched_error
            fetch_elapsed_avg = (
                self._fetch_elapsed_ms_total / self._fetch_elapsed_samples
                if self._fetch_elapsed_samples > 0
                else 0.0
            )

            return {
                **self._core.to_json(),
                "duration_seconds": duration_seconds,
                "fetched_per_second": (
                    fetched_total / duration_seconds if duration_seconds > 0 else 0.0
                ),
                "frontier": dict(self._frontier_snapshot),
                "fetch": {
                    "status_code_counts": dict(self._fetch_status_code_counts),
                    "error_type_counts": dict(self._fetch_error_type_counts),
                    "elapsed_ms_avg": fetch_elapsed_avg,
                    "bytes_total": self._fetch_bytes_total,
                },
                "extract": {
                    "error_type_counts": dict(self._extract_error_type_counts),
                },
            }


def _parse_iso_utc(value: str | None) -> datetime:
    if not value:
        return datetime.now(timezone.utc)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return datetime.now(timezone.utc)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


__all__ = ["StatsCollector"]
