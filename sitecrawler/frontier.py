"""Thread-safe crawl frontier: pending URLs plus the visited set."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .types import CrawlStage
from .url import normalize_url


logger = logging.getLogger(__name__)


class AdmitStatus(str, Enum):
    """Result status for frontier admission attempts."""

    ADMITTED = "admitted"
    SKIPPED_SEEN = "skipped_seen"
    SKIPPED_INVALID_URL = "skipped_invalid_url"


@dataclass(frozen=True, slots=True)
class AdmitResult:
    """Outcome of one admission attempt."""

    status: AdmitStatus
    normalized_url: str | None = None

    @property
    def accepted(self) -> bool:
        return self.status == AdmitStatus.ADMITTED


class Frontier:
    """Frontier shared by all crawl workers.

    - One condition lock covers pending, visited, and the in-flight count, so
      "is this URL new" and "mark it seen" happen as one step.
    - A URL counts as visited from the moment it is admitted, whether or not
      its fetch later succeeds.
    - `take_next` reports the frontier as drained only when nothing is pending
      and no taken URL is still being processed.
    """

    def __init__(self, seed_urls: Iterable[str] | None = None) -> None:
        self._cond = threading.Condition(threading.Lock())

        self._pending: list[str] = []
        self._visited: set[str] = set()
        self._in_flight = 0

        self._admitted_count = 0
        self._taken_count = 0
        self._completed_count = 0
        self._skipped_seen_count = 0
        self._skipped_invalid_count = 0

        for url in seed_urls or ():
            self.admit(url)

    def admit(self, url: str, *, referrer: str | None = None) -> AdmitResult:
        """Admit one URL unless it is malformed or already visited."""

        normalized = normalize_url(url)
        if normalized is None:
            logger.error(
                "[%s] Invalid URL: %s (found on %s)",
                CrawlStage.FRONTIER.value,
                url,
                referrer or "<seed>",
            )
            with self._cond:
                self._skipped_invalid_count += 1
            return AdmitResult(AdmitStatus.SKIPPED_INVALID_URL)

        with self._cond:
            if normalized in self._visited:
                self._skipped_seen_count += 1
                return AdmitResult(AdmitStatus.SKIPPED_SEEN, normalized_url=normalized)

            self._visited.add(normalized)
            self._pending.append(normalized)
            self._admitted_count += 1
            self._cond.notify()

        logger.debug("Admitted URL: %s", normalized)
        return AdmitResult(AdmitStatus.ADMITTED, normalized_url=normalized)

    def admit_many(
        self,
        urls: Iterable[str],
        *,
        referrer: str | None = None,
    ) -> list[AdmitResult]:
        """Admit multiple URLs, preserving input order."""

        return [self.admit(url, referrer=referrer) for url in urls]

    def try_admit(self, url: str) -> bool:
        """Return True if this call admitted the URL, False otherwise."""

        return self.admit(url).accepted

    def take_next(self, *, block: bool = True) -> str | None:
        """Pop one pending URL and mark it in flight.

        With `block=True` this waits while the pending list is empty but other
        workers still hold in-flight URLs, and returns `None` once the frontier
        is drained. With `block=False` it returns `None` whenever nothing is
        pending right now.

        Every URL returned must be matched by one `task_done()` call.
        """

        with self._cond:
            while not self._pending:
                if not block or self._in_flight == 0:
                    return None
                self._cond.wait()

            url = self._pending.pop()
            self._in_flight += 1
            self._taken_count += 1
            return url

    def task_done(self) -> None:
        """Mark one taken URL as fully processed."""

        with self._cond:
            if self._in_flight <= 0:
                raise ValueError("task_done() called more times than take_next()")
            self._in_flight -= 1
            self._completed_count += 1
            if self._in_flight == 0 and not self._pending:
                # Drained: release every waiting worker so it can exit.
                self._cond.notify_all()

    def drained(self) -> bool:
        """Return True when nothing is pending and nothing is in flight."""

        with self._cond:
            return not self._pending and self._in_flight == 0

    def pending_count(self) -> int:
        with self._cond:
            return len(self._pending)

    def in_flight(self) -> int:
        with self._cond:
            return self._in_flight

    def visited_urls(self) -> set[str]:
        """Return a snapshot of every URL ever admitted."""

        with self._cond:
            return set(self._visited)

    def snapshot(self) -> dict[str, int]:
        """Return frontier counters for logs/stats reporting."""

        with self._cond:
            return {
                "pending": len(self._pending),
                "in_flight": self._in_flight,
                "visited": len(self._visited),
                "admitted": self._admitted_count,
                "taken": self._taken_count,
                "completed": self._completed_count,
                "skipped_seen": self._skipped_seen_count,
                "skipped_invalid": self._skipped_invalid_count,
            }


__all__ = [
    "AdmitResult",
    "AdmitStatus",
    "Frontier",
]
