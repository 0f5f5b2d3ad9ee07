"""URL fetching over HTTPS with a per-thread requests session."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

import requests

from .config import CrawlConfig
from .types import FetchResult


logger = logging.getLogger(__name__)


class Fetcher:
    """Fetch pages with `requests`.

    Each worker thread gets its own `requests.Session`, so the fetcher can be
    shared across workers without extra locking. Every failure (network error,
    timeout, non-2xx status) is reported through `FetchResult`, never raised.
    """

    def __init__(
        self,
        config: CrawlConfig | None = None,
        *,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ) -> None:
        self.config = config or CrawlConfig()
        self._session_factory = session_factory

        self._thread_local = threading.local()

        self._sessions_lock = threading.Lock()
        self._sessions: list[requests.Session] = []

    def fetch(self, url: str) -> FetchResult:
        """Fetch one URL and return its body or the failure reason."""

        logger.debug("Attempt to fetch URL: %s", url)
        started = time.perf_counter()

        try:
            response = self._thread_local_session().get(
                url,
                headers=self.config.headers(),
                timeout=self.config.timeout_seconds,
                allow_redirects=True,
            )
        except requests.RequestException as exc:
            return FetchResult(
                requested_url=url,
                final_url=None,
                status_code=None,
                content_type=None,
                body=None,
                elapsed_ms=int((time.perf_counter() - started) * 1000),
                error=f"{exc.__class__.__name__}: {exc}",
            )

        return FetchResult(
            requested_url=url,
            final_url=response.url or url,
            status_code=response.status_code,
            content_type=response.headers.get("Content-Type"),
            body=response.content if response.content is not None else b"",
            elapsed_ms=int((time.perf_counter() - started) * 1000),
            error=None,
        )

    def close(self) -> None:
        """Close every session opened by worker threads."""

        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []

        for session in sessions:
            session.close()

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _thread_local_session(self) -> requests.Session:
        session = getattr(self._thread_local, "session", None)
        if session is None:
            session = self._session_factory()
            self._thread_local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session


__all__ = ["Fetcher"]
