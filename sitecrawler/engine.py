"""Concurrent crawl engine: a fixed pool of workers draining one frontier."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Protocol

from .config import CrawlConfig
from .fetcher import Fetcher
from .frontier import Frontier
from .parsers import LinkExtractor
from .stats import StatsCollector
from .types import ContentKind, CrawlStage, FetchResult


logger = logging.getLogger(__name__)


class PageFetcher(Protocol):
    def fetch(self, url: str) -> FetchResult: ...


class CrawlEngine:
    """Crawl every same-domain https page reachable from a seed URL.

    Workers loop `take_next -> fetch -> extract -> admit` until the frontier
    reports that nothing is pending and nothing is in flight. A failed fetch
    or extraction contributes no links; the URL stays visited and is never
    retried.
    """

    def __init__(
        self,
        config: CrawlConfig | None = None,
        *,
        fetcher: PageFetcher | None = None,
        stats: StatsCollector | None = None,
        extractor_factory: Callable[[str], LinkExtractor] | None = None,
    ) -> None:
        self.config = config or CrawlConfig()
        self.fetcher = fetcher or Fetcher(self.config)
        self.stats = stats or StatsCollector()

        self._owns_fetcher = fetcher is None
        self._owns_stats = stats is None
        self._extractor_factory = extractor_factory or self._default_extractor
        self._frontier: Frontier | None = None

    @property
    def frontier(self) -> Frontier | None:
        """Frontier of the current or most recent run."""

        return self._frontier

    def run(
        self,
        seed_url: str,
        target_domain: str,
        worker_count: int | None = None,
    ) -> dict[str, Any]:
        """Run the crawl to completion and return the stats summary."""

        workers_total = worker_count if worker_count is not None else self.config.concurrency
        if workers_total <= 0:
            raise ValueError("worker_count must be > 0")

        # Counters and the start time belong to one run.
        if self._owns_stats:
            self.stats = StatsCollector()

        frontier = Frontier()
        self._frontier = frontier
        seed_result = frontier.admit(seed_url)
        self.stats.record_admit(seed_result)
        if not seed_result.accepted:
            raise ValueError(f"Seed URL is not a crawlable https URL: {seed_url}")

        extractor = self._extractor_factory(target_domain)

        workers = [
            threading.Thread(
                target=self._worker,
                args=(frontier, extractor),
                name=f"crawler-worker-{idx}",
                daemon=True,
            )
            for idx in range(workers_total)
        ]

        try:
            for worker in workers:
                worker.start()
            for worker in workers:
                worker.join()
        finally:
            if self._owns_fetcher:
                self.fetcher.close()

        self.stats.record_frontier_snapshot(frontier.snapshot())
        self.stats.finish()
        return self.stats.to_json()

    def _default_extractor(self, target_domain: str) -> LinkExtractor:
        return LinkExtractor(
            target_domain,
            excluded_extensions=self.config.excluded_extensions,
        )

    def _worker(self, frontier: Frontier, extractor: LinkExtractor) -> None:
        while True:
            url = frontier.take_next()
            if url is None:
                return

            try:
                links = self._process(url, extractor)
                if links:
                    results = frontier.admit_many(links, referrer=url)
                    self.stats.record_admit_many(results)
            except Exception:
                logger.exception("Unexpected error while crawling %s", url)
            finally:
                frontier.task_done()

    def _process(self, url: str, extractor: LinkExtractor) -> list[str]:
        """Fetch one URL and return the links it contributes."""

        fetch_result = self.fetcher.fetch(url)
        self.stats.record_fetch(fetch_result)

        if not fetch_result.ok:
            logger.error(
                "[%s] Failed to fetch URL %s: %s",
                CrawlStage.FETCH.value,
                url,
                fetch_result.failure_reason,
            )
            return []

        logger.info("Successfully fetched URL: %s", url)

        if fetch_result.content_kind == ContentKind.OTHER:
            logger.debug(
                "Skipping link extraction for %s (content type %s)",
                url,
                fetch_result.content_type,
            )
            self.stats.record_non_html()
            return []

        try:
            links = extractor.extract(fetch_result.body or b"")
        except Exception as exc:
            logger.error(
                "[%s] Failed to get URLs from HTML content of %s: %s",
                CrawlStage.EXTRACT.value,
                url,
                exc,
            )
            self.stats.record_extract_error(exc)
            return []

        self.stats.record_links(len(links))
        logger.info("Extracted %d URLs from %s", len(links), url)
        return links


def crawl(
    seed_url: str,
    target_domain: str,
    worker_count: int | None = None,
    *,
    config: CrawlConfig | None = None,
    fetcher: PageFetcher | None = None,
) -> dict[str, Any]:
    """Crawl `target_domain` starting at `seed_url` with `worker_count` workers."""

    engine = CrawlEngine(config, fetcher=fetcher)
    return engine.run(seed_url, target_domain, worker_count)


__all__ = [
    "CrawlEngine",
    "PageFetcher",
    "crawl",
]
