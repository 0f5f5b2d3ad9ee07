"""
Shared fixtures for crawler tests
"""

import logging
import threading
import time
from collections import Counter

import pytest

from sitecrawler.types import FetchResult


class FakeFetcher:
    """In-memory fetcher serving canned pages keyed by URL."""

    def __init__(self, pages, *, failures=(), content_types=None, delays=None):
        self.pages = dict(pages)
        self.failures = set(failures)
        self.content_types = dict(content_types or {})
        self.delays = dict(delays or {})
        self.calls = Counter()
        self._lock = threading.Lock()

    def fetch(self, url):
        with self._lock:
            self.calls[url] += 1

        delay = self.delays.get(url)
        if delay:
            time.sleep(delay)

        if url in self.failures:
            return FetchResult(
                requested_url=url,
                final_url=None,
                status_code=None,
                content_type=None,
                body=None,
                error="ConnectionError: connection refused",
            )

        if url not in self.pages:
            return FetchResult(
                requested_url=url,
                final_url=url,
                status_code=404,
                content_type="text/html",
                body=b"not found",
            )

        return FetchResult(
            requested_url=url,
            final_url=url,
            status_code=200,
            content_type=self.content_types.get(url, "text/html; charset=utf-8"),
            body=self.pages[url].encode("utf-8"),
        )


def anchors(*hrefs):
    body = "".join(f'<a href="{href}">link</a>' for href in hrefs)
    return f"<html><body>{body}</body></html>"


@pytest.fixture
def fake_fetcher_cls():
    return FakeFetcher


@pytest.fixture
def page():
    return anchors


@pytest.fixture(autouse=True)
def reset_root_logger():
    """Drop the handlers installed by the CLI's setup_logging after each test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
