"""
Fetcher Tests

Tests for the requests-backed fetcher with the HTTP session mocked out.
"""

import threading
from unittest.mock import Mock

import requests

from sitecrawler.config import CrawlConfig
from sitecrawler.constants import DEFAULT_USER_AGENT
from sitecrawler.fetcher import Fetcher


def make_response(status_code=200, body=b"<html></html>", content_type="text/html", url=None):
    response = Mock()
    response.status_code = status_code
    response.content = body
    response.headers = {"Content-Type": content_type}
    response.url = url
    return response


def make_fetcher(session, **config_kwargs):
    return Fetcher(CrawlConfig(**config_kwargs), session_factory=lambda: session)


def test_fetch_success():
    session = Mock()
    session.get.return_value = make_response(url="https://example.com/")
    fetcher = make_fetcher(session)

    result = fetcher.fetch("https://example.com/")

    assert result.ok
    assert result.body == b"<html></html>"
    assert result.status_code == 200
    assert result.final_url == "https://example.com/"
    assert result.content_type == "text/html"
    assert result.elapsed_ms is not None


def test_fetch_sends_user_agent_and_timeout():
    session = Mock()
    session.get.return_value = make_response()
    fetcher = make_fetcher(session, timeout_seconds=7.5)

    fetcher.fetch("https://example.com/")

    kwargs = session.get.call_args.kwargs
    assert kwargs["headers"]["User-Agent"] == DEFAULT_USER_AGENT
    assert kwargs["timeout"] == 7.5


def test_fetch_connection_error_is_a_failed_result():
    session = Mock()
    session.get.side_effect = requests.ConnectionError("connection refused")
    fetcher = make_fetcher(session)

    result = fetcher.fetch("https://example.com/")

    assert not result.ok
    assert result.body is None
    assert result.error.startswith("ConnectionError")
    assert "connection refused" in result.failure_reason


def test_fetch_timeout_is_a_failed_result():
    session = Mock()
    session.get.side_effect = requests.Timeout("read timed out")
    result = make_fetcher(session).fetch("https://example.com/")

    assert not result.ok
    assert result.error.startswith("Timeout")


def test_fetch_non_2xx_is_a_failed_result():
    session = Mock()
    session.get.return_value = make_response(status_code=404, body=b"missing")
    result = make_fetcher(session).fetch("https://example.com/missing")

    assert not result.ok
    assert result.error is None
    assert result.failure_reason == "HTTP status 404"


def test_sessions_are_per_thread_and_closed():
    created = []

    def factory():
        session = Mock()
        session.get.return_value = make_response()
        created.append(session)
        return session

    fetcher = Fetcher(CrawlConfig(), session_factory=factory)
    fetcher.fetch("https://example.com/a")
    fetcher.fetch("https://example.com/b")

    thread = threading.Thread(target=fetcher.fetch, args=("https://example.com/c",))
    thread.start()
    thread.join(timeout=5)

    assert len(created) == 2

    fetcher.close()
    for session in created:
        session.close.assert_called_once()


def test_context_manager_closes_sessions():
    session = Mock()
    session.get.return_value = make_response()

    with make_fetcher(session) as fetcher:
        fetcher.fetch("https://example.com/")

    session.close.assert_called_once()
