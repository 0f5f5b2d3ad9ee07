"""URL normalization and seed URL validation helpers."""

from __future__ import annotations

import posixpath
import re
from urllib.parse import SplitResult, urlsplit, urlunsplit

from .constants import CRAWL_SCHEME


MISSING_SEED_MESSAGE = "Please Provide 'One' Web Domain URL in the Terminal."
NO_HOST_MESSAGE = "No host found in URL."


class SeedURLError(ValueError):
    """Raised when the seed URL given on the command line cannot start a crawl."""


def _split(url: str) -> SplitResult | None:
    try:
        return urlsplit(url)
    except ValueError:
        return None


def _port_or_invalid(parsed: SplitResult) -> tuple[int | None, bool]:
    try:
        return parsed.port, True
    except ValueError:
        return None, False


def host_from_url(url: str) -> str:
    """Extract the lowercased host from a URL, or an empty string."""

    parsed = _split(url)
    if parsed is None:
        return ""
    return (parsed.hostname or "").strip().lower()


def is_https_url(url: str) -> bool:
    """Return True if URL is absolute, uses https, and carries a host."""

    parsed = _split(url.strip()) if url else None
    if parsed is None or not parsed.netloc:
        return False
    if parsed.scheme.lower() != CRAWL_SCHEME:
        return False
    _, port_ok = _port_or_invalid(parsed)
    return port_ok and bool(parsed.hostname)


def _normalize_netloc(parsed: SplitResult) -> str:
    host = (parsed.hostname or "").lower()
    if ":" in host:
        host = f"[{host}]"

    port, _ = _port_or_invalid(parsed)
    if port is None or port == 443:
        return host
    return f"{host}:{port}"


def _normalize_path(path: str) -> str:
    if not path:
        return "/"

    collapsed = re.sub(r"/{2,}", "/", path)
    normalized = posixpath.normpath(collapsed)

    if not normalized.startswith("/"):
        normalized = "/" + normalized

    # normpath drops the trailing slash, which is significant for most servers.
    if collapsed.endswith("/") and not normalized.endswith("/"):
        normalized += "/"

    return normalized


def normalize_url(url: str | None) -> str | None:
    """Canonicalize an absolute https URL for frontier dedup.

    Lowercases scheme and host, drops the default port and the fragment,
    collapses duplicate slashes and dot segments, and keeps the query as-is.
    Returns `None` for anything that is not an absolute https URL with a host.
    """

    if not url:
        return None

    raw = url.strip()
    if not is_https_url(raw):
        return None

    parsed = urlsplit(raw)
    return urlunsplit(
        (
            CRAWL_SCHEME,
            _normalize_netloc(parsed),
            _normalize_path(parsed.path),
            parsed.query,
            "",
        )
    )


def parse_seed_url(raw: str | None) -> tuple[str, str]:
    """Validate the seed URL and return `(target_domain, normalized_url)`.

    Raises `SeedURLError` with an operator-facing message when the seed is
    missing, is not a well-formed https URL, or has no host.
    """

    if raw is None or not raw.strip():
        raise SeedURLError(MISSING_SEED_MESSAGE)

    candidate = raw.strip()
    parsed = _split(candidate)
    _, port_ok = _port_or_invalid(parsed) if parsed is not None else (None, False)
    if (
        parsed is None
        or not port_ok
        or parsed.scheme.lower() != CRAWL_SCHEME
        or not parsed.netloc
    ):
        raise SeedURLError(f"Invalid URL: The Given Uri is not valid: {raw}")

    host = (parsed.hostname or "").strip().lower()
    if not host:
        raise SeedURLError(f"Invalid URL: {NO_HOST_MESSAGE}")

    normalized = normalize_url(candidate)
    if normalized is None:
        raise SeedURLError(f"Invalid URL: The Given Uri is not valid: {raw}")

    return host, normalized


__all__ = [
    "MISSING_SEED_MESSAGE",
    "SeedURLError",
    "host_from_url",
    "is_https_url",
    "normalize_url",
    "parse_seed_url",
]
