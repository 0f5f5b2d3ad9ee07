"""Same-domain link extraction from HTML anchor tags."""

from __future__ import annotations

import logging
from typing import Iterable
from urllib.parse import urlsplit

from bs4 import BeautifulSoup, SoupStrainer

from ..constants import CRAWL_SCHEME, DOCUMENT_EXTENSIONS, MEDIA_EXTENSIONS
from ..url import host_from_url, is_https_url


logger = logging.getLogger(__name__)

# lxml feeds tag events to bs4 and only <a> elements are kept, so the rest of
# the document never becomes a tree.
ANCHOR_ONLY = SoupStrainer("a")


class LinkExtractor:
    """Collect followable links for one target domain.

    A link is followable when it is an absolute https URL whose host equals
    the target domain exactly and whose path does not end in a media or
    document extension. Hrefs starting with `/` are resolved against
    `https://<target_domain>`; every other relative form is dropped.
    """

    def __init__(
        self,
        target_domain: str,
        *,
        excluded_extensions: Iterable[str] | None = None,
    ) -> None:
        self.target_domain = target_domain.strip().lower()
        if excluded_extensions is None:
            excluded_extensions = MEDIA_EXTENSIONS + DOCUMENT_EXTENSIONS
        self.excluded_extensions = tuple(ext.lower() for ext in excluded_extensions)

    def extract(self, html: str | bytes) -> list[str]:
        """Return followable links in document order, duplicates included."""

        out: list[str] = []
        if not html or not html.strip():
            return out

        soup = BeautifulSoup(html, "lxml", parse_only=ANCHOR_ONLY)
        for element in soup.find_all("a"):
            href = element.get("href")
            if not isinstance(href, str):
                continue

            candidate = self.resolve(href)
            if self.is_same_domain(candidate) and not self.is_media_or_document_url(candidate):
                logger.debug("URL found: %s", candidate)
                out.append(candidate)

        logger.debug("Extracted %d URLs", len(out))
        return out

    def resolve(self, href: str) -> str:
        """Prefix root-relative hrefs with the target https origin.

        Surrounding whitespace is stripped first, as browsers do for href
        values.
        """

        candidate = href.strip()
        if candidate.startswith("/"):
            return f"{CRAWL_SCHEME}://{self.target_domain}{candidate}"
        return candidate

    def is_same_domain(self, url: str) -> bool:
        """Return True for absolute https URLs on exactly the target host."""

        if not is_https_url(url):
            return False
        return host_from_url(url) == self.target_domain

    def is_media_or_document_url(self, url: str) -> bool:
        """Return True when the URL path ends with an excluded extension."""

        try:
            path = urlsplit(url).path
        except ValueError:
            return False
        return path.lower().endswith(self.excluded_extensions)


def extract_links(target_domain: str, html: str | bytes) -> list[str]:
    """Extract followable same-domain links from one HTML document."""

    return LinkExtractor(target_domain).extract(html)


__all__ = [
    "LinkExtractor",
    "extract_links",
]
