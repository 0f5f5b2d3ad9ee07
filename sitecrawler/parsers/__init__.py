"""Parser package exports."""

from .html_parser import LinkExtractor, extract_links

__all__ = [
    "LinkExtractor",
    "extract_links",
]
