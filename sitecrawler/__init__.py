"""Single-domain crawler package: frontier, fetcher, link extraction, engine."""

from .config import CrawlConfig, load_config, save_config
from .engine import CrawlEngine, PageFetcher, crawl
from .fetcher import Fetcher
from .frontier import AdmitResult, AdmitStatus, Frontier
from .parsers import LinkExtractor, extract_links
from .stats import StatsCollector
from .types import (
    ContentKind,
    CrawlStage,
    CrawlStats,
    FetchResult,
    infer_content_kind,
    utc_now_iso,
)
from .url import SeedURLError, host_from_url, is_https_url, normalize_url, parse_seed_url

__all__ = [
    "AdmitResult",
    "AdmitStatus",
    "ContentKind",
    "CrawlConfig",
    "CrawlEngine",
    "CrawlStage",
    "CrawlStats",
    "FetchResult",
    "Fetcher",
    "Frontier",
    "LinkExtractor",
    "PageFetcher",
    "SeedURLError",
    "StatsCollector",
    "crawl",
    "extract_links",
    "host_from_url",
    "infer_content_kind",
    "is_https_url",
    "load_config",
    "normalize_url",
    "parse_seed_url",
    "save_config",
    "utc_now_iso",
]
