"""CLI entrypoint for a single-domain crawl."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
import time
from datetime import timedelta
from typing import Any

from .config import CrawlConfig, load_config
from .constants import LOG_DATE_FORMAT, LOG_FORMAT
from .engine import CrawlEngine
from .url import SeedURLError, parse_seed_url


logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="sitecrawl",
        description="Crawl every https page reachable from a seed URL on the same domain.",
    )

    parser.add_argument(
        "url",
        nargs="?",
        default=None,
        help="Seed URL, e.g. https://example.com. Overrides the config 'seed'.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to JSON/YAML crawl config.",
    )
    parser.add_argument("--concurrency", type=int, default=None)
    parser.add_argument("--timeout_seconds", type=float, default=None)
    parser.add_argument("--user_agent", type=str, default=None)
    parser.add_argument(
        "--log_file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    parser.add_argument(
        "--print_stats_json",
        action="store_true",
        help="Log the full stats JSON after the run.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> CrawlConfig:
    if args.config is not None:
        payload: dict[str, Any] = load_config(args.config).to_dict()
    else:
        payload = {}

    if args.url is not None:
        payload["seed"] = args.url
    if args.concurrency is not None:
        payload["concurrency"] = args.concurrency
    if args.timeout_seconds is not None:
        payload["timeout_seconds"] = args.timeout_seconds
    if args.user_agent is not None:
        payload["user_agent"] = args.user_agent

    return CrawlConfig.from_dict(payload)


def setup_logging(verbose: bool, log_file: Path | None = None) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(log_level)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setLevel(log_level)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    # urllib3 logs every connection at debug level.
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def log_summary(stats: dict[str, Any], *, print_stats_json: bool) -> None:
    logger.info("--- Core Stats ---")
    for key in [
        "admitted",
        "skipped_seen",
        "skipped_invalid",
        "fetched_ok",
        "fetched_error",
        "skipped_non_html",
        "extract_error",
        "links_extracted",
        "duration_seconds",
    ]:
        if key in stats:
            logger.info("%s: %s", key, stats[key])

    if print_stats_json:
        logger.info("Full stats JSON:\n%s", json.dumps(stats, indent=2, sort_keys=True))


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    try:
        config = build_config(args)
    except (OSError, ValueError) as exc:
        logger.error("Failed to build config: %s", exc)
        print(f"Failed to build config: {exc}", file=sys.stderr)
        return 2

    try:
        host, seed_url = parse_seed_url(config.seed)
    except SeedURLError as exc:
        logger.debug("Rejected seed URL %r: %s", config.seed, exc)
        print(exc, file=sys.stderr)
        return 2

    logger.info("Starting crawl for domain: %s", host)
    started = time.perf_counter()

    try:
        stats = CrawlEngine(config).run(seed_url, host, config.concurrency)
    except KeyboardInterrupt:
        logger.error("Interrupted by user")
        return 130
    except Exception:
        logger.exception("Crawl failed for domain: %s", host)
        return 1

    logger.info("Crawl completed for domain: %s", host)
    logger.info("Crawl completed in: %s", timedelta(seconds=time.perf_counter() - started))
    log_summary(stats, print_stats_json=args.print_stats_json)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
