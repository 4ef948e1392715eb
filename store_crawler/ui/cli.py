from __future__ import annotations

import argparse
import asyncio
import logging
from typing import List

from ..config import CrawlConfig
from ..utils.logging import setup_logging
from ..utils.loader import load_symbol
from ..engines.base import CrawlReport
from ..engines.site_engine import SiteCrawlEngine

logger = logging.getLogger(__name__)

_RULE = "=" * 36


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Crawl a store and save its products, media and a text digest")
    p.add_argument("base_url", nargs="?", default=None, help="Store URL to start from (default from config)")
    p.add_argument("--config", type=str, help="Path to config JSON", default=None)
    p.add_argument("--max-pages", type=int, default=None, help="Max listing pages to crawl (default from config)")
    p.add_argument("--max-concurrency", type=int, default=None,
                   help="Max product pages processed at once (default from config)")
    p.add_argument("--output-dir", type=str, default=None, help="Output directory")
    p.add_argument("--delay", type=float, default=None, help="Seconds to wait between listing pages")
    p.add_argument("--headful", action="store_true", help="Show the browser window")
    p.add_argument("--manifest", type=str, default=None, help="Also write processed products to this file")
    p.add_argument("--exporter", type=str, default=None, help="Manifest exporter dotted path (module:ClassName)")
    p.add_argument("--log-level", type=str, default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
    return p


def _load_config(args: argparse.Namespace) -> CrawlConfig:
    if args.config:
        cfg = CrawlConfig.from_file(args.config)
    else:
        cfg = CrawlConfig.from_env()

    if args.base_url:
        cfg.base_url = args.base_url
    if args.max_pages is not None:
        cfg.max_pages = args.max_pages
    if args.max_concurrency is not None:
        cfg.max_concurrency = args.max_concurrency
    if args.output_dir:
        cfg.output_dir = args.output_dir
    if args.delay is not None:
        cfg.delay = args.delay
    if args.headful:
        cfg.headless = False
    if args.manifest:
        cfg.manifest_path = args.manifest
    if args.exporter:
        cfg.exporter = args.exporter

    cfg.validate()
    return cfg


def _log_summary(cfg: CrawlConfig, report: CrawlReport) -> None:
    logger.info(_RULE)
    logger.info("Crawling complete!")
    logger.info("Pages visited: %s | Product pages: %s | Saved: %s | Failed: %s | Downloads: %s",
                report.visited_count,
                report.product_urls_found,
                report.processed,
                report.failed,
                report.downloads)
    logger.info("All content has been saved to %s", cfg.output_dir)
    logger.info("Consolidated text file: %s", cfg.digest_path)
    logger.info(_RULE)


def run_cli(argv: List[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        cfg = _load_config(args)
        exporter_cls = load_symbol(cfg.exporter) if cfg.manifest_path else None
    except (OSError, ImportError, ValueError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1

    logger.info(_RULE)
    logger.info("Store Scraper Tool")
    logger.info(_RULE)
    logger.info("Base URL: %s", cfg.base_url)
    logger.info("Max Pages: %s", cfg.max_pages)
    logger.info("Output Directory: %s", cfg.output_dir)
    logger.info(_RULE)

    async def _run() -> CrawlReport:
        engine = SiteCrawlEngine(cfg)
        return await engine.crawl()

    try:
        report: CrawlReport = asyncio.run(_run())
    except Exception as exc:
        # Only setup (output dir, browser launch) can fail this far up.
        logger.error("Error: %s", exc)
        return 1

    if exporter_cls is not None:
        exporter_cls().export(report.products, cfg.manifest_path)
        logger.info("Manifest written to %s", cfg.manifest_path)

    _log_summary(cfg, report)
    return 0
