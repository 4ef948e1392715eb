from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, Dict, Iterable, List, Optional

import aiofiles
from aiohttp import ClientSession

from .base import CrawlEngine, CrawlReport, CrawlSession, ProductResult
from .browser_engine import BrowserRenderer
from ..config import CrawlConfig
from ..products import ProductParser, determine_category, render_digest_entry
from ..utils.files import MEDIA_SUBDIRS, DigestWriter, ensure_dir, sanitize_name
from ..utils.http import create_session, download_file
from ..utils.parsing import (
    extract_links,
    extract_media_links,
    is_external,
    is_product_url,
    matches_any,
    normalize_url,
    url_extension,
)

logger = logging.getLogger(__name__)

Downloader = Callable[[str, Path], Awaitable[bool]]

# Media group -> filename stem for downloaded files
_FILE_PREFIXES = {"images": "image", "videos": "video", "pdfs": "document"}


class SiteCrawlEngine(CrawlEngine):
    """
    Two-phase crawler for a single store.

    Phase 1 walks listing pages one at a time, breadth first, harvesting
    product URLs. Phase 2 processes every product URL under a semaphore:
    parse, write the report and digest entry, screenshot, download media.
    Failures are logged and skip only the page, product or file concerned.
    """

    def __init__(
        self,
        config: CrawlConfig,
        renderer=None,
        parser: Optional[ProductParser] = None,
        downloader: Optional[Downloader] = None,
    ) -> None:
        self.config = config
        self.renderer = renderer or BrowserRenderer(
            user_agent=config.user_agent,
            timeout=config.request_timeout,
            headless=config.headless,
        )
        self.parser = parser or ProductParser(config.title_suffix_pattern)
        self.digest = DigestWriter(config.digest_path)
        self._downloader = downloader
        self._http: Optional[ClientSession] = None

    # ---- Lifecycle ----------------------------------------------------------

    async def init(self) -> None:
        """Prepare the output tree, truncate the digest and start the renderer."""
        cfg = self.config
        ensure_dir(cfg.output_dir)
        ensure_dir(cfg.products_dir)
        self.digest.reset()
        await self.renderer.start()
        if self._downloader is None:
            self._http = create_session()
        logger.info("Crawler initialized. Output: %s", cfg.output_dir)

    async def close(self) -> None:
        try:
            await self.renderer.close()
        finally:
            if self._http is not None:
                await self._http.close()
                self._http = None

    async def crawl(self) -> CrawlReport:
        session = CrawlSession()
        await self.init()
        try:
            logger.info("Starting to crawl %s", self.config.base_url)
            await self.discover(session)
            logger.info("Found %s product pages. Processing them...", len(session.product_urls))
            results = await self.process_products(session.product_urls)
        finally:
            await self.close()
        logger.info("Crawling complete.")
        return CrawlReport(
            visited_count=len(session.visited),
            product_urls_found=len(session.product_urls),
            results=results,
        )

    # ---- Phase 1: discovery -------------------------------------------------

    async def discover(self, session: CrawlSession) -> None:
        cfg = self.config
        session.frontier.append(cfg.base_url)

        while session.frontier and session.pages_processed < cfg.max_pages:
            url = session.frontier.popleft()
            if url in session.visited:
                continue
            session.visited.add(url)

            await self.process_page(session, url)

            session.pages_processed += 1
            logger.info("Processed %s pages. Queue size: %s", session.pages_processed, len(session.frontier))
            await asyncio.sleep(cfg.delay)

    async def process_page(self, session: CrawlSession, url: str) -> None:
        logger.info("Processing page: %s", url)
        try:
            async with self.renderer.open(url) as page:
                links = page.links or extract_links(page.html, url)
        except Exception as exc:  # broad catch: a failed page never stops the crawl
            logger.warning("Error processing page %s: %r", url, exc)
            return
        self.route_links(session, links)

    def route_links(self, session: CrawlSession, links: Iterable[str]) -> None:
        """
        Sort harvested links into the product set or the frontier.
        The product check runs before the include check, so a product URL is
        never crawled as a listing page.
        """
        cfg = self.config
        for raw in links:
            try:
                link = normalize_url(raw)
            except ValueError as exc:
                logger.debug("Invalid URL %r: %s", raw, exc)
                continue
            if is_external(link, cfg.base_url):
                continue
            if matches_any(link, cfg.exclude_patterns):
                continue
            if is_product_url(link, cfg.product_marker):
                session.add_product(link)
                continue
            if matches_any(link, cfg.include_patterns):
                session.enqueue(link)

    # ---- Phase 2: products --------------------------------------------------

    async def process_products(self, urls: Iterable[str]) -> List[ProductResult]:
        sem = asyncio.Semaphore(self.config.max_concurrency)

        async def bounded(url: str) -> ProductResult:
            async with sem:
                return await self.process_product(url)

        return list(await asyncio.gather(*(bounded(u) for u in urls)))

    async def process_product(self, url: str) -> ProductResult:
        cfg = self.config
        logger.info("Processing product page: %s", url)
        try:
            async with self.renderer.open(url) as page:
                html = page.html
                product = self.parser.extract_product_info(html, url)
                category = determine_category(product.name, url, cfg.categories)
                product.category = category

                product_dir = cfg.products_dir / sanitize_name(category) / sanitize_name(product.name)
                for sub in self._media_groups():
                    ensure_dir(product_dir / sub)
                product.output_dir = str(product_dir)

                async with aiofiles.open(product_dir / "product_info.md", "w", encoding="utf-8") as f:
                    await f.write(self.parser.to_markdown(product))
                await self.digest.append(render_digest_entry(product, category))

                try:
                    await page.screenshot(product_dir / "screenshot.png")
                except Exception as exc:
                    logger.warning("Screenshot failed for %s: %r", url, exc)

            downloads = await self.download_media(html, url, product_dir)
        except Exception as exc:  # broad catch: one product never stops the batch
            logger.warning("Error processing product page %s: %r", url, exc)
            return ProductResult(url=url, ok=False, error=repr(exc))

        logger.info("Saved %s - %s", category, product.name)
        return ProductResult(url=url, ok=True, product=product, downloads=downloads)

    async def download_media(self, html: str, page_url: str, product_dir: Path) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for group, extensions in self.config.file_types.items():
            prefix = _FILE_PREFIXES.get(group, group.rstrip("s") or group)
            saved = 0
            for i, link in enumerate(extract_media_links(html, extensions, page_url), start=1):
                filename = f"{prefix}_{i}{url_extension(link)}"
                try:
                    ok = await self._download(link, product_dir / group / filename)
                except Exception as exc:
                    logger.warning("Error downloading file from %s: %r", link, exc)
                    ok = False
                if ok:
                    saved += 1
                    logger.info("Downloaded %s: %s", group, filename)
            counts[group] = saved
        return counts

    async def _download(self, url: str, target: Path) -> bool:
        if self._downloader is not None:
            return await self._downloader(url, target)
        if self._http is None:
            raise RuntimeError("HTTP session not started")
        return await download_file(
            self._http,
            url,
            target,
            timeout=self.config.request_timeout,
            user_agent=self.config.user_agent,
        )

    def _media_groups(self) -> List[str]:
        groups = list(MEDIA_SUBDIRS)
        groups.extend(g for g in self.config.file_types if g not in groups)
        return groups
