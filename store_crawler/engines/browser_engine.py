from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, List, Optional

from playwright.async_api import Browser, Page, Playwright, async_playwright

logger = logging.getLogger(__name__)

_LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]
_COLLECT_ANCHORS = "els => els.map(e => e.href).filter(Boolean)"


@dataclass
class RenderedPage:
    """Fully rendered page; valid only inside ``BrowserRenderer.open``."""
    url: str
    html: str
    links: List[str] = field(default_factory=list)
    _page: Optional[Page] = field(default=None, repr=False)

    async def screenshot(self, path: str | os.PathLike[str]) -> None:
        if self._page is None:
            raise RuntimeError("page is closed")
        # Viewport only, not the full scrollable page.
        await self._page.screenshot(path=str(path), full_page=False)


class BrowserRenderer:
    """
    Headless Chromium via Playwright. One browser per crawl, one page per URL.
    """

    def __init__(self, user_agent: str, timeout: float = 30.0, headless: bool = True) -> None:
        self.user_agent = user_agent
        self.timeout_ms = int(timeout * 1000)
        self.headless = headless
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def start(self) -> None:
        if self._browser is not None:
            return
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(headless=self.headless, args=_LAUNCH_ARGS)
        except Exception:
            await self._playwright.stop()
            self._playwright = None
            raise
        logger.info("Browser started (headless=%s)", self.headless)

    async def close(self) -> None:
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
        logger.info("Browser closed")

    async def __aenter__(self) -> "BrowserRenderer":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @asynccontextmanager
    async def open(self, url: str) -> AsyncIterator[RenderedPage]:
        """
        Navigate to ``url`` and yield its rendered markup and anchors.
        Navigation errors and timeouts propagate to the caller.
        """
        if self._browser is None:
            raise RuntimeError("renderer not started")
        page = await self._browser.new_page(user_agent=self.user_agent)
        try:
            page.set_default_navigation_timeout(self.timeout_ms)
            await page.goto(url, wait_until="networkidle")
            html = await page.content()
            links = await page.eval_on_selector_all("a", _COLLECT_ANCHORS)
            rendered = RenderedPage(url=url, html=html, links=list(links), _page=page)
            try:
                yield rendered
            finally:
                rendered._page = None
        finally:
            await page.close()
