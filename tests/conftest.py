"""
Pytest configuration and shared fixtures for crawler tests.

Provides an in-memory renderer and downloader so the engine runs without a browser or network.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from store_crawler.config import CrawlConfig
from store_crawler.utils.parsing import extract_links


BASE_URL = "https://store.ui.com/us/"


class FakePage:
    def __init__(self, url: str, html: str, links: List[str]):
        self.url = url
        self.html = html
        self.links = links

    async def screenshot(self, path):
        Path(path).write_bytes(b"\x89PNG fake")


class FakeRenderer:
    """Serves canned HTML per URL; URLs without a page fail like a navigation timeout."""

    def __init__(self, pages: Dict[str, str], links: Optional[Dict[str, List[str]]] = None):
        self.pages = pages
        self.links = links or {}
        self.opened: List[str] = []
        self.started = False
        self.closed = False

    async def start(self):
        self.started = True

    async def close(self):
        self.closed = True

    @asynccontextmanager
    async def open(self, url: str):
        self.opened.append(url)
        if url not in self.pages:
            raise TimeoutError(f"Navigation timeout for {url}")
        html = self.pages[url]
        yield FakePage(url, html, self.links.get(url) or extract_links(html, url))


class FakeDownloader:
    def __init__(self, failing=()):
        self.failing = set(failing)
        self.calls: List[str] = []

    async def __call__(self, url: str, target: Path) -> bool:
        self.calls.append(url)
        if url in self.failing:
            return False
        Path(target).write_bytes(url.encode("utf-8"))
        return True


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "engine: marks tests that drive the full crawl engine"
    )


@pytest.fixture
def config(tmp_path):
    """Default store config writing into a temp dir with no politeness delay."""
    return CrawlConfig(output_dir=str(tmp_path / "out"), delay=0.0, max_concurrency=2)


@pytest.fixture
def downloader():
    return FakeDownloader()
