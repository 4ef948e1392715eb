from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional, Set
from abc import ABC, abstractmethod

from ..products.base import ProductInfo


@dataclass
class CrawlSession:
    """
    Mutable state of one crawl: frontier, visited set and discovered products.
    Owned by the engine and handed to each phase explicitly.
    """
    frontier: Deque[str] = field(default_factory=deque)
    visited: Set[str] = field(default_factory=set)
    # dict keeps discovery order while giving set semantics
    product_urls: Dict[str, None] = field(default_factory=dict)
    pages_processed: int = 0

    def enqueue(self, url: str) -> bool:
        if url in self.visited or url in self.frontier:
            return False
        self.frontier.append(url)
        return True

    def add_product(self, url: str) -> None:
        self.product_urls.setdefault(url, None)


@dataclass
class ProductResult:
    url: str
    ok: bool
    product: Optional[ProductInfo] = None
    error: Optional[str] = None
    downloads: Dict[str, int] = field(default_factory=dict)  # media group -> files saved


@dataclass
class CrawlReport:
    visited_count: int = 0
    product_urls_found: int = 0
    results: List[ProductResult] = field(default_factory=list)

    @property
    def products(self) -> List[ProductInfo]:
        return [r.product for r in self.results if r.ok and r.product is not None]

    @property
    def processed(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.ok)

    @property
    def downloads(self) -> int:
        return sum(sum(r.downloads.values()) for r in self.results)


class CrawlEngine(ABC):
    """
    Abstract engine interface. Implementations own the crawl lifecycle.
    """
    @abstractmethod
    async def crawl(self) -> CrawlReport:  # pragma: no cover - interface
        ...
