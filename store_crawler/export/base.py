from __future__ import annotations

from typing import List, Protocol

from ..products.base import ProductInfo

class Exporter(Protocol):
    def export(self, products: List[ProductInfo], path: str) -> None:
        ...
