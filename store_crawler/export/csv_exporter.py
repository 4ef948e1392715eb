from __future__ import annotations

import csv
from typing import List
from pathlib import Path

from .base import Exporter
from ..products.base import ProductInfo


class CSVExporter:
    """
    One row per processed product; features and specifications are counted, not inlined.
    """

    _headers = [
        "category",
        "name",
        "price",
        "url",
        "features",
        "specifications",
        "output_dir",
    ]

    def export(self, products: List[ProductInfo], path: str) -> None:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            w = csv.writer(f)
            w.writerow(self._headers)
            for product in products:
                w.writerow(
                    [
                        product.category or "",
                        product.name,
                        product.price,
                        product.url,
                        len(product.features),
                        len(product.specifications),
                        product.output_dir or "",
                    ]
                )
