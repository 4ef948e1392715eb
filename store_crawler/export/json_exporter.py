from __future__ import annotations

import json
from typing import List
from pathlib import Path

from .base import Exporter
from ..products.base import ProductInfo


class JSONExporter:
    def export(self, products: List[ProductInfo], path: str) -> None:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump([p.to_dict() for p in products], f, indent=2, ensure_ascii=False)
