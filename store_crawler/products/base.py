from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

UNKNOWN_PRODUCT = "Unknown Product"
PRICE_NOT_AVAILABLE = "Price not available"


@dataclass
class ProductInfo:
    """Structured data extracted from one product page."""

    url: str
    name: str = UNKNOWN_PRODUCT
    description: str = ""
    price: str = PRICE_NOT_AVAILABLE
    features: List[str] = field(default_factory=list)
    specifications: Dict[str, str] = field(default_factory=dict)
    # Filled in when the product is written out
    category: Optional[str] = None
    output_dir: Optional[str] = None

    @property
    def has_price(self) -> bool:
        return bool(self.price) and self.price != PRICE_NOT_AVAILABLE

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "url": self.url,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "features": list(self.features),
            "specifications": dict(self.specifications),
            "category": self.category,
            "output_dir": self.output_dir,
        }
        # Drop unset keys for a cleaner export.
        return {k: v for k, v in data.items() if v is not None}
