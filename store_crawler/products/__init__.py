from .base import PRICE_NOT_AVAILABLE, UNKNOWN_PRODUCT, ProductInfo
from .category import FALLBACK_CATEGORY, determine_category
from .parser import ProductParser, render_digest_entry

__all__ = [
    "FALLBACK_CATEGORY",
    "PRICE_NOT_AVAILABLE",
    "UNKNOWN_PRODUCT",
    "ProductInfo",
    "ProductParser",
    "determine_category",
    "render_digest_entry",
]
