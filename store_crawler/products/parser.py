from __future__ import annotations

import logging
import re
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, Tag

from .base import PRICE_NOT_AVAILABLE, UNKNOWN_PRODUCT, ProductInfo

logger = logging.getLogger(__name__)

DEFAULT_TITLE_SUFFIX = r"\s*[\-|]\s*Ubiquiti.*$"
DIGEST_DELIMITER = "=" * 36

# ---- Extractors -------------------------------------------------------------
# Each takes the parsed page and a CSS selector and returns raw text ("" on miss).

Extractor = Callable[[BeautifulSoup, str], str]


def _first_text(soup: BeautifulSoup, selector: str) -> str:
    node = soup.select_one(selector)
    return node.get_text() if node else ""


def _all_text(soup: BeautifulSoup, selector: str) -> str:
    return "".join(node.get_text() for node in soup.select(selector))


def _meta_content(soup: BeautifulSoup, selector: str) -> str:
    node = soup.select_one(selector)
    if not node:
        return ""
    content = node.get("content")
    return content if isinstance(content, str) else ""


NAME_CASCADE: Sequence[Tuple[str, Extractor]] = (
    ("h1.product-title", _first_text),
    ("h1.product-name", _first_text),
    ("h1.product_title", _first_text),
    ("h1.product-single__title", _first_text),
    ("h1", _first_text),
)

DESCRIPTION_CASCADE: Sequence[Tuple[str, Extractor]] = (
    (".product-description", _all_text),
    (".product-details__description", _all_text),
    (".product-single__description", _all_text),
    (".product__description", _all_text),
    ('meta[name="description"]', _meta_content),
)

PRICE_CASCADE: Sequence[Tuple[str, Extractor]] = (
    (".product-price", _first_text),
    (".price", _first_text),
    (".product__price", _first_text),
    ('meta[property="product:price:amount"]', _meta_content),
    ("[data-product-price]", _first_text),
)

SPEC_TABLE_SELECTORS: Sequence[str] = (
    ".product-specifications table",
    ".specifications table",
    ".product-specs table",
    ".specs-table",
    "table.specifications",
)

FEATURE_SELECTORS: Sequence[str] = (
    ".product-features ul li",
    ".features ul li",
    ".product-highlights li",
    ".key-features li",
)


def run_cascade(soup: BeautifulSoup, cascade: Sequence[Tuple[str, Extractor]]) -> Optional[str]:
    """Return the first non-empty stripped result of ``cascade``, or None."""
    for selector, extract in cascade:
        text = extract(soup, selector).strip()
        if text:
            logger.debug("Cascade hit on %s", selector)
            return text
    return None


class ProductParser:
    """
    Pulls a ProductInfo out of product-page markup.

    Every field is a cascade of selectors tried in order; the first one that
    yields text wins and misses fall back to fixed defaults, so parsing
    well-formed markup never raises.
    """

    def __init__(self, title_suffix_pattern: str = DEFAULT_TITLE_SUFFIX) -> None:
        self._title_suffix = re.compile(title_suffix_pattern, re.IGNORECASE)

    def extract_product_info(self, html: str, url: str) -> ProductInfo:
        soup = BeautifulSoup(html, "html.parser")
        return ProductInfo(
            url=url,
            name=self.extract_name(soup),
            description=self.extract_description(soup),
            price=self.extract_price(soup),
            specifications=self.extract_specifications(soup),
            features=self.extract_features(soup),
        )

    # ---- Field extraction ---------------------------------------------------

    def extract_name(self, soup: BeautifulSoup) -> str:
        name = run_cascade(soup, NAME_CASCADE)
        if name:
            return name
        title = soup.title.get_text().strip() if soup.title else ""
        title = self._title_suffix.sub("", title)
        return title or UNKNOWN_PRODUCT

    def extract_description(self, soup: BeautifulSoup) -> str:
        return run_cascade(soup, DESCRIPTION_CASCADE) or ""

    def extract_price(self, soup: BeautifulSoup) -> str:
        return run_cascade(soup, PRICE_CASCADE) or PRICE_NOT_AVAILABLE

    def extract_specifications(self, soup: BeautifulSoup) -> Dict[str, str]:
        specs = self._specs_from_tables(soup)
        if specs:
            return specs
        return self._specs_from_definition_lists(soup)

    def extract_features(self, soup: BeautifulSoup) -> List[str]:
        for selector in FEATURE_SELECTORS:
            items = [li.get_text().strip() for li in soup.select(selector)]
            items = [text for text in items if text]
            if items:
                return items
        return []

    # ---- Specification strategies -------------------------------------------

    @staticmethod
    def _specs_from_tables(soup: BeautifulSoup) -> Dict[str, str]:
        specs: Dict[str, str] = {}
        for selector in SPEC_TABLE_SELECTORS:
            for table in soup.select(selector):
                for row in table.find_all("tr"):
                    cells = row.find_all(["td", "th"])
                    if len(cells) < 2:
                        continue
                    key = cells[0].get_text().strip()
                    value = cells[1].get_text().strip()
                    if key and value:
                        specs[key] = value
            if specs:
                return specs
        return specs

    @staticmethod
    def _specs_from_definition_lists(soup: BeautifulSoup) -> Dict[str, str]:
        specs: Dict[str, str] = {}
        for dl in soup.find_all("dl"):
            terms: List[Tag] = dl.find_all("dt")
            definitions: List[Tag] = dl.find_all("dd")
            for term, definition in zip(terms, definitions):
                key = term.get_text().strip()
                value = definition.get_text().strip()
                if key and value:
                    specs[key] = value
        return specs

    # ---- Rendering ----------------------------------------------------------

    @staticmethod
    def to_markdown(product: ProductInfo) -> str:
        out = [f"# {product.name}\n\n"]

        if product.has_price:
            out.append(f"**Price**: {product.price}\n\n")

        if product.description:
            out.append(f"## Description\n\n{product.description}\n\n")

        if product.features:
            out.append("## Features\n\n")
            out.extend(f"- {feature}\n" for feature in product.features)
            out.append("\n")

        if product.specifications:
            out.append("## Specifications\n\n")
            out.extend(f"- **{key}**: {value}\n" for key, value in product.specifications.items())
            out.append("\n")

        out.append(f"**Product URL**: {product.url}\n")
        return "".join(out)


def render_digest_entry(product: ProductInfo, category: str) -> str:
    """Block appended to the shared digest file for one product."""
    features = "\n".join(f"- {feature}" for feature in product.features)
    return (
        f"\n{DIGEST_DELIMITER}\n"
        f"{category} - {product.name}\n"
        f"{DIGEST_DELIMITER}\n"
        f"{product.description}\n"
        f"\n"
        f"Price: {product.price}\n"
        f"\n"
        f"Features:\n"
        f"{features}\n"
        f"\n"
        f"URL: {product.url}\n"
        f"{DIGEST_DELIMITER}\n"
    )
