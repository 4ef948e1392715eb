from __future__ import annotations

from typing import Iterable

FALLBACK_CATEGORY = "Other"


def _title_case_slug(slug: str) -> str:
    # Only the first letter of each word changes; "poe-switches" -> "Poe Switches".
    return " ".join(word[:1].upper() + word[1:] for word in slug.split("-"))


def determine_category(product_name: str, url: str, categories: Iterable[str]) -> str:
    """
    Pick the output category for a product.

    A ``collections/<slug>`` segment in the URL wins outright. Otherwise the first
    known category contained in the product name (case-insensitive) is used,
    and ``"Other"`` when nothing matches.
    """
    parts = url.split("/")
    if "collections" in parts:
        idx = parts.index("collections")
        if idx + 1 < len(parts) and parts[idx + 1]:
            return _title_case_slug(parts[idx + 1])

    name = (product_name or "").lower()
    for category in categories:
        if category.lower() in name:
            return category

    return FALLBACK_CATEGORY
