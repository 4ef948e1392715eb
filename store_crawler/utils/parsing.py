from __future__ import annotations

import logging
import posixpath
from typing import Iterable, List, Set
from urllib.parse import urljoin, urlparse, urlunparse

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

_FETCHABLE_SCHEMES = ("http", "https")


def normalize_url(url: str) -> str:
    """
    Normalize URL by removing fragments.
    """
    parts = list(urlparse(url))
    parts[5] = ""  # strip fragment
    return urlunparse(parts)


def extract_links(html: str, base_url: str) -> List[str]:
    """
    Extract absolute anchor links from an HTML string, in document order.
    """
    soup = BeautifulSoup(html, "html.parser")
    out: List[str] = []
    seen: Set[str] = set()
    for a in soup.select("a[href]"):
        href = a.get("href")
        if not href:
            continue
        try:
            link = normalize_url(urljoin(base_url, href.strip()))
        except ValueError as exc:
            logger.debug("Invalid URL %r on %s: %s", href, base_url, exc)
            continue
        if link not in seen:
            seen.add(link)
            out.append(link)
    return out


def extract_media_links(html: str, extensions: Iterable[str], base_url: str) -> List[str]:
    """
    Return distinct absolute URLs referenced by ``href``/``src`` attributes whose
    path ends with one of ``extensions`` (case-insensitive), in discovery order.

    Values that cannot be resolved against ``base_url`` are logged and dropped.
    """
    wanted = tuple(ext.lower() for ext in extensions)
    if not wanted:
        return []

    soup = BeautifulSoup(html, "html.parser")
    out: List[str] = []
    seen: Set[str] = set()
    for tag in soup.find_all(lambda t: t.has_attr("href") or t.has_attr("src")):
        for attr in ("href", "src"):
            value = tag.get(attr)
            if not value or not isinstance(value, str):
                continue
            try:
                absolute = urljoin(base_url, value.strip())
                parsed = urlparse(absolute)
            except ValueError as exc:
                logger.debug("Invalid URL %r on %s: %s", value, base_url, exc)
                continue
            if parsed.scheme not in _FETCHABLE_SCHEMES:
                continue
            if not parsed.path.lower().endswith(wanted):
                continue
            if absolute not in seen:
                seen.add(absolute)
                out.append(absolute)
    return out


def url_extension(url: str) -> str:
    """Extension of the URL path including the dot, e.g. ``.png``; empty when absent."""
    return posixpath.splitext(urlparse(url).path)[1]


def is_external(link: str, base_url: str) -> bool:
    return not link.startswith(base_url)


def matches_any(link: str, patterns: Iterable[str]) -> bool:
    return any(p in link for p in patterns)


def is_product_url(link: str, marker: str) -> bool:
    """
    Product pages are recognised solely by the marker appearing in the URL path.
    """
    try:
        path = urlparse(link).path
    except ValueError:
        return False
    return marker in path
