from __future__ import annotations

from dataclasses import dataclass, field, asdict, fields
from typing import List, Optional, Dict, Any
from pathlib import Path
import os
import json

from .version import CONFIG_SCHEMA_VERSION

DEFAULT_BASE_URL = "https://store.ui.com/us/"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
)


def _default_file_types() -> Dict[str, List[str]]:
    return {
        "images": [".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg"],
        "videos": [".mp4", ".webm", ".mov"],
        "pdfs": [".pdf"],
    }


def _default_categories() -> List[str]:
    return [
        "Networks",
        "Protect",
        "Access",
        "Talk",
        "Connect",
        "Cameras",
        "Door Access",
        "Accessories",
        "Sensors",
        "Antennas",
    ]


@dataclass
class CrawlConfig:
    """
    Canonical configuration object passed throughout the system.
    Keep it dataclass-only (no heavy deps) to stay upgrade-friendly.
    """
    schema_version: int = CONFIG_SCHEMA_VERSION
    base_url: str = DEFAULT_BASE_URL
    max_pages: int = 1000
    output_dir: str = "./ubiquiti_store"
    # Media groups downloaded per product: group name -> extensions
    file_types: Dict[str, List[str]] = field(default_factory=_default_file_types)
    max_concurrency: int = 5
    # Seconds
    request_timeout: float = 30.0
    delay: float = 0.5
    user_agent: str = DEFAULT_USER_AGENT
    headless: bool = True
    categories: List[str] = field(default_factory=_default_categories)
    include_patterns: List[str] = field(default_factory=lambda: ["/us/products/", "/us/collections/"])
    exclude_patterns: List[str] = field(
        default_factory=lambda: ["/cart", "/account", "/search", "/pages/", "/policies/"]
    )
    product_marker: str = "/products/"
    # Stripped from <title> when a page has no product heading
    title_suffix_pattern: str = r"\s*[\-|]\s*Ubiquiti.*$"
    # Dotted path for the manifest exporter; manifest is skipped when manifest_path is unset.
    exporter: str = "store_crawler.export.json_exporter:JSONExporter"
    manifest_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    # ---------- Derived paths ----------

    @property
    def products_dir(self) -> Path:
        return Path(self.output_dir) / "products"

    @property
    def digest_path(self) -> Path:
        return Path(self.output_dir) / "all_content.txt"

    # ---------- Loaders ----------

    @classmethod
    def from_env(cls) -> "CrawlConfig":
        """
        Build config from environment variables (all optional).
        """
        defaults = cls()

        def _get(name: str, default: str) -> str:
            return os.getenv(name, default)

        def _list(name: str, default: List[str]) -> List[str]:
            raw = os.getenv(name)
            if raw is None:
                return list(default)
            return [p.strip() for p in raw.split(",") if p.strip()]

        return cls(
            base_url=_get("CRAWLER_BASE_URL", defaults.base_url),
            max_pages=int(_get("CRAWLER_MAX_PAGES", str(defaults.max_pages))),
            output_dir=_get("CRAWLER_OUTPUT_DIR", defaults.output_dir),
            max_concurrency=int(_get("CRAWLER_MAX_CONCURRENCY", str(defaults.max_concurrency))),
            request_timeout=float(_get("CRAWLER_REQUEST_TIMEOUT", str(defaults.request_timeout))),
            delay=float(_get("CRAWLER_DELAY", str(defaults.delay))),
            user_agent=_get("CRAWLER_USER_AGENT", defaults.user_agent),
            headless=_get("CRAWLER_HEADLESS", "1").lower() not in ("0", "false", "no"),
            categories=_list("CRAWLER_CATEGORIES", defaults.categories),
            include_patterns=_list("CRAWLER_INCLUDE_PATTERNS", defaults.include_patterns),
            exclude_patterns=_list("CRAWLER_EXCLUDE_PATTERNS", defaults.exclude_patterns),
            exporter=_get("CRAWLER_EXPORTER", defaults.exporter),
            manifest_path=os.getenv("CRAWLER_MANIFEST_PATH") or None,
        )

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> "CrawlConfig":
        """
        Load configuration from a JSON file. Supports schema migration for future versions.
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        data = migrate_config(data)
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys in {path}: {', '.join(unknown)}")
        return cls(**data)

    # ---------- Validation ----------

    def validate(self) -> None:
        if not self.base_url:
            raise ValueError("base_url cannot be empty.")
        if self.max_pages <= 0:
            raise ValueError("max_pages must be > 0")
        if self.max_concurrency <= 0:
            raise ValueError("max_concurrency must be > 0")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be > 0")
        if self.delay < 0:
            raise ValueError("delay must be >= 0")
        if not self.product_marker:
            raise ValueError("product_marker cannot be empty.")
        for group, extensions in self.file_types.items():
            if not extensions:
                raise ValueError(f"file_types[{group!r}] must list at least one extension")
        if self.manifest_path:
            Path(self.manifest_path).parent.mkdir(parents=True, exist_ok=True)


def migrate_config(raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    Migrate config dict to the latest schema version.
    Keep this pure and additive. Add migrations here as you bump schema.
    """
    raw = dict(raw)

    # Ensure a schema_version is present
    raw.setdefault("schema_version", CONFIG_SCHEMA_VERSION)
    return raw
