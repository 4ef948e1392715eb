from __future__ import annotations

import asyncio
import hashlib
import os
from pathlib import Path

import aiofiles
from slugify import slugify

MEDIA_SUBDIRS = ("images", "videos", "pdfs")


def ensure_dir(path: str | os.PathLike[str]) -> Path:
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def sanitize_name(name: str, max_length: int = 120) -> str:
    """
    Make ``name`` safe as a single path segment, keeping its case.
    Whitespace becomes ``_`` ("Door Access" -> "Door_Access").
    """
    cleaned = slugify(
        name.strip(),
        lowercase=False,
        separator="_",
        max_length=max_length,
        regex_pattern=r"[^-a-zA-Z0-9.]+",
    ).strip("-_.")
    return cleaned or hashlib.sha1(name.encode("utf-8", errors="ignore")).hexdigest()[:10]


class DigestWriter:
    """
    Single shared text file that accumulates one block per product.

    Appends from concurrent product tasks are serialized by a lock, each entry
    written in one call and terminated by a newline.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self._lock = asyncio.Lock()
        self.entries = 0

    def reset(self) -> None:
        """Create or truncate the digest file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("", encoding="utf-8")
        self.entries = 0

    async def append(self, text: str) -> None:
        async with self._lock:
            async with aiofiles.open(self.path, "a", encoding="utf-8") as f:
                await f.write(text + "\n")
            self.entries += 1
